"""
Quote Tool Package

Monthly cost quoting for fulfillment services.
Turns a versioned price schedule and a client usage profile into a cost
breakdown, and derives the discount needed to match a target price.
"""

__version__ = "3.0.0"
