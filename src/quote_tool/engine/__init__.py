"""Engine subpackage - pure quote calculation and harmonization."""
from .models import (
    PriceSchedule,
    UsageProfile,
    SizeMix,
    StorageUnits,
    ShippingModel,
    QuoteBreakdown,
    LineItem,
    HarmonizationMode,
    HarmonizationResult,
)
from .quote_engine import QuoteEngine, assemble
from .harmonization import (
    DiscountThresholds,
    PriceBasis,
    ProposalStrategy,
    harmonize,
    analyze_target_price,
    compare_schedules,
    propose_schedule,
)

__all__ = [
    'PriceSchedule', 'UsageProfile', 'SizeMix', 'StorageUnits', 'ShippingModel',
    'QuoteBreakdown', 'LineItem', 'HarmonizationMode', 'HarmonizationResult',
    'QuoteEngine', 'assemble',
    'DiscountThresholds', 'PriceBasis', 'ProposalStrategy',
    'harmonize', 'analyze_target_price', 'compare_schedules', 'propose_schedule',
]
