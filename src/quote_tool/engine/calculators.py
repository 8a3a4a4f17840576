"""
Per-category cost calculators.

All functions are pure: they take rate snapshots and usage numbers and return
integer cents. Rounding happens per term, before any sum.
"""
from typing import Optional

from .money import round_half_up
from .models import (
    FulfillmentRates,
    StorageRates,
    PackageRates,
    NormalizedMix,
    StorageUnits,
    FulfillmentBranches,
    ShippingCost,
)


def calculate_fulfillment(
    units_per_order: float,
    average_order_value: float,
    rates: FulfillmentRates,
) -> FulfillmentBranches:
    """
    Per-order fulfillment cost: the larger of the two branches.

    AOV branch:  order value (in cents) times the AOV percentage.
    Base branch: base fee plus the per-unit fee for every unit after the first.

    Fewer than one unit per order makes the increment negative, so the base
    branch drops below the base fee. There is no floor at zero.
    """
    aov_branch = round_half_up(average_order_value * 100 * rates.aov_percentage)
    base_branch = round_half_up(
        rates.base_fee_cents + rates.per_additional_unit_cents * (units_per_order - 1)
    )
    return FulfillmentBranches(
        aov_branch_cents=aov_branch,
        base_branch_cents=base_branch,
        selected_branch_cents=max(aov_branch, base_branch),
    )


def calculate_shipping(mix: NormalizedMix, rates: PackageRates) -> ShippingCost:
    """Blended per-order shipping cost across the package size mix."""
    small = round_half_up((mix.small / 100) * rates.small_package_cents)
    medium = round_half_up((mix.medium / 100) * rates.medium_package_cents)
    large = round_half_up((mix.large / 100) * rates.large_package_cents)
    return ShippingCost(
        small_weighted_cents=small,
        medium_weighted_cents=medium,
        large_weighted_cents=large,
        blended_cost_per_order_cents=small + medium + large,
    )


def calculate_storage(units: Optional[StorageUnits], rates: StorageRates) -> int:
    """Monthly storage cost. Integral inputs, integral result."""
    if units is None:
        return 0
    return (
        units.small_units * rates.small_unit_cents
        + units.medium_units * rates.medium_unit_cents
        + units.large_units * rates.large_unit_cents
        + units.pallets * rates.pallet_cents
    )
