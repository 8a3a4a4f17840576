"""
Quote Engine - composes the category calculators into a monthly breakdown.

Resolution order:
1. Normalize the shipping size mix
2. Fulfillment per-order cost (max of AOV and base branches) x monthly orders
3. Blended shipping per-order cost x monthly orders
4. Storage monthly cost (when storage is part of the total)
5. Subtotal, then the schedule's monthly minimum as a floor
6. Line items, with a synthetic minimum line when the floor lifted the total

The engine is pure: it reads the schedule snapshot it is given, keeps no
state between calls and never performs I/O.
"""
from .calculators import calculate_fulfillment, calculate_shipping, calculate_storage
from .models import PriceSchedule, UsageProfile, QuoteBreakdown, LineItem
from .normalizer import normalize_shipping_mix, mix_advisory

FULFILLMENT = "fulfillment"
SHIPPING = "shippingAndHandling"
STORAGE = "storage"
MINIMUM = "minimum"

LINE_ITEM_NAMES = {
    FULFILLMENT: "Fulfillment",
    SHIPPING: "Shipping & Handling",
    STORAGE: "Storage",
    MINIMUM: "Monthly Minimum Adjustment",
}


class QuoteEngine:
    """
    Turns a price schedule and a usage profile into a QuoteBreakdown.

    include_storage decides whether the storage line counts toward the
    monthly total. When it is off, storage is reported as zero. A storage line item is
    emitted only when storage is included and costs something.
    """

    def __init__(self, include_storage: bool = True):
        self.include_storage = include_storage

    def assemble(self, schedule: PriceSchedule, profile: UsageProfile) -> QuoteBreakdown:
        """Calculate the full monthly breakdown."""
        prices = schedule.prices
        warnings = []

        normalized = normalize_shipping_mix(profile.shipping_size_mix)
        advisory = mix_advisory(normalized)
        if advisory:
            warnings.append(advisory)

        fulfillment = calculate_fulfillment(
            profile.average_units_per_order,
            profile.average_order_value,
            prices.fulfillment,
        )
        if profile.average_units_per_order < 1:
            warnings.append(
                f"Average units per order ({profile.average_units_per_order}) is below 1; "
                "the base fulfillment branch is reduced below the base fee"
            )

        rate_set = prices.shipping_and_handling.for_model(profile.shipping_model)
        shipping = calculate_shipping(normalized, rate_set)

        fulfillment_cost = fulfillment.selected_branch_cents * profile.monthly_orders
        shipping_cost = shipping.blended_cost_per_order_cents * profile.monthly_orders
        storage_cost = calculate_storage(profile.storage, prices.storage) if self.include_storage else 0

        subtotal = fulfillment_cost + shipping_cost + storage_cost
        final = max(subtotal, schedule.monthly_minimum_cents)

        line_items = [
            LineItem(FULFILLMENT, LINE_ITEM_NAMES[FULFILLMENT], fulfillment_cost),
            LineItem(SHIPPING, LINE_ITEM_NAMES[SHIPPING], shipping_cost),
        ]
        if self.include_storage and storage_cost > 0:
            line_items.append(LineItem(STORAGE, LINE_ITEM_NAMES[STORAGE], storage_cost))
        if final > subtotal:
            line_items.append(LineItem(MINIMUM, LINE_ITEM_NAMES[MINIMUM], final - subtotal))

        return QuoteBreakdown(
            schedule_id=schedule.id,
            schedule_version=schedule.version,
            fulfillment=fulfillment,
            shipping=shipping,
            normalized_mix=normalized,
            fulfillment_cost_cents=fulfillment_cost,
            shipping_cost_cents=shipping_cost,
            storage_cost_cents=storage_cost,
            storage_included=self.include_storage,
            subtotal_cents=subtotal,
            monthly_minimum_cents=schedule.monthly_minimum_cents,
            final_monthly_cost_cents=final,
            line_items=tuple(line_items),
            warnings=tuple(warnings),
        )


def assemble(schedule: PriceSchedule, profile: UsageProfile, include_storage: bool = True) -> QuoteBreakdown:
    """Functional entry point: QuoteEngine(include_storage).assemble(schedule, profile)."""
    return QuoteEngine(include_storage=include_storage).assemble(schedule, profile)
