"""
Harmonization Analyzer - derives the discount needed to move a computed
price onto a target.

Two modes:
- target delta: one schedule + profile against a target monthly price
- schedule comparison: two schedules evaluated against the same profile

Both modes return a HarmonizationResult with per-category discounts, warnings
for any category whose absolute discount exceeds the caller's threshold, and
a proposed adjusted schedule. The proposal is a suggestion only; saving it is
a separate, explicit step for the caller.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .money import round_half_up, round2, safe_percent, format_currency
from .models import (
    PriceSchedule,
    UsageProfile,
    QuoteBreakdown,
    CategoryDiscount,
    HarmonizationResult,
    HarmonizationMode,
    FulfillmentRates,
    StorageRates,
    PackageRates,
    ShippingRates,
    SchedulePrices,
)
from .quote_engine import QuoteEngine, FULFILLMENT, SHIPPING, STORAGE

GLOBAL = "global"


class PriceBasis(str, Enum):
    """Which figure of a breakdown counts as 'the price'."""
    FINAL = "final"          # after the monthly minimum
    SUBTOTAL = "subtotal"    # before the monthly minimum


class ProposalStrategy(str, Enum):
    SCALE_FEES = "scale_fees"
    MINIMUM_FLOOR = "minimum_floor"


@dataclass(frozen=True)
class DiscountThresholds:
    """Per-category ceilings (percent) above which a discount is flagged."""
    global_percent: Optional[float] = None
    fulfillment: Optional[float] = None
    storage: Optional[float] = None
    shipping_and_handling: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'DiscountThresholds':
        data = data or {}
        unknown = set(data) - {GLOBAL, FULFILLMENT, STORAGE, SHIPPING}
        if unknown:
            raise ValueError(f"Unknown threshold keys: {', '.join(sorted(unknown))}")
        return cls(
            global_percent=data.get(GLOBAL),
            fulfillment=data.get(FULFILLMENT),
            storage=data.get(STORAGE),
            shipping_and_handling=data.get(SHIPPING),
        )

    def for_category(self, category: str) -> Optional[float]:
        return {
            GLOBAL: self.global_percent,
            FULFILLMENT: self.fulfillment,
            STORAGE: self.storage,
            SHIPPING: self.shipping_and_handling,
        }.get(category)

    def to_dict(self) -> dict:
        return {
            GLOBAL: self.global_percent,
            FULFILLMENT: self.fulfillment,
            STORAGE: self.storage,
            SHIPPING: self.shipping_and_handling,
        }


def _price_of(breakdown: QuoteBreakdown, basis: PriceBasis) -> int:
    if basis is PriceBasis.SUBTOTAL:
        return breakdown.subtotal_cents
    return breakdown.final_monthly_cost_cents


def _category_discount(
    category: str,
    source_cents: int,
    target_cents: int,
    thresholds: DiscountThresholds,
) -> CategoryDiscount:
    discount = round2(safe_percent(source_cents - target_cents, source_cents))
    threshold = thresholds.for_category(category)
    return CategoryDiscount(
        category=category,
        source_cents=source_cents,
        target_cents=target_cents,
        discount_percent=discount,
        threshold_percent=threshold,
        exceeds_threshold=threshold is not None and abs(discount) > threshold,
    )


def _threshold_warnings(categories: list[CategoryDiscount]) -> list[str]:
    warnings = []
    for c in categories:
        if c.exceeds_threshold:
            warnings.append(
                f"High discount warning: {c.category} discount of {c.discount_percent:.2f}% "
                f"exceeds the {c.threshold_percent:.2f}% threshold"
            )
    return warnings


# ============================================================================
# PROPOSALS
# ============================================================================

def _scale(cents: int, factor: float) -> int:
    return max(0, round_half_up(cents * factor))


def _scale_packages(rates: PackageRates, factor: float) -> PackageRates:
    return PackageRates(
        small_package_cents=_scale(rates.small_package_cents, factor),
        medium_package_cents=_scale(rates.medium_package_cents, factor),
        large_package_cents=_scale(rates.large_package_cents, factor),
    )


def _scale_prices(prices: SchedulePrices, factor: float) -> SchedulePrices:
    fulfillment = prices.fulfillment
    storage = prices.storage
    shipping = prices.shipping_and_handling
    return SchedulePrices(
        fulfillment=FulfillmentRates(
            aov_percentage=min(1.0, max(0.0, round(fulfillment.aov_percentage * factor, 6))),
            base_fee_cents=_scale(fulfillment.base_fee_cents, factor),
            per_additional_unit_cents=_scale(fulfillment.per_additional_unit_cents, factor),
        ),
        storage=StorageRates(
            small_unit_cents=_scale(storage.small_unit_cents, factor),
            medium_unit_cents=_scale(storage.medium_unit_cents, factor),
            large_unit_cents=_scale(storage.large_unit_cents, factor),
            pallet_cents=_scale(storage.pallet_cents, factor),
        ),
        shipping_and_handling=ShippingRates(
            standard=_scale_packages(shipping.standard, factor),
            customer_account=_scale_packages(shipping.customer_account, factor),
        ),
    )


def propose_schedule(
    schedule: PriceSchedule,
    discount_percent: float,
    strategy: ProposalStrategy = ProposalStrategy.SCALE_FEES,
    target_price_cents: Optional[int] = None,
) -> PriceSchedule:
    """
    Synthesize an adjusted schedule reflecting a concession.

    SCALE_FEES multiplies every fee (and the monthly minimum) by
    1 - discount/100. MINIMUM_FLOOR keeps the fees and raises the monthly
    minimum to the target price.
    """
    strategy = ProposalStrategy(strategy)

    if strategy is ProposalStrategy.MINIMUM_FLOOR:
        if target_price_cents is None:
            raise ValueError("MINIMUM_FLOOR proposals need a target price")
        prices = schedule.prices
        minimum = max(schedule.monthly_minimum_cents, target_price_cents)
        notes = f"Harmonized rate card for target price: {format_currency(target_price_cents)}"
    else:
        factor = 1 - discount_percent / 100
        prices = _scale_prices(schedule.prices, factor)
        minimum = _scale(schedule.monthly_minimum_cents, factor)
        if target_price_cents is not None:
            notes = f"Harmonized rate card for target price: {format_currency(target_price_cents)}"
        else:
            notes = f"Harmonized rate card with {discount_percent:.2f}% fee adjustment"

    return PriceSchedule(
        id=f"{schedule.id}-harmonized",
        name=f"Harmonized {schedule.name}",
        version="v1.0.0",
        monthly_minimum_cents=minimum,
        prices=prices,
        version_notes=notes,
    )


# ============================================================================
# ANALYSES
# ============================================================================

def analyze_target_price(
    schedule: PriceSchedule,
    profile: UsageProfile,
    target_price_cents: int,
    thresholds: Optional[DiscountThresholds] = None,
    include_storage: bool = True,
    basis: PriceBasis = PriceBasis.SUBTOTAL,
    strategy: ProposalStrategy = ProposalStrategy.SCALE_FEES,
) -> HarmonizationResult:
    """
    Target-delta mode.

    The computed price is the pre-minimum subtotal unless basis is FINAL.
    A positive delta means the computed price exceeds the target and a
    discount is owed; a negative delta means the schedule already undercuts it.
    """
    thresholds = thresholds or DiscountThresholds()
    breakdown = QuoteEngine(include_storage=include_storage).assemble(schedule, profile)

    new_price = _price_of(breakdown, PriceBasis(basis))
    delta = new_price - target_price_cents
    required = round2((delta / new_price) * 100) if new_price > 0 else 0.0

    overall = _category_discount(GLOBAL, new_price, target_price_cents, thresholds)
    categories = [overall]

    return HarmonizationResult(
        mode=HarmonizationMode.TARGET_DELTA,
        new_price_cents=new_price,
        target_price_cents=target_price_cents,
        delta_cents=delta,
        required_discount_percent=required,
        source_breakdown=breakdown,
        categories=tuple(categories),
        warnings=tuple(_threshold_warnings(categories)),
        proposed_schedule=propose_schedule(schedule, required, strategy, target_price_cents),
    )


def compare_schedules(
    source: PriceSchedule,
    target: PriceSchedule,
    profile: UsageProfile,
    thresholds: Optional[DiscountThresholds] = None,
    include_storage: bool = True,
    basis: PriceBasis = PriceBasis.FINAL,
) -> HarmonizationResult:
    """
    Schedule-comparison mode.

    Each category's discount is (source - target) / source * 100, 0% when the
    source category costs nothing. The 'global' row compares the totals.
    """
    thresholds = thresholds or DiscountThresholds()
    engine = QuoteEngine(include_storage=include_storage)
    source_breakdown = engine.assemble(source, profile)
    target_breakdown = engine.assemble(target, profile)

    source_costs = source_breakdown.category_costs()
    target_costs = target_breakdown.category_costs()
    category_keys = [FULFILLMENT, SHIPPING] + ([STORAGE] if include_storage else [])

    categories = [
        _category_discount(key, source_costs[key], target_costs[key], thresholds)
        for key in category_keys
    ]

    new_price = _price_of(source_breakdown, PriceBasis(basis))
    target_price = _price_of(target_breakdown, PriceBasis(basis))
    overall = _category_discount(GLOBAL, new_price, target_price, thresholds)
    categories.append(overall)

    return HarmonizationResult(
        mode=HarmonizationMode.SCHEDULE_COMPARISON,
        new_price_cents=new_price,
        target_price_cents=target_price,
        delta_cents=new_price - target_price,
        required_discount_percent=overall.discount_percent,
        source_breakdown=source_breakdown,
        target_breakdown=target_breakdown,
        categories=tuple(categories),
        warnings=tuple(_threshold_warnings(categories)),
        proposed_schedule=propose_schedule(source, overall.discount_percent),
    )


def harmonize(mode: Union[HarmonizationMode, str], **kwargs) -> HarmonizationResult:
    """
    Dispatch to the analysis for a mode.

    target:  schedule, profile, target_price_cents, [thresholds, include_storage, basis, strategy]
    compare: source, target, profile, [thresholds, include_storage, basis]
    """
    mode = HarmonizationMode(mode)
    if mode is HarmonizationMode.TARGET_DELTA:
        return analyze_target_price(**kwargs)
    return compare_schedules(**kwargs)
