"""
Data models for the quote engine.

Uses dataclasses for structured, type-safe data representation.
Rate-card documents travel as JSON with camelCase keys; the from_dict/to_dict
pairs translate between that wire format and these immutable snapshots.
"""
from dataclasses import dataclass, replace
from enum import Enum
from numbers import Real
from typing import Optional


def _require_number(name: str, value) -> None:
    """Reject values that are not real numbers instead of coercing them."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}: {value!r}")


def _require_int(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer number of cents, got {type(value).__name__}: {value!r}")


class ShippingModel(str, Enum):
    """Which shipping & handling rate set applies to a profile."""
    STANDARD = "standard"
    CUSTOMER_ACCOUNT = "customerAccount"


class HarmonizationMode(str, Enum):
    TARGET_DELTA = "target"
    SCHEDULE_COMPARISON = "compare"


# ============================================================================
# PRICE SCHEDULE
# ============================================================================

@dataclass(frozen=True)
class FulfillmentRates:
    """Per-order fulfillment pricing: the larger of the AOV and base branches."""
    aov_percentage: float
    base_fee_cents: int
    per_additional_unit_cents: int

    def __post_init__(self):
        _require_number("aov_percentage", self.aov_percentage)
        _require_int("base_fee_cents", self.base_fee_cents)
        _require_int("per_additional_unit_cents", self.per_additional_unit_cents)

    @classmethod
    def from_dict(cls, data: dict) -> 'FulfillmentRates':
        return cls(
            aov_percentage=data['aovPercentage'],
            base_fee_cents=data['baseFeeCents'],
            per_additional_unit_cents=data['perAdditionalUnitCents'],
        )

    def to_dict(self) -> dict:
        return {
            'aovPercentage': self.aov_percentage,
            'baseFeeCents': self.base_fee_cents,
            'perAdditionalUnitCents': self.per_additional_unit_cents,
        }


@dataclass(frozen=True)
class StorageRates:
    """Monthly storage fee per stored unit size and per pallet."""
    small_unit_cents: int
    medium_unit_cents: int
    large_unit_cents: int
    pallet_cents: int

    def __post_init__(self):
        for name in ('small_unit_cents', 'medium_unit_cents', 'large_unit_cents', 'pallet_cents'):
            _require_int(name, getattr(self, name))

    @classmethod
    def from_dict(cls, data: dict) -> 'StorageRates':
        return cls(
            small_unit_cents=data['smallUnitCents'],
            medium_unit_cents=data['mediumUnitCents'],
            large_unit_cents=data['largeUnitCents'],
            pallet_cents=data['palletCents'],
        )

    def to_dict(self) -> dict:
        return {
            'smallUnitCents': self.small_unit_cents,
            'mediumUnitCents': self.medium_unit_cents,
            'largeUnitCents': self.large_unit_cents,
            'palletCents': self.pallet_cents,
        }


@dataclass(frozen=True)
class PackageRates:
    """Shipping & handling fee per package size."""
    small_package_cents: int
    medium_package_cents: int
    large_package_cents: int

    def __post_init__(self):
        for name in ('small_package_cents', 'medium_package_cents', 'large_package_cents'):
            _require_int(name, getattr(self, name))

    @classmethod
    def from_dict(cls, data: dict) -> 'PackageRates':
        return cls(
            small_package_cents=data['smallPackageCents'],
            medium_package_cents=data['mediumPackageCents'],
            large_package_cents=data['largePackageCents'],
        )

    def to_dict(self) -> dict:
        return {
            'smallPackageCents': self.small_package_cents,
            'mediumPackageCents': self.medium_package_cents,
            'largePackageCents': self.large_package_cents,
        }


@dataclass(frozen=True)
class ShippingRates:
    """The two shipping & handling rate sets of a schedule."""
    standard: PackageRates
    customer_account: PackageRates

    def for_model(self, model: 'ShippingModel') -> PackageRates:
        """Select the rate set for a shipping model."""
        if model is ShippingModel.STANDARD:
            return self.standard
        if model is ShippingModel.CUSTOMER_ACCOUNT:
            return self.customer_account
        raise ValueError(f"Unknown shipping model: {model!r}")

    @classmethod
    def from_dict(cls, data: dict) -> 'ShippingRates':
        return cls(
            standard=PackageRates.from_dict(data['standard']),
            customer_account=PackageRates.from_dict(data['customerAccount']),
        )

    def to_dict(self) -> dict:
        return {
            'standard': self.standard.to_dict(),
            'customerAccount': self.customer_account.to_dict(),
        }


@dataclass(frozen=True)
class SchedulePrices:
    fulfillment: FulfillmentRates
    storage: StorageRates
    shipping_and_handling: ShippingRates

    @classmethod
    def from_dict(cls, data: dict) -> 'SchedulePrices':
        return cls(
            fulfillment=FulfillmentRates.from_dict(data['fulfillment']),
            storage=StorageRates.from_dict(data['storage']),
            shipping_and_handling=ShippingRates.from_dict(data['shippingAndHandling']),
        )

    def to_dict(self) -> dict:
        return {
            'fulfillment': self.fulfillment.to_dict(),
            'storage': self.storage.to_dict(),
            'shippingAndHandling': self.shipping_and_handling.to_dict(),
        }


@dataclass(frozen=True)
class PriceSchedule:
    """A versioned rate card. Never mutated; edits produce a new snapshot."""
    id: str
    name: str
    version: str
    monthly_minimum_cents: int
    prices: SchedulePrices
    version_notes: Optional[str] = None

    def __post_init__(self):
        _require_int("monthly_minimum_cents", self.monthly_minimum_cents)

    def with_changes(self, **changes) -> 'PriceSchedule':
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict) -> 'PriceSchedule':
        """Build a schedule from a rate-card document."""
        minimum = data.get('monthly_minimum_cents', data.get('monthlyMinimumCents'))
        return cls(
            id=str(data['id']),
            name=str(data['name']),
            version=str(data['version']),
            monthly_minimum_cents=minimum,
            prices=SchedulePrices.from_dict(data['prices']),
            version_notes=data.get('version_notes') or data.get('versionNotes'),
        )

    def to_dict(self) -> dict:
        doc = {
            'id': self.id,
            'name': self.name,
            'version': self.version,
            'monthly_minimum_cents': self.monthly_minimum_cents,
            'prices': self.prices.to_dict(),
        }
        if self.version_notes:
            doc['version_notes'] = self.version_notes
        return doc


# ============================================================================
# USAGE PROFILE
# ============================================================================

@dataclass(frozen=True)
class SizeMix:
    """Package size mix as percentages (small/medium/large)."""
    small: float
    medium: float
    large: float

    def __post_init__(self):
        for name in ('small', 'medium', 'large'):
            _require_number(f"shipping_size_mix.{name}", getattr(self, name))

    @property
    def total(self) -> float:
        return self.small + self.medium + self.large

    @classmethod
    def from_dict(cls, data: dict) -> 'SizeMix':
        return cls(small=data['small'], medium=data['medium'], large=data['large'])

    def to_dict(self) -> dict:
        return {'small': self.small, 'medium': self.medium, 'large': self.large}


@dataclass(frozen=True)
class StorageUnits:
    """Average units held in storage per month."""
    small_units: int = 0
    medium_units: int = 0
    large_units: int = 0
    pallets: int = 0

    def __post_init__(self):
        for name in ('small_units', 'medium_units', 'large_units', 'pallets'):
            _require_int(name, getattr(self, name))

    @classmethod
    def from_dict(cls, data: dict) -> 'StorageUnits':
        return cls(
            small_units=data.get('smallUnits', 0),
            medium_units=data.get('mediumUnits', 0),
            large_units=data.get('largeUnits', 0),
            pallets=data.get('pallets', 0),
        )

    def to_dict(self) -> dict:
        return {
            'smallUnits': self.small_units,
            'mediumUnits': self.medium_units,
            'largeUnits': self.large_units,
            'pallets': self.pallets,
        }


@dataclass(frozen=True)
class UsageProfile:
    """A client's expected monthly volume, order composition and storage footprint."""
    monthly_orders: int
    average_units_per_order: float
    average_order_value: float  # currency units, not cents
    shipping_model: ShippingModel
    shipping_size_mix: SizeMix
    storage: Optional[StorageUnits] = None

    def __post_init__(self):
        _require_int("monthly_orders", self.monthly_orders)
        _require_number("average_units_per_order", self.average_units_per_order)
        _require_number("average_order_value", self.average_order_value)
        if not isinstance(self.shipping_model, ShippingModel):
            object.__setattr__(self, 'shipping_model', ShippingModel(self.shipping_model))
        if not isinstance(self.shipping_size_mix, SizeMix):
            raise TypeError("shipping_size_mix must be a SizeMix")

    @classmethod
    def from_dict(cls, data: dict) -> 'UsageProfile':
        storage = data.get('storageRequirements')
        return cls(
            monthly_orders=data['monthlyOrders'],
            average_units_per_order=data['averageUnitsPerOrder'],
            average_order_value=data['averageOrderValue'],
            shipping_model=ShippingModel(data['shippingModel']),
            shipping_size_mix=SizeMix.from_dict(data['shippingSizeMix']),
            storage=StorageUnits.from_dict(storage) if storage is not None else None,
        )

    def to_dict(self) -> dict:
        doc = {
            'monthlyOrders': self.monthly_orders,
            'averageUnitsPerOrder': self.average_units_per_order,
            'averageOrderValue': self.average_order_value,
            'shippingModel': self.shipping_model.value,
            'shippingSizeMix': self.shipping_size_mix.to_dict(),
        }
        if self.storage is not None:
            doc['storageRequirements'] = self.storage.to_dict()
        return doc


# ============================================================================
# DERIVED OUTPUTS
# ============================================================================

# A mix totaling within these bounds is rescaled to exactly 100%.
TOLERANCE_LOW = 99.5
TOLERANCE_HIGH = 100.5


@dataclass(frozen=True)
class NormalizedMix:
    small: float
    medium: float
    large: float
    was_normalized: bool
    original_total: float

    @property
    def in_tolerance(self) -> bool:
        return TOLERANCE_LOW <= self.original_total <= TOLERANCE_HIGH


@dataclass(frozen=True)
class FulfillmentBranches:
    """Both candidate per-order fulfillment costs and the one that was charged."""
    aov_branch_cents: int
    base_branch_cents: int
    selected_branch_cents: int


@dataclass(frozen=True)
class ShippingCost:
    """Per-order shipping cost, each size term rounded before summing."""
    small_weighted_cents: int
    medium_weighted_cents: int
    large_weighted_cents: int
    blended_cost_per_order_cents: int


@dataclass(frozen=True)
class LineItem:
    """A named cost line for display."""
    code: str
    name: str
    cost_cents: int

    def to_dict(self) -> dict:
        return {'code': self.code, 'name': self.name, 'costCents': self.cost_cents}


@dataclass(frozen=True)
class QuoteBreakdown:
    """Complete monthly cost breakdown for one (schedule, profile) pair."""
    schedule_id: str
    schedule_version: str
    fulfillment: FulfillmentBranches
    shipping: ShippingCost
    normalized_mix: NormalizedMix
    fulfillment_cost_cents: int
    shipping_cost_cents: int
    storage_cost_cents: int
    storage_included: bool
    subtotal_cents: int
    monthly_minimum_cents: int
    final_monthly_cost_cents: int
    line_items: tuple[LineItem, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def minimum_applied(self) -> bool:
        return self.final_monthly_cost_cents > self.subtotal_cents

    @property
    def minimum_adjustment_cents(self) -> int:
        return self.final_monthly_cost_cents - self.subtotal_cents

    def category_costs(self) -> dict[str, int]:
        """Monthly cost per pricing category, keyed like the schedule's price sections."""
        return {
            'fulfillment': self.fulfillment_cost_cents,
            'storage': self.storage_cost_cents,
            'shippingAndHandling': self.shipping_cost_cents,
        }

    def to_dict(self) -> dict:
        return {
            'scheduleId': self.schedule_id,
            'scheduleVersion': self.schedule_version,
            'fulfillmentCostCents': self.fulfillment_cost_cents,
            'shippingCostCents': self.shipping_cost_cents,
            'storageCostCents': self.storage_cost_cents,
            'storageIncluded': self.storage_included,
            'subtotalCents': self.subtotal_cents,
            'finalMonthlyCostCents': self.final_monthly_cost_cents,
            'minimumApplied': self.minimum_applied,
            'breakdown': {
                'fulfillment': {
                    'aovBranchCents': self.fulfillment.aov_branch_cents,
                    'baseBranchCents': self.fulfillment.base_branch_cents,
                    'selectedBranchCents': self.fulfillment.selected_branch_cents,
                },
                'shipping': {
                    'smallWeightedCents': self.shipping.small_weighted_cents,
                    'mediumWeightedCents': self.shipping.medium_weighted_cents,
                    'largeWeightedCents': self.shipping.large_weighted_cents,
                    'blendedCostPerOrderCents': self.shipping.blended_cost_per_order_cents,
                    'totalShippingCents': self.shipping_cost_cents,
                },
                'shippingSizeMix': {
                    'small': self.normalized_mix.small,
                    'medium': self.normalized_mix.medium,
                    'large': self.normalized_mix.large,
                    'wasNormalized': self.normalized_mix.was_normalized,
                    'originalTotal': self.normalized_mix.original_total,
                },
                'monthlyMinimumCents': self.monthly_minimum_cents,
            },
            'lineItems': [item.to_dict() for item in self.line_items],
            'warnings': list(self.warnings),
        }


@dataclass(frozen=True)
class CategoryDiscount:
    """Discount of one cost category between a source and a target figure."""
    category: str
    source_cents: int
    target_cents: int
    discount_percent: float
    threshold_percent: Optional[float] = None
    exceeds_threshold: bool = False

    def to_dict(self) -> dict:
        return {
            'category': self.category,
            'sourceCents': self.source_cents,
            'targetCents': self.target_cents,
            'discountPercent': self.discount_percent,
            'thresholdPercent': self.threshold_percent,
            'exceedsThreshold': self.exceeds_threshold,
        }


@dataclass(frozen=True)
class HarmonizationResult:
    """Outcome of a harmonization analysis. Ephemeral until a caller saves the proposal."""
    mode: HarmonizationMode
    new_price_cents: int
    target_price_cents: int
    delta_cents: int
    required_discount_percent: float
    source_breakdown: QuoteBreakdown
    target_breakdown: Optional[QuoteBreakdown] = None
    categories: tuple[CategoryDiscount, ...] = ()
    warnings: tuple[str, ...] = ()
    proposed_schedule: Optional[PriceSchedule] = None

    @property
    def flagged_categories(self) -> list[str]:
        return [c.category for c in self.categories if c.exceeds_threshold]

    def to_dict(self) -> dict:
        return {
            'mode': self.mode.value,
            'newPriceCents': self.new_price_cents,
            'targetPriceCents': self.target_price_cents,
            'deltaCents': self.delta_cents,
            'requiredDiscountPercent': self.required_discount_percent,
            'categories': [c.to_dict() for c in self.categories],
            'warnings': list(self.warnings),
            'sourceBreakdown': self.source_breakdown.to_dict(),
            'targetBreakdown': self.target_breakdown.to_dict() if self.target_breakdown else None,
            'proposedSchedule': self.proposed_schedule.to_dict() if self.proposed_schedule else None,
        }
