"""
Request models for the HTTP API.

These enforce the range invariants of rate cards and usage profiles at the
boundary; the engine itself assumes validated input.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..engine.harmonization import DiscountThresholds, PriceBasis, ProposalStrategy
from ..engine.models import PriceSchedule, SchedulePrices, ShippingModel, UsageProfile


class CamelModel(BaseModel):
    """Accepts the camelCase keys used by rate-card documents."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# USAGE PROFILE
# ============================================================================

class SizeMixIn(CamelModel):
    small: float = Field(ge=0)
    medium: float = Field(ge=0)
    large: float = Field(ge=0)


class StorageIn(CamelModel):
    small_units: int = Field(0, ge=0)
    medium_units: int = Field(0, ge=0)
    large_units: int = Field(0, ge=0)
    pallets: int = Field(0, ge=0)


class ScopeIn(CamelModel):
    """A client's usage profile."""
    monthly_orders: int = Field(ge=0)
    average_units_per_order: float = Field(gt=0)
    average_order_value: float = Field(ge=0)
    shipping_model: ShippingModel
    shipping_size_mix: SizeMixIn
    storage_requirements: Optional[StorageIn] = None

    def to_profile(self) -> UsageProfile:
        return UsageProfile.from_dict(self.model_dump(by_alias=True, mode='json'))


# ============================================================================
# RATE CARDS
# ============================================================================

class FulfillmentIn(CamelModel):
    aov_percentage: float = Field(ge=0, le=1)
    base_fee_cents: int = Field(ge=0)
    per_additional_unit_cents: int = Field(ge=0)


class StorageRatesIn(CamelModel):
    small_unit_cents: int = Field(ge=0)
    medium_unit_cents: int = Field(ge=0)
    large_unit_cents: int = Field(ge=0)
    pallet_cents: int = Field(ge=0)


class PackageRatesIn(CamelModel):
    small_package_cents: int = Field(ge=0)
    medium_package_cents: int = Field(ge=0)
    large_package_cents: int = Field(ge=0)


class ShippingRatesIn(CamelModel):
    standard: PackageRatesIn
    customer_account: PackageRatesIn


class PricesIn(CamelModel):
    fulfillment: FulfillmentIn
    storage: StorageRatesIn
    shipping_and_handling: ShippingRatesIn

    def to_prices(self) -> SchedulePrices:
        return SchedulePrices.from_dict(self.model_dump(by_alias=True))


class RateCardCreate(CamelModel):
    """Request model for creating a rate card."""
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    version: str = Field("v1.0.0", min_length=1)
    monthly_minimum_cents: int = Field(ge=0, alias='monthly_minimum_cents')
    prices: PricesIn
    version_notes: Optional[str] = None

    def to_schedule(self) -> PriceSchedule:
        return PriceSchedule(
            id=self.id,
            name=self.name,
            version=self.version,
            monthly_minimum_cents=self.monthly_minimum_cents,
            prices=self.prices.to_prices(),
            version_notes=self.version_notes,
        )


class RateCardUpdate(CamelModel):
    """Request model for updating a rate card. Version notes are mandatory."""
    name: Optional[str] = Field(None, min_length=1)
    monthly_minimum_cents: Optional[int] = Field(None, ge=0, alias='monthly_minimum_cents')
    prices: Optional[PricesIn] = None
    version_notes: str = Field(min_length=1)


# ============================================================================
# QUOTES & HARMONIZATION
# ============================================================================

class QuotePreviewRequest(CamelModel):
    scope: ScopeIn
    rate_card_id: str = Field(min_length=1)
    include_storage: Optional[bool] = None


class QuoteSaveRequest(QuotePreviewRequest):
    client_name: Optional[str] = None


class ThresholdsIn(CamelModel):
    global_percent: Optional[float] = Field(None, ge=0, alias='global')
    fulfillment: Optional[float] = Field(None, ge=0)
    storage: Optional[float] = Field(None, ge=0)
    shipping_and_handling: Optional[float] = Field(None, ge=0)

    def to_thresholds(self) -> DiscountThresholds:
        return DiscountThresholds(
            global_percent=self.global_percent,
            fulfillment=self.fulfillment,
            storage=self.storage,
            shipping_and_handling=self.shipping_and_handling,
        )


class TargetHarmonizationRequest(CamelModel):
    rate_card_id: str = Field(min_length=1)
    scope: ScopeIn
    target_price_cents: int = Field(ge=0)
    thresholds: Optional[ThresholdsIn] = None
    basis: PriceBasis = PriceBasis.SUBTOTAL
    strategy: ProposalStrategy = ProposalStrategy.SCALE_FEES
    include_storage: Optional[bool] = None


class CompareHarmonizationRequest(CamelModel):
    source_rate_card_id: str = Field(min_length=1)
    target_rate_card_id: str = Field(min_length=1)
    scope: ScopeIn
    thresholds: Optional[ThresholdsIn] = None
    basis: PriceBasis = PriceBasis.FINAL
    include_storage: Optional[bool] = None


class ProposalSaveRequest(CamelModel):
    """A harmonized proposal the caller has reviewed and wants persisted."""
    rate_card: RateCardCreate
    confirmed: bool = False
