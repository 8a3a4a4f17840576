import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from quote_tool.config.settings import Settings
from quote_tool.engine.models import (
    PriceSchedule,
    SchedulePrices,
    FulfillmentRates,
    StorageRates,
    ShippingRates,
    PackageRates,
    UsageProfile,
    SizeMix,
    ShippingModel,
)


def make_schedule(
    schedule_id: str = "standard-test",
    monthly_minimum_cents: int = 300000,
    standard: tuple = (300, 600, 1200),
    customer_account: tuple = (75, 125, 250),
    aov_percentage: float = 0.05,
    base_fee_cents: int = 250,
    per_additional_unit_cents: int = 75,
) -> PriceSchedule:
    return PriceSchedule(
        id=schedule_id,
        name=f"Test {schedule_id}",
        version="v1.0.0",
        monthly_minimum_cents=monthly_minimum_cents,
        prices=SchedulePrices(
            fulfillment=FulfillmentRates(
                aov_percentage=aov_percentage,
                base_fee_cents=base_fee_cents,
                per_additional_unit_cents=per_additional_unit_cents,
            ),
            storage=StorageRates(
                small_unit_cents=75,
                medium_unit_cents=150,
                large_unit_cents=250,
                pallet_cents=7500,
            ),
            shipping_and_handling=ShippingRates(
                standard=PackageRates(*standard),
                customer_account=PackageRates(*customer_account),
            ),
        ),
    )


def make_profile(**overrides) -> UsageProfile:
    values = dict(
        monthly_orders=1000,
        average_units_per_order=2,
        average_order_value=45.0,
        shipping_model=ShippingModel.STANDARD,
        shipping_size_mix=SizeMix(small=60, medium=30, large=10),
        storage=None,
    )
    values.update(overrides)
    return UsageProfile(**values)


@pytest.fixture
def schedule() -> PriceSchedule:
    """aov 5%, base $2.50, +$0.75/unit, S&H $3/$6/$12, minimum $3,000."""
    return make_schedule()


@pytest.fixture
def profile() -> UsageProfile:
    """1000 orders of 2 units at $45, 60/30/10 standard mix, no storage."""
    return make_profile()


@pytest.fixture
def settings(tmp_path, monkeypatch) -> Settings:
    """Settings whose stores live in a temporary directory."""
    for name in ('QUOTE_TOOL_DATA_DIR', 'QUOTE_TOOL_INCLUDE_STORAGE', 'QUOTE_TOOL_DISCOUNT_THRESHOLD'):
        monkeypatch.delenv(name, raising=False)
    return Settings.load(project_root=tmp_path)
