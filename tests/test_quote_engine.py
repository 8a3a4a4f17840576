import pytest

from conftest import make_schedule, make_profile
from quote_tool.engine import QuoteEngine, assemble, SizeMix, StorageUnits, ShippingModel, UsageProfile
from quote_tool.engine.quote_engine import FULFILLMENT, SHIPPING, STORAGE, MINIMUM


def test_scenario_breakdown(schedule, profile):
    """1000 orders at $8.05 per order, above the $3,000 minimum."""
    result = assemble(schedule, profile)

    assert result.fulfillment_cost_cents == 325000
    assert result.shipping_cost_cents == 480000
    assert result.storage_cost_cents == 0
    assert result.subtotal_cents == 805000
    assert result.final_monthly_cost_cents == 805000
    assert not result.minimum_applied
    assert [item.code for item in result.line_items] == [FULFILLMENT, SHIPPING]
    assert result.warnings == ()


def test_minimum_floor_adds_adjustment_line(profile):
    schedule = make_schedule(monthly_minimum_cents=900000)
    result = assemble(schedule, profile)

    assert result.subtotal_cents == 805000
    assert result.final_monthly_cost_cents == 900000
    assert result.minimum_applied
    assert result.minimum_adjustment_cents == 95000

    minimum_line = result.line_items[-1]
    assert minimum_line.code == MINIMUM
    assert minimum_line.name == "Monthly Minimum Adjustment"
    assert minimum_line.cost_cents == 95000
    assert sum(item.cost_cents for item in result.line_items) == result.final_monthly_cost_cents


@pytest.mark.parametrize("orders", [0, 1, 10, 372, 1000, 25000])
def test_final_is_max_of_subtotal_and_minimum(schedule, orders):
    result = assemble(schedule, make_profile(monthly_orders=orders))
    assert result.final_monthly_cost_cents == max(result.subtotal_cents, schedule.monthly_minimum_cents)
    assert result.final_monthly_cost_cents >= schedule.monthly_minimum_cents


def test_zero_orders_bills_the_minimum(schedule):
    result = assemble(schedule, make_profile(monthly_orders=0))
    assert result.subtotal_cents == 0
    assert result.final_monthly_cost_cents == schedule.monthly_minimum_cents


def test_assemble_is_deterministic(schedule, profile):
    engine = QuoteEngine()
    assert engine.assemble(schedule, profile) == engine.assemble(schedule, profile)


def test_storage_included_in_total(schedule):
    profile = make_profile(storage=StorageUnits(small_units=100, pallets=2))
    result = QuoteEngine(include_storage=True).assemble(schedule, profile)

    assert result.storage_cost_cents == 7500 + 15000
    assert result.subtotal_cents == 805000 + 22500
    assert result.storage_included
    assert STORAGE in [item.code for item in result.line_items]


def test_zero_storage_has_no_line_item(schedule, profile):
    result = QuoteEngine(include_storage=True).assemble(schedule, profile)
    assert result.storage_included
    assert result.storage_cost_cents == 0
    assert STORAGE not in [item.code for item in result.line_items]


def test_storage_excluded_from_total(schedule):
    profile = make_profile(storage=StorageUnits(small_units=100, pallets=2))
    result = QuoteEngine(include_storage=False).assemble(schedule, profile)

    assert result.storage_cost_cents == 0
    assert result.subtotal_cents == 805000
    assert not result.storage_included
    assert STORAGE not in [item.code for item in result.line_items]


def test_customer_account_rate_set(schedule):
    profile = make_profile(
        shipping_model=ShippingModel.CUSTOMER_ACCOUNT,
        shipping_size_mix=SizeMix(50, 25, 25),
    )
    result = assemble(schedule, profile)
    assert result.shipping.blended_cost_per_order_cents == 38 + 31 + 63


def test_shipping_model_accepts_wire_value(schedule):
    profile = make_profile(shipping_model="customerAccount")
    assert profile.shipping_model is ShippingModel.CUSTOMER_ACCOUNT


def test_unknown_shipping_model_rejected():
    with pytest.raises(ValueError):
        make_profile(shipping_model="freight")


def test_non_numeric_input_rejected():
    with pytest.raises(TypeError):
        make_profile(average_order_value="45")
    with pytest.raises(TypeError):
        make_profile(monthly_orders=True)


def test_mix_out_of_tolerance_still_quotes_with_warning(schedule):
    result = assemble(schedule, make_profile(shipping_size_mix=SizeMix(60, 30, 20)))
    assert not result.normalized_mix.was_normalized
    assert result.warnings == ("Shipping percentages total 110.0% (should be 100%)",)


def test_normalized_mix_warning(schedule):
    result = assemble(schedule, make_profile(shipping_size_mix=SizeMix(33.0, 33.0, 33.5)))
    assert result.normalized_mix.was_normalized
    assert "auto-normalized from 99.5%" in result.warnings[0]


def test_units_below_one_warns(schedule):
    result = assemble(schedule, make_profile(average_units_per_order=0.5))
    assert result.fulfillment.base_branch_cents == 213
    assert any("below 1" in w for w in result.warnings)


def test_breakdown_to_dict(schedule, profile):
    doc = assemble(schedule, profile).to_dict()
    assert doc['scheduleId'] == schedule.id
    assert doc['finalMonthlyCostCents'] == 805000
    assert doc['breakdown']['fulfillment']['selectedBranchCents'] == 325
    assert doc['breakdown']['shipping']['blendedCostPerOrderCents'] == 480
    assert [item['code'] for item in doc['lineItems']] == [FULFILLMENT, SHIPPING]


def test_profile_wire_format_round_trip(profile):
    doc = profile.to_dict()
    assert doc['shippingModel'] == "standard"
    assert UsageProfile.from_dict(doc) == profile
