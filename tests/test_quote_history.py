import pytest

from quote_tool.engine import assemble
from quote_tool.services.quote_history import QuoteHistoryService, QuoteNotFoundError, QuoteRecord


@pytest.fixture
def history(tmp_path):
    return QuoteHistoryService(tmp_path / "quotes.json")


def test_save_and_get(history, schedule, profile):
    record = history.save_quote(schedule, profile, assemble(schedule, profile), client_name="Acme")

    assert record.schedule_id == schedule.id
    assert record.schedule_version == "v1.0.0"
    assert record.final_monthly_cost_cents == 805000
    assert history.get_quote(record.id) == record


def test_blank_client_name_stored_as_none(history, schedule, profile):
    record = history.save_quote(schedule, profile, assemble(schedule, profile), client_name="")
    assert record.client_name is None


def test_list_newest_first(history, schedule, profile):
    breakdown = assemble(schedule, profile)
    first = history.save_quote(schedule, profile, breakdown)
    second = history.save_quote(schedule, profile, breakdown)

    ids = [r.id for r in history.list_quotes()]
    assert set(ids) == {first.id, second.id}
    assert ids[0] == max([first, second], key=lambda r: r.created_at).id


def test_count_for_schedule(history, schedule, profile):
    breakdown = assemble(schedule, profile)
    history.save_quote(schedule, profile, breakdown)
    history.save_quote(schedule, profile, breakdown)

    assert history.count_for_schedule(schedule.id) == 2
    assert history.count_for_schedule("other") == 0


def test_missing_quote_raises(history):
    with pytest.raises(QuoteNotFoundError):
        history.get_quote("missing")


def test_record_wire_format(history, schedule, profile):
    record = history.save_quote(schedule, profile, assemble(schedule, profile), client_name="Acme")
    doc = record.to_dict()

    assert doc['rateCardId'] == schedule.id
    assert doc['scopeInput']['monthlyOrders'] == 1000
    assert doc['calculation']['finalMonthlyCostCents'] == 805000
    assert QuoteRecord.from_dict(doc) == record
