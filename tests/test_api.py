import pytest
from fastapi.testclient import TestClient

from quote_tool.api.main import app
from quote_tool.api.state import AppState, get_state
from quote_tool.data.seed_schedules import seed_schedules


@pytest.fixture
def state(settings):
    seed_schedules(settings, verbose=False)
    return AppState.from_settings(settings)


@pytest.fixture
def client(state):
    app.dependency_overrides[get_state] = lambda: state
    yield TestClient(app)
    app.dependency_overrides.clear()


SCOPE = {
    "monthlyOrders": 1000,
    "averageUnitsPerOrder": 2,
    "averageOrderValue": 45,
    "shippingModel": "standard",
    "shippingSizeMix": {"small": 60, "medium": 30, "large": 10},
}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["ok"] is True


def test_preview_quote(client):
    response = client.post("/api/quotes/preview", json={"rateCardId": "standard-2025", "scope": SCOPE})
    assert response.status_code == 200

    body = response.json()
    assert body["rateCardId"] == "standard-2025"
    assert body["version"] == "v1.0.0"
    assert body["breakdown"]["finalMonthlyCostCents"] == 805000


def test_preview_unknown_rate_card(client):
    response = client.post("/api/quotes/preview", json={"rateCardId": "nope", "scope": SCOPE})
    assert response.status_code == 404


def test_preview_rejects_negative_orders(client):
    scope = dict(SCOPE, monthlyOrders=-5)
    response = client.post("/api/quotes/preview", json={"rateCardId": "standard-2025", "scope": scope})
    assert response.status_code == 422


def test_preview_storage_toggle(client):
    scope = dict(SCOPE, storageRequirements={"pallets": 2})
    included = client.post("/api/quotes/preview", json={"rateCardId": "standard-2025", "scope": scope}).json()
    excluded = client.post(
        "/api/quotes/preview",
        json={"rateCardId": "standard-2025", "scope": scope, "includeStorage": False},
    ).json()

    assert included["breakdown"]["storageCostCents"] == 15000
    assert excluded["breakdown"]["storageCostCents"] == 0
    assert excluded["breakdown"]["storageIncluded"] is False


def test_save_list_and_export_quote(client):
    saved = client.post(
        "/api/quotes",
        json={"rateCardId": "standard-2025", "scope": SCOPE, "clientName": "Acme"},
    )
    assert saved.status_code == 201
    quote_id = saved.json()["quote"]["id"]

    listed = client.get("/api/quotes").json()["quotes"]
    assert [q["id"] for q in listed] == [quote_id]
    assert client.get(f"/api/quotes/{quote_id}").json()["quote"]["clientName"] == "Acme"

    exported = client.get(f"/api/quotes/{quote_id}/export")
    assert exported.status_code == 200
    assert exported.text.splitlines()[0] == "Category,Code,Monthly Cost"
    assert "Fulfillment" in exported.text


def test_export_keeps_quoted_figures_after_rate_card_edit(client):
    """Editing the rate card after saving never changes the exported quote."""
    quote_id = client.post(
        "/api/quotes",
        json={"rateCardId": "standard-2025", "scope": SCOPE},
    ).json()["quote"]["id"]

    card = client.get("/api/rate-cards/standard-2025").json()["rateCard"]
    card["prices"]["fulfillment"]["baseFeeCents"] = 500
    edited = client.put(
        "/api/rate-cards/standard-2025",
        json={"prices": card["prices"], "versionNotes": "Raise base fee"},
    )
    assert edited.json()["rateCard"]["version"] == "v1.0.1"

    lines = client.get(f"/api/quotes/{quote_id}/export").text.splitlines()
    assert "Fulfillment,fulfillment,3250.0" in lines
    assert "Total,total,8050.0" in lines


def test_get_missing_quote(client):
    assert client.get("/api/quotes/missing").status_code == 404


def test_rate_card_crud(client):
    card = client.get("/api/rate-cards/standard-2025").json()["rateCard"]
    card["id"] = "custom"
    card["name"] = "Custom"

    created = client.post("/api/rate-cards", json=card)
    assert created.status_code == 201
    assert client.post("/api/rate-cards", json=card).status_code == 409

    updated = client.put(
        "/api/rate-cards/custom",
        json={"monthly_minimum_cents": 500000, "versionNotes": "Raise minimum"},
    )
    assert updated.status_code == 200
    assert updated.json()["previousVersion"] == "v1.0.0"
    assert updated.json()["rateCard"]["version"] == "v1.0.1"
    assert updated.json()["rateCard"]["monthly_minimum_cents"] == 500000

    deleted = client.delete("/api/rate-cards/custom")
    assert deleted.status_code == 200
    assert client.get("/api/rate-cards/custom").status_code == 404


def test_update_requires_version_notes(client):
    response = client.put("/api/rate-cards/standard-2025", json={"name": "Renamed"})
    assert response.status_code == 422


def test_delete_referenced_rate_card_conflicts(client):
    client.post("/api/quotes", json={"rateCardId": "standard-2025", "scope": SCOPE})
    response = client.delete("/api/rate-cards/standard-2025")
    assert response.status_code == 409


def test_list_rate_cards_sorted(client):
    names = [c["name"] for c in client.get("/api/rate-cards").json()["rateCards"]]
    assert names == sorted(names)
    assert len(names) == 3


def test_target_harmonization_does_not_persist(client):
    response = client.post(
        "/api/harmonization/target",
        json={"rateCardId": "standard-2025", "scope": SCOPE, "targetPriceCents": 700000},
    )
    assert response.status_code == 200

    body = response.json()
    assert body["requiredDiscountPercent"] == 13.04
    assert body["deltaCents"] == 105000
    assert body["proposedSchedule"]["id"] == "standard-2025-harmonized"
    assert client.get("/api/rate-cards/standard-2025-harmonized").status_code == 404


def test_target_harmonization_defaults_to_subtotal(client):
    client.put(
        "/api/rate-cards/standard-2025",
        json={"monthly_minimum_cents": 900000, "versionNotes": "Raise minimum"},
    )
    request = {"rateCardId": "standard-2025", "scope": SCOPE, "targetPriceCents": 700000}

    subtotal = client.post("/api/harmonization/target", json=request).json()
    assert subtotal["newPriceCents"] == 805000
    assert subtotal["requiredDiscountPercent"] == 13.04

    final = client.post("/api/harmonization/target", json=dict(request, basis="final")).json()
    assert final["newPriceCents"] == 900000


def test_target_harmonization_threshold_override(client):
    body = client.post(
        "/api/harmonization/target",
        json={
            "rateCardId": "standard-2025",
            "scope": SCOPE,
            "targetPriceCents": 700000,
            "thresholds": {"global": 10},
        },
    ).json()
    assert body["warnings"] == ["High discount warning: global discount of 13.04% exceeds the 10.00% threshold"]


def test_compare_harmonization(client):
    response = client.post(
        "/api/harmonization/compare",
        json={"sourceRateCardId": "standard-2025", "targetRateCardId": "standard-2025", "scope": SCOPE},
    )
    assert response.status_code == 200
    assert response.json()["requiredDiscountPercent"] == 0.0
    assert response.json()["mode"] == "compare"


def test_save_proposal_requires_confirmation(client):
    proposal = client.post(
        "/api/harmonization/target",
        json={"rateCardId": "standard-2025", "scope": SCOPE, "targetPriceCents": 700000},
    ).json()["proposedSchedule"]

    unconfirmed = client.post("/api/harmonization/proposals", json={"rateCard": proposal})
    assert unconfirmed.status_code == 400

    confirmed = client.post("/api/harmonization/proposals", json={"rateCard": proposal, "confirmed": True})
    assert confirmed.status_code == 201
    assert confirmed.json()["rateCard"]["version_notes"] == "Harmonized rate card for target price: $7,000.00"
    assert client.get("/api/rate-cards/standard-2025-harmonized").status_code == 200
