"""Tests for the HTTP API: defaults, simulation and location routes."""

from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from propsim.api.app import app
from propsim.data.geocode import GeoLocation


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def draft_payload():
    return {
        "price": "100000000",
        "monthly_rent": "500000",
        "structure": "RC",
        "building_age": 0,
    }


class TestHealth:
    def test_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestDefaultsRoute:
    def test_fills_draft(self, client, draft_payload):
        resp = client.post("/api/v1/defaults", json=draft_payload)
        assert resp.status_code == 200
        draft = resp.json()["draft"]
        assert Decimal(draft["loan_amount"]) == Decimal("95000000")
        assert Decimal(draft["building_ratio"]) == Decimal("70")
        assert draft["loan_years"] == 35
        assert draft["expense_mode"] == "SIMPLE"

    def test_manifest(self, client, draft_payload):
        data = client.post("/api/v1/defaults", json=draft_payload).json()
        filled = {item["field_name"]: item for item in data["auto_filled"]}
        assert filled["building_ratio"]["source"] == "estimated"
        assert filled["registration_rate"]["source"] == "default"
        assert "price" not in filled

    def test_round_trip_is_stable(self, client, draft_payload):
        draft = client.post("/api/v1/defaults", json=draft_payload).json()["draft"]
        again = client.post("/api/v1/defaults", json=draft).json()
        assert again["draft"] == draft
        assert again["auto_filled"] == []


class TestSimulateRoute:
    def test_baseline(self, client, draft_payload):
        resp = client.post("/api/v1/simulate", json=draft_payload)
        assert resp.status_code == 200
        data = resp.json()
        assert len(data["baseline"]) == 35
        assert data["scenario"] is None
        assert data["exit"] is None
        assert data["auto_filled"]
        assert Decimal(data["baseline"][0]["dscr"]) > 1
        assert Decimal(data["minimum_dscr"]) <= Decimal(data["baseline"][0]["dscr"])

    def test_loan_repaid_at_term(self, client, draft_payload):
        data = client.post("/api/v1/simulate", json={**draft_payload, "loan_years": 30}).json()
        assert Decimal(data["baseline"][29]["loan_balance"]) == Decimal("0")

    def test_acquisition(self, client, draft_payload):
        data = client.post("/api/v1/simulate", json=draft_payload).json()
        acquisition = data["acquisition"]
        assert Decimal(acquisition["building_price"]) + Decimal(acquisition["land_price"]) == Decimal("100000000")

    def test_stress_and_exit(self, client, draft_payload):
        payload = {
            **draft_payload,
            "stress_enabled": True,
            "rent_curve_enabled": True,
            "occupancy_decline_enabled": True,
            "exit_enabled": True,
        }
        data = client.post("/api/v1/simulate", json=payload).json()
        assert len(data["scenario"]["yearly"]) == 35
        assert data["scenario"]["exit"]["exit_year"] == 10
        assert data["exit"]["exit_year"] == 10

    def test_detailed_items(self, client, draft_payload):
        payload = {
            **draft_payload,
            "expense_mode": "DETAILED",
            "leasing_enabled": False,
            "oer_fixed_items": [{"label": "Management", "annual_amount": "300000"}],
            "repair_events": [{"year": 3, "amount": "1000000", "label": "Exterior"}],
        }
        data = client.post("/api/v1/simulate", json=payload).json()
        assert Decimal(data["baseline"][0]["operating_expense"]) == Decimal("300000")
        assert Decimal(data["baseline"][2]["repair_cost"]) == Decimal("1000000")

    def test_empty_draft_all_zero(self, client):
        data = client.post("/api/v1/simulate", json={}).json()
        assert all(Decimal(y["cash_flow_post_tax"]) == 0 for y in data["baseline"])

    def test_invalid_enum_rejected(self, client, draft_payload):
        resp = client.post("/api/v1/simulate", json={**draft_payload, "structure": "BRICK"})
        assert resp.status_code == 422

    def test_oversized_loan_term_rejected(self, client, draft_payload):
        resp = client.post("/api/v1/simulate", json={**draft_payload, "loan_years": 100000})
        assert resp.status_code == 422

    def test_invalid_repair_year_rejected(self, client, draft_payload):
        payload = {**draft_payload, "repair_events": [{"year": 0, "amount": "1000"}]}
        resp = client.post("/api/v1/simulate", json=payload)
        assert resp.status_code == 422


class TestLocationRoute:
    def test_geocoded(self, client):
        location = GeoLocation(
            query="東京都新宿区西新宿2-8-1",
            matched_address="東京都新宿区西新宿二丁目",
            latitude=Decimal("35.689488"),
            longitude=Decimal("139.691711"),
        )
        with patch("propsim.api.routes.location.try_geocode", new_callable=AsyncMock, return_value=location):
            resp = client.post("/api/v1/location", json={"address": "東京都新宿区西新宿2-8-1"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["matched_address"] == "東京都新宿区西新宿二丁目"
        assert Decimal(data["latitude"]) == Decimal("35.689488")
        assert data["warnings"] == []

    def test_failure_is_warning(self, client):
        with patch("propsim.api.routes.location.try_geocode", new_callable=AsyncMock, return_value=None):
            resp = client.post("/api/v1/location", json={"address": "nowhere"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["latitude"] is None
        assert data["warnings"] == ["Could not geocode address: nowhere"]

    def test_blank_address(self, client):
        resp = client.post("/api/v1/location", json={"address": "  "})
        assert resp.status_code == 400
