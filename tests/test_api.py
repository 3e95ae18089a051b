"""
API Tests for the Irish Tax Engine

Exercises the HTTP surface in-process with FastAPI's TestClient.

Run with: pytest tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from irish_tax_engine.server import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


class TestHealth:
    """Test health and configuration endpoints."""

    def test_root(self, client):
        response = client.get("/api/")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health(self, client):
        data = client.get("/api/health").json()

        assert data["status"] == "healthy"
        assert "configuration" in data["checks"]

    def test_liveness(self, client):
        assert client.get("/api/health/live").json()["status"] == "alive"

    def test_config_status(self, client):
        data = client.get("/api/config/status").json()

        assert "default_tax_year" in data
        assert "SENTRY_DSN" in data["variables"]

    def test_request_id_echoed(self, client):
        response = client.get("/api/", headers={"X-Request-ID": "test-123"})

        assert response.headers["X-Request-ID"] == "test-123"
        assert "X-Process-Time" in response.headers


class TestReferenceEndpoints:
    """Test status and rate tables."""

    def test_status(self, client):
        data = client.get("/api/tax/status").json()

        assert data["jurisdiction"] == "IE"
        assert data["modules"]["form11"]["tax_years"] == [2024, 2025, 2026]

    def test_rates(self, client):
        data = client.get("/api/tax/rates", params={"tax_year": 2024}).json()

        assert data["income_tax"]["year"] == 2024
        assert data["vat_rates"]["standard_23"] == 0.23
        assert data["revenue_rates"]["bicycle_rate_per_km"] == 0.08

    def test_eu_vat_rules(self, client):
        data = client.get("/api/tax/eu-vat/rules").json()

        assert len(data["eu_countries"]) == 26


class TestTravelEndpoints:
    """Test mileage, subsistence and vehicle endpoints."""

    def test_mileage(self, client):
        response = client.post("/api/tax/mileage/calculate", json={"distance_km": 1500})

        assert response.status_code == 200
        data = response.json()
        assert data["allowance"] == 777.3
        assert len(data["bands"]) == 1

    def test_mileage_unknown_vehicle(self, client):
        response = client.post(
            "/api/tax/mileage/calculate",
            json={"distance_km": 100, "vehicle_type": "tractor"},
        )

        assert response.status_code == 400

    def test_mileage_negative_distance_is_zero(self, client):
        """Negative distances are clamped like the library does."""
        response = client.post("/api/tax/mileage/calculate", json={"distance_km": -5})

        assert response.status_code == 200
        assert response.json()["allowance"] == 0
        assert response.json()["bands"] == []

    def test_commute(self, client):
        data = client.post(
            "/api/tax/mileage/commute",
            json={"one_way_km": 10, "working_days_per_year": 230},
        ).json()

        assert data["annual_km"] == 4600
        assert data["allowance"] == 3586.83

    def test_subsistence(self, client):
        data = client.post("/api/tax/subsistence/calculate", json={"nights_away": 2, "days_away": 3}).json()

        assert data["total"] == 549.57

    def test_vehicle_depreciation(self, client):
        data = client.post("/api/tax/vehicle/depreciation", json={
            "vehicle": {"purchase_cost": 30000, "date_acquired": "2023-03-01", "business_use_pct": 80},
            "tax_year": 2025,
            "include_schedule": True,
        }).json()

        assert data["annual_allowance"] == 2400.0
        assert data["net_book_value"] == 15000.0
        assert len(data["schedule"]) == 8

    def test_vehicle_business_use_over_100_echoed(self, client):
        data = client.post("/api/tax/vehicle/depreciation", json={
            "vehicle": {"purchase_cost": 30000, "date_acquired": "2023-03-01", "business_use_pct": 150},
            "tax_year": 2025,
        }).json()

        assert data["business_use_pct"] == 150.0
        assert data["annual_allowance"] == 3000.0


class TestVATEndpoints:
    """Test VAT endpoints."""

    def test_cross_border(self, client):
        data = client.post("/api/tax/vat/cross-border", json={
            "direction": "sale",
            "counterparty_location": "eu",
            "supply_type": "goods",
            "customer_type": "b2b",
        }).json()

        assert data["treatment"] == "zero_rated"
        assert data["vat3_boxes"] == ["E1"]

    def test_validate_number(self, client):
        data = client.post(
            "/api/tax/vat/validate-number",
            json={"vat_number": "IE1234567T", "country_code": "IE"},
        ).json()

        assert data["valid"] is True

    def test_import_vat(self, client):
        data = client.post("/api/tax/vat/import", json={"cif_value": 1000, "customs_duty": 100}).json()

        assert data["vat_amount"] == 253.0

    def test_thresholds(self, client):
        oss = client.post("/api/tax/vat/oss-threshold", json={"annual_eu_b2c_sales": 12000}).json()
        intrastat = client.post(
            "/api/tax/vat/intrastat-threshold",
            json={"arrivals_total": 800000, "dispatches_total": 0},
        ).json()

        assert oss["exceeds"] is True
        assert intrastat["arrivals_required"] is True
        assert intrastat["dispatches_required"] is False

    def test_deductibility(self, client):
        vat = client.post("/api/tax/vat/deductibility", json={"description": "Shell petrol"}).json()
        ct = client.post(
            "/api/tax/ct/deductibility",
            json={"description": "Client lunch", "category": "Entertainment"},
        ).json()

        assert vat["is_deductible"] is False
        assert ct["is_deductible"] is False

    def test_from_gross(self, client):
        standard = client.post("/api/tax/vat/from-gross", json={"gross_amount": 123}).json()
        second_reduced = client.post("/api/tax/vat/from-gross", json={"gross_amount": 109, "vat_rate": 9}).json()

        assert standard == {"net_amount": 100.0, "vat_amount": 23.0}
        assert second_reduced["vat_amount"] == 9.0

    def test_account_suggestion(self, client):
        found = client.get("/api/tax/accounts/suggest", params={"category": "Fuel"})
        missing = client.get("/api/tax/accounts/suggest", params={"category": "Nope"})

        assert found.json()["account_name"] == "Motor - Fuel"
        assert missing.status_code == 404


class TestReturnEndpoints:
    """Test Form 11, CT1 and trial balance endpoints."""

    def test_form11(self, client):
        data = client.post("/api/tax/form11/calculate", json={"salary": 60000, "tax_year": 2025}).json()

        assert data["tax_year"] == 2025
        assert data["summary"]["total_liability"] == 15021.0

    def test_form11_invalid_marital_status(self, client):
        response = client.post("/api/tax/form11/calculate", json={"marital_status": "engaged"})

        assert response.status_code == 400

    def test_vehicle_bik(self, client):
        data = client.post(
            "/api/tax/form11/vehicle-bik",
            json={"omv": 30000, "business_km": 10000, "tax_year": 2025},
        ).json()

        assert data["bik"] == 6801.0

    def test_ct1(self, client):
        data = client.post("/api/tax/ct1/compute", json={
            "tax_year": 2025,
            "transactions": [
                {"description": "Invoice", "amount": 100000, "type": "income", "category": "Sales"},
                {"description": "Materials", "amount": -20000, "type": "expense", "category": "Materials"},
            ],
            "questionnaire": {
                "capital_allowances_plant": 5000,
                "losses_forward": 10000,
                "close_company_surcharge": 2000,
                "preliminary_ct_paid": 5000,
            },
        }).json()

        assert data["computation"]["taxable_profit"] == 65000.0
        assert data["computation"]["total_ct_liability"] == 10125.0
        assert data["computation"]["balance_due"] == 5125.0

    def test_trial_balance(self, client):
        data = client.post("/api/tax/trial-balance", json={
            "transactions": [
                {"description": "Invoice", "amount": 1000, "type": "income", "category": "Sales"},
                {"description": "Eir", "amount": -100, "type": "expense", "category": "Phone"},
            ],
        }).json()

        assert data["is_balanced"] is True
        assert data["total_debits"] == 1100.0
        assert data["accounts"][0]["account_name"] == "Bank - Current Account"

    def test_relief_scan(self, client):
        data = client.post("/api/tax/reliefs/scan", json={
            "transactions": [
                {"description": "VHI Healthcare", "amount": -100, "type": "expense"},
                {"description": "VHI Healthcare", "amount": -50},
            ],
        }).json()

        assert data["health_insurance"]["total"] == 100.0
