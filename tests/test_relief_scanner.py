"""
Unit Tests for the Form 11 Relief Scanner

Run with: pytest tests/test_relief_scanner.py -v
"""

import pytest
from decimal import Decimal

from irish_tax_engine.services.relief_scanner import (
    classify_relief,
    scan_for_reliefs,
    RELIEF_BUCKETS,
)


class TestClassifyRelief:
    """Test description matching."""

    def test_health_insurance_before_medical(self):
        assert classify_relief("LAYA HEALTHCARE DD") == "health_insurance"
        assert classify_relief("VHI Healthcare") == "health_insurance"

    def test_medical(self):
        assert classify_relief("Beacon Hospital consultant") == "medical"
        assert classify_relief("Physio session") == "medical"

    def test_medical_exclusions(self):
        assert classify_relief("Botox clinic") is None
        assert classify_relief("Dental checkup") is None

    def test_excluded_medical_tries_later_categories(self):
        """Cosmetic surgeon paid through a university falls to tuition."""
        assert classify_relief("Cosmetic surgeon UCD") == "tuition"

    def test_other_buckets(self):
        assert classify_relief("Irish Life Pension") == "pension"
        assert classify_relief("Trocaire donation") == "charitable"
        assert classify_relief("Monthly rent to landlord") == "rent"
        assert classify_relief("Griffith College fees") == "tuition"

    def test_whitespace_and_case(self):
        assert classify_relief("  monthly    RENT ") == "rent"

    def test_no_match(self):
        assert classify_relief("Tesco groceries") is None
        assert classify_relief("") is None


class TestScanForReliefs:
    """Test bucket totals."""

    @pytest.fixture
    def transactions(self):
        return [
            {"description": "VHI Healthcare", "amount": -150.50, "date": "2025-01-05", "type": "expense"},
            {"description": "VHI Healthcare", "amount": -150.50, "date": "2025-02-05", "type": "expense"},
            {"description": "Beacon Hospital", "amount": -400, "date": "2025-03-10", "type": "expense"},
            {"description": "Teeth whitening", "amount": -250, "type": "expense"},
            {"description": "Monthly rent", "amount": -1200, "type": "expense"},
            {"description": "Monthly rent refund", "amount": 100, "type": "income"},
            {"description": "Trocaire", "amount": 0, "type": "expense"},
        ]

    def test_totals(self, transactions):
        result = scan_for_reliefs(transactions)

        assert result.health_insurance.total == Decimal("301.00")
        assert result.medical.total == Decimal("400")
        assert result.rent.total == Decimal("1200")

    def test_income_and_zero_skipped(self, transactions):
        result = scan_for_reliefs(transactions)

        assert len(result.rent.transactions) == 1
        assert result.charitable.transactions == []

    def test_dates_carried(self, transactions):
        result = scan_for_reliefs(transactions)

        assert result.health_insurance.transactions[0].date == "2025-01-05"

    def test_serialises_every_bucket(self, transactions):
        data = scan_for_reliefs(transactions).to_dict()

        assert set(data) == set(RELIEF_BUCKETS)
        assert data["health_insurance"]["total"] == 301.0
        assert data["tuition"] == {"total": 0.0, "transactions": []}

    def test_untyped_rows_skipped(self):
        """Rows without a type are neither income nor expense."""
        result = scan_for_reliefs([
            {"description": "VHI Healthcare", "amount": 100, "transaction_date": "2024-01-01"},
        ])

        assert result.health_insurance.total == Decimal("0")
        assert result.health_insurance.transactions == []

    def test_repeat_scan_is_identical(self, transactions):
        assert scan_for_reliefs(transactions).to_dict() == scan_for_reliefs(transactions).to_dict()
