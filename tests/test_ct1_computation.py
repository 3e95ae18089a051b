"""
Unit Tests for CT1 Corporation Tax Computation

Run with: pytest tests/test_ct1_computation.py -v
"""

import pytest
from decimal import Decimal

from irish_tax_engine.models.transactions import TransactionRecord
from irish_tax_engine.services.ct1_computation import (
    CT1Questionnaire,
    compute_ct1,
    classify_payment_type,
    is_construction_trade,
    is_non_taxable_income,
)
from irish_tax_engine.services.vehicle_depreciation import VehicleAsset


@pytest.fixture
def transactions():
    return [
        {"description": "Invoice 101 SEPA", "amount": 100000, "type": "income", "category": "Sales"},
        {"description": "Revenue Commissioners refund", "amount": 500, "type": "income"},
        {"description": "Screwfix materials", "amount": -20000, "type": "expense", "category": "Materials"},
        {"description": "Client dinner", "amount": -300, "type": "expense", "category": "Entertainment"},
        {"description": "Transfer to director", "amount": -1000, "type": "expense", "category": "Drawings"},
    ]


@pytest.fixture
def questionnaire():
    return {
        "capital_allowances_plant": 5000,
        "losses_forward": 10000,
        "close_company_surcharge": 2000,
        "preliminary_ct_paid": 5000,
        "unknown_field": "ignored",
    }


class TestCT1Computation:
    """Test the trading profit to balance due chain."""

    def test_full_computation(self, transactions, questionnaire):
        result = compute_ct1(transactions, questionnaire, tax_year=2025)

        assert result.total_income == Decimal("100000.00")
        assert result.allowable_expenses == Decimal("20000.00")
        assert result.disallowed_expenses == Decimal("300.00")
        # 100000 - 20000 - 5000 = 75000, less 10000 losses
        assert result.trading_profit == Decimal("75000.00")
        assert result.taxable_profit == Decimal("65000.00")
        assert result.ct_at_trading_rate == Decimal("8125.00")
        assert result.total_ct_liability == Decimal("10125.00")
        assert result.balance_due == Decimal("5125.00")

    def test_revenue_refund_excluded_from_income(self, transactions):
        result = compute_ct1(transactions, tax_year=2025)

        assert [i["category"] for i in result.detected_income] == ["Sales"]

    def test_drawings_go_to_directors_loan(self, transactions):
        result = compute_ct1(transactions, tax_year=2025, directors_loan_travel=1500)

        assert result.directors_loan_debits == Decimal("1000.00")
        assert result.directors_loan_travel == Decimal("1500.00")
        assert result.net_directors_loan == Decimal("500.00")
        # Travel owed to the director is deductible
        assert result.trading_profit == Decimal("78500.00")

    def test_disallowed_by_category(self, transactions):
        result = compute_ct1(transactions, tax_year=2025)

        assert result.disallowed_by_category == [{"category": "Entertainment", "amount": 300.0}]

    def test_rct_credit(self, transactions, questionnaire):
        result = compute_ct1(transactions, questionnaire, tax_year=2025, rct_prepayment=3000)

        assert result.rct_prepayment == Decimal("3000.00")
        assert result.balance_due == Decimal("2125.00")

    def test_loss_making_year(self):
        result = compute_ct1(
            [{"description": "Rent", "amount": -5000, "type": "expense", "category": "Rent"}],
            tax_year=2025,
        )

        assert result.trading_profit == Decimal("0")
        assert result.taxable_profit == Decimal("0")
        assert result.total_ct_liability == Decimal("0.00")

    def test_vehicle_replaces_questionnaire_motor(self, transactions):
        vehicle = VehicleAsset(purchase_cost=30000, date_acquired="2023-03-01", business_use_pct=80)
        result = compute_ct1(
            transactions,
            {"capital_allowances_motor_vehicles": 9999},
            tax_year=2025,
            vehicle=vehicle,
        )

        assert result.capital_allowances_motor == Decimal("2400.00")
        assert result.vehicle_asset["depreciation"]["years_owned"] == 3

    def test_vat_registration_re_evaluation(self):
        rows = [
            {"description": "Jurys Hotel", "amount": -200, "type": "expense", "category": "Travel"},
            {"description": "Screwfix", "amount": -1000, "type": "expense", "category": "Materials"},
        ]
        q = CT1Questionnaire(vat_change_date="2025-06-01", vat_status_before="not_registered")
        result = compute_ct1(rows, q, tax_year=2025)

        assert result.re_evaluation_applied is True
        assert result.original_expense_summary == {"allowable": 1200.0, "disallowed": 0.0}
        assert result.allowable_expenses == Decimal("1000.00")
        assert result.disallowed_expenses == Decimal("200.00")

    def test_capital_items_flagged(self, transactions):
        result = compute_ct1(transactions, tax_year=2025)

        assert "Screwfix materials" in [i["description"] for i in result.flagged_capital_items]

    def test_closing_balance_and_vat(self, transactions):
        result = compute_ct1(transactions, tax_year=2025, vat_position=-1200)

        # 100500 in, 21300 out
        assert result.closing_balance == Decimal("79200.00")
        assert result.vat_position == {"type": "refundable", "amount": 1200.0}

    def test_serialises(self, transactions, questionnaire):
        data = compute_ct1(transactions, questionnaire, tax_year=2025).to_dict()

        assert data["computation"]["ct_at_12_5"] == 8125.0
        assert data["capital_allowances"]["total"] == 5000.0


class TestClassifiers:
    """Test payment and trade classifiers."""

    def test_payment_types(self):
        assert classify_payment_type("Salary March") == "Wages"
        assert classify_payment_type("SEPA credit transfer") == "SEPA Transfer"
        assert classify_payment_type("POS Tesco") == "Card Payment"
        assert classify_payment_type("CHQ 0042") == "Cheque"
        assert classify_payment_type("Misc") == "Other"

    def test_construction_trade(self):
        assert is_construction_trade("electrical") is True
        assert is_construction_trade("software") is False
        assert is_construction_trade(None) is False

    def test_non_taxable_income(self):
        assert is_non_taxable_income(TransactionRecord("Collector General", Decimal("50"), type="income"))
        assert is_non_taxable_income(
            TransactionRecord("Refund", Decimal("50"), type="income", category="Tax Refund")
        )
        assert not is_non_taxable_income(
            TransactionRecord("Revenue share", Decimal("50"), type="income", category="Sales")
        )
