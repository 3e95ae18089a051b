"""
Irish Tax Engine - CT1 Corporation Tax Computation

Builds the CT1 position for a close company from its business bank
transactions and the year-end questionnaire:
- Trading income by category (Revenue refunds excluded)
- Allowable vs disallowed expenses (s.81 TCA 1997 add-backs)
- Director's loan account movements
- Capital allowances (plant + motor vehicle wear & tear)
- Losses forward, CT at 12.5%, close company surcharge
- Preliminary CT and RCT credits
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from irish_tax_engine.models.transactions import TransactionRecord
from irish_tax_engine.services.form11_calculator import default_tax_year
from irish_tax_engine.services.vat_deductibility import is_ct_deductible, is_vat_deductible
from irish_tax_engine.services.vehicle_depreciation import (
    VehicleAsset,
    VehicleDepreciation,
    calculate_vehicle_depreciation,
)
from irish_tax_engine.utils.currency import ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)


# ==================== CONSTANTS ====================

CT_TRADING_RATE = Decimal("0.125")

NON_TAXABLE_INCOME_CATEGORIES = ["Tax Refund"]

REVENUE_REFUND_INDICATORS = ["revenue", "collector general", "tax refund"]

UNCATEGORISED = "Uncategorised"

CAPITAL_CATEGORY_KEYWORDS = ["equipment", "tools", "vehicle", "fixed asset", "machinery", "plant"]

CAPITAL_ITEM_THRESHOLD = Decimal("1000")

# Principal contractor deducts RCT from payments to these trades
CONSTRUCTION_TRADE_TYPES = [
    "construction",
    "forestry",
    "meat_processing",
    "carpentry_joinery",
    "electrical",
    "plumbing_heating",
]


@dataclass
class CT1Questionnaire:
    """Year-end questionnaire figures supplied by the director."""
    capital_allowances_plant: Any = 0
    capital_allowances_motor_vehicles: Any = 0
    capital_allowances_total: Any = None  # override for reporting only
    losses_forward: Any = 0
    close_company_surcharge: Any = 0
    preliminary_ct_paid: Any = 0
    vat_status: Optional[str] = None
    vat_change_date: Optional[str] = None
    vat_status_before: Optional[str] = None
    vat_status_after: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "CT1Questionnaire":
        if not data:
            return cls()
        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class CT1Computation:
    """CT1 computation result."""
    tax_year: int
    detected_income: List[Dict[str, Any]]
    expense_by_category: List[Dict[str, Any]]
    allowable_expenses: Decimal
    disallowed_expenses: Decimal
    disallowed_by_category: List[Dict[str, Any]]
    detected_payments: List[Dict[str, Any]]
    closing_balance: Decimal
    vat_position: Optional[Dict[str, Any]]
    flagged_capital_items: List[Dict[str, Any]]
    vehicle_asset: Optional[Dict[str, Any]]
    is_construction_trade: bool
    is_close_company: bool
    total_income: Decimal
    capital_allowances_plant: Decimal
    capital_allowances_motor: Decimal
    capital_allowances_total: Decimal
    directors_loan_travel: Decimal
    directors_loan_debits: Decimal
    net_directors_loan: Decimal
    trading_profit: Decimal
    losses_forward: Decimal
    taxable_profit: Decimal
    ct_at_trading_rate: Decimal
    close_company_surcharge: Decimal
    total_ct_liability: Decimal
    preliminary_ct_paid: Decimal
    rct_prepayment: Decimal
    balance_due: Decimal
    total_deductions: Decimal
    re_evaluation_applied: bool = False
    re_evaluation_warnings: List[str] = field(default_factory=list)
    original_expense_summary: Optional[Dict[str, float]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tax_year": self.tax_year,
            "detected_income": self.detected_income,
            "expense_by_category": self.expense_by_category,
            "expense_summary": {
                "allowable": float(self.allowable_expenses),
                "disallowed": float(self.disallowed_expenses),
            },
            "disallowed_by_category": self.disallowed_by_category,
            "detected_payments": self.detected_payments,
            "closing_balance": float(self.closing_balance),
            "vat_position": self.vat_position,
            "flagged_capital_items": self.flagged_capital_items,
            "vehicle_asset": self.vehicle_asset,
            "is_construction_trade": self.is_construction_trade,
            "is_close_company": self.is_close_company,
            "capital_allowances": {
                "plant": float(self.capital_allowances_plant),
                "motor_vehicles": float(self.capital_allowances_motor),
                "total": float(self.capital_allowances_total),
            },
            "directors_loan": {
                "travel": float(self.directors_loan_travel),
                "debits": float(self.directors_loan_debits),
                "net": float(self.net_directors_loan),
            },
            "computation": {
                "total_income": float(self.total_income),
                "trading_profit": float(self.trading_profit),
                "losses_forward": float(self.losses_forward),
                "taxable_profit": float(self.taxable_profit),
                "ct_at_12_5": float(self.ct_at_trading_rate),
                "close_company_surcharge": float(self.close_company_surcharge),
                "total_ct_liability": float(self.total_ct_liability),
                "preliminary_ct_paid": float(self.preliminary_ct_paid),
                "rct_prepayment": float(self.rct_prepayment),
                "balance_due": float(self.balance_due),
                "total_deductions": float(self.total_deductions),
            },
            "re_evaluation_applied": self.re_evaluation_applied,
            "re_evaluation_warnings": self.re_evaluation_warnings,
            "original_expense_summary": self.original_expense_summary,
        }


# ==================== CLASSIFIERS ====================

def classify_payment_type(description: str) -> str:
    """Bucket a bank description by payment method."""
    d = (description or "").lower()
    if "salary" in d or "wages" in d:
        return "Wages"
    if "sepa" in d:
        return "SEPA Transfer"
    if "direct debit" in d or " dd " in d or d.startswith("dd "):
        return "Direct Debit"
    if "pos" in d or "card" in d:
        return "Card Payment"
    if "standing order" in d or "s/o" in d:
        return "Standing Order"
    if "cheque" in d or "chq" in d:
        return "Cheque"
    return "Other"


def is_directors_loan_category(category: Optional[str]) -> bool:
    """Drawings and director's loan debits are balance sheet items, not P&L."""
    if not category:
        return False
    lower = category.lower()
    return "drawing" in lower or "director's loan" in lower or "directors loan" in lower


def is_non_taxable_income(tx: TransactionRecord) -> bool:
    category = tx.category or UNCATEGORISED
    if category in NON_TAXABLE_INCOME_CATEGORIES:
        return True
    desc = tx.description.lower()
    return category == UNCATEGORISED and any(ind in desc for ind in REVENUE_REFUND_INDICATORS)


def is_construction_trade(business_type: Optional[str]) -> bool:
    return (business_type or "") in CONSTRUCTION_TRADE_TYPES


def _sorted_amounts(totals: Dict[str, Decimal], key_name: str = "category") -> List[Dict[str, Any]]:
    return [
        {key_name: name, "amount": float(round_currency(amount))}
        for name, amount in sorted(totals.items(), key=lambda item: item[1], reverse=True)
    ]


def _vat_position_dict(vat_position: Any) -> Optional[Dict[str, Any]]:
    """Accept a signed net VAT figure or an explicit {type, amount} mapping."""
    if vat_position is None:
        return None
    if isinstance(vat_position, Mapping):
        return {
            "type": str(vat_position.get("type") or "payable"),
            "amount": float(abs(to_decimal(vat_position.get("amount")))),
        }
    net_vat = to_decimal(vat_position)
    return {
        "type": "payable" if net_vat >= ZERO else "refundable",
        "amount": float(abs(net_vat)),
    }


# ==================== COMPUTATION ====================

def compute_ct1(
    transactions: Iterable[Union[TransactionRecord, Mapping[str, Any]]],
    questionnaire: Union[CT1Questionnaire, Mapping[str, Any], None] = None,
    tax_year: Optional[int] = None,
    vehicle: Optional[VehicleAsset] = None,
    business_type: Optional[str] = None,
    vat_position: Any = None,
    directors_loan_travel: Any = 0,
    rct_prepayment: Any = 0,
) -> CT1Computation:
    """
    Compute the CT1 return figures.

    Expenses are split with the Corporation Tax add-back rules; hotels and
    bank charges stay allowable. When the questionnaire records a mid-year
    move from not registered to registered for VAT, the allowable/disallowed
    split is re-evaluated with the VAT blocked-credit rules and the original
    split is kept alongside.

    The vehicle allowance, when a vehicle is supplied, replaces the
    questionnaire's motor vehicle figure.
    """
    year = tax_year or default_tax_year()
    q = questionnaire if isinstance(questionnaire, CT1Questionnaire) else CT1Questionnaire.from_dict(questionnaire)
    records = [t if isinstance(t, TransactionRecord) else TransactionRecord.from_dict(t) for t in transactions]
    income_txs = [t for t in records if t.is_income]
    expense_txs = [t for t in records if t.is_expense]

    # 1. Detected income
    income_by_category: Dict[str, Decimal] = {}
    for tx in income_txs:
        if is_non_taxable_income(tx):
            continue
        name = tx.category or UNCATEGORISED
        income_by_category[name] = income_by_category.get(name, ZERO) + tx.abs_amount
    detected_income = [
        {"category": name, "amount": float(round_currency(amount))}
        for name, amount in income_by_category.items()
    ]
    total_income = sum(income_by_category.values(), ZERO)

    # 2. Allowable vs disallowed
    allowable = ZERO
    disallowed = ZERO
    dla_debits = ZERO
    disallowed_by_category: Dict[str, Decimal] = {}
    expense_by_category: Dict[str, Decimal] = {}

    for tx in expense_txs:
        amount = tx.abs_amount
        name = tx.category or UNCATEGORISED
        expense_by_category[name] = expense_by_category.get(name, ZERO) + amount

        if is_directors_loan_category(tx.category):
            dla_debits += amount
            continue

        if is_ct_deductible(tx.description, tx.category).is_deductible:
            allowable += amount
        else:
            disallowed += amount
            disallowed_by_category[name] = disallowed_by_category.get(name, ZERO) + amount

    original_summary = {"allowable": float(allowable), "disallowed": float(disallowed)}
    re_evaluation_applied = False
    re_evaluation_warnings: List[str] = []

    if q.vat_change_date and q.vat_status_before == "not_registered":
        allowable = ZERO
        disallowed = ZERO
        for tx in expense_txs:
            if is_directors_loan_category(tx.category):
                continue
            if is_vat_deductible(tx.description, tx.category).is_deductible:
                allowable += tx.abs_amount
            else:
                disallowed += tx.abs_amount
        re_evaluation_applied = True
        re_evaluation_warnings.append(
            f"Expenses re-evaluated based on VAT registration from {q.vat_change_date}. "
            f"Pre-registration expenses have no recoverable VAT input."
        )
        logger.info(f"CT1 expenses re-evaluated for VAT registration from {q.vat_change_date}")

    # 3. Payments by type
    payments: Dict[str, Decimal] = {}
    for tx in records:
        payment_type = classify_payment_type(tx.description)
        payments[payment_type] = payments.get(payment_type, ZERO) + tx.abs_amount
    detected_payments = [
        {"type": name, "amount": float(round_currency(amount))}
        for name, amount in payments.items()
    ]

    # 4. Closing balance
    closing_balance = (
        sum((t.abs_amount for t in income_txs), ZERO)
        - sum((t.abs_amount for t in expense_txs), ZERO)
    )

    # 5. Flagged capital items
    flagged_capital_items = []
    for tx in expense_txs:
        category = (tx.category or "").lower()
        if tx.abs_amount >= CAPITAL_ITEM_THRESHOLD or any(k in category for k in CAPITAL_CATEGORY_KEYWORDS):
            flagged_capital_items.append({
                "description": tx.description or "Unknown",
                "date": tx.transaction_date,
                "amount": float(tx.abs_amount),
            })

    # 6. Capital allowances
    vehicle_asset = None
    plant = to_decimal(q.capital_allowances_plant)
    if vehicle is not None and to_decimal(vehicle.purchase_cost) > ZERO:
        depreciation: VehicleDepreciation = calculate_vehicle_depreciation(vehicle, year)
        motor = depreciation.annual_allowance
        vehicle_asset = {
            "description": vehicle.description or "Motor Vehicle",
            "reg": vehicle.reg,
            "depreciation": depreciation.to_dict(),
        }
    else:
        motor = to_decimal(q.capital_allowances_motor_vehicles)
    capital_allowances = plant + motor

    # 7. Director's loan
    travel = round_currency(max(ZERO, to_decimal(directors_loan_travel)))
    dla_debits = round_currency(dla_debits)
    net_directors_loan = round_currency(travel - dla_debits)

    # 8. Tax computation
    trading_profit = total_income - allowable - capital_allowances - travel
    losses_forward = to_decimal(q.losses_forward)
    taxable_profit = max(ZERO, trading_profit - losses_forward)
    ct_at_rate = round_currency(taxable_profit * CT_TRADING_RATE)
    surcharge = to_decimal(q.close_company_surcharge)
    total_ct = round_currency(ct_at_rate + surcharge)
    preliminary = to_decimal(q.preliminary_ct_paid)
    rct = round_currency(to_decimal(rct_prepayment))
    balance_due = round_currency(total_ct - preliminary - rct)

    logger.debug(
        f"CT1 {year}: income {total_income}, allowable {allowable}, "
        f"capital allowances {capital_allowances}, taxable {taxable_profit}, CT {total_ct}"
    )

    return CT1Computation(
        tax_year=year,
        detected_income=detected_income,
        expense_by_category=_sorted_amounts(expense_by_category),
        allowable_expenses=round_currency(allowable),
        disallowed_expenses=round_currency(disallowed),
        disallowed_by_category=_sorted_amounts(disallowed_by_category),
        detected_payments=detected_payments,
        closing_balance=round_currency(closing_balance),
        vat_position=_vat_position_dict(vat_position),
        flagged_capital_items=flagged_capital_items,
        vehicle_asset=vehicle_asset,
        is_construction_trade=is_construction_trade(business_type),
        is_close_company=True,
        total_income=round_currency(total_income),
        capital_allowances_plant=plant,
        capital_allowances_motor=motor,
        capital_allowances_total=round_currency(capital_allowances),
        directors_loan_travel=travel,
        directors_loan_debits=dla_debits,
        net_directors_loan=net_directors_loan,
        trading_profit=round_currency(max(ZERO, trading_profit)),
        losses_forward=losses_forward,
        taxable_profit=round_currency(taxable_profit),
        ct_at_trading_rate=ct_at_rate,
        close_company_surcharge=surcharge,
        total_ct_liability=total_ct,
        preliminary_ct_paid=preliminary,
        rct_prepayment=rct,
        balance_due=balance_due,
        total_deductions=round_currency(allowable + capital_allowances + travel),
        re_evaluation_applied=re_evaluation_applied,
        re_evaluation_warnings=re_evaluation_warnings,
        original_expense_summary=original_summary if re_evaluation_applied else None,
    )
