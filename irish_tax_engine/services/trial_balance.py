"""
Irish Tax Engine - Trial Balance

Synthesizes a double-entry trial balance from single-entry bank
transactions. Every bank movement is posted against the bank current
account and the mapped P&L (or balance sheet) account.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from irish_tax_engine.models.transactions import TransactionRecord
from irish_tax_engine.services.account_mapping import AccountType, get_account_suggestion
from irish_tax_engine.utils.currency import ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)


BANK_ACCOUNT = "Bank - Current Account"
SUSPENSE_ACCOUNT = "Uncategorized / Suspense"
DRAWINGS_ACCOUNT = "Owner's Drawings"
DIRECTORS_LOAN_ACCOUNT = "Director's Loan Account"
TRAVEL_ACCOUNT = "Travel & Subsistence (Revenue Rates)"
INTERNAL_TRANSFER_CATEGORY = "Internal Transfer"

ACCOUNT_TYPE_ORDER = {
    AccountType.CURRENT_ASSETS: 1,
    AccountType.FIXED_ASSETS: 2,
    AccountType.CURRENT_LIABILITIES: 3,
    AccountType.EQUITY: 4,
    AccountType.INCOME: 5,
    AccountType.COST_OF_SALES: 6,
    AccountType.EXPENSE: 7,
    AccountType.PAYROLL: 8,
    AccountType.VAT: 9,
}

BALANCE_TOLERANCE = Decimal("1")
MIN_CATEGORISED_FOR_ISSUES = 5
ORPHANED_ERROR_THRESHOLD = 10


@dataclass
class TrialBalanceAccount:
    account_name: str
    account_type: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    transaction_count: int = 0
    account_code: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_code": self.account_code,
            "account_name": self.account_name,
            "account_type": self.account_type,
            "debit": float(self.debit),
            "credit": float(self.credit),
            "transaction_count": self.transaction_count,
        }


@dataclass
class TrialBalanceIssue:
    severity: str  # "warning" | "error"
    code: str
    title: str
    description: str
    affected_count: Optional[int] = None
    affected_amount: Optional[Decimal] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity,
            "code": self.code,
            "title": self.title,
            "description": self.description,
            "affected_count": self.affected_count,
            "affected_amount": float(self.affected_amount) if self.affected_amount is not None else None,
        }


@dataclass
class TrialBalanceResult:
    accounts: List[TrialBalanceAccount]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool
    imbalance_amount: Decimal
    orphaned_transactions: int
    uncategorized_amount: Decimal
    vat_reconciled: bool
    issues: List[TrialBalanceIssue] = field(default_factory=list)

    def account(self, name: str) -> Optional[TrialBalanceAccount]:
        return next((a for a in self.accounts if a.account_name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accounts": [a.to_dict() for a in self.accounts],
            "total_debits": float(self.total_debits),
            "total_credits": float(self.total_credits),
            "is_balanced": self.is_balanced,
            "imbalance_amount": float(self.imbalance_amount),
            "issues": [i.to_dict() for i in self.issues],
            "orphaned_transactions": self.orphaned_transactions,
            "uncategorized_amount": float(self.uncategorized_amount),
            "vat_reconciled": self.vat_reconciled,
        }


class _Ledger:
    """Accounts keyed by (type, name) in first-seen order."""

    def __init__(self):
        self._accounts: Dict[Tuple[str, str], TrialBalanceAccount] = {}

    def get(self, name: str, account_type: str) -> TrialBalanceAccount:
        key = (account_type, name)
        if key not in self._accounts:
            self._accounts[key] = TrialBalanceAccount(account_name=name, account_type=account_type)
        return self._accounts[key]

    def post(self, debit: TrialBalanceAccount, credit: TrialBalanceAccount, amount: Decimal):
        debit.debit += amount
        credit.credit += amount
        debit.transaction_count += 1
        credit.transaction_count += 1

    def accounts(self) -> List[TrialBalanceAccount]:
        return list(self._accounts.values())


def _signed_vat(vat_position: Any) -> Decimal:
    if vat_position is None:
        return ZERO
    if isinstance(vat_position, Mapping):
        amount = abs(to_decimal(vat_position.get("amount")))
        return amount if vat_position.get("type", "payable") == "payable" else -amount
    return to_decimal(vat_position)


def build_trial_balance(
    transactions: Iterable[Union[TransactionRecord, Mapping[str, Any]]],
    net_directors_loan: Any = 0,
    directors_drawings: Any = 0,
    vat_position: Any = None,
) -> TrialBalanceResult:
    """
    Build the trial balance.

    Internal transfers net to zero on the bank and are skipped. Uncategorised
    rows go to suspense, drawings to equity, everything else through the
    category map. A positive net director's loan is owed to the director and
    is booked against travel at Revenue rates; a negative one is a debtor.

    Issues are only raised once at least five transactions are categorised so
    a fresh import is not flagged.
    """
    records = [t if isinstance(t, TransactionRecord) else TransactionRecord.from_dict(t) for t in transactions]
    ledger = _Ledger()
    orphaned = 0
    uncategorized_amount = ZERO

    for tx in records:
        amount = tx.abs_amount
        if amount == ZERO:
            continue

        category = tx.category
        if category == INTERNAL_TRANSFER_CATEGORY:
            continue

        bank = ledger.get(BANK_ACCOUNT, AccountType.CURRENT_ASSETS)

        if not category:
            orphaned += 1
            uncategorized_amount += amount
            suspense = ledger.get(SUSPENSE_ACCOUNT, AccountType.EXPENSE)
            if tx.is_income:
                ledger.post(bank, suspense, amount)
            else:
                ledger.post(suspense, bank, amount)
            continue

        if "drawing" in category.lower():
            drawings = ledger.get(DRAWINGS_ACCOUNT, AccountType.EQUITY)
            ledger.post(drawings, bank, amount)
            continue

        tx_type = "income" if tx.is_income else "expense"
        suggestion = get_account_suggestion(category, tx_type)
        if suggestion:
            account = ledger.get(suggestion.account_name, suggestion.account_type)
        else:
            account = ledger.get(category, AccountType.INCOME if tx.is_income else AccountType.EXPENSE)

        if tx.is_income:
            ledger.post(bank, account, amount)
        else:
            ledger.post(account, bank, amount)

    net_loan = to_decimal(net_directors_loan)
    if net_loan > ZERO:
        loan = ledger.get(DIRECTORS_LOAN_ACCOUNT, AccountType.CURRENT_LIABILITIES)
        travel = ledger.get(TRAVEL_ACCOUNT, AccountType.EXPENSE)
        ledger.post(travel, loan, net_loan)
    elif net_loan < ZERO:
        loan = ledger.get(DIRECTORS_LOAN_ACCOUNT, AccountType.CURRENT_ASSETS)
        loan.debit += abs(net_loan)
        loan.transaction_count += 1

    accounts = [a for a in ledger.accounts() if a.debit > ZERO or a.credit > ZERO]
    for a in accounts:
        a.debit = round_currency(a.debit)
        a.credit = round_currency(a.credit)
    accounts.sort(key=lambda a: (ACCOUNT_TYPE_ORDER.get(a.account_type, 10), a.account_name.casefold()))

    total_debits = round_currency(sum((a.debit for a in accounts), ZERO))
    total_credits = round_currency(sum((a.credit for a in accounts), ZERO))
    imbalance = round_currency(total_debits - total_credits)
    is_balanced = abs(imbalance) < BALANCE_TOLERANCE

    # Bank amounts are gross, so there are no VAT control postings to reconcile
    vat_reconciled = abs(_signed_vat(vat_position)) < BALANCE_TOLERANCE or vat_position is not None

    issues: List[TrialBalanceIssue] = []
    categorised = sum(1 for t in records if t.category)

    if categorised >= MIN_CATEGORISED_FOR_ISSUES:
        if orphaned > 0:
            issues.append(TrialBalanceIssue(
                severity="error" if orphaned > ORPHANED_ERROR_THRESHOLD else "warning",
                code="ORPHANED_TX",
                title=f"{orphaned} uncategorized transactions",
                description=(
                    f"{orphaned} transactions have no category and can't be mapped to a Chart of Accounts "
                    f"entry. Total amount: €{uncategorized_amount:.2f}."
                ),
                affected_count=orphaned,
                affected_amount=round_currency(uncategorized_amount),
            ))

        if not is_balanced:
            issues.append(TrialBalanceIssue(
                severity="error",
                code="IMBALANCE",
                title=f"Trial balance off by €{abs(imbalance):.2f}",
                description=(
                    f"Total debits (€{total_debits:.2f}) don't equal total credits (€{total_credits:.2f}). "
                    f"This indicates a data integrity issue."
                ),
                affected_amount=abs(imbalance),
            ))

        drawings = to_decimal(directors_drawings)
        has_salary = any(
            "salary" in t.description.lower() or "wages" in t.description.lower() for t in records
        )
        if drawings > ZERO and not has_salary:
            issues.append(TrialBalanceIssue(
                severity="warning",
                code="DRAWINGS_NO_SALARY",
                title="Drawings taken without salary on payroll",
                description=(
                    f"Director has taken €{drawings:.2f} in drawings but no salary transactions detected. "
                    f"For Irish LLCs, directors should be on payroll to utilise personal tax credits (€4,000+)."
                ),
                affected_amount=drawings,
            ))

    if issues:
        logger.info(f"Trial balance raised {len(issues)} issue(s): {', '.join(i.code for i in issues)}")

    return TrialBalanceResult(
        accounts=accounts,
        total_debits=total_debits,
        total_credits=total_credits,
        is_balanced=is_balanced,
        imbalance_amount=imbalance,
        orphaned_transactions=orphaned,
        uncategorized_amount=round_currency(uncategorized_amount),
        vat_reconciled=vat_reconciled,
        issues=issues,
    )
