"""
Normalized bank transaction record consumed by the scanners and assemblers.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from irish_tax_engine.utils.currency import to_decimal


@dataclass(frozen=True)
class TransactionRecord:
    """A single bank transaction as imported from a statement."""
    description: str
    amount: Decimal
    transaction_date: str = ""
    type: str = ""
    category: Optional[str] = None

    @property
    def abs_amount(self) -> Decimal:
        return abs(self.amount)

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"

    @property
    def is_income(self) -> bool:
        return self.type == "income"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TransactionRecord":
        """
        Build a record from a loosely typed mapping.

        Accepts ``date`` as an alias for ``transaction_date``. A category may be
        given as a plain name or as ``{"name": ...}``. A missing type stays
        empty, so the row is neither income nor expense.
        """
        category = data.get("category")
        if isinstance(category, Mapping):
            category = category.get("name")

        return cls(
            description=str(data.get("description") or ""),
            amount=to_decimal(data.get("amount")),
            transaction_date=str(data.get("transaction_date") or data.get("date") or ""),
            type=str(data.get("type") or ""),
            category=str(category) if category else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "description": self.description,
            "amount": float(self.amount),
            "transaction_date": self.transaction_date,
            "type": self.type,
            "category": self.category,
        }
