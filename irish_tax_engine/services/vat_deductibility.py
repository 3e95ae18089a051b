"""
Irish Tax Engine - VAT & Corporation Tax Deductibility

VAT: Section 59/60 VAT Consolidation Act 2010 blocked input credits.
CT: trading add-backs under s.81 and s.840 TCA 1997.
Also reverse-calculates VAT from VAT-inclusive amounts.
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple, Union

from irish_tax_engine.utils.currency import ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)


# ==================== SECTION 60 BLOCKED CREDITS ====================

DISALLOWED_VAT_CREDITS: Dict[str, Dict[str, Any]] = {
    "food_drink_accommodation": {
        "section": "Section 60(2)(a)(i)",
        "description": "Food, drink, or accommodation supplied to taxable person, agents or employees",
        "exception": "Accommodation for qualifying conferences is allowed",
        "keywords": [
            "restaurant", "cafe", "coffee", "pub", "hotel", "accommodation",
            "food", "meal", "lunch", "dinner", "breakfast", "catering", "takeaway",
            "mcdonalds", "burger king", "kfc", "subway", "supermacs", "starbucks",
            "costa", "deliveroo", "just eat", "uber eats", "airbnb", "b&b",
        ],
    },
    "entertainment": {
        "section": "Section 60(2)(a)(iii)",
        "description": "Entertainment expenses incurred by the taxable person, agents or employees",
        "keywords": [
            "entertainment", "cinema", "theatre", "concert", "event tickets",
            "netflix", "disney", "spotify", "amazon prime", "playstation", "xbox",
            "smyths", "toys", "games", "amusement",
        ],
    },
    "passenger_vehicles": {
        "section": "Section 60(2)(a)(iv)",
        "description": "Purchase, hire or lease of passenger motor vehicles",
        "exception": "Allowed for car hire/rental businesses as trade stock",
        "keywords": [
            "car purchase", "car lease", "car hire", "car rental",
            "motor finance", "pcp", "hp car",
        ],
    },
    "petrol": {
        "section": "Section 60(2)(a)(v)",
        "description": "Purchase of petrol otherwise than as stock-in-trade",
        "keywords": ["petrol", "unleaded", "gasoline"],
    },
}

DIESEL_KEYWORDS = ["diesel", "derv", "adblue"]

FUEL_STATIONS = ["maxol", "circle k", "applegreen", "texaco", "esso", "shell", "topaz", "spar", "centra"]

VAT_RATES: Dict[str, Decimal] = {
    "standard_23": Decimal("0.23"),
    "reduced_13_5": Decimal("0.135"),
    "second_reduced_9": Decimal("0.09"),
    "livestock_4_8": Decimal("0.048"),
    "zero_rated": Decimal("0"),
    "exempt": Decimal("0"),
}

DEFAULT_VAT_RATE_KEY = "standard_23"


@dataclass
class DeductibilityResult:
    is_deductible: bool
    reason: str
    section: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"is_deductible": self.is_deductible, "reason": self.reason, "section": self.section}


def _contains_any(text: str, keywords) -> bool:
    return any(k in text for k in keywords)


_FINES_PATTERN = re.compile(r"\bfines?\b")
_PENALTY_PATTERN = re.compile(r"\bpenalt(y|ies)\b")


def _is_fine_or_penalty(description: str, category: str) -> bool:
    return (
        "fine" in category
        or "penalt" in category
        or bool(_FINES_PATTERN.search(description))
        or bool(_PENALTY_PATTERN.search(description))
    )


def _is_drawings(category: str) -> bool:
    return (
        "drawing" in category
        or "director's loan" in category
        or "directors loan" in category
    )


# ==================== VAT ====================

def is_vat_deductible(
    description: str,
    category: Optional[str] = None,
    account: Optional[str] = None
) -> DeductibilityResult:
    """
    Decide whether input VAT on an expense can be reclaimed.

    Keyword checks run over description, category and account together and
    fire first; category-only checks follow. Anything not caught is treated
    as a deductible business expense.
    """
    desc = (description or "").lower()
    cat = (category or "").lower()
    acc = (account or "").lower()
    combined = f"{desc} {cat} {acc}"

    for key, reason in (
        ("food_drink_accommodation", "Food, drink or accommodation - VAT NOT recoverable"),
        ("entertainment", "Entertainment expense - VAT NOT recoverable"),
        ("passenger_vehicles", "Passenger vehicle purchase/hire - VAT NOT recoverable"),
    ):
        rule = DISALLOWED_VAT_CREDITS[key]
        if _contains_any(combined, rule["keywords"]):
            return DeductibilityResult(False, reason, rule["section"])

    has_petrol = _contains_any(combined, DISALLOWED_VAT_CREDITS["petrol"]["keywords"])
    has_diesel = _contains_any(combined, DIESEL_KEYWORDS)

    if has_petrol and not has_diesel:
        return DeductibilityResult(
            False,
            "Petrol - VAT NOT recoverable (diesel IS deductible)",
            DISALLOWED_VAT_CREDITS["petrol"]["section"],
        )

    if has_diesel:
        return DeductibilityResult(True, "Diesel fuel - VAT IS recoverable")

    # Forecourts sell both fuels; without a receipt assume petrol
    if _contains_any(combined, FUEL_STATIONS):
        if "diesel" in combined or ("fuel" in combined and "petrol" not in combined):
            return DeductibilityResult(True, "Fuel purchase - categorized as deductible")
        return DeductibilityResult(
            False,
            "Mixed retailer - cannot claim VAT without receipt proving diesel",
            "Section 60",
        )

    if "personal" in combined or "private" in combined or "non-business" in combined:
        return DeductibilityResult(False, "Non-business expense - VAT NOT recoverable", "Section 59")

    if "bank" in combined and ("fee" in combined or "charge" in combined):
        return DeductibilityResult(False, "Bank charges - VAT exempt supply, VAT not recoverable")

    if "insurance" in combined and "motor tax" not in combined:
        return DeductibilityResult(False, "Insurance - VAT exempt supply, VAT not recoverable")

    if "meals" in cat or cat == "entertainment":
        return DeductibilityResult(
            False,
            "Meals & Entertainment - not an allowable tax deduction",
            "Section 60(2)(a)(i)/(iii)",
        )

    if _is_fine_or_penalty(desc, cat):
        return DeductibilityResult(False, "Fines & penalties are not allowable tax deductions")

    if "drawing" in cat or "director's draw" in cat:
        return DeductibilityResult(False, "Director's Drawings - capital withdrawal, not a business expense")

    return DeductibilityResult(True, "Business expense - VAT recoverable")


# ==================== CORPORATION TAX ====================

def is_ct_deductible(description: str, category: Optional[str] = None) -> DeductibilityResult:
    """
    Decide whether an expense is allowable against trading profits.

    Narrower than the VAT test: hotels, subsistence, bank charges and
    insurance are blocked for VAT but remain allowable for CT.
    """
    desc = (description or "").lower()
    cat = (category or "").lower()
    combined = f"{desc} {cat}"

    if "meals" in cat or "entertainment" in cat or _contains_any(
        combined, DISALLOWED_VAT_CREDITS["entertainment"]["keywords"]
    ):
        return DeductibilityResult(
            False,
            "Business entertainment - not deductible for Corporation Tax",
            "Section 840 TCA 1997",
        )

    if _is_fine_or_penalty(desc, cat):
        return DeductibilityResult(False, "Fines & penalties are not allowable tax deductions", "Section 81 TCA 1997")

    if _is_drawings(cat):
        return DeductibilityResult(False, "Director's Drawings - capital withdrawal, not a business expense")

    if "personal" in combined or "private" in combined or "non-business" in combined:
        return DeductibilityResult(
            False,
            "Non-business expense - not wholly and exclusively for the trade",
            "Section 81(2)(a) TCA 1997",
        )

    return DeductibilityResult(True, "Business expense - deductible for Corporation Tax")


# ==================== VAT FROM GROSS ====================

@dataclass
class VATSplit:
    net_amount: Decimal
    vat_amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"net_amount": float(self.net_amount), "vat_amount": float(self.vat_amount)}


def resolve_vat_rate(rate: Union[str, int, float, Decimal, None]) -> Decimal:
    """
    Resolve a rate key ("standard_23") or a numeric percentage (23, 13.5).
    Unknown keys fall back to the standard 23% rate.
    """
    if isinstance(rate, (int, float, Decimal)) and not isinstance(rate, bool):
        return to_decimal(rate) / Decimal("100")
    return VAT_RATES.get(str(rate or ""), VAT_RATES[DEFAULT_VAT_RATE_KEY])


def calculate_vat_from_gross(gross_amount: Any, vat_rate: Union[str, int, float, Decimal] = DEFAULT_VAT_RATE_KEY) -> VATSplit:
    """
    Extract VAT from a VAT-inclusive amount.

    Formula: VAT = Gross x Rate / (1 + Rate)
    """
    gross = to_decimal(gross_amount)
    rate = resolve_vat_rate(vat_rate)

    if rate == ZERO:
        return VATSplit(net_amount=gross, vat_amount=ZERO)

    vat_amount = round_currency(gross * rate / (1 + rate))
    net_amount = round_currency(gross - vat_amount)
    return VATSplit(net_amount=net_amount, vat_amount=vat_amount)


def vat_rate_table() -> Dict[str, float]:
    return {key: float(rate) for key, rate in VAT_RATES.items()}


def split_by_deductibility(
    items: Tuple[Tuple[str, Optional[str], Any], ...]
) -> Dict[str, Decimal]:
    """Total (description, category, amount) rows into VAT-recoverable and blocked."""
    recoverable = ZERO
    blocked = ZERO
    for description, category, amount in items:
        value = abs(to_decimal(amount))
        if is_vat_deductible(description, category).is_deductible:
            recoverable += value
        else:
            blocked += value
    return {"recoverable": recoverable, "blocked": blocked}
