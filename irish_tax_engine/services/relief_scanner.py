"""
Irish Tax Engine - Relief Scanner

Scans personal account transactions for Form 11 qualifying reliefs:
- Health insurance (s.470 TCA 1997)
- Medical expenses (s.469), excluding cosmetic and routine dental
- Pension contributions (s.774)
- Charitable donations (s.848A)
- Rent tax credit (s.473B)
- Tuition fees (s.473A)
"""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from irish_tax_engine.models.transactions import TransactionRecord
from irish_tax_engine.utils.currency import ZERO, round_currency

logger = logging.getLogger(__name__)


# ==================== QUALIFYING PATTERNS ====================

HEALTH_INSURANCE_PATTERNS = ["vhi", "laya healthcare", "laya health", "irish life health", "glo health"]

MEDICAL_PATTERNS = [
    "physio",
    "physiotherapy",
    "dental surgery",
    "orthodont",
    "oral surgery",
    "hospital",
    "consultant",
    "surgeon",
    "dermatolog",
    "fertility",
    "ivf",
    "mater private",
    "blackrock clinic",
    "beacon hospital",
    "bon secours",
    "st vincent",
    "galway clinic",
    "gp visit",
    "doctor",
]

# Never qualify for medical relief even when a medical pattern matches
MEDICAL_EXCLUSIONS = [
    "teeth whitening",
    "teeth cleaning",
    "dental checkup",
    "dental check-up",
    "dental check up",
    "routine dental",
    "botox",
    "cosmetic",
    "filler",
    "laser hair",
    "liposuction",
    "rhinoplasty",
    "breast augment",
    "tanning",
]

PENSION_PATTERNS = ["irish life pension", "zurich pension", "aviva pension", "new ireland", "standard life"]

CHARITABLE_PATTERNS = [
    "trocaire",
    "concern worldwide",
    "goal",
    "svp",
    "st vincent de paul",
    "unicef ireland",
    "irish cancer society",
    "pieta house",
    "barnardos",
]

RENT_PATTERNS = ["rent payment", "monthly rent", "residential tenancies", "rtb registration"]

TUITION_PATTERNS = [
    "ucd",
    "tcd",
    "trinity college",
    "dcu",
    "nuig",
    "university of galway",
    "ucc",
    "maynooth university",
    "tu dublin",
    "technological university",
    "griffith college",
    "ncad",
    "rcsi",
    "dit",
    "athlone it",
    "waterford it",
    "letterkenny it",
    "sligo it",
    "carlow it",
    "dundalk it",
    "limerick it",
    "tuition",
]

# (bucket, patterns, exclusions) checked in priority order; first match wins.
# Health insurance precedes medical so "Laya Healthcare" is not read as medical.
RELIEF_CATEGORIES: Tuple[Tuple[str, Sequence[str], Sequence[str]], ...] = (
    ("health_insurance", HEALTH_INSURANCE_PATTERNS, ()),
    ("medical", MEDICAL_PATTERNS, MEDICAL_EXCLUSIONS),
    ("pension", PENSION_PATTERNS, ()),
    ("charitable", CHARITABLE_PATTERNS, ()),
    ("rent", RENT_PATTERNS, ()),
    ("tuition", TUITION_PATTERNS, ()),
)

RELIEF_BUCKETS = tuple(name for name, _, _ in RELIEF_CATEGORIES)


# ==================== RESULT TYPES ====================

@dataclass
class ReliefMatch:
    date: str
    description: str
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "description": self.description, "amount": float(self.amount)}


@dataclass
class ReliefBucket:
    total: Decimal = ZERO
    transactions: List[ReliefMatch] = field(default_factory=list)

    def add(self, match: ReliefMatch):
        self.total += match.amount
        self.transactions.append(match)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": float(round_currency(self.total)),
            "transactions": [t.to_dict() for t in self.transactions],
        }


@dataclass
class ReliefScanResult:
    medical: ReliefBucket = field(default_factory=ReliefBucket)
    health_insurance: ReliefBucket = field(default_factory=ReliefBucket)
    pension: ReliefBucket = field(default_factory=ReliefBucket)
    charitable: ReliefBucket = field(default_factory=ReliefBucket)
    rent: ReliefBucket = field(default_factory=ReliefBucket)
    tuition: ReliefBucket = field(default_factory=ReliefBucket)

    def bucket(self, name: str) -> ReliefBucket:
        return getattr(self, name)

    def to_dict(self) -> Dict[str, Any]:
        return {name: self.bucket(name).to_dict() for name in RELIEF_BUCKETS}


# ==================== SCANNER ====================

_WHITESPACE = re.compile(r"\s+")


def _normalise(text: str) -> str:
    return _WHITESPACE.sub(" ", (text or "").lower()).strip()


def _matches_any(text: str, patterns: Iterable[str]) -> bool:
    return any(p in text for p in patterns)


def classify_relief(description: str) -> Optional[str]:
    """Return the relief bucket a description falls into, or None."""
    desc = _normalise(description)
    for name, patterns, exclusions in RELIEF_CATEGORIES:
        if _matches_any(desc, patterns) and not _matches_any(desc, exclusions):
            return name
    return None


def scan_for_reliefs(
    transactions: Iterable[Union[TransactionRecord, Mapping[str, Any]]]
) -> ReliefScanResult:
    """
    Classify expense transactions into relief buckets.

    Income and zero-amount rows are skipped. Each transaction lands in at most
    one bucket. A medical match that also hits an exclusion gets no medical
    credit and is tried against the remaining categories.
    """
    result = ReliefScanResult()

    for raw in transactions:
        tx = raw if isinstance(raw, TransactionRecord) else TransactionRecord.from_dict(raw)
        if not tx.is_expense:
            continue
        amount = tx.abs_amount
        if amount == ZERO:
            continue

        bucket = classify_relief(tx.description)
        if bucket is None:
            continue

        result.bucket(bucket).add(ReliefMatch(
            date=tx.transaction_date,
            description=tx.description,
            amount=amount,
        ))

    logger.debug(
        "Relief scan: " + ", ".join(
            f"{name}={result.bucket(name).total}" for name in RELIEF_BUCKETS
        )
    )
    return result
