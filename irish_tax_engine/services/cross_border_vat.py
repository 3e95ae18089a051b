"""
Irish Tax Engine - Cross-Border VAT Rule Engine

Determines the Irish VAT treatment of sales and purchases with EU, GB,
Northern Ireland and non-EU counterparties, and provides:
- VAT number format validation
- Import VAT on CIF value plus duties
- OSS distance-selling threshold check
- Intrastat arrivals/dispatches threshold check

Northern Ireland follows EU rules for goods and non-EU rules for services.
"""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, FrozenSet, List, Tuple

from irish_tax_engine.models.enums import (
    CounterpartyLocation,
    CustomerType,
    Direction,
    SupplyType,
    VATTreatment,
)
from irish_tax_engine.services.eu_vat_rules import (
    DEFAULT_IMPORT_VAT_RATE,
    INTRASTAT_ARRIVALS_THRESHOLD,
    INTRASTAT_DISPATCHES_THRESHOLD,
    OSS_THRESHOLD,
    VAT_FORMAT_PATTERNS,
    get_vat_country,
)
from irish_tax_engine.utils.currency import round_currency, to_decimal

logger = logging.getLogger(__name__)

VIES_OBLIGATION = "VIES return (quarterly)"


@dataclass
class CrossBorderVATQuery:
    direction: str
    counterparty_location: str
    supply_type: str
    customer_type: str = CustomerType.b2b.value


@dataclass
class CrossBorderVATResult:
    treatment: VATTreatment
    explanation: str
    vat3_boxes: List[str] = field(default_factory=list)
    reporting_obligations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "treatment": self.treatment.value,
            "explanation": self.explanation,
            "vat3_boxes": list(self.vat3_boxes),
            "reporting_obligations": list(self.reporting_obligations),
            "warnings": list(self.warnings),
        }


# ==================== DECISION TABLE ====================

@dataclass(frozen=True)
class _Outcome:
    treatment: VATTreatment
    explanation: str
    vat3_boxes: Tuple[str, ...] = ()
    reporting_obligations: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    def build(self) -> CrossBorderVATResult:
        return CrossBorderVATResult(
            treatment=self.treatment,
            explanation=self.explanation,
            vat3_boxes=list(self.vat3_boxes),
            reporting_obligations=list(self.reporting_obligations),
            warnings=list(self.warnings),
        )


@dataclass(frozen=True)
class _Rule:
    direction: str
    locations: FrozenSet[str]
    supply_types: FrozenSet[str]
    customer_types: FrozenSet[str]
    outcome: _Outcome

    def matches(self, direction: str, location: str, supply: str, customer: str) -> bool:
        return (
            direction == self.direction
            and location in self.locations
            and supply in self.supply_types
            and customer in self.customer_types
        )


def _values(*members) -> FrozenSet[str]:
    return frozenset(m.value for m in members)


_ANY_CUSTOMER = _values(*CustomerType)
_GOODS = _values(SupplyType.goods)
_SERVICES = _values(SupplyType.services)
_EU = _values(CounterpartyLocation.eu)
_NI = _values(CounterpartyLocation.ni)
_THIRD_COUNTRY = _values(CounterpartyLocation.gb, CounterpartyLocation.non_eu)
_OUTSIDE_EU_FOR_SERVICES = _values(CounterpartyLocation.gb, CounterpartyLocation.ni, CounterpartyLocation.non_eu)
_SALE = Direction.sale.value
_PURCHASE = Direction.purchase.value

# Rows are evaluated top to bottom; the first match wins.
CROSS_BORDER_RULES: Tuple[_Rule, ...] = (
    # ---- Sales ----
    _Rule(_SALE, _EU, _GOODS, _values(CustomerType.b2b), _Outcome(
        VATTreatment.zero_rated,
        "Intra-Community Supply (ICS) - zero-rated. Customer must provide valid EU VAT number, verified via VIES. Retain proof of transport.",
        ("E1",), (VIES_OBLIGATION,),
        ("Verify customer's VAT number on VIES before zero-rating",),
    )),
    _Rule(_SALE, _EU, _GOODS, _values(CustomerType.b2c), _Outcome(
        VATTreatment.oss_destination,
        "Distance selling to EU consumers - if total EU B2C sales exceed €10,000, charge destination country VAT via OSS. Below threshold, Irish VAT may apply.",
        (), ("OSS return (quarterly) if above threshold",),
        ("Check if total EU B2C sales exceed €10,000 threshold",),
    )),
    _Rule(_SALE, _EU, _SERVICES, _values(CustomerType.b2b), _Outcome(
        VATTreatment.zero_rated,
        "B2B services to EU - reverse charge applies. Invoice without VAT, noting 'Reverse charge - Article 196'. Customer self-accounts in their country.",
        ("ES1",), (VIES_OBLIGATION,), (),
    )),
    _Rule(_SALE, _EU, _SERVICES, _values(CustomerType.b2c), _Outcome(
        VATTreatment.standard_rated,
        "B2C services - generally subject to Irish VAT (supplier's country). Exception: digital/electronic services use destination country rate via OSS if above €10,000.",
        (), (),
        ("Check if this is a digital/electronic service - different rules apply",),
    )),
    _Rule(_SALE, _NI, _GOODS, _ANY_CUSTOMER, _Outcome(
        VATTreatment.zero_rated,
        "Northern Ireland - EU single market for goods. Intra-community supply rules apply. Customer uses XI-prefixed VAT number.",
        ("E1",), (VIES_OBLIGATION,),
        ("Verify XI-prefixed VAT number via VIES",),
    )),
    _Rule(_SALE, _THIRD_COUNTRY, _GOODS, _ANY_CUSTOMER, _Outcome(
        VATTreatment.zero_rated,
        "Export to non-EU country - zero-rated. Retain proof of export (customs declaration, shipping documentation).",
        ("E2",), (),
        ("Retain customs export documentation",),
    )),
    _Rule(_SALE, _OUTSIDE_EU_FOR_SERVICES, _SERVICES, _ANY_CUSTOMER, _Outcome(
        VATTreatment.zero_rated,
        "Services to non-EU business - outside scope of Irish VAT. Invoice without VAT.",
    )),

    # ---- Purchases ----
    _Rule(_PURCHASE, _EU, _GOODS, _ANY_CUSTOMER, _Outcome(
        VATTreatment.self_accounting,
        "Intra-Community Acquisition (ICA) - self-account for Irish VAT. EU supplier invoices at 0%. Declare both output (T1) and input (T2) VAT on your VAT3 (net zero if fully deductible).",
        ("T1", "T2"),
    )),
    _Rule(_PURCHASE, _EU, _SERVICES, _ANY_CUSTOMER, _Outcome(
        VATTreatment.reverse_charge,
        "Reverse charge on EU services received - self-account for Irish VAT. Declare as both output (ES2) and input on your VAT3.",
        ("ES2",),
    )),
    _Rule(_PURCHASE, _NI, _GOODS, _ANY_CUSTOMER, _Outcome(
        VATTreatment.self_accounting,
        "Northern Ireland goods - intra-community acquisition rules apply (same as EU). Self-account for VAT on your VAT3.",
        ("T1", "T2"),
    )),
    _Rule(_PURCHASE, _OUTSIDE_EU_FOR_SERVICES, _SERVICES, _ANY_CUSTOMER, _Outcome(
        VATTreatment.reverse_charge,
        "Services from non-EU supplier - self-account for Irish VAT at the applicable rate. Same reverse charge mechanism as EU services. Declare output VAT (T1) and input credit (T2) on your VAT3.",
        ("T1", "T2"),
    )),
    _Rule(_PURCHASE, _THIRD_COUNTRY, _GOODS, _ANY_CUSTOMER, _Outcome(
        VATTreatment.postponed_accounting,
        "Import from non-EU - import VAT applies on CIF + duties. Use postponed accounting (PA1) to avoid cash-flow impact.",
        ("PA1",), (),
        ("Consider applying for postponed accounting if not already authorised",),
    )),
)

FALLBACK_OUTCOME = _Outcome(
    VATTreatment.standard_rated,
    "Unable to determine specific treatment - apply standard Irish VAT rate and consult your accountant.",
    (), (),
    ("Consult a tax advisor for the correct treatment",),
)


def _key_part(value: Any) -> str:
    return str(getattr(value, "value", value) or "").strip().lower()


def determine_cross_border_vat(query: CrossBorderVATQuery) -> CrossBorderVATResult:
    """
    Look up the VAT treatment for a cross-border transaction.

    Unrecognised combinations, including invalid directions or locations,
    fall back to standard rating with an advisor warning rather than raising.
    """
    key = (
        _key_part(query.direction),
        _key_part(query.counterparty_location),
        _key_part(query.supply_type),
        _key_part(query.customer_type),
    )

    for rule in CROSS_BORDER_RULES:
        if rule.matches(*key):
            logger.debug(f"Cross-border VAT {key} -> {rule.outcome.treatment.value}")
            return rule.outcome.build()

    logger.info(f"No cross-border VAT rule for {key}, falling back to standard rate")
    return FALLBACK_OUTCOME.build()


# ==================== VAT NUMBER VALIDATION ====================

@dataclass
class VATNumberValidation:
    valid: bool
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "message": self.message}


_VAT_SEPARATORS = re.compile(r"[\s.\-]")


def validate_eu_vat_format(vat_number: str, country_code: str) -> VATNumberValidation:
    """
    Check a VAT number against the format for its country.

    Spaces, dots and hyphens are stripped and letters upper-cased first. This
    is a format check only; it does not confirm registration on VIES.
    """
    code = (country_code or "").strip().upper()
    pattern = VAT_FORMAT_PATTERNS.get(code)
    if pattern is None:
        return VATNumberValidation(False, f"Unknown country code: {country_code}")

    cleaned = _VAT_SEPARATORS.sub("", vat_number or "").upper()
    if pattern.match(cleaned):
        return VATNumberValidation(True, f"Valid {code} VAT number format")

    country = get_vat_country(code)
    name = country.name if country else code
    prefix = country.vat_prefix if country else code
    return VATNumberValidation(
        False,
        f"Invalid format for {name}. Expected pattern: {prefix} followed by the required digits.",
    )


# ==================== IMPORT VAT ====================

@dataclass
class ImportVATResult:
    vat_base: Decimal
    vat_amount: Decimal
    total_cost: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vat_base": float(self.vat_base),
            "vat_amount": float(self.vat_amount),
            "total_cost": float(self.total_cost),
        }


def calculate_import_vat(
    cif_value: Any,
    customs_duty: Any = 0,
    excise_duty: Any = 0,
    vat_rate: Any = DEFAULT_IMPORT_VAT_RATE,
) -> ImportVATResult:
    """Import VAT is charged on CIF value plus customs and excise duty."""
    vat_base = to_decimal(cif_value) + to_decimal(customs_duty) + to_decimal(excise_duty)
    vat_amount = round_currency(vat_base * to_decimal(vat_rate))
    return ImportVATResult(
        vat_base=vat_base,
        vat_amount=vat_amount,
        total_cost=vat_base + vat_amount,
    )


# ==================== THRESHOLDS ====================

def _fmt_euro(value: Decimal) -> str:
    text = f"{value:,.2f}"
    return text[:-3] if text.endswith(".00") else text


@dataclass
class OSSThresholdCheck:
    exceeds: bool
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {"exceeds": self.exceeds, "recommendation": self.recommendation}


def check_oss_threshold(annual_eu_b2c_sales: Any) -> OSSThresholdCheck:
    """OSS registration is required once EU B2C sales are strictly above €10,000."""
    sales = to_decimal(annual_eu_b2c_sales)
    threshold = _fmt_euro(OSS_THRESHOLD)

    if sales > OSS_THRESHOLD:
        return OSSThresholdCheck(
            True,
            f"EU B2C sales (€{_fmt_euro(sales)}) exceed the €{threshold} OSS threshold. "
            f"You must register for OSS and charge destination country VAT rates.",
        )
    return OSSThresholdCheck(
        False,
        f"EU B2C sales (€{_fmt_euro(sales)}) are below the €{threshold} OSS threshold. "
        f"You may charge Irish VAT rates, but can voluntarily register for OSS.",
    )


@dataclass
class IntrastatThresholdCheck:
    arrivals_required: bool
    dispatches_required: bool
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "arrivals_required": self.arrivals_required,
            "dispatches_required": self.dispatches_required,
            "recommendation": self.recommendation,
        }


def check_intrastat_threshold(arrivals_total: Any, dispatches_total: Any) -> IntrastatThresholdCheck:
    """Arrivals and dispatches are tested independently; reaching €750,000 requires filing."""
    arrivals = to_decimal(arrivals_total)
    dispatches = to_decimal(dispatches_total)
    arrivals_required = arrivals >= INTRASTAT_ARRIVALS_THRESHOLD
    dispatches_required = dispatches >= INTRASTAT_DISPATCHES_THRESHOLD

    parts = []
    if arrivals_required:
        parts.append(f"Arrivals (€{_fmt_euro(arrivals)}) exceed Intrastat threshold - monthly filing required.")
    if dispatches_required:
        parts.append(f"Dispatches (€{_fmt_euro(dispatches)}) exceed Intrastat threshold - monthly filing required.")
    if not parts:
        parts.append(
            f"Both arrivals (€{_fmt_euro(arrivals)}) and dispatches (€{_fmt_euro(dispatches)}) are below "
            f"the €{_fmt_euro(INTRASTAT_ARRIVALS_THRESHOLD)} Intrastat threshold. No filing required."
        )

    return IntrastatThresholdCheck(arrivals_required, dispatches_required, " ".join(parts))
