"""
Irish Tax Engine - EU & International VAT Knowledge Base

Static reference tables for cross-border VAT from an Irish perspective.
Based on the VAT Consolidation Act 2010, EU VAT Directive 2006/112/EC and the
Windsor Framework arrangements for Northern Ireland.

Tables are read-only; the rule engine in cross_border_vat consults them.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Pattern, Tuple


# ==================== EU MEMBER STATES (EXCL. IRELAND) ====================

@dataclass(frozen=True)
class EUCountry:
    code: str
    name: str
    vat_prefix: str

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "name": self.name, "vat_prefix": self.vat_prefix}


EU_COUNTRIES: Tuple[EUCountry, ...] = (
    EUCountry("AT", "Austria", "ATU"),
    EUCountry("BE", "Belgium", "BE"),
    EUCountry("BG", "Bulgaria", "BG"),
    EUCountry("HR", "Croatia", "HR"),
    EUCountry("CY", "Cyprus", "CY"),
    EUCountry("CZ", "Czech Republic", "CZ"),
    EUCountry("DK", "Denmark", "DK"),
    EUCountry("EE", "Estonia", "EE"),
    EUCountry("FI", "Finland", "FI"),
    EUCountry("FR", "France", "FR"),
    EUCountry("DE", "Germany", "DE"),
    EUCountry("GR", "Greece", "EL"),  # ISO code GR, VAT prefix EL
    EUCountry("HU", "Hungary", "HU"),
    EUCountry("IT", "Italy", "IT"),
    EUCountry("LV", "Latvia", "LV"),
    EUCountry("LT", "Lithuania", "LT"),
    EUCountry("LU", "Luxembourg", "LU"),
    EUCountry("MT", "Malta", "MT"),
    EUCountry("NL", "Netherlands", "NL"),
    EUCountry("PL", "Poland", "PL"),
    EUCountry("PT", "Portugal", "PT"),
    EUCountry("RO", "Romania", "RO"),
    EUCountry("SK", "Slovakia", "SK"),
    EUCountry("SI", "Slovenia", "SI"),
    EUCountry("ES", "Spain", "ES"),
    EUCountry("SE", "Sweden", "SE"),
)

EU_COUNTRIES_BY_CODE: Dict[str, EUCountry] = {c.code: c for c in EU_COUNTRIES}

# VAT registrations outside the member-state list that still need format checks
OTHER_VAT_JURISDICTIONS: Dict[str, EUCountry] = {
    "IE": EUCountry("IE", "Ireland", "IE"),
    "GB": EUCountry("GB", "Great Britain", "GB"),
    "XI": EUCountry("XI", "Northern Ireland", "XI"),
}


def get_vat_country(code: str) -> Optional[EUCountry]:
    return EU_COUNTRIES_BY_CODE.get(code) or OTHER_VAT_JURISDICTIONS.get(code)


# ==================== UK POST-BREXIT RULES ====================

UK_RULES: Dict[str, Any] = {
    "description": "Post-Brexit, GB is a third country. Northern Ireland remains in EU single market for goods under the Windsor Framework.",
    "gb": {
        "goods": "non_eu",
        "services": "non_eu",
        "note": "Great Britain (England, Scotland, Wales) - treated as non-EU for both goods and services. Import VAT applies on goods, reverse charge on services.",
    },
    "ni": {
        "goods": "eu",
        "services": "non_eu",
        "note": "Northern Ireland - EU single market for goods (XI prefix VAT numbers), but non-EU for services. Intra-community rules apply to goods.",
    },
    "vat_prefixes": {
        "gb": "GB",
        "ni": "XI",
    },
}


# ==================== INTRA-COMMUNITY SUPPLIES ====================

INTRA_COMMUNITY_SUPPLIES: Dict[str, Any] = {
    "ics": {
        "title": "Intra-Community Supplies (ICS) - Selling goods to EU",
        "treatment": "zero_rated",
        "conditions": [
            "Goods must be physically transported from Ireland to another EU member state",
            "Customer must provide a valid EU VAT registration number",
            "Irish supplier must verify VAT number via VIES before zero-rating",
            "Supplier must retain proof of transport (CMR, bill of lading, carrier confirmation)",
            "Supply must be reported on VIES return",
        ],
        "vat3_box": "E1",
        "warning": "If conditions not met, Irish VAT must be charged at the applicable rate.",
    },
    "ica": {
        "title": "Intra-Community Acquisitions (ICA) - Buying goods from EU",
        "treatment": "self_accounting",
        "description": "Irish purchaser self-accounts for VAT on the acquisition. VAT is both charged and deducted on the same return (net zero if fully deductible).",
        "vat3_boxes": {"output": "T1", "input": "T2"},
        "note": "The EU supplier invoices at 0% (zero-rated ICS from their side). You declare Irish VAT at the applicable rate on your VAT3.",
    },
    "triangulation": {
        "title": "Triangulation (ABC supplies)",
        "description": "Simplification for three-party transactions across three EU states. The intermediary (B) avoids VAT registration in the destination state.",
        "conditions": [
            "Three parties in three different EU member states",
            "Goods shipped directly from A's state to C's state",
            "B issues zero-rated invoice to C with triangulation note",
            "C self-accounts for VAT",
        ],
    },
}


# ==================== REPORTING OBLIGATIONS ====================

REPORTING_OBLIGATIONS: Dict[str, Any] = {
    "vies": {
        "title": "VIES Return (VAT Information Exchange System)",
        "threshold": 0,
        "frequency": "quarterly",
        "description": "Must report all intra-community supplies of goods and services to VAT-registered customers in other EU states.",
        "deadline": "By the 23rd of the month following the quarter-end",
        "note": "No minimum threshold - all qualifying supplies must be reported.",
        "penalty": "€4,000 per return for late/non-filing.",
    },
    "intrastat": {
        "title": "Intrastat Returns",
        "arrivals_threshold": 750000,
        "dispatches_threshold": 750000,
        "description": "Statistical return for movement of goods between EU states. Required when annual arrivals or dispatches exceed €750,000.",
        "frequency": "monthly",
        "deadline": "By the 23rd of the month following the reference period",
    },
}


# ==================== ONE STOP SHOP (OSS) ====================

OSS_RULES: Dict[str, Any] = {
    "threshold": 10000,
    "title": "One Stop Shop (OSS) - Distance selling to EU consumers",
    "description": "When B2C sales of goods or digital services to other EU states exceed €10,000/year (combined across all EU states), you must charge VAT at the destination country's rate.",
    "schemes": {
        "union": {
            "name": "Union OSS",
            "scope": "Intra-EU distance sales of goods and B2C supplies of services",
            "registration": "Register via Revenue's OSS portal in Ireland",
            "returns": "Quarterly OSS return (not on your Irish VAT3)",
        },
        "non_union": {
            "name": "Non-Union OSS",
            "scope": "B2C supplies of services by non-EU businesses to EU consumers",
            "note": "Not applicable to Irish-established businesses",
        },
        "ioss": {
            "name": "Import One Stop Shop (IOSS)",
            "scope": "Distance sales of imported goods valued ≤€150 to EU consumers",
            "description": "Allows charging and collecting VAT at point of sale instead of import. Goods clear customs VAT-free.",
        },
    },
    "deemed_supplier": {
        "description": "Electronic interfaces (marketplaces) facilitating B2C sales may be deemed the supplier and responsible for collecting VAT.",
        "applies_to": ["Online marketplaces", "Platform operators"],
    },
    "below_threshold": "If total EU B2C sales below €10,000, you may charge Irish VAT rates instead of destination rates.",
}


# ==================== PLACE OF SUPPLY - SERVICES ====================

PLACE_OF_SUPPLY_SERVICES: Dict[str, Any] = {
    "general_rule": {
        "b2b": {
            "rule": "Where the customer is established (reverse charge applies)",
            "description": "For B2B services, the customer self-accounts for VAT in their country. Irish supplier invoices without VAT and notes 'Reverse charge - Article 196 EU VAT Directive'.",
        },
        "b2c": {
            "rule": "Where the supplier is established",
            "description": "For B2C services, Irish VAT applies unless an exception below applies.",
        },
    },
    "exceptions": [
        {
            "type": "digital_services",
            "title": "Electronically supplied services (ESS)",
            "b2c_rule": "Where the customer is located (destination principle)",
            "note": "SaaS, streaming, e-books, online courses. Use OSS if above €10,000 threshold.",
            "examples": ["SaaS subscriptions", "Streaming services", "Online courses", "App downloads", "Web hosting"],
        },
        {
            "type": "property_related",
            "title": "Services related to immovable property",
            "rule": "Where the property is located",
            "examples": ["Construction work", "Architecture", "Estate agents", "Property valuation", "Accommodation"],
        },
        {
            "type": "transport_passengers",
            "title": "Passenger transport",
            "rule": "Where the transport takes place (proportional if cross-border)",
            "examples": ["Bus", "Rail", "Air (intra-EU)"],
        },
        {
            "type": "events_admission",
            "title": "Admission to events",
            "rule": "Where the event physically takes place",
            "examples": ["Conferences", "Exhibitions", "Sports events", "Concerts"],
        },
        {
            "type": "catering",
            "title": "Restaurant and catering services",
            "rule": "Where physically performed",
            "examples": ["On-site catering", "Restaurant meals"],
        },
        {
            "type": "hire_transport",
            "title": "Short-term hire of transport",
            "rule": "Where the transport is put at the customer's disposal (≤30 days, ≤90 for vessels)",
            "examples": ["Car hire", "Van rental"],
        },
        {
            "type": "intermediary",
            "title": "Intermediary services",
            "b2c_rule": "Where the underlying transaction takes place",
            "examples": ["Agents", "Brokers acting in someone else's name"],
        },
    ],
}


# ==================== IMPORTS & EXPORTS ====================

IMPORTS_EXPORTS: Dict[str, Any] = {
    "exports": {
        "title": "Exports to non-EU countries",
        "treatment": "zero_rated",
        "conditions": [
            "Goods must physically leave the EU",
            "Retain proof of export (customs declaration, shipping docs)",
            "Report on VAT3 box E2",
        ],
        "vat3_box": "E2",
    },
    "imports": {
        "title": "Imports from non-EU countries",
        "description": "VAT is charged on importation. The taxable amount is CIF value + customs duty + excise duty.",
        "vat_base": "CIF (cost + insurance + freight) + customs duty + excise duty",
        "rate": "Irish VAT rate applicable to the goods",
        "payment": "Normally payable at point of import unless postponed accounting applies",
    },
    "postponed_accounting": {
        "title": "Postponed Accounting (PA1)",
        "description": "Allows registered traders to account for import VAT on their VAT3 return instead of paying at the point of import. Both output and input VAT declared on the same return.",
        "eligibility": "Must be VAT-registered and hold a Customs & Excise (C&E) number. Apply via Revenue's online system.",
        "vat3_box": "PA1",
        "benefit": "No cash-flow impact - VAT is self-accounted (charged and reclaimed on the same return).",
    },
    "section_56": {
        "title": "Section 56 Authorisation",
        "description": "Allows qualifying persons to receive goods and services without VAT being charged. Primarily used by exporters whose inputs mainly relate to zero-rated exports.",
        "eligibility": "At least 75% of taxable supplies must be zero-rated (exports or ICS).",
        "note": "Apply to Revenue for a Section 56 authorisation number. Suppliers invoice at 0% quoting the authorisation.",
    },
}


# ==================== VAT3 EU-RELATED BOXES ====================

VAT3_EU_BOXES: Dict[str, str] = {
    "T1": "VAT on intra-community acquisitions (goods received from EU)",
    "T2": "VAT on intra-community acquisitions - input credit (self-accounted)",
    "E1": "Intra-community supplies of goods (zero-rated sales to EU)",
    "E2": "Exports of goods to non-EU countries (zero-rated)",
    "ES1": "Intra-community supplies of services to EU businesses",
    "ES2": "Intra-community acquisitions of services from EU businesses (reverse charge)",
    "PA1": "Postponed accounting - import VAT self-accounted",
}


# ==================== VAT NUMBER FORMATS ====================

VAT_FORMAT_PATTERNS: Dict[str, Pattern[str]] = {
    code: re.compile(pattern) for code, pattern in {
        "AT": r"^ATU\d{8}$",
        "BE": r"^BE[01]\d{9}$",
        "BG": r"^BG\d{9,10}$",
        "HR": r"^HR\d{11}$",
        "CY": r"^CY\d{8}[A-Z]$",
        "CZ": r"^CZ\d{8,10}$",
        "DK": r"^DK\d{8}$",
        "EE": r"^EE\d{9}$",
        "FI": r"^FI\d{8}$",
        "FR": r"^FR[A-Z0-9]{2}\d{9}$",
        "DE": r"^DE\d{9}$",
        "GR": r"^EL\d{9}$",
        "HU": r"^HU\d{8}$",
        "IE": r"^IE\d{7}[A-Z]{1,2}$|^IE\d[A-Z]\d{5}[A-Z]$",
        "IT": r"^IT\d{11}$",
        "LV": r"^LV\d{11}$",
        "LT": r"^LT(\d{9}|\d{12})$",
        "LU": r"^LU\d{8}$",
        "MT": r"^MT\d{8}$",
        "NL": r"^NL\d{9}B\d{2}$",
        "PL": r"^PL\d{10}$",
        "PT": r"^PT\d{9}$",
        "RO": r"^RO\d{2,10}$",
        "SK": r"^SK\d{10}$",
        "SI": r"^SI\d{8}$",
        "ES": r"^ES[A-Z0-9]\d{7}[A-Z0-9]$",
        "SE": r"^SE\d{12}$",
        "GB": r"^GB(\d{9}|\d{12}|GD\d{3}|HA\d{3})$",
        "XI": r"^XI(\d{9}|\d{12}|GD\d{3}|HA\d{3})$",
    }.items()
}


# ==================== THRESHOLDS ====================

OSS_THRESHOLD = Decimal(OSS_RULES["threshold"])
INTRASTAT_ARRIVALS_THRESHOLD = Decimal(REPORTING_OBLIGATIONS["intrastat"]["arrivals_threshold"])
INTRASTAT_DISPATCHES_THRESHOLD = Decimal(REPORTING_OBLIGATIONS["intrastat"]["dispatches_threshold"])
DEFAULT_IMPORT_VAT_RATE = Decimal("0.23")


def get_eu_vat_reference() -> Dict[str, Any]:
    """All reference tables in a JSON-serializable shape."""
    return {
        "eu_countries": [c.to_dict() for c in EU_COUNTRIES],
        "uk_rules": UK_RULES,
        "intra_community_supplies": INTRA_COMMUNITY_SUPPLIES,
        "reporting_obligations": REPORTING_OBLIGATIONS,
        "oss_rules": OSS_RULES,
        "place_of_supply_services": PLACE_OF_SUPPLY_SERVICES,
        "imports_exports": IMPORTS_EXPORTS,
        "vat3_eu_boxes": VAT3_EU_BOXES,
        "vat_format_countries": sorted(VAT_FORMAT_PATTERNS),
    }
