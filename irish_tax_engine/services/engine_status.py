"""
Irish Tax Engine - Module Status

Summary of the calculators exposed by the API with their headline rates.
"""

from typing import Any, Dict

from irish_tax_engine import __version__
from irish_tax_engine.models.enums import VATTreatment, VehicleType
from irish_tax_engine.services.ct1_computation import CT_TRADING_RATE
from irish_tax_engine.services.eu_vat_rules import EU_COUNTRIES, OSS_THRESHOLD
from irish_tax_engine.services.form11_calculator import TAX_CONSTANTS_BY_YEAR
from irish_tax_engine.services.relief_scanner import RELIEF_BUCKETS
from irish_tax_engine.services.vat_deductibility import VAT_RATES
from irish_tax_engine.services.vehicle_depreciation import (
    ANNUAL_ALLOWANCE_RATE,
    CLAIM_HORIZON_YEARS,
    MOTOR_VEHICLE_COST_CAP,
)


def get_tax_engine_status() -> Dict[str, Any]:
    """Return status of all tax calculation modules."""
    return {
        "modules": {
            "revenue_rates": {
                "name": "Mileage & Subsistence (Civil Service Rates)",
                "vehicle_types": [v.value for v in VehicleType],
                "status": "active",
            },
            "vehicle_depreciation": {
                "name": "Motor Vehicle Capital Allowances",
                "cost_cap": float(MOTOR_VEHICLE_COST_CAP),
                "annual_rate": float(ANNUAL_ALLOWANCE_RATE),
                "years": CLAIM_HORIZON_YEARS,
                "status": "active",
            },
            "relief_scanner": {
                "name": "Form 11 Relief Scanner",
                "buckets": list(RELIEF_BUCKETS),
                "status": "active",
            },
            "cross_border_vat": {
                "name": "Cross-Border VAT",
                "treatments": [t.value for t in VATTreatment],
                "eu_member_states": len(EU_COUNTRIES),
                "oss_threshold": float(OSS_THRESHOLD),
                "status": "active",
            },
            "vat_deductibility": {
                "name": "VAT & CT Deductibility",
                "vat_rates": {k: float(v) for k, v in VAT_RATES.items()},
                "status": "active",
            },
            "form11": {
                "name": "Form 11 Income Tax",
                "tax_years": sorted(TAX_CONSTANTS_BY_YEAR),
                "status": "active",
            },
            "ct1": {
                "name": "CT1 Corporation Tax",
                "trading_rate": float(CT_TRADING_RATE),
                "status": "active",
            },
            "trial_balance": {
                "name": "Trial Balance",
                "status": "active",
            },
        },
        "jurisdiction": "IE",
        "version": __version__,
        "compliance": "Revenue Commissioners guidelines",
    }
