"""
Irish Tax Engine - Motor Vehicle Capital Allowances

Irish wear & tear rules for passenger motor vehicles (TCA 1997 s.284/s.373):
- 12.5% straight-line over 8 years
- Qualifying cost capped at EUR 24,000
- Allowance apportioned by business use percentage
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from irish_tax_engine.utils.currency import ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)


# ==================== TAX CONSTANTS ====================

MOTOR_VEHICLE_COST_CAP = Decimal("24000")
ANNUAL_ALLOWANCE_RATE = Decimal("0.125")  # 1/8
CLAIM_HORIZON_YEARS = 8


@dataclass
class VehicleAsset:
    """A depreciable vehicle as captured at onboarding."""
    description: str = "Motor Vehicle"
    reg: str = ""
    purchase_cost: Any = 0  # ex-VAT
    date_acquired: Optional[str] = None  # ISO date
    business_use_pct: Any = 100


@dataclass
class VehicleDepreciation:
    """Capital allowance position for one vehicle in one tax year."""
    cost: Decimal
    qualifying_cost: Decimal
    years_owned: int
    annual_allowance_full: Decimal
    annual_allowance: Decimal
    cumulative_allowances: Decimal
    net_book_value: Decimal
    fully_depreciated: bool
    business_use_pct: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cost": float(self.cost),
            "qualifying_cost": float(self.qualifying_cost),
            "years_owned": self.years_owned,
            "annual_allowance_full": float(self.annual_allowance_full),
            "annual_allowance": float(self.annual_allowance),
            "cumulative_allowances": float(self.cumulative_allowances),
            "net_book_value": float(self.net_book_value),
            "fully_depreciated": self.fully_depreciated,
            "business_use_pct": float(self.business_use_pct),
        }


def _acquisition_year(date_acquired: Any, default_year: int) -> int:
    if isinstance(date_acquired, (date, datetime)):
        return date_acquired.year
    if not date_acquired:
        return default_year
    try:
        return date.fromisoformat(str(date_acquired).strip()[:10]).year
    except ValueError:
        logger.debug(f"Unparseable acquisition date {date_acquired!r}, using {default_year}")
        return default_year


def calculate_vehicle_depreciation(vehicle: VehicleAsset, tax_year: int) -> VehicleDepreciation:
    """
    Calculate the capital allowance schedule position for ``tax_year``.

    The year of acquisition counts as year 1. Allowances stop after the 8-year
    horizon even if the vehicle is still owned, but the per-year figures keep
    reporting the annual amount.

    Net book value deducts the full (unapportioned) allowance each year while
    cumulative allowances are apportioned by business use. The business use
    percentage is clamped to 0-100 for the arithmetic and echoed as supplied.
    """
    cost = to_decimal(vehicle.purchase_cost)
    qualifying_cost = min(cost, MOTOR_VEHICLE_COST_CAP)
    raw_business_pct = to_decimal(vehicle.business_use_pct)
    business_fraction = max(ZERO, min(Decimal("100"), raw_business_pct)) / Decimal("100")

    acquired_year = _acquisition_year(vehicle.date_acquired, tax_year)
    years_owned = max(0, tax_year - acquired_year + 1)
    claimable_years = min(years_owned, CLAIM_HORIZON_YEARS)

    annual_allowance_full = round_currency(qualifying_cost * ANNUAL_ALLOWANCE_RATE)
    annual_allowance = round_currency(annual_allowance_full * business_fraction)

    cumulative_allowances = round_currency(min(
        claimable_years * annual_allowance_full * business_fraction,
        qualifying_cost * business_fraction,
    ))

    net_book_value = max(ZERO, round_currency(qualifying_cost - claimable_years * annual_allowance_full))

    result = VehicleDepreciation(
        cost=cost,
        qualifying_cost=qualifying_cost,
        years_owned=years_owned,
        annual_allowance_full=annual_allowance_full,
        annual_allowance=annual_allowance,
        cumulative_allowances=cumulative_allowances,
        net_book_value=net_book_value,
        fully_depreciated=claimable_years >= CLAIM_HORIZON_YEARS,
        business_use_pct=raw_business_pct,
    )

    logger.debug(
        f"Vehicle {vehicle.reg or vehicle.description} {tax_year}: "
        f"year {years_owned}, allowance {annual_allowance}, NBV {net_book_value}"
    )
    return result


def build_depreciation_schedule(vehicle: VehicleAsset, first_year: Optional[int] = None) -> list:
    """Year-by-year schedule across the full claim horizon."""
    start = first_year or _acquisition_year(vehicle.date_acquired, date.today().year)
    return [
        {"tax_year": year, **calculate_vehicle_depreciation(vehicle, year).to_dict()}
        for year in range(start, start + CLAIM_HORIZON_YEARS)
    ]
