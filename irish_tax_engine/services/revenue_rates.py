"""
Irish Tax Engine - Revenue Civil Service Mileage & Subsistence Rates

Implements the Revenue-approved tax-free travel allowances:
- Motor car and motorcycle mileage (cumulative distance bands)
- Bicycle mileage (flat rate)
- Overnight and day subsistence (flat rates)
- Annual commute projection

Rates: Revenue circular, civil service rates effective 1 September 2022.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from irish_tax_engine.models.enums import VehicleType
from irish_tax_engine.utils.currency import ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)


# ==================== RATE TABLES ====================

@dataclass(frozen=True)
class MileageBand:
    """One distance band. ``up_to`` is the cumulative km ceiling, None for the open band."""
    up_to: Optional[Decimal]
    rate: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "up_to": float(self.up_to) if self.up_to is not None else None,
            "rate": float(self.rate),
        }


MILEAGE_RATES: Dict[VehicleType, Tuple[MileageBand, ...]] = {
    VehicleType.motor_car: (
        MileageBand(Decimal("1500"), Decimal("0.5182")),
        MileageBand(Decimal("5500"), Decimal("0.9063")),
        MileageBand(Decimal("25000"), Decimal("0.3922")),
        MileageBand(None, Decimal("0.2587")),
    ),
    VehicleType.motorcycle: (
        MileageBand(Decimal("6437"), Decimal("0.2372")),
        MileageBand(None, Decimal("0.1529")),
    ),
}

BICYCLE_RATE_PER_KM = Decimal("0.08")

SUBSISTENCE_RATES: Dict[str, Dict[str, Decimal]] = {
    "overnight": {
        "normal": Decimal("205.53"),
        "reduced": Decimal("184.98"),
        "vouched_accommodation": Decimal("0"),
        "day_rate": Decimal("46.17"),
    },
    "day_trip": {
        "ten_hours": Decimal("46.17"),
        "five_hours": Decimal("19.25"),
    },
}

DEFAULT_WORKING_DAYS_PER_YEAR = 230


# ==================== MILEAGE ====================

def calculate_mileage_allowance(distance_km: Any, vehicle_type: str = "motor_car") -> Decimal:
    """
    Calculate the tax-free mileage allowance for a distance travelled.

    Banded vehicles use a cumulative marginal model: each band is charged at
    its own rate for the kilometres falling inside it, like a progressive tax
    bracket. A distance landing exactly on a band ceiling is charged wholly in
    the lower band.

    Non-positive distances return zero.
    """
    vehicle = VehicleType(vehicle_type)
    distance = to_decimal(distance_km)

    if distance <= ZERO:
        return ZERO

    if vehicle == VehicleType.bicycle:
        return round_currency(distance * BICYCLE_RATE_PER_KM)

    remaining = distance
    previous_ceiling = ZERO
    total = ZERO

    for band in MILEAGE_RATES[vehicle]:
        if band.up_to is None:
            km_in_band = remaining
        else:
            km_in_band = min(remaining, band.up_to - previous_ceiling)
            previous_ceiling = band.up_to

        total += km_in_band * band.rate
        remaining -= km_in_band
        if remaining <= ZERO:
            break

    result = round_currency(total)
    logger.debug(f"Mileage allowance {vehicle.value} {distance}km = {result}")
    return result


def mileage_band_breakdown(distance_km: Any, vehicle_type: str = "motor_car") -> List[Dict[str, Any]]:
    """Per-band kilometres and amounts for display alongside the allowance total."""
    vehicle = VehicleType(vehicle_type)
    distance = to_decimal(distance_km)

    if distance <= ZERO:
        return []

    if vehicle == VehicleType.bicycle:
        return [{
            "band": "flat",
            "km": float(distance),
            "rate": float(BICYCLE_RATE_PER_KM),
            "amount": float(round_currency(distance * BICYCLE_RATE_PER_KM)),
        }]

    lines = []
    remaining = distance
    previous_ceiling = ZERO
    for band in MILEAGE_RATES[vehicle]:
        if band.up_to is None:
            km_in_band = remaining
            label = f"over {previous_ceiling:,.0f} km"
        else:
            km_in_band = min(remaining, band.up_to - previous_ceiling)
            label = f"{previous_ceiling:,.0f}-{band.up_to:,.0f} km"
            previous_ceiling = band.up_to

        lines.append({
            "band": label,
            "km": float(km_in_band),
            "rate": float(band.rate),
            "amount": float(round_currency(km_in_band * band.rate)),
        })
        remaining -= km_in_band
        if remaining <= ZERO:
            break

    return lines


def calculate_annual_commute_mileage(
    one_way_km: Any,
    working_days_per_year: int = DEFAULT_WORKING_DAYS_PER_YEAR
) -> Decimal:
    """Project a daily round-trip commute over a working year at motor car rates."""
    annual_km = to_decimal(one_way_km) * 2 * to_decimal(working_days_per_year)
    return calculate_mileage_allowance(annual_km, VehicleType.motor_car.value)


# ==================== SUBSISTENCE ====================

@dataclass
class SubsistenceAllowance:
    """Flat-rate subsistence for a trip."""
    accommodation: Decimal
    meals: Decimal
    total: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accommodation": float(self.accommodation),
            "meals": float(self.meals),
            "total": float(self.total),
        }


def calculate_subsistence_allowance(nights_away: Any, days_away: Any) -> SubsistenceAllowance:
    """
    Overnight allowance per night at the normal rate plus the ten-hour day
    rate per day away. Negative counts contribute nothing.
    """
    nights = max(ZERO, to_decimal(nights_away))
    days = max(ZERO, to_decimal(days_away))

    accommodation_raw = nights * SUBSISTENCE_RATES["overnight"]["normal"]
    meals_raw = days * SUBSISTENCE_RATES["day_trip"]["ten_hours"]

    return SubsistenceAllowance(
        accommodation=round_currency(accommodation_raw),
        meals=round_currency(meals_raw),
        total=round_currency(accommodation_raw + meals_raw),
    )


def get_revenue_rates() -> Dict[str, Any]:
    """Reference table of current mileage and subsistence rates."""
    return {
        "mileage": {
            vehicle.value: [band.to_dict() for band in bands]
            for vehicle, bands in MILEAGE_RATES.items()
        },
        "bicycle_rate_per_km": float(BICYCLE_RATE_PER_KM),
        "subsistence": {
            period: {name: float(rate) for name, rate in rates.items()}
            for period, rates in SUBSISTENCE_RATES.items()
        },
        "default_working_days_per_year": DEFAULT_WORKING_DAYS_PER_YEAR,
    }
