"""
Unit Tests for Revenue Travel Rates

Tests civil service mileage bands, bicycle rate, commute projection and
subsistence.

Run with: pytest tests/test_revenue_rates.py -v
"""

import pytest
from decimal import Decimal

from irish_tax_engine.services.revenue_rates import (
    calculate_mileage_allowance,
    mileage_band_breakdown,
    calculate_annual_commute_mileage,
    calculate_subsistence_allowance,
    get_revenue_rates,
    BICYCLE_RATE_PER_KM,
)


class TestMotorCarMileage:
    """Test cumulative motor car bands."""

    def test_first_band_ceiling(self):
        """Distance on the first ceiling is charged wholly in band 1."""
        # 1500 × 0.5182 = 777.30
        assert calculate_mileage_allowance(1500) == Decimal("777.30")

    def test_second_band(self):
        """Test distance inside band 2."""
        # 777.30 + 4000 × 0.9063 = 4402.50
        assert calculate_mileage_allowance(5500, "motor_car") == Decimal("4402.50")

    def test_spans_first_two_bands(self):
        # 777.30 + 1500 × 0.9063 = 2136.75
        assert calculate_mileage_allowance(3000) == Decimal("2136.75")

    def test_monotonic(self):
        distances = [0, 1, 1500, 1501, 5500, 25000, 25001, 40000]
        amounts = [calculate_mileage_allowance(d) for d in distances]

        assert amounts == sorted(amounts)

    def test_repeat_call_is_identical(self):
        assert calculate_mileage_allowance(30000) == calculate_mileage_allowance(30000)
        assert mileage_band_breakdown(30000) == mileage_band_breakdown(30000)

    def test_third_band(self):
        # 4402.50 + 2500 × 0.3922 = 5383.00
        assert calculate_mileage_allowance(8000) == Decimal("5383.00")

    def test_open_band(self):
        """Test distance beyond 25,000 km."""
        # 4402.50 + 19500 × 0.3922 + 5000 × 0.2587 = 13343.90
        assert calculate_mileage_allowance(30000) == Decimal("13343.90")

    def test_zero_and_negative_distance(self):
        assert calculate_mileage_allowance(0) == Decimal("0")
        assert calculate_mileage_allowance(-100) == Decimal("0")

    def test_breakdown_matches_total(self):
        """Per-band amounts add up to the allowance."""
        lines = mileage_band_breakdown(8000)

        assert len(lines) == 3
        assert [line["km"] for line in lines] == [1500.0, 4000.0, 2500.0]
        assert sum(Decimal(str(line["amount"])) for line in lines) == Decimal("5383.00")


class TestOtherVehicles:
    """Test motorcycle and bicycle rates."""

    def test_motorcycle_two_bands(self):
        # 6437 × 0.2372 + 3563 × 0.1529 = 2071.6391
        assert calculate_mileage_allowance(10000, "motorcycle") == Decimal("2071.64")

    def test_bicycle_flat_rate(self):
        assert calculate_mileage_allowance(100, "bicycle") == Decimal("8.00")
        assert BICYCLE_RATE_PER_KM == Decimal("0.08")

    def test_unknown_vehicle_type_rejected(self):
        with pytest.raises(ValueError):
            calculate_mileage_allowance(100, "tractor")


class TestCommuteProjection:
    """Test annual commute projection."""

    def test_default_working_days(self):
        """10 km each way over 230 days = 4600 km."""
        # 777.30 + 3100 × 0.9063 = 3586.83
        assert calculate_annual_commute_mileage(10) == Decimal("3586.83")

    def test_custom_working_days(self):
        # 2 × 7.5 × 100 = 1500 km
        assert calculate_annual_commute_mileage(7.5, 100) == Decimal("777.30")


class TestSubsistence:
    """Test overnight and day subsistence."""

    def test_nights_and_days(self):
        result = calculate_subsistence_allowance(2, 3)

        # 2 × 205.53 = 411.06, 3 × 46.17 = 138.51
        assert result.accommodation == Decimal("411.06")
        assert result.meals == Decimal("138.51")
        assert result.total == Decimal("549.57")

    def test_negative_counts_clamped(self):
        result = calculate_subsistence_allowance(-1, -4)

        assert result.total == Decimal("0")

    def test_rates_reference(self):
        rates = get_revenue_rates()

        assert rates["bicycle_rate_per_km"] == 0.08
        assert rates["subsistence"]["overnight"]["normal"] == 205.53
        assert len(rates["mileage"]["motor_car"]) == 4
        assert rates["mileage"]["motor_car"][-1]["up_to"] is None
