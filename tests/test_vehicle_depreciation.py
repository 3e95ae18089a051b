"""
Unit Tests for Motor Vehicle Capital Allowances

Run with: pytest tests/test_vehicle_depreciation.py -v
"""

import pytest
from decimal import Decimal

from irish_tax_engine.services.vehicle_depreciation import (
    VehicleAsset,
    calculate_vehicle_depreciation,
    build_depreciation_schedule,
    MOTOR_VEHICLE_COST_CAP,
    CLAIM_HORIZON_YEARS,
)


class TestVehicleDepreciation:
    """Test 12.5% straight-line wear & tear on motor vehicles."""

    @pytest.fixture
    def van(self):
        return VehicleAsset(
            description="Ford Transit",
            reg="231-D-12345",
            purchase_cost=30000,
            date_acquired="2023-03-01",
            business_use_pct=80,
        )

    def test_cost_capped(self, van):
        """Qualifying cost is capped at €24,000."""
        result = calculate_vehicle_depreciation(van, 2025)

        assert result.cost == Decimal("30000")
        assert result.qualifying_cost == MOTOR_VEHICLE_COST_CAP

    def test_third_year_position(self, van):
        """Acquisition year counts as year 1."""
        result = calculate_vehicle_depreciation(van, 2025)

        # 24000 × 12.5% = 3000, 80% business = 2400
        assert result.years_owned == 3
        assert result.annual_allowance_full == Decimal("3000.00")
        assert result.annual_allowance == Decimal("2400.00")
        assert result.cumulative_allowances == Decimal("7200.00")
        # NBV deducts the full allowance: 24000 - 3 × 3000
        assert result.net_book_value == Decimal("15000.00")
        assert result.fully_depreciated is False

    def test_beyond_claim_horizon(self, van):
        """Allowances stop after eight years."""
        result = calculate_vehicle_depreciation(van, 2032)

        assert result.years_owned == 10
        assert result.cumulative_allowances == Decimal("19200.00")
        assert result.net_book_value == Decimal("0")
        assert result.fully_depreciated is True

    def test_cost_below_cap(self):
        vehicle = VehicleAsset(purchase_cost=20000, date_acquired="2025-01-15")
        result = calculate_vehicle_depreciation(vehicle, 2025)

        assert result.qualifying_cost == Decimal("20000")
        assert result.annual_allowance == Decimal("2500.00")
        assert result.net_book_value == Decimal("17500.00")

    def test_acquired_after_tax_year(self, van):
        """No allowance before the vehicle is owned."""
        result = calculate_vehicle_depreciation(van, 2022)

        assert result.years_owned == 0
        assert result.cumulative_allowances == Decimal("0")
        assert result.net_book_value == Decimal("24000.00")

    def test_unparseable_date_uses_tax_year(self):
        vehicle = VehicleAsset(purchase_cost=16000, date_acquired="not a date")
        result = calculate_vehicle_depreciation(vehicle, 2025)

        assert result.years_owned == 1

    def test_business_use_echoed(self, van):
        result = calculate_vehicle_depreciation(van, 2025)

        assert result.business_use_pct == Decimal("80")
        assert result.to_dict()["business_use_pct"] == 80.0

    def test_schedule(self, van):
        schedule = build_depreciation_schedule(van)

        assert len(schedule) == CLAIM_HORIZON_YEARS
        assert schedule[0]["tax_year"] == 2023
        assert schedule[0]["cumulative_allowances"] == 2400.0
        assert schedule[0]["net_book_value"] == 21000.0
        assert schedule[-1]["fully_depreciated"] is True

    def test_business_use_clamped_but_echoed(self, van):
        """Out-of-range percentages are clamped for the arithmetic only."""
        van.business_use_pct = 150
        over = calculate_vehicle_depreciation(van, 2025)
        van.business_use_pct = -10
        under = calculate_vehicle_depreciation(van, 2025)

        assert over.annual_allowance == Decimal("3000.00")
        assert over.business_use_pct == Decimal("150")
        assert under.annual_allowance == Decimal("0.00")
        assert under.business_use_pct == Decimal("-10")

    def test_allowance_linear_in_business_use(self, van):
        van.business_use_pct = 50
        half = calculate_vehicle_depreciation(van, 2025)
        van.business_use_pct = 100
        full = calculate_vehicle_depreciation(van, 2025)

        assert half.annual_allowance == full.annual_allowance / 2

    def test_cumulative_pinned_after_horizon(self, van):
        eighth = calculate_vehicle_depreciation(van, 2030)
        later = calculate_vehicle_depreciation(van, 2038)

        assert eighth.fully_depreciated is True
        assert later.cumulative_allowances == eighth.cumulative_allowances

    def test_repeat_call_is_identical(self, van):
        first = calculate_vehicle_depreciation(van, 2025)
        second = calculate_vehicle_depreciation(van, 2025)

        assert first.to_dict() == second.to_dict()
        assert build_depreciation_schedule(van) == build_depreciation_schedule(van)
