"""
Unit Tests for Cross-Border VAT

Tests the treatment decision table, VAT number formats, import VAT and the
OSS/Intrastat thresholds.

Run with: pytest tests/test_cross_border_vat.py -v
"""

import pytest
from decimal import Decimal

from irish_tax_engine.models.enums import VATTreatment
from irish_tax_engine.services.cross_border_vat import (
    CrossBorderVATQuery,
    determine_cross_border_vat,
    validate_eu_vat_format,
    calculate_import_vat,
    check_oss_threshold,
    check_intrastat_threshold,
    VIES_OBLIGATION,
)
from irish_tax_engine.services.eu_vat_rules import EU_COUNTRIES, get_eu_vat_reference


def _treat(direction, location, supply, customer="b2b"):
    return determine_cross_border_vat(CrossBorderVATQuery(direction, location, supply, customer))


class TestSales:
    """Test treatment of sales."""

    def test_eu_goods_b2b_zero_rated(self):
        result = _treat("sale", "eu", "goods", "b2b")

        assert result.treatment == VATTreatment.zero_rated
        assert result.vat3_boxes == ["E1"]
        assert VIES_OBLIGATION in result.reporting_obligations
        assert result.warnings

    def test_eu_goods_b2c_oss(self):
        result = _treat("sale", "eu", "goods", "b2c")

        assert result.treatment == VATTreatment.oss_destination
        assert result.vat3_boxes == []

    def test_eu_services_b2b(self):
        result = _treat("sale", "eu", "services", "b2b")

        assert result.treatment == VATTreatment.zero_rated
        assert result.vat3_boxes == ["ES1"]

    def test_eu_services_b2c_irish_vat(self):
        assert _treat("sale", "eu", "services", "b2c").treatment == VATTreatment.standard_rated

    def test_ni_goods_follow_eu_rules(self):
        """Northern Ireland goods are intra-community for any customer."""
        for customer in ("b2b", "b2c"):
            result = _treat("sale", "ni", "goods", customer)
            assert result.treatment == VATTreatment.zero_rated
            assert result.vat3_boxes == ["E1"]

    def test_ni_services_follow_non_eu_rules(self):
        result = _treat("sale", "ni", "services")

        assert result.treatment == VATTreatment.zero_rated
        assert result.vat3_boxes == []

    def test_ni_services_outside_scope(self):
        assert "outside scope" in _treat("sale", "ni", "services", "b2b").explanation

    def test_export_goods(self):
        assert _treat("sale", "gb", "goods").vat3_boxes == ["E2"]
        assert _treat("sale", "non_eu", "goods", "b2c").vat3_boxes == ["E2"]


class TestPurchases:
    """Test treatment of purchases."""

    def test_eu_goods_acquisition(self):
        result = _treat("purchase", "eu", "goods")

        assert result.treatment == VATTreatment.self_accounting
        assert result.vat3_boxes == ["T1", "T2"]

    def test_eu_services_reverse_charge(self):
        result = _treat("purchase", "eu", "services")

        assert result.treatment == VATTreatment.reverse_charge
        assert result.vat3_boxes == ["ES2"]

    def test_ni_goods_acquisition(self):
        assert _treat("purchase", "ni", "goods").treatment == VATTreatment.self_accounting

    def test_non_eu_services(self):
        result = _treat("purchase", "gb", "services")

        assert result.treatment == VATTreatment.reverse_charge
        assert result.vat3_boxes == ["T1", "T2"]

    def test_import_postponed_accounting(self):
        result = _treat("purchase", "non_eu", "goods")

        assert result.treatment == VATTreatment.postponed_accounting
        assert result.vat3_boxes == ["PA1"]

    def test_unknown_combination_falls_back(self):
        result = _treat("barter", "mars", "goods")

        assert result.treatment == VATTreatment.standard_rated
        assert result.warnings == ["Consult a tax advisor for the correct treatment"]

    def test_inputs_case_insensitive(self):
        assert _treat("SALE", " EU ", "Goods", "B2B").vat3_boxes == ["E1"]

    def test_repeat_query_is_identical(self):
        query = CrossBorderVATQuery("purchase", "eu", "services", "b2b")

        assert determine_cross_border_vat(query) == determine_cross_border_vat(query)
        assert calculate_import_vat(1000, 100) == calculate_import_vat(1000, 100)


class TestVATNumberFormat:
    """Test EU VAT number format validation."""

    def test_irish_number_with_spaces(self):
        result = validate_eu_vat_format("IE 1234567T", "ie")

        assert result.valid is True
        assert result.message == "Valid IE VAT number format"

    def test_german_number_too_short(self):
        result = validate_eu_vat_format("DE12345678", "DE")

        assert result.valid is False
        assert "Germany" in result.message

    def test_unknown_country(self):
        result = validate_eu_vat_format("XX123", "XX")

        assert result.valid is False
        assert result.message == "Unknown country code: XX"

    def test_greece_uses_el_prefix(self):
        """Greek numbers carry EL, not the ISO code GR."""
        assert validate_eu_vat_format("EL123456789", "GR").valid is True
        assert validate_eu_vat_format("GR123456789", "GR").valid is False

    def test_invalid_message_names_country_and_prefix(self):
        result = validate_eu_vat_format("AT12345678", "AT")

        assert result.valid is False
        assert result.message == "Invalid format for Austria. Expected pattern: ATU followed by the required digits."


class TestImportVATAndThresholds:
    """Test import VAT, OSS and Intrastat."""

    def test_import_vat(self):
        result = calculate_import_vat(1000, 100, 0)

        # (1000 + 100) × 23% = 253
        assert result.vat_base == Decimal("1100")
        assert result.vat_amount == Decimal("253.00")
        assert result.total_cost == Decimal("1353.00")

    def test_import_vat_custom_rate(self):
        result = calculate_import_vat(200, vat_rate="0.135")

        assert result.vat_amount == Decimal("27.00")

    def test_oss_threshold_is_strict(self):
        assert check_oss_threshold(10000).exceeds is False
        assert check_oss_threshold("10000.01").exceeds is True

    def test_intrastat_threshold_inclusive(self):
        result = check_intrastat_threshold(750000, 100)

        assert result.arrivals_required is True
        assert result.dispatches_required is False
        assert "Arrivals" in result.recommendation

    def test_intrastat_below(self):
        result = check_intrastat_threshold(0, 0)

        assert not result.arrivals_required and not result.dispatches_required
        assert "No filing required" in result.recommendation

    def test_reference_data(self):
        reference = get_eu_vat_reference()

        assert len(EU_COUNTRIES) == 26
        assert len(reference["eu_countries"]) == 26
