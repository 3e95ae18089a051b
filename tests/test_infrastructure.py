"""
Infrastructure Tests

Tests configuration, structured logging and Sentry event scrubbing.

Run with: pytest tests/test_infrastructure.py -v
"""

import asyncio
import json
import logging
import pytest

from irish_tax_engine.config import Settings
from irish_tax_engine.logging_config import JSONFormatter, RequestContextFilter, set_request_id
from irish_tax_engine.sentry_integration import filter_sensitive_data, init_sentry
from irish_tax_engine.utils.currency import decimal_to_float, round_currency, to_decimal
from decimal import Decimal


class TestSettings:
    """Test environment-aware settings."""

    def test_defaults(self, monkeypatch):
        for name in ("ENVIRONMENT", "DEBUG", "DEFAULT_TAX_YEAR", "COMMUTE_WORKING_DAYS"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)

        assert settings.DEFAULT_TAX_YEAR == 2025
        assert settings.COMMUTE_WORKING_DAYS == 230
        assert settings.is_development is True
        assert settings.debug_enabled is True

    def test_dev_origins_added_outside_production(self):
        settings = Settings(_env_file=None, CORS_ORIGINS="https://app.example.ie")

        assert "https://app.example.ie" in settings.cors_origins_list
        assert "http://localhost:3000" in settings.cors_origins_list

    def test_production_origins_only(self):
        settings = Settings(_env_file=None, ENVIRONMENT="production", CORS_ORIGINS="https://app.example.ie")

        assert settings.cors_origins_list == ["https://app.example.ie"]
        assert settings.json_logging is True

    def test_production_validation(self):
        settings = Settings(_env_file=None, ENVIRONMENT="production", CORS_ORIGINS="*", DEBUG=True)
        errors = settings.validate_production_config()

        assert "CORS_ORIGINS cannot be '*' in production" in errors
        assert "DEBUG should be False in production" in errors


class TestLogging:
    """Test JSON log formatting."""

    def _record(self, msg="hello", **extra):
        record = logging.LogRecord("irish_tax_engine.test", logging.INFO, __file__, 10, msg, None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_json_output(self):
        output = json.loads(JSONFormatter(service_name="svc").format(self._record()))

        assert output["message"] == "hello"
        assert output["level"] == "INFO"
        assert output["service"] == "svc"

    def test_extra_fields(self):
        output = json.loads(JSONFormatter().format(self._record(tax_year=2025)))

        assert output["extra"]["tax_year"] == 2025

    def test_request_id_filter(self):
        context = RequestContextFilter()
        context.set_request_id("req-1")
        record = self._record()

        assert context.filter(record) is True
        assert record.request_id == "req-1"
        context.set_request_id(None)

    def test_request_id_isolated_per_task(self):
        """Concurrent tasks each log with their own request id."""
        context = RequestContextFilter()
        seen = {}

        async def handle(request_id, ready, other_ready):
            set_request_id(request_id)
            ready.set()
            await other_ready.wait()
            record = self._record()
            context.filter(record)
            seen[request_id] = record.request_id

        async def main():
            a_ready, b_ready = asyncio.Event(), asyncio.Event()
            await asyncio.gather(
                asyncio.create_task(handle("A", a_ready, b_ready)),
                asyncio.create_task(handle("B", b_ready, a_ready)),
            )

        asyncio.run(main())

        assert seen == {"A": "A", "B": "B"}


class TestSentry:
    """Test Sentry setup and scrubbing."""

    def test_disabled_without_dsn(self, monkeypatch):
        monkeypatch.delenv("SENTRY_DSN", raising=False)

        assert init_sentry(dsn="") is False

    def test_taxpayer_identifiers_redacted(self):
        event = {
            "request": {
                "headers": {"Authorization": "Bearer abc", "Accept": "application/json"},
                "data": {"pps_number": "1234567T", "salary": 60000, "spouse": {"date_of_birth": "1980-01-01"}},
            },
            "extra": {"vat_number": "IE1234567T"},
        }
        scrubbed = filter_sensitive_data(event, {})

        assert scrubbed["request"]["headers"]["Authorization"] == "[REDACTED]"
        assert scrubbed["request"]["headers"]["Accept"] == "application/json"
        assert scrubbed["request"]["data"]["pps_number"] == "[REDACTED]"
        assert scrubbed["request"]["data"]["salary"] == 60000
        assert scrubbed["request"]["data"]["spouse"]["date_of_birth"] == "[REDACTED]"
        assert scrubbed["extra"]["vat_number"] == "[REDACTED]"


class TestCurrency:
    """Test money helpers."""

    def test_to_decimal(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(None) == Decimal("0")
        assert to_decimal("abc") == Decimal("0")
        assert to_decimal(float("nan")) == Decimal("0")

    def test_round_half_up(self):
        assert round_currency(Decimal("2.675")) == Decimal("2.68")
        assert round_currency(Decimal("-2.675")) == Decimal("-2.68")

    def test_decimal_to_float(self):
        assert decimal_to_float({"a": [Decimal("1.50")]}) == {"a": [1.5]}
