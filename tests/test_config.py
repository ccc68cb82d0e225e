"""
Tests for configuration and structured logging
"""

import json
import logging

import pytest
from pydantic import ValidationError as SettingsError

from ledger_core.config import LedgerConfig, get_config, reload_config
from ledger_core.currency import Currency
from ledger_core.logging_config import JSONFormatter, get_logger, log_action, setup_logging
from ledger_core.ledger import Direction
from ledger_core.system import LedgerSystem


class TestLedgerConfig:

    def test_defaults(self, monkeypatch):
        for key in ("LEDGER_API_PORT", "LEDGER_DEFAULT_CURRENCY", "LEDGER_LOG_FORMAT"):
            monkeypatch.delenv(key, raising=False)

        config = LedgerConfig(_env_file=None)

        assert config.api_port == 3000
        assert config.default_currency == "USD"
        assert config.default_currency_enum == Currency.USD
        assert config.log_format == "json"
        assert config.enable_audit_logging is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LEDGER_API_PORT", "8123")
        monkeypatch.setenv("LEDGER_DEFAULT_CURRENCY", "eur")

        config = LedgerConfig(_env_file=None)

        assert config.api_port == 8123
        assert config.default_currency == "EUR"

    def test_rejects_unsupported_default_currency(self):
        with pytest.raises(SettingsError):
            LedgerConfig(_env_file=None, default_currency="CHF")

    def test_rejects_unknown_log_format(self):
        with pytest.raises(SettingsError):
            LedgerConfig(_env_file=None, log_format="xml")

    def test_reload_config(self, monkeypatch):
        monkeypatch.setenv("LEDGER_LOG_LEVEL", "DEBUG")
        try:
            assert reload_config().log_level == "DEBUG"
            assert get_config().log_level == "DEBUG"
        finally:
            monkeypatch.delenv("LEDGER_LOG_LEVEL")
            reload_config()

    def test_system_uses_configured_currency(self):
        config = LedgerConfig(_env_file=None, default_currency="GBP")
        system = LedgerSystem(config=config)

        account = system.account_manager.create_account(direction=Direction.DEBIT)

        assert account.currency == Currency.GBP


class TestStructuredLogging:

    def test_json_formatter(self):
        logger = logging.getLogger("ledger.test.formatter")
        record = logger.makeRecord(
            logger.name, logging.INFO, __file__, 1, "Transaction created", (), None
        )
        record.action = "create_transaction"
        record.extra = {"entry_count": 2}

        payload = json.loads(JSONFormatter().format(record))

        assert payload["level"] == "INFO"
        assert payload["message"] == "Transaction created"
        assert payload["action"] == "create_transaction"
        assert payload["extra"] == {"entry_count": 2}
        assert "correlation_id" not in payload

    def test_log_action_attaches_fields(self):
        logger = get_logger("ledger.test.actions")
        logger.setLevel(logging.INFO)
        records = []

        class Collector(logging.Handler):
            def emit(self, record):
                records.append(record)

        handler = Collector()
        logger.addHandler(handler)
        try:
            log_action(logger, "info", "Account created",
                       action="create_account", resource="account:a1",
                       extra={"currency": "USD"})
            log_action(logger, "debug", "suppressed")
        finally:
            logger.removeHandler(handler)

        assert len(records) == 1
        assert records[0].action == "create_account"
        assert records[0].resource == "account:a1"
        assert records[0].extra == {"currency": "USD"}

    def test_setup_logging_replaces_handlers(self):
        logger = setup_logging("WARNING", "ledger.test.setup")
        logger = setup_logging("DEBUG", "ledger.test.setup", log_format="text")

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.propagate is False


class TestWorkerSetting:

    def test_single_worker_accepted(self):
        assert LedgerConfig(_env_file=None, api_workers=1).api_workers == 1

    @pytest.mark.parametrize("workers", ["0", "2", "4"])
    def test_multiple_workers_rejected(self, monkeypatch, workers):
        """Test the config refuses to split the ledger across processes"""
        monkeypatch.setenv("LEDGER_API_WORKERS", workers)

        with pytest.raises(SettingsError, match="api_workers must be 1"):
            LedgerConfig(_env_file=None)
