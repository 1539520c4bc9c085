"""
Tests for configuration and structured logging
"""

import json
import logging

from account_ledger.api.dependencies import LedgerSystem
from account_ledger.config import LedgerConfig, get_config, reload_config
from account_ledger.logging_config import JSONFormatter, log_action, setup_logging
from account_ledger.storage import InMemoryStorage, JSONFileStorage


class TestLedgerConfig:
    """Test environment-driven configuration"""
    
    def test_defaults(self, monkeypatch):
        """Defaults describe a JSON-backed ledger that resets to empty"""
        for name in ("LEDGER_DATA_FILE", "LEDGER_STORAGE_BACKEND", "LEDGER_SEED_ACCOUNTS"):
            monkeypatch.delenv(name, raising=False)
        config = LedgerConfig()
        assert config.storage_backend == "json"
        assert config.data_file == "var/data/accounts.json"
        assert config.seed_accounts == []
        assert config.api_port == 8090
    
    def test_environment_overrides(self, monkeypatch):
        """LEDGER_ prefixed variables override defaults"""
        monkeypatch.setenv("LEDGER_DATA_FILE", "/tmp/ledger.json")
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("LEDGER_SEED_ACCOUNTS", '["100", "300"]')
        monkeypatch.setenv("LEDGER_API_PORT", "9000")
        
        config = LedgerConfig()
        assert config.data_file == "/tmp/ledger.json"
        assert config.storage_backend == "memory"
        assert config.seed_accounts == ["100", "300"]
        assert config.api_port == 9000
    
    def test_reload_config(self, monkeypatch):
        """reload_config replaces the global instance"""
        monkeypatch.setenv("LEDGER_LOG_LEVEL", "DEBUG")
        try:
            config = reload_config()
            assert config.log_level == "DEBUG"
            assert get_config() is config
        finally:
            monkeypatch.delenv("LEDGER_LOG_LEVEL")
            reload_config()


class TestLedgerSystem:
    """Test wiring from configuration"""
    
    def test_memory_backend(self):
        """The memory backend needs no file"""
        system = LedgerSystem(LedgerConfig(storage_backend="memory"))
        assert isinstance(system.storage, InMemoryStorage)
        assert system.ledger.accounts() == {}
    
    def test_json_backend_loads_existing_file(self, tmp_path):
        """The JSON backend loads balances from the configured file"""
        path = tmp_path / "accounts.json"
        path.write_text('{"A": 7}', encoding="utf-8")
        
        system = LedgerSystem(LedgerConfig(data_file=str(path)))
        assert isinstance(system.storage, JSONFileStorage)
        assert system.ledger.get_balance("A") == 7


class TestLogging:
    """Test structured logging helpers"""
    
    def test_json_formatter(self):
        """Records are rendered as JSON with custom fields"""
        record = logging.LogRecord("account_ledger.ledger", logging.INFO, __file__, 1,
                                   "Deposit applied", (), None)
        record.action = "deposit"
        record.resource = "A"
        record.extra = {"amount": 5}
        
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "INFO"
        assert entry["message"] == "Deposit applied"
        assert entry["action"] == "deposit"
        assert entry["resource"] == "A"
        assert entry["extra"] == {"amount": 5}
    
    def test_json_formatter_drops_empty_fields(self):
        """Fields that were not set are omitted"""
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "plain", (), None)
        entry = json.loads(JSONFormatter().format(record))
        assert "action" not in entry
        assert "resource" not in entry
    
    def test_setup_logging_replaces_handlers(self):
        """Repeated setup keeps a single handler"""
        setup_logging(level="DEBUG", logger_name="ledger_test")
        logger = setup_logging(level="WARNING", log_format="text", logger_name="ledger_test")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
    
    def test_log_action_attaches_fields(self):
        """log_action passes structured fields to handlers"""
        records = []
        
        class ListHandler(logging.Handler):
            def emit(self, record):
                records.append(record)
        
        logger = logging.getLogger("ledger_test_actions")
        logger.handlers = [ListHandler()]
        logger.setLevel(logging.INFO)
        logger.propagate = False
        
        log_action(logger, "info", "Withdrawal applied", action="withdraw",
                   resource="B", extra={"amount": 3})
        log_action(logger, "debug", "filtered out")
        
        assert len(records) == 1
        assert records[0].action == "withdraw"
        assert records[0].resource == "B"
        assert records[0].extra == {"amount": 3}
