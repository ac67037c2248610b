from __future__ import annotations

import json
import logging

import pytest
from agentdefs_core.config import LoggingConfig
from agentdefs_core.errors import ConfigError
from agentdefs_core.logging import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def clean_logger():
    logger = logging.getLogger("agentdefs")
    saved = (logger.handlers[:], logger.level)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])


class TestLogging:
    def test_get_logger_namespace(self):
        assert get_logger("loader.registry").name == "agentdefs.loader.registry"

    def test_defaults(self, clean_logger):
        logger = setup_logging()
        assert logger is clean_logger
        assert logger.level == logging.INFO

    def test_applies_config(self, clean_logger):
        setup_logging(LoggingConfig(level="debug", json=True))

        assert clean_logger.level == logging.DEBUG
        assert isinstance(clean_logger.handlers[-1].formatter, JSONFormatter)

    def test_reconfigure_replaces_handler(self, clean_logger):
        before = len(clean_logger.handlers)
        setup_logging(LoggingConfig(level="DEBUG", json=True))
        setup_logging(LoggingConfig(level="ERROR"))

        assert len(clean_logger.handlers) <= before + 1
        assert clean_logger.level == logging.ERROR
        assert not isinstance(clean_logger.handlers[-1].formatter, JSONFormatter)

    def test_unknown_level(self, clean_logger):
        with pytest.raises(ConfigError, match="logging.level"):
            setup_logging(LoggingConfig(level="LOUD"))

    def test_json_output(self):
        record = logging.LogRecord(
            "agentdefs.test", logging.INFO, __file__, 1, "loaded %d", (3,), None,
        )
        payload = json.loads(JSONFormatter().format(record))
        assert payload["msg"] == "loaded 3"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "agentdefs.test"
        assert "exc" not in payload
