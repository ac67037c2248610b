"""Logging for the agentdefs packages.

All loggers live under the ``agentdefs`` namespace; :func:`setup_logging`
applies the ``[logging]`` config section to that tree in one call.
"""
from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING

from agentdefs_core.errors import ConfigError

if TYPE_CHECKING:
    from agentdefs_core.config import LoggingConfig

ROOT_LOGGER = "agentdefs"

_PLAIN_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"

# Handler installed by the last setup_logging call, replaced on the next one.
_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, msg and exc if any."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": record.created,
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        msg = f"logging.level must be a standard level name, got {name!r}"
        raise ConfigError(msg)
    return level


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Apply *config* to the ``agentdefs`` logger and return it.

    Logs go to stderr so command output on stdout stays clean.  Calling
    again swaps the previous handler out, so the level and format always
    reflect the latest config.

    Raises:
        ConfigError: If ``config.level`` is not a standard level name.
    """
    global _handler

    level = _resolve_level(config.level if config is not None else "INFO")
    json_output = config.json if config is not None else False

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT, datefmt="%H:%M:%S"))

    if _handler is not None:
        logger.removeHandler(_handler)
    logger.addHandler(handler)
    _handler = handler
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the agentdefs namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
