"""agentdefs core: shared config, errors, and logging."""
from __future__ import annotations

from agentdefs_core.config import AgentDefsConfig, LoaderConfig, LoggingConfig
from agentdefs_core.errors import (
    AgentDefinitionError,
    AgentDefsError,
    ConfigError,
    MalformedHeaderError,
    MissingRequiredFieldError,
)
from agentdefs_core.logging import get_logger, setup_logging

__version__ = "0.1.0"

__all__ = [
    # Config
    "AgentDefsConfig",
    # Errors
    "AgentDefinitionError",
    "AgentDefsError",
    "ConfigError",
    "LoaderConfig",
    "LoggingConfig",
    "MalformedHeaderError",
    "MissingRequiredFieldError",
    # Version
    "__version__",
    # Logging
    "get_logger",
    "setup_logging",
]
