from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class AgentDefsError(Exception):
    """Base exception for all agentdefs errors."""


# ── Config Errors ────────────────────────────────────────────────────

class ConfigError(AgentDefsError):
    """Invalid or missing configuration."""


# ── Agent Definition Errors ─────────────────────────────────────────

class AgentDefinitionError(AgentDefsError):
    """Base for errors raised while loading a single agent definition."""

    def __init__(self, message: str, source_path: Path | None = None) -> None:
        super().__init__(message)
        self.source_path = source_path


class MalformedHeaderError(AgentDefinitionError):
    """Front-matter header is absent, unterminated or not a YAML mapping."""


class MissingRequiredFieldError(AgentDefinitionError):
    """Front-matter header lacks ``name`` or ``description``."""
