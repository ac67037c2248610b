"""Agent definition system: discovery, parsing, caching, and lookup."""
from __future__ import annotations

from agentdefs_loader.aliases import (
    LEGACY_AGENT_MAPPING,
    is_legacy_agent_type,
    resolve_legacy_agent_type,
)
from agentdefs_loader.cache import DefinitionCache
from agentdefs_loader.parser import parse_agent_md, parse_agent_text
from agentdefs_loader.registry import AgentRegistry
from agentdefs_loader.scanner import DirectoryScanner, derive_category
from agentdefs_loader.schema import AgentTypeAdapter
from agentdefs_loader.types import (
    AgentDefinition,
    Diagnostic,
    DiagnosticKind,
    ParseResult,
    RegistrySnapshot,
)

__all__ = [
    "LEGACY_AGENT_MAPPING",
    "AgentDefinition",
    "AgentRegistry",
    "AgentTypeAdapter",
    "DefinitionCache",
    "Diagnostic",
    "DiagnosticKind",
    "DirectoryScanner",
    "ParseResult",
    "RegistrySnapshot",
    "derive_category",
    "is_legacy_agent_type",
    "parse_agent_md",
    "parse_agent_text",
    "resolve_legacy_agent_type",
]
