"""Legacy agent type names and their current replacements."""
from __future__ import annotations

from types import MappingProxyType

LEGACY_AGENT_MAPPING = MappingProxyType({
    "analyst": "code-analyzer",
    "coordinator": "task-orchestrator",
    "optimizer": "perf-analyzer",
    "documenter": "api-docs",
    "monitor": "performance-benchmarker",
    "specialist": "system-architect",
    "architect": "system-architect",
})


def resolve_legacy_agent_type(agent_type: str) -> str:
    """Map a deprecated agent type to its replacement, else return it unchanged."""
    return LEGACY_AGENT_MAPPING.get(agent_type, agent_type)


def is_legacy_agent_type(agent_type: str) -> bool:
    return agent_type in LEGACY_AGENT_MAPPING
