"""Agent type validation and JSON Schema generation for tool registration."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from agentdefs_loader.registry import AgentRegistry

AGENT_TYPE_DESCRIPTION = "Type of specialized AI agent"


class AgentTypeAdapter:
    """Answers agent-type questions from the registry's current definitions.

    Nothing is cached here; every call goes through the registry, so the
    answers follow the registry's own snapshot and expiry.  Legacy aliases
    are not valid types: resolve them with
    :func:`~agentdefs_loader.aliases.resolve_legacy_agent_type` first.
    """

    def __init__(self, registry: AgentRegistry) -> None:
        self._registry = registry

    async def get_valid_agent_types(self) -> list[str]:
        return [d.name for d in await self._registry.list_all()]

    async def is_valid_agent_type(self, agent_type: str) -> bool:
        return agent_type in await self.get_valid_agent_types()

    async def get_agent_type_schema(self) -> dict[str, Any]:
        """JSON Schema for an agent-type tool parameter."""
        return {
            "type": "string",
            "enum": await self.get_valid_agent_types(),
            "description": AGENT_TYPE_DESCRIPTION,
        }
