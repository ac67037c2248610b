"""MCP tool server exposing agent definitions and agent-type validation."""
from __future__ import annotations

import json
from typing import TYPE_CHECKING

from agentdefs_loader.aliases import is_legacy_agent_type, resolve_legacy_agent_type
from agentdefs_loader.schema import AgentTypeAdapter
from fastmcp import FastMCP

if TYPE_CHECKING:
    from agentdefs_loader.registry import AgentRegistry

_PREVIEW_CHARS = 500


def create_agents_server(registry: AgentRegistry) -> FastMCP:
    """Build a FastMCP server whose tools query *registry*."""
    server = FastMCP("agentdefs")

    @server.tool()
    async def list_agents() -> str:
        """List all available agent definitions with name, category, and description."""
        return await render_agent_list(registry)

    @server.tool()
    async def get_agent_info(agent_name: str) -> str:
        """Get detailed information about a specific agent definition.

        Args:
            agent_name: The exact name of the agent.
        """
        return await render_agent_info(registry, agent_name)

    @server.tool()
    async def list_agent_categories() -> str:
        """List agent categories and the agents in each."""
        return await render_categories(registry)

    @server.tool()
    async def validate_agent_type(agent_type: str) -> str:
        """Check whether an agent type is valid, resolving legacy names first.

        Args:
            agent_type: The agent type to check (current or legacy name).
        """
        return await render_validation(registry, agent_type)

    @server.tool()
    async def agent_type_schema() -> str:
        """Return the JSON Schema for an agent-type parameter."""
        schema = await AgentTypeAdapter(registry).get_agent_type_schema()
        return json.dumps(schema, indent=2)

    return server


async def render_agent_list(registry: AgentRegistry) -> str:
    agents = await registry.list_all()

    if not agents:
        return "No agent definitions discovered."

    lines: list[str] = [f"Found {len(agents)} agent(s):\n"]
    for a in agents:
        caps = ", ".join(a.capabilities) if a.capabilities else "(none)"
        lines.append(f"- **{a.name}** [{a.category}]")
        lines.append(f"  {a.description}")
        lines.append(f"  Capabilities: {caps}")
        lines.append("")

    return "\n".join(lines)


async def render_agent_info(registry: AgentRegistry, agent_name: str) -> str:
    agent = await registry.get(agent_name)

    if agent is None:
        agents = await registry.list_all()
        if not agents:
            return "No agent definitions discovered."
        available = ", ".join(a.name for a in agents)
        return (
            f"Agent '{agent_name}' not found. "
            f"Available agents: {available}"
        )

    caps = ", ".join(agent.capabilities) if agent.capabilities else "(none)"
    tools = ", ".join(agent.tools) if agent.tools else "(none)"
    preview = agent.body[:_PREVIEW_CHARS] if agent.body else "(no instructions)"
    if len(agent.body) > _PREVIEW_CHARS:
        preview += "..."

    lines: list[str] = [
        f"# {agent.name}\n",
        f"**Description:** {agent.description}",
        f"**Category:** {agent.category}",
        f"**Capabilities:** {caps}",
        f"**Tools:** {tools}",
        f"**Model:** {agent.model or '(default)'}",
        f"**Priority:** {agent.priority or '(none)'}",
        f"**Source:** {agent.source_path}",
        "\n## Instructions preview\n",
        preview,
    ]

    return "\n".join(lines)


async def render_categories(registry: AgentRegistry) -> str:
    categories = await registry.get_categories()

    if not categories:
        return "No agent definitions discovered."

    lines: list[str] = []
    for category, agents in categories.items():
        lines.append(f"## {category} ({len(agents)})")
        lines.extend(f"- {a.name}" for a in agents)
        lines.append("")

    return "\n".join(lines)


async def render_validation(registry: AgentRegistry, agent_type: str) -> str:
    adapter = AgentTypeAdapter(registry)
    resolved = resolve_legacy_agent_type(agent_type)

    if await adapter.is_valid_agent_type(resolved):
        if is_legacy_agent_type(agent_type):
            return (
                f"'{agent_type}' is a legacy agent type; "
                f"use '{resolved}' instead."
            )
        return f"'{agent_type}' is a valid agent type."

    valid = await adapter.get_valid_agent_types()
    listing = ", ".join(valid) if valid else "(none)"
    return f"'{agent_type}' is not a valid agent type. Valid types: {listing}"
