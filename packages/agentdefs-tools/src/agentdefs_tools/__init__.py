"""agentdefs tools: MCP server wiring for the agent registry."""
from __future__ import annotations

from agentdefs_tools.agents_server import create_agents_server

__all__ = ["create_agents_server"]
