from __future__ import annotations

import typer
from agentdefs_core.config import AgentDefsConfig
from agentdefs_core.logging import setup_logging

from agentdefs_cli.commands.agent_mgmt import agent_app

app = typer.Typer(
    name="agentdefs",
    help="agentdefs: inspect agent definitions",
    no_args_is_help=True,
)

app.add_typer(agent_app, name="agent", help="Inspect agent definitions")


@app.command()
def version() -> None:
    """Print the installed version."""
    from agentdefs_core import __version__

    typer.echo(__version__)


def main() -> None:
    config = AgentDefsConfig.load()
    setup_logging(config.logging)
    app(obj=config)


if __name__ == "__main__":
    main()
