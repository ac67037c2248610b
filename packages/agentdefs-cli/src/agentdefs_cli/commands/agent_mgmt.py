"""Agent management commands: list, info, categories, check, schema, diagnostics."""
from __future__ import annotations

import asyncio
import json

import typer
from agentdefs_core.config import AgentDefsConfig
from agentdefs_loader import (
    AgentRegistry,
    AgentTypeAdapter,
    is_legacy_agent_type,
    resolve_legacy_agent_type,
)
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

console = Console()

agent_app = typer.Typer(
    no_args_is_help=True,
)


def _build_registry(config: AgentDefsConfig | None, root: str | None) -> AgentRegistry:
    """Build an AgentRegistry from project config, optionally overriding the root.

    *config* is the one loaded by ``main()``; it is only loaded here when
    the app is invoked without it.
    """
    if config is None:
        config = AgentDefsConfig.load()
    return AgentRegistry.from_config(config, root=root)


@agent_app.callback()
def agent_options(
    ctx: typer.Context,
    root: str | None = typer.Option(
        None,
        "--root",
        "-r",
        help="Agents directory to scan (default: loader.agents_dir from config)",
    ),
) -> None:
    """Inspect agent definitions."""
    ctx.obj = _build_registry(ctx.obj, root)


@agent_app.command("list")
def agent_list(ctx: typer.Context) -> None:
    """List all discovered agent definitions."""
    registry: AgentRegistry = ctx.obj
    agents = asyncio.run(registry.list_all())

    if not agents:
        console.print(
            "[yellow]No agents found.[/yellow] "
            f"Place agent markdown files under {escape(str(registry.root))}."
        )
        raise typer.Exit(0)

    table = Table(
        title="Discovered Agents",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Category", no_wrap=True)
    table.add_column("Description")

    for agent in agents:
        table.add_row(
            escape(agent.name), escape(agent.category), escape(agent.description),
        )

    console.print(table)
    console.print(f"\n[dim]{len(agents)} agent(s) found.[/dim]")


@agent_app.command("info")
def agent_info(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the agent to inspect"),
) -> None:
    """Show detailed information about an agent definition."""
    registry: AgentRegistry = ctx.obj
    match = asyncio.run(registry.get(name))

    if match is None:
        console.print(f"[red]Agent not found:[/red] '{escape(name)}'")
        available = [escape(a.name) for a in asyncio.run(registry.list_all())]
        if available:
            console.print(
                f"[dim]Available agents: {', '.join(sorted(available))}[/dim]"
            )
        raise typer.Exit(1)

    meta_lines = [
        f"[bold]Name:[/bold]          {escape(match.name)}",
        f"[bold]Category:[/bold]      {escape(match.category)}",
        f"[bold]Description:[/bold]   {escape(match.description)}",
    ]

    if match.capabilities:
        meta_lines.append(
            f"[bold]Capabilities:[/bold]  {escape(', '.join(match.capabilities))}"
        )

    if match.tools:
        meta_lines.append(
            f"[bold]Tools:[/bold]         {escape(', '.join(match.tools))}"
        )

    if match.model:
        meta_lines.append(f"[bold]Model:[/bold]         {escape(match.model)}")

    meta_lines.append(f"[bold]Source:[/bold]        {escape(str(match.source_path))}")

    console.print(Panel(
        "\n".join(meta_lines),
        title=f"Agent: {escape(match.name)}",
        border_style="cyan",
    ))

    if match.body:
        preview = match.body
        if len(preview) > 500:
            preview = preview[:500] + "\n\n... (truncated)"
        console.print()
        console.print(Panel(
            Syntax(preview, "markdown", theme="monokai", word_wrap=True),
            title="Instructions (preview)",
            border_style="dim",
        ))
    else:
        console.print("\n[dim]No instructions body defined.[/dim]")


@agent_app.command("categories")
def agent_categories(ctx: typer.Context) -> None:
    """List agent categories and their agents."""
    registry: AgentRegistry = ctx.obj
    categories = asyncio.run(registry.get_categories())

    if not categories:
        console.print("[yellow]No agents found.[/yellow]")
        raise typer.Exit(0)

    for category, agents in categories.items():
        console.print(f"[bold cyan]{escape(category)}[/bold cyan] ({len(agents)})")
        for agent in agents:
            console.print(f"  - {escape(agent.name)}")


@agent_app.command("check")
def agent_check(
    ctx: typer.Context,
    agent_type: str = typer.Argument(..., help="Agent type to validate"),
) -> None:
    """Check whether an agent type is valid, resolving legacy names."""
    adapter = AgentTypeAdapter(ctx.obj)
    resolved = resolve_legacy_agent_type(agent_type)

    if not asyncio.run(adapter.is_valid_agent_type(resolved)):
        console.print(f"[red]Invalid agent type:[/red] '{escape(agent_type)}'")
        raise typer.Exit(1)

    if is_legacy_agent_type(agent_type):
        console.print(
            f"[yellow]Legacy agent type[/yellow] '{escape(agent_type)}' "
            f"resolves to [bold]{escape(resolved)}[/bold]"
        )
    else:
        console.print(f"[green]OK[/green]  {escape(agent_type)}")


@agent_app.command("schema")
def agent_schema(ctx: typer.Context) -> None:
    """Print the JSON Schema for an agent-type parameter."""
    schema = asyncio.run(AgentTypeAdapter(ctx.obj).get_agent_type_schema())
    console.print_json(json.dumps(schema))


@agent_app.command("diagnostics")
def agent_diagnostics(ctx: typer.Context) -> None:
    """Report files that were skipped while loading agent definitions."""
    registry: AgentRegistry = ctx.obj
    diagnostics = asyncio.run(registry.diagnostics())

    if not diagnostics:
        console.print("[green]No problems found.[/green]")
        return

    for diag in diagnostics:
        console.print(f"  [red]{diag.kind.value}[/red]  {escape(diag.message)}")
