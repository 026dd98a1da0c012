"""Inspect command for mcpkit CLI."""

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mcpkit.cli.target import TargetError, load_server
from mcpkit.logic.mcp.models.registry_entry import EntryKind


@click.command(name="inspect")
@click.argument("target")
@click.option("--json", "as_json", is_flag=True, help="Output in JSON format")
@click.pass_context
def inspect_command(ctx: click.Context, target: str, as_json: bool):
    """Show the tools, prompts and resources a server registers."""
    error_console = Console(stderr=True, soft_wrap=True)
    console = Console()

    try:
        server = load_server(target)
    except TargetError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        ctx.exit(2)

    registry = server.registry
    tools = [entry.to_metadata().to_wire() for entry in registry.list(EntryKind.TOOL)]
    prompts = [entry.to_metadata().to_wire() for entry in registry.list(EntryKind.PROMPT)]
    resources = [entry.to_metadata().to_wire() for entry in registry.list(EntryKind.RESOURCE)]

    if as_json:
        click.echo(json.dumps({
            "serverInfo": {"name": server.name, "version": server.version},
            "capabilities": server.build_capabilities().to_wire(),
            "tools": tools,
            "prompts": prompts,
            "resources": resources,
        }, indent=2))
        return

    console.print(f"[bold]{escape(server.name)}[/bold] v{escape(server.version)}\n")

    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Parameters", style="dim")
    for tool in tools:
        properties = tool["inputSchema"].get("properties", {})
        required = set(tool["inputSchema"].get("required", []))
        params = ", ".join(
            f"{name}: {prop['type']}" + ("" if name in required else "?")
            for name, prop in properties.items()
        )
        table.add_row(escape(tool["name"]), escape(tool.get("description", "")), escape(params))
    console.print(table)

    table = Table(title="Prompts")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Arguments", style="dim")
    for prompt in prompts:
        args = ", ".join(
            arg["name"] + ("" if arg.get("required") else "?") for arg in prompt.get("arguments", [])
        )
        table.add_row(escape(prompt["name"]), escape(prompt.get("description", "")), escape(args))
    console.print(table)

    table = Table(title="Resources")
    table.add_column("URI", style="cyan")
    table.add_column("Name")
    table.add_column("MIME type", style="dim")
    for resource in resources:
        table.add_row(escape(resource["uri"]), escape(resource["name"]), resource.get("mimeType", ""))
    console.print(table)
