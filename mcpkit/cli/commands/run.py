"""Run command for mcpkit CLI."""

import click
from rich.console import Console
from rich.markup import escape

from mcpkit.cli.target import TargetError, load_server
from mcpkit.core.config import LOG_LEVELS


@click.command(name="run")
@click.argument("target")
@click.option(
    "--log-level",
    type=click.Choice(sorted(LOG_LEVELS), case_sensitive=False),
    default=None,
    help="Log level for stderr output",
)
@click.option(
    "--max-concurrency",
    type=click.IntRange(1, 64),
    default=None,
    help="Requests handled at once (1 keeps strict arrival order)",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Per-call handler timeout in seconds",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def run(
    ctx: click.Context,
    target: str,
    log_level: str | None,
    max_concurrency: int | None,
    timeout: float | None,
    debug: bool,
):
    """Serve an MCP server over stdin/stdout.

    TARGET is module:attribute or path/to/file.py:attribute; the attribute
    defaults to `server`.

    \b
    EXAMPLES:
      mcpkit run examples/echo_server.py
      mcpkit run myapp.mcp:server --max-concurrency 4
      mcpkit run myapp.mcp:create_server --timeout 30
    """
    console = Console(stderr=True, soft_wrap=True)

    try:
        server = load_server(target)
    except TargetError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        ctx.exit(2)

    overrides = {}
    if log_level is not None:
        overrides["log_level"] = log_level.upper()
    if max_concurrency is not None:
        overrides["max_concurrency"] = max_concurrency
    if timeout is not None:
        overrides["handler_timeout"] = timeout
    if debug:
        overrides["debug"] = True
    if overrides:
        server.config = server.config.model_copy(update=overrides)

    server.run()
