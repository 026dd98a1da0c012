"""Main CLI entry point for mcpkit."""

import click

from mcpkit.cli.commands.inspect import inspect_command
from mcpkit.cli.commands.run import run
from mcpkit.version import __version__


@click.group()
@click.version_option(__version__, "--version", "-v", prog_name="mcpkit", help="Show version and exit")
def main():
    """mcpkit - serve Model Context Protocol tools, prompts and resources.

    \b
    QUICK START:
      mcpkit run examples/echo_server.py         # Serve over stdio
      mcpkit inspect examples/echo_server.py     # Show what a server registers
    """


main.add_command(run)
main.add_command(inspect_command)

# CLI alias
cli = main

if __name__ == "__main__":
    main()
