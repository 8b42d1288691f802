"""
nodehub CLI.

This package splits CLI commands into focused modules:
- main:   start, generate-key
- nodes:  list, get, create, update, delete
"""

import typer

from nodehub.cli.main import configure_logging, register_commands
from nodehub.cli.nodes import nodes_app

app = typer.Typer(help="nodehub - manage nodes and their clients")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    nodehub - manage nodes and their clients.
    """
    configure_logging(verbose)


register_commands(app)

app.add_typer(nodes_app, name="nodes")

if __name__ == "__main__":
    app()
