"""
Top-level CLI commands: start, generate-key.
"""

import os
from typing import Optional

import typer


def configure_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    from nodehub.logger import setup_logging

    log_level = "DEBUG" if verbose else "WARNING"
    setup_logging(level=log_level)

    if verbose:
        os.environ["LOG_LEVEL"] = "DEBUG"


def register_commands(app: typer.Typer):
    """Attach the top-level commands to the CLI app."""

    @app.command()
    def start(
        host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
        port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on"),
    ):
        """Start the nodehub server."""
        from nodehub.config import CONFIG
        from nodehub.server import main as run_server

        CONFIG.reload()
        run_server(host=host, port=port)

    @app.command("generate-key")
    def generate_key():
        """Print a new random API key for NODEHUB_API_KEYS."""
        from nodehub.middleware import generate_api_key

        typer.echo(generate_api_key())
