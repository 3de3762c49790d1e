"""Main CLI entry point for unbound-webhook."""

import asyncio
import logging
from enum import Enum

import typer
from rich.console import Console
from rich.logging import RichHandler

from unbound_webhook.core.errors import ConfigurationError, WebhookError

app = typer.Typer(
    name="unbound-webhook",
    help="external-dns webhook provider for Unbound local data",
    no_args_is_help=True,
)

console = Console()
logger = logging.getLogger("unbound_webhook")


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class GlobalOptions:
    def __init__(self):
        self.output: OutputFormat = OutputFormat.TABLE
        self.log_level: LogLevel = LogLevel.INFO


def setup_logging(level: LogLevel) -> None:
    logging.basicConfig(
        level=level.value,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.command("serve")
def serve():
    """Run the webhook and health servers until SIGINT/SIGTERM."""
    from unbound_webhook.cli.commands.serve import serve as run_serve

    try:
        run_serve()
    except ConfigurationError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)


@app.command("records")
def records(ctx: typer.Context):
    """List the records the provider reports to external-dns."""
    from unbound_webhook.cli.commands.records import show

    try:
        asyncio.run(show(ctx.obj))
    except WebhookError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(code=1)


@app.command("config")
def config(ctx: typer.Context):
    """Show the effective configuration read from the environment."""
    from unbound_webhook.cli.commands.config import show

    try:
        show(ctx.obj)
    except ConfigurationError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(code=1)


@app.command("version")
def version():
    """Show version information."""
    from unbound_webhook import __version__

    console.print(f"unbound-webhook version {__version__}")


@app.callback()
def main(
    ctx: typer.Context,
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE, "--output", "-o", help="Output format"
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.INFO, "--log-level", envvar="LOG_LEVEL", case_sensitive=False, help="Log level"
    ),
):
    """Unbound webhook provider for external-dns."""
    ctx.ensure_object(GlobalOptions)
    ctx.obj.output = output
    ctx.obj.log_level = log_level
    setup_logging(log_level)


if __name__ == "__main__":
    app()
