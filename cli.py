"""
CLI tool for the signaling relay.

Provides commands for running the relay and for viewing the signaling
message types together with their registered handlers.
"""

import logging
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from signaling.constants import MESSAGE_DIRECTIONS, MessageType
from signaling.routing import message_router
from signaling.settings import app_settings
from signaling.uvicorn_filters import ExcludePathsFilter

# Initialize Typer app with help text
typer_app = typer.Typer(
    name="signaling-relay",
    help="WebRTC signaling relay - run the server and inspect its protocol",
    add_completion=False,
)
console = Console()


@typer_app.command(name="serve")
def serve(
    host: Optional[str] = typer.Option(
        None, help="Interface to bind (default: HOST setting)"
    ),
    port: Optional[int] = typer.Option(
        None, help="Port to bind (default: PORT setting)"
    ),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """
    Run the signaling relay with uvicorn.

    Example:
        python cli.py serve --port 8181
    """
    host = host or app_settings.HOST
    port = port or app_settings.PORT

    logging.getLogger("uvicorn.access").addFilter(ExcludePathsFilter())

    console.print(
        Panel.fit(
            f"[bold cyan]Signaling relay[/bold cyan] listening on "
            f"ws://{host}:{port}{app_settings.WS_PATH}",
            border_style="cyan",
        )
    )
    uvicorn.run(
        "signaling:application",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


@typer_app.command(name="message-types")
def message_types():
    """
    Display a table of all signaling message types.

    Shows each type, its direction and the handler registered for inbound
    types. Outbound-only types have no handler.

    Example:
        python cli.py message-types
    """
    table = Table(
        "Type",
        "Direction",
        "Handler Path",
        title="Signaling Message Types",
        show_lines=True,
    )

    for message_type in MessageType:
        handler = message_router.handlers_registry.get(message_type)
        handler_path = (
            f"{handler.__module__}.[yellow]{handler.__name__}[/yellow]"
            if handler
            else "[dim]outbound only[/dim]"
        )
        table.add_row(
            f"[green]{message_type.value}[/green]",
            MESSAGE_DIRECTIONS[message_type],
            handler_path,
        )

    console.print(table)
    console.print(
        f"[bold]Summary:[/bold] {len(message_router.handlers_registry)}/"
        f"{len(MessageType)} message types handled inbound"
    )


if __name__ == "__main__":
    typer_app()
