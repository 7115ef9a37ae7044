"""Output formatting and display utilities."""
from datetime import datetime, timezone

from rich.console import Console
from rich.panel import Panel

from truetime.utils.exceptions import (
    TransportError, ResolutionError, TransportTimeoutError,
    ProtocolError, InvalidNtpServerResponseError,
    CacheError, TrueTimeNotInitializedError, CacheNotInitializedError, ValidationError,
)
from . import get_panel_box, CONSOLE_WIDTH


def format_epoch_ms(epoch_ms: int) -> str:
    """Format epoch milliseconds as an ISO-8601 UTC string."""
    dt = datetime.fromtimestamp(epoch_ms / 1000.0, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_offset(offset_ms: int) -> str:
    """Format a signed millisecond offset, switching to seconds past 10s."""
    if abs(offset_ms) >= 10_000:
        return f"{offset_ms / 1000.0:+.3f}s"
    return f"{offset_ms:+d}ms"


class OutputHelper:
    """Output formatting and display utilities."""

    _console = Console()
    PANEL_WIDTH = None

    @staticmethod
    def _get_panel_width():
        """Get panel width."""
        if OutputHelper.PANEL_WIDTH is None:
            OutputHelper.PANEL_WIDTH = CONSOLE_WIDTH
        return OutputHelper.PANEL_WIDTH

    @staticmethod
    def print_panel(content: str, title: str = "", border_style: str = "blue"):
        """Print content in a rich panel box."""
        width = OutputHelper._get_panel_width()
        OutputHelper._console.print(Panel(content, title=title, title_align="left", border_style=border_style, box=get_panel_box(), expand=True, width=width))

    @staticmethod
    def print_sync_result(host: str, response, saved_to: str = None):
        lines = [
            f"Server:      [bright_cyan]{host}[/bright_cyan] (stratum {response.stratum})",
            f"Offset:      [bright_yellow]{format_offset(response.clock_offset)}[/bright_yellow]",
            f"Round trip:  {response.round_trip_delay}ms",
            f"Root delay:  {response.root_delay_ms:.3f}ms  dispersion {response.root_dispersion_ms:.3f}ms",
            f"True time:   [bright_green]{format_epoch_ms(response.true_time)}[/bright_green]",
            f"Local time:  {format_epoch_ms(response.response_time)}",
        ]
        if saved_to:
            lines.append("")
            lines.append(f"[dim]Saved to {saved_to}[/dim]")
        OutputHelper.print_panel("\n".join(lines), title="SNTP", border_style="green")

    @staticmethod
    def handle_error(error: Exception, context: str = "Error") -> bool:
        """
        Handle truetime errors with user-friendly messages.

        Args:
            error: The exception to handle
            context: Context string for the error (e.g., "Sync")

        Returns:
            True if error was handled, False if it should be re-raised
        """
        if isinstance(error, InvalidNtpServerResponseError):
            message = (
                f"{error.message}\n\n"
                f"[dim]check:[/dim] [yellow]{error.check}[/yellow]  "
                f"[dim]actual:[/dim] {error.actual}  [dim]expected:[/dim] {error.expected}"
            )
            OutputHelper.print_panel(message, title="Untrusted Response", border_style="red")
            return True
        if isinstance(error, ResolutionError):
            OutputHelper.print_panel(
                f"{error.message}\n\n[dim]Check the host name or your DNS settings.[/dim]",
                title="Unknown Host",
                border_style="red"
            )
            return True
        if isinstance(error, TransportTimeoutError):
            OutputHelper.print_panel(
                f"{error.message}\n\n[dim]Try a larger [bold]--timeout[/bold] or another server.[/dim]",
                title="Timeout",
                border_style="red"
            )
            return True
        if isinstance(error, (TransportError, ProtocolError)):
            OutputHelper.print_panel(error.message, title=context, border_style="red")
            return True
        if isinstance(error, (TrueTimeNotInitializedError, CacheNotInitializedError)):
            OutputHelper.print_panel(
                "No cached true time for this boot.\n\n"
                "Run [bright_blue]truetime sync[/bright_blue] first.",
                title="Not Synchronized",
                border_style="yellow"
            )
            return True
        if isinstance(error, CacheError):
            OutputHelper.print_panel(error.message, title="Cache", border_style="red")
            return True
        if isinstance(error, ValidationError):
            OutputHelper.print_panel(error.message, title="Invalid Configuration", border_style="red")
            return True

        return False
