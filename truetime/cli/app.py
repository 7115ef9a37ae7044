import sys
import logging
from typing import Optional

import typer
import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from truetime import __version__
from .helpers import OutputHelper, get_panel_box, CONSOLE_WIDTH
from .config import GLOBAL_OPTIONS


def _handle_usage_error(e):
    console = Console(width=CONSOLE_WIDTH, file=sys.stderr)

    error_msg = str(e.format_message()) if hasattr(e, 'format_message') else str(e)

    cmd_name = None
    if e.ctx and e.ctx.info_name and e.ctx.info_name != 'truetime':
        cmd_name = e.ctx.info_name

    error_lines = []
    if cmd_name:
        error_lines.append(f"[bold cyan]Usage:[/bold cyan] truetime {cmd_name} [OPTIONS] [ARGS]...")
    else:
        error_lines.append("[bold cyan]Usage:[/bold cyan] truetime [OPTIONS] COMMAND [ARGS]...")
    error_lines.append("")
    error_lines.append(f"[red]{error_msg}[/red]")

    console.print(Panel(
        "\n".join(error_lines),
        title="Error",
        border_style="red",
        box=get_panel_box(),
        width=CONSOLE_WIDTH
    ))


def _configure_logging(verbose: bool):
    root = logging.getLogger("truetime")
    if verbose:
        if not any(isinstance(h, RichHandler) for h in root.handlers):
            root.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(logging.WARNING)


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=False,
    pretty_exceptions_show_locals=False,
    pretty_exceptions_enable=False,
    help="SNTP client: measure this machine's clock offset and keep true time."
)


def _print_main_help():
    lines = []
    lines.append("[bold]Network-corrected time from a single SNTP exchange[/bold]")
    lines.append("[dim]Query a time server, check that its reply can be trusted, and cache true time[/dim]")
    lines.append("")
    lines.append("[bold cyan]Usage:[/bold cyan]")
    lines.append("  truetime [yellow][OPTIONS][/yellow] [green]COMMAND[/green] [[dim]ARGS[/dim]]...")
    lines.append("")
    lines.append("[bold cyan]Global Options:[/bold cyan]")
    lines.append("  [yellow]-c, --config[/yellow] [cyan]PATH[/cyan]     Settings file [dim](default: nearest .truetime)[/dim]")
    lines.append("  [yellow]-v, --verbose[/yellow]         Log exchanges to stderr")
    lines.append("  [yellow]--version[/yellow]             Show version and exit")
    lines.append("")
    lines.append("[bold cyan]Commands:[/bold cyan]")
    for cmd, desc in (
        ("sync", "Query an SNTP server and cache the corrected time"),
        ("now", "Show true time rebuilt from the cache, without the network"),
        ("clear", "Delete the cached true time"),
        ("version", "Show truetime version information"),
    ):
        lines.append(f"  [green]{cmd:<12}[/green] {desc}")
    lines.append("")
    lines.append("[dim]Use 'truetime COMMAND --help' for detailed help on each command.[/dim]")

    OutputHelper.print_panel(
        "\n".join(lines),
        title="truetime",
        border_style="bright_blue"
    )


# =============================================================================
# App Callback
# =============================================================================

@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config", "-c",
        help="Path to a .truetime settings file",
        is_eager=True
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Log exchanges to stderr"
    ),
    show_version: bool = typer.Option(
        False,
        "--version",
        is_eager=True,
        help="Show version and exit."
    ),
):
    """
    SNTP client: measure this machine's clock offset and keep true time.
    """
    GLOBAL_OPTIONS.set(config, verbose)
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj['config'] = config
    ctx.obj['verbose'] = verbose

    if show_version:
        OutputHelper.print_panel(
            f"[bright_blue]truetime[/bright_blue] version [bright_green]{__version__}[/bright_green]",
            title="Version",
            border_style="green"
        )
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        _print_main_help()
        raise typer.Exit()


# =============================================================================
# Import all commands to register them with the app
# =============================================================================
from .commands import sync, cache, utility

# These imports are for side-effect (command registration)
_command_modules = (sync, cache, utility)


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    try:
        # With standalone_mode off, typer.Exit codes come back as the return value
        rv = app(standalone_mode=False)
        exit_code = rv if isinstance(rv, int) else 0
    except click.exceptions.UsageError as e:
        _handle_usage_error(e)
        exit_code = 2
    except click.exceptions.Abort:
        print()
        exit_code = 1
    except KeyboardInterrupt:
        print()
        exit_code = 130
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
