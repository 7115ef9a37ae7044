from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from truetime.storage import FileCache
from truetime.truetime import TrueTime
from truetime.utils.exceptions import TrueTimeException
from ..config import SyncSettings
from ..helpers import OutputHelper, get_panel_box, CONSOLE_WIDTH
from ..app import app
from . import _load_settings, _exit_with_error


def _create_truetime(settings: SyncSettings, save: bool = True) -> TrueTime:
    tt = (TrueTime()
          .with_ntp_host(settings.host, settings.port)
          .with_connection_timeout(settings.timeout)
          .with_root_delay_max(settings.root_delay_max)
          .with_root_dispersion_max(settings.root_dispersion_max)
          .with_server_response_delay_max(settings.server_response_delay_max)
          .with_retry_count(settings.retries))
    if save:
        tt.with_shared_preferences_cache(FileCache(settings.cache_file))
    return tt


def _print_sync_help():
    console = Console(width=CONSOLE_WIDTH)
    help_text = """\
Query an SNTP server once and cache the corrected time.

The reply is rejected when the server reports a root delay or dispersion
above the limits, a mode other than server/broadcast, a stratum outside
1..15, an unsynchronized leap indicator, or a response delay above the limit.

[bold cyan]Usage:[/bold cyan]
  truetime sync [yellow][HOST][/yellow] [[cyan]OPTIONS[/cyan]]

[bold cyan]Options:[/bold cyan]
  -t, --timeout [green]MS[/green]                     Receive timeout [dim](default: 30000)[/dim]
  --root-delay-max [green]MS[/green]                  [dim](default: 100)[/dim]
  --root-dispersion-max [green]MS[/green]             [dim](default: 100)[/dim]
  --server-response-delay-max [green]MS[/green]       [dim](default: 750)[/dim]
  -r, --retries [green]N[/green]                      Extra attempts after a failure [dim](default: 0)[/dim]
  --no-save                             Do not write the result to the cache file

[bold cyan]Examples:[/bold cyan]
  truetime sync                         [dim]# Default server (1.us.pool.ntp.org)[/dim]
  truetime sync time.google.com -r 2    [dim]# Up to three attempts[/dim]
  truetime sync 10.0.0.1:1123 -t 2000   [dim]# Custom port, 2s timeout[/dim]"""
    console.print(Panel(help_text, border_style="dim", box=get_panel_box(), width=CONSOLE_WIDTH))


@app.command(name="sync")
def sync_cmd(
    host: Optional[str] = typer.Argument(None, help="Time server host[:port]"),
    timeout: Optional[int] = typer.Option(None, "--timeout", "-t", help="Receive timeout in milliseconds"),
    root_delay_max: Optional[float] = typer.Option(None, "--root-delay-max", help="Maximum root delay (ms)"),
    root_dispersion_max: Optional[float] = typer.Option(None, "--root-dispersion-max", help="Maximum root dispersion (ms)"),
    server_response_delay_max: Optional[float] = typer.Option(
        None, "--server-response-delay-max", help="Maximum server response delay (ms)"
    ),
    retries: Optional[int] = typer.Option(None, "--retries", "-r", help="Extra attempts after a failure"),
    no_save: bool = typer.Option(False, "--no-save", help="Do not write the result to the cache file"),
    show_help: bool = typer.Option(False, "--help", "-h", is_eager=True, hidden=True),
):
    """
    Query an SNTP server and cache the corrected time.
    """
    if show_help:
        _print_sync_help()
        raise typer.Exit()

    try:
        settings = _load_settings({
            'host': host,
            'timeout': timeout,
            'root_delay_max': root_delay_max,
            'root_dispersion_max': root_dispersion_max,
            'server_response_delay_max': server_response_delay_max,
            'retries': retries,
        })
        tt = _create_truetime(settings, save=not no_save)
        response = tt.initialize()
    except TrueTimeException as e:
        _exit_with_error(e, "Sync")

    saved_to = None if no_save else tt.disk_cache.cache.path
    OutputHelper.print_sync_result(settings.host, response, saved_to=saved_to)
