import typer

from truetime.storage import FileCache
from truetime.truetime import TrueTime
from truetime.utils.exceptions import TrueTimeException
from ..helpers import OutputHelper
from ..helpers.output import format_epoch_ms, format_offset
from ..app import app
from . import _load_settings, _exit_with_error


@app.command(name="now")
def now_cmd(
    raw: bool = typer.Option(False, "--ms", help="Print epoch milliseconds only"),
):
    """
    Show true time rebuilt from the cache, without the network.
    """
    try:
        settings = _load_settings()
        tt = TrueTime().with_shared_preferences_cache(FileCache(settings.cache_file))
        now_ms = tt.now_ms()
    except TrueTimeException as e:
        _exit_with_error(e, "Now")

    if raw:
        typer.echo(now_ms)
        return

    local_ms = tt.clock.wall_ms()
    OutputHelper.print_panel(
        f"True time:   [bright_green]{format_epoch_ms(now_ms)}[/bright_green]\n"
        f"Local time:  {format_epoch_ms(local_ms)}\n"
        f"Offset:      [bright_yellow]{format_offset(now_ms - local_ms)}[/bright_yellow]",
        title="TrueTime",
        border_style="green"
    )


@app.command(name="clear")
def clear_cmd():
    """
    Delete the cached true time.
    """
    try:
        settings = _load_settings()
        cache = FileCache(settings.cache_file)
        cache.clear()
    except TrueTimeException as e:
        _exit_with_error(e, "Clear")

    OutputHelper.print_panel(
        f"Removed [bright_cyan]{cache.path}[/bright_cyan]",
        title="Cache Cleared",
        border_style="green"
    )
