import typer

from truetime import __version__
from ..helpers import OutputHelper
from ..app import app


@app.command(name="version", hidden=True)
def version_cmd():
    """
    Show truetime version information.

    Alias: truetime --version
    """
    OutputHelper.print_panel(
        f"[bright_blue]truetime[/bright_blue] version [bright_green]{__version__}[/bright_green]",
        title="Version",
        border_style="green"
    )
