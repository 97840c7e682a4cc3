"""
randwall explore

This module defines the 'explore' subcommand which opens the configured wallpaper folders in the
file browser defined by the OS.
"""

from pathlib import Path

import click

from randwall.cli_utils.console import confirm_success, describe, highlight
from randwall.cli_utils.decorators import catch_errors
from randwall.rotation import check_paths
from randwall.state import RandwallState


@click.command(name="explore")
@click.pass_obj
@catch_errors
def cli(state: RandwallState):
    """Open a file browser window for every configured wallpaper folder."""

    check_paths(state)

    for path in state.config.paths:
        folder = Path(path).expanduser()
        if folder.is_dir():
            click.launch(str(folder))
            confirm_success(f"Opened folder {highlight(folder)}.")
        else:
            describe(f"Skipped folder {highlight(path)}: does not exist or not a directory path.")
