"""
randwall config

This module defines the 'config' subcommand, which shows the persisted settings and changes the
ones given on the command line.
"""

import click

from randwall.cli_utils.console import describe, highlight, info
from randwall.cli_utils.decorators import catch_errors
from randwall.config import BACKENDS
from randwall.state import RandwallState


@click.command(name="config")
@click.option(
    "--skip-recent",
    "-s",
    type=click.IntRange(0, 99),
    help="Percentage of the most recently shown wallpapers to skip. Images are ordered by how long "
    "ago they were last replaced and this share of the newest is excluded from the selection, "
    "except images that have never been shown.",
)
@click.option(
    "--old-bias",
    "-b",
    type=click.FloatRange(min=0),
    help="Skews the random selection towards older images. Each eligible image is weighted by the "
    "time since it was last shown times this factor; 0 makes all eligible images equally likely.",
)
@click.option(
    "--min-time",
    "-m",
    type=click.IntRange(min=0),
    help="Minimum time in minutes a wallpaper should be shown. Only applies to 'next --scheduled'.",
)
@click.option(
    "--path",
    "--paths",
    "-p",
    "paths",
    multiple=True,
    help="Directory, file or filename mask to pick images from. Can use multiple times; replaces "
    "the configured paths. Switching paths keeps the history of every image.",
)
@click.option(
    "--backend",
    type=click.Choice(BACKENDS),
    help="How the desktop wallpaper is read and set.",
)
@click.pass_obj
@catch_errors
def cli(state: RandwallState, skip_recent, old_bias, min_time, paths, backend):
    """
    Display and optionally change the settings affecting the wallpaper selection.
    """

    config = state.config
    if skip_recent is not None:
        config.skip_recent = skip_recent
    if old_bias is not None:
        config.old_bias = old_bias
    if min_time is not None:
        config.min_time = min_time
    if paths:
        config.paths = list(paths)
    if backend is not None:
        config.backend = backend
        state.wallpaper = None

    info("Skip recent: ", f"{config.skip_recent}%")
    info("Old bias: ", f"{config.old_bias:g}")
    info("Minimum time: ", f"{config.min_time} minutes")
    info("Backend: ", config.backend)
    if config.paths:
        info("Paths:", "")
        for path in config.paths:
            describe(f"  {highlight(path)}")
    else:
        info("Paths: ", "[muted]none configured[/]")
