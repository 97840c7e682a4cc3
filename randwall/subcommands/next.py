"""
randwall next

This module defines the 'next' subcommand, which picks a new image from the configured paths and
sets it as the desktop wallpaper.
"""

import click

from randwall.cli_utils.decorators import catch_errors
from randwall.rotation import NextOptions, next_wallpaper
from randwall.state import RandwallState


@click.command(name="next")
@click.option(
    "--scheduled",
    is_flag=True,
    help="This is a scheduled invocation (e.g. from cron or a systemd timer). Lets the configured "
    "minimum time and 'more' keep the current image by exiting without doing anything.",
)
@click.option(
    "--not-shown",
    "-n",
    is_flag=True,
    help="Do not record the current image as recently shown. By default it is, which makes it "
    "less likely to appear again for some time.",
)
@click.option(
    "--uniform",
    "-u",
    is_flag=True,
    help="Ignore the 'more'/'less' tweaks just this time.",
)
@click.option(
    "--skip-recent",
    "-s",
    type=click.IntRange(0, 99),
    help="Percentage of the most recently shown images to skip, this time only. "
    "Defaults to the configured value.",
)
@click.option(
    "--old-bias",
    "-b",
    type=click.FloatRange(min=0),
    help="How strongly to favour images not shown for a long time, this time only. "
    "Defaults to the configured value.",
)
@click.option(
    "--path",
    "--paths",
    "-p",
    "paths",
    multiple=True,
    help="Directory, file or filename mask to pick images from, this time only. "
    "Can use multiple times.",
)
@click.pass_obj
@catch_errors
def cli(state: RandwallState, scheduled, not_shown, uniform, skip_recent, old_bias, paths):
    """
    Pick a new image and set it as the desktop wallpaper.
    """

    options = NextOptions(
        scheduled=scheduled,
        not_shown=not_shown,
        uniform=uniform,
        skip_recent=skip_recent,
        old_bias=old_bias,
        paths=list(paths) if paths else None,
    )
    return next_wallpaper(state, options)
