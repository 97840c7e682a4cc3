"""
randwall more

This module defines the 'more' subcommand.
"""

import click

from randwall.cli_utils.decorators import catch_errors
from randwall.rotation import more_of_current
from randwall.state import RandwallState


@click.command(name="more")
@click.pass_obj
@catch_errors
def cli(state: RandwallState):
    """
    Make the current image more likely to appear again.

    Each time 'next --scheduled' runs there is a chance the current image is kept instead of
    replaced; every 'more' raises that chance by 20%. For images that were previously subject
    to 'less', this undoes one 'less' instead.
    """

    return more_of_current(state)
