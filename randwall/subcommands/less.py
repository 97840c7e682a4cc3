"""
randwall less

This module defines the 'less' subcommand.
"""

import click

from randwall.cli_utils.decorators import catch_errors
from randwall.rotation import less_of_current
from randwall.state import RandwallState


@click.command(name="less")
@click.pass_obj
@catch_errors
def cli(state: RandwallState):
    """
    Undo one 'more' on the current image, and switch to the next image.

    Once an image is back at the default setting, 'less' leaves its setting there and only
    switches to the next image. Images whose stored setting is "less: NN%" are skipped (recorded
    as shown and passed over) with that chance whenever they are drawn; 'less' raises it further.
    """

    return less_of_current(state)
