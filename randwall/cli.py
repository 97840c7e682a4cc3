"""
randwall

Pick a new desktop wallpaper from your own folders, taking care not to pick recently shown images
too often, and with options to show specific images more or less often than others. randwall does
not stay resident; it only changes the wallpaper when invoked, by hand or by a scheduler.

This module defines the entry point to the randwall CLI. The 'cli' group loads the configuration
and selection history once, before the subcommand runs, and stores them on the click context. Its
result callback saves them once afterwards and exits with the status the subcommand returned.

Subcommands are discovered from the subcommands directory and attached to the group at startup.
"""

import sys

import click

from randwall import __version__
from randwall.cli_utils.console import fail, set_verbosity
from randwall.cli_utils.utils import AliasedGroup, attach_commands, import_commands
from randwall.exceptions import ExitCode, RandwallError
from randwall.state import RandwallState, load_state

COMMAND_ALIASES = {"n": "next", "l": "less", "m": "more", "c": "config", "e": "explore"}


@click.group(cls=AliasedGroup, aliases=COMMAND_ALIASES)
@click.pass_context
@click.option(
    "--verbose",
    "verbosity",
    flag_value="verbose",
    help="Also print debug logging, e.g. the weights behind each selection.",
)
@click.option(
    "--quiet",
    "verbosity",
    flag_value="quiet",
    help="Silence all output except errors.",
)
@click.option(
    "--seed",
    type=int,
    help="Seed the random source, for reproducible selections.",
)
@click.version_option(version=__version__)
def cli(ctx: click.Context, verbosity, seed):
    """
    randwall

    Randomly selects and assigns a new desktop wallpaper from folders of images.


    ====================
    Quickstart
    ====================

    Tell randwall where your wallpapers are:

        $ randwall config --path ~/Pictures/wallpapers

    Change the wallpaper:

        $ randwall next

    Schedule it (e.g. every 15 minutes from cron), keeping each image up for at least 10 minutes:

        $ randwall next --scheduled


    ====================
    Tweaks
    ====================

    See the current wallpaper more often, or less often (this also switches to the next one):

        $ randwall more

        $ randwall less

    Every command can also be run by its first letter, e.g. 'randwall n' for 'randwall next'.

    For detailed help text add --help to the specified command, e.g.

        $ randwall next --help
    """

    set_verbosity(verbosity or "normal")

    # tests and embedding code may provide a ready-made state
    if ctx.obj is None:
        try:
            ctx.obj = load_state(seed=seed)

        except RandwallError as error:
            fail(str(error))
            ctx.exit(error.exit_code)

    elif seed is not None:
        ctx.obj.rng.seed(seed)


@cli.result_callback()
@click.pass_obj
def persist_state(state: RandwallState, exit_code, *args, **kwargs):
    """
    Save the configuration and history after the subcommand ran, then exit with its status. A
    failure to save is reported and turns the status into ExitCode.CRASH, since the outcome on
    screen is then not remembered for the next run.
    """

    try:
        state.save()

    except RandwallError as error:
        fail(f"could not save settings. {error}")
        exit_code = ExitCode.CRASH

    click.get_current_context().exit(int(exit_code or ExitCode.SUCCESS))


def main():
    commands = import_commands()
    attach_commands(cli, commands)

    try:
        exit_code = cli.main(prog_name="randwall", standalone_mode=False)

    except click.UsageError as error:
        error.show()
        exit_code = ExitCode.INVALID_ARGUMENTS

    except click.ClickException as error:
        error.show()
        exit_code = error.exit_code

    except click.exceptions.Abort:
        fail("aborted.")
        exit_code = ExitCode.CRASH

    sys.exit(exit_code or ExitCode.SUCCESS)


if __name__ == "__main__":
    main()
