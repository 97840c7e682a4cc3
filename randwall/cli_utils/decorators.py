"""
randwall Decorators

Use these decorators to turn plain functions into well-behaved randwall subcommands. A subcommand
function receives the RandwallState (via click.pass_obj) and returns an ExitCode. It should not
print errors or call exit itself; raise a RandwallError with a helpful message instead and
@catch_errors will report it.

Here's how a subcommand module looks:

    @click.command(name="sparkle")
    @click.pass_obj
    @catch_errors
    def cli(state: RandwallState):
        '''Make the wallpaper sparkle'''

        return make_it_sparkle(state)

The group's result callback then saves the state and exits with the returned status.
"""

import logging
import sys
from functools import wraps

import click

from randwall.cli_utils.console import fail
from randwall.exceptions import ExitCode, RandwallError

logger = logging.getLogger(__name__)


def catch_errors(func):
    """
    Catch errors and format them with the "fail" console template.

    A RandwallError becomes the command's exit status, so the state is still saved afterwards
    (a 'less' adjustment survives a failed selection, for example). Anything else is unexpected:
    it is reported and the application exits with ExitCode.CRASH without saving. click's own
    exceptions (usage errors, --help, ctx.exit) pass through untouched.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)

        except (click.exceptions.Exit, click.exceptions.Abort, click.ClickException):
            raise

        except RandwallError as error:
            fail(str(error))
            return error.exit_code

        except Exception as error:
            logger.debug("Unexpected failure in %s", func.__name__, exc_info=True)
            fail(f"{type(error).__name__}: {error}")
            sys.exit(ExitCode.CRASH)

        return ExitCode.SUCCESS if result is None else result

    return wrapper
