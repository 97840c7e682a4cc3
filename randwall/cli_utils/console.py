"""
randwall console utilities

This module provides application-wide access to Rich Console objects for writing messages
to stdout and stderr, and routes the stdlib logging used by the core modules through a
Rich handler. Core modules never print; they raise, log, or hand results back to the
subcommands, which report them here.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

randwall_theme = Theme(
    {
        "warning": "orange_red1",
        "fail": "bold red",
        "confirm": "bold",
        "describe": "",
        "label": "bold white",
        "muted": "bright_black",
        "highlight": "bold cyan",
    }
)

console = Console(theme=randwall_theme)
error_console = Console(theme=randwall_theme, stderr=True)
log_console = Console(theme=randwall_theme, stderr=True)


"""
Formatting helpers
"""


def highlight(text) -> str:
    """
    Escape text (usually a file path) so that Rich does not read it as markup, and mark it
    up as highlighted.
    """

    return f"[highlight]{escape(str(text))}[/]"


def warn(msg: str):
    """
    Format msg and print to stderr. msg is plain text, not markup.
    """

    error_console.print(
        f":exclamation_mark-emoji: [bold]warning:[/] {escape(msg)}", style="warning", soft_wrap=True
    )


def describe(msg: str, **kwargs):
    """
    Format descriptive msg and print to stdout.
    """

    console.print(f"{msg}", style="describe", soft_wrap=True, **kwargs)


def info(label: str, value: str):
    """
    Print a "label: value" pair, used for the current wallpaper summary.
    """

    console.print(f"[label]{escape(label)}[/]{value}", soft_wrap=True)


def confirm_success(msg: str, **kwargs):
    """
    Format confirmation msg and print to stdout. Accept any additional kwargs that console.print from
    rich module exposes.
    """

    console.print(f"{msg}", style="confirm", soft_wrap=True, **kwargs)


def fail(msg: str):
    """
    Format failure msg and print to stderr. msg is plain text, not markup.
    """

    error_console.print(f":x-emoji: [bold]error:[/] {escape(msg)}", style="fail", soft_wrap=True)


def set_verbosity(verbosity: str):
    """
    Apply the --verbose/--quiet choice. Quiet silences user messages (errors are still shown),
    verbose turns on debug logging for the randwall package.
    """

    console.quiet = verbosity == "quiet"

    logger = logging.getLogger("randwall")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=log_console, show_path=False, markup=False))
    logger.setLevel(logging.DEBUG if verbosity == "verbose" else logging.WARNING)
