"""
Wallpaper rotation

The invocation paths behind the 'next', 'more' and 'less' subcommands. These put the pieces
together: look up what is on the desktop now, mark it as removed, scan the configured paths,
let the selector pick, and apply the result. Messages for the user are printed here; the
scanner and selector only return results or raise.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from randwall.cli_utils.console import confirm_success, describe, highlight, info, warn
from randwall.exceptions import ExitCode, RandwallError
from randwall.history import ImageRecord
from randwall.scanner import scan_paths
from randwall.selector import (
    NoImagesError,
    SelectionConfig,
    describe_bias,
    keep_current_reason,
    less,
    more,
    select_next,
)
from randwall.state import RandwallState

logger = logging.getLogger(__name__)


class UserConfigError(RandwallError):
    """Raise when the user needs to change the configuration or command line to continue."""

    exit_code = ExitCode.USER_ERROR


@dataclass
class NextOptions:
    """
    Options of a single 'next' run. None means "use the configured value"; an empty paths
    list is an explicit (and invalid) override.
    """

    scheduled: bool = False
    not_shown: bool = False
    uniform: bool = False
    skip_recent: Optional[int] = None
    old_bias: Optional[float] = None
    paths: Optional[List[str]] = None


def selection_config(state: RandwallState, options: NextOptions) -> SelectionConfig:
    config = state.config
    return SelectionConfig(
        skip_recent=config.skip_recent if options.skip_recent is None else options.skip_recent,
        old_bias=config.old_bias if options.old_bias is None else options.old_bias,
        min_time=config.min_time,
        uniform=options.uniform,
    )


def check_paths(state: RandwallState):
    if not state.config.paths:
        raise UserConfigError(
            "please configure at least one path containing wallpapers using "
            "'randwall config --path'."
        )


def current_wallpaper(state: RandwallState) -> Optional[str]:
    """Print and return the path of the current wallpaper, with its history if it has any."""

    path = state.desktop().get_current()
    if path is None:
        info("Current wallpaper: ", "[muted]none[/]")
        return None

    info("Current wallpaper: ", highlight(path))
    record = state.history.get(path) or ImageRecord(path=path)
    applied = "[muted]unknown[/]" if record.applied is None else str(record.applied.astimezone())
    info("Applied at: ", applied)
    info("More/less: ", describe_bias(record.bias))
    describe("")
    return path


def next_wallpaper(state: RandwallState, options: NextOptions, current: str = None) -> ExitCode:
    """
    Pick a new wallpaper and apply it. current is the path of the image on the desktop, when
    the caller has already looked it up; a scheduled run may decide to keep it.
    """

    paths = state.config.paths if options.paths is None else list(options.paths)
    if not paths:
        raise UserConfigError(
            "please specify at least one wallpaper path using 'randwall next --path', "
            "or configure one permanently using 'randwall config --path'."
        )

    config = selection_config(state, options)
    now = state.now()

    if current is None:
        current = current_wallpaper(state)

    if current is not None:
        if options.scheduled:
            reason = keep_current_reason(state.history.get(current), config, now, state.rng)
            logger.debug("Scheduled run, keep current wallpaper: %s", reason)
            if reason == "min_time":
                describe(
                    "Leaving current image unchanged because it has been visible for less than "
                    f"{config.min_time} minutes (use [bold]randwall config --min-time[/] to configure)."
                )
                return ExitCode.SUCCESS
            if reason == "more":
                describe(
                    "Leaving current image unchanged because you've requested to see it more "
                    "(use [bold]randwall more[/]/[bold]randwall less[/] to configure)."
                )
                return ExitCode.SUCCESS

        if not options.not_shown:
            state.history.get_or_create(current).removed = now

    scan = scan_paths(paths)
    for warning in scan.warnings:
        warn(warning)
    if not scan.files:
        raise NoImagesError("there are no images to choose from.")

    selection = select_next([str(path) for path in scan.files], state.history, config, now, state.rng)
    for skipped in selection.skipped:
        describe(
            f"Skipping {highlight(skipped)} because it was configured to be shown less frequently."
        )

    state.desktop().apply(selection.path)
    confirm_success(f"Applied next wallpaper: {highlight(selection.path)}.")
    return ExitCode.SUCCESS


def _current_record(state: RandwallState) -> ImageRecord:
    check_paths(state)
    current = current_wallpaper(state)
    if current is None:
        raise UserConfigError("Cannot execute command because no current wallpaper has been detected.")
    return state.history.get_or_create(current)


def more_of_current(state: RandwallState) -> ExitCode:
    """Make the current wallpaper more likely to stay and to come back."""

    record = _current_record(state)
    record.bias = more(record.bias)
    info("New more/less: ", describe_bias(record.bias))
    return ExitCode.SUCCESS


def less_of_current(state: RandwallState) -> ExitCode:
    """Make the current wallpaper less likely to come back, and move on to the next one."""

    record = _current_record(state)
    record.bias = less(record.bias)
    info("New more/less: ", describe_bias(record.bias))
    describe("")
    return next_wallpaper(state, NextOptions(), current=record.path)
