"""
randwall CLI Utilities

This module contains utilities for working across Click subcommands: importing subcommands
from the subcommands directory, attaching them to the command group, and the group class that
resolves short command aliases.
"""

import sys
import inspect
import importlib.util

from pathlib import Path
from collections.abc import Iterable

import click

import randwall

from randwall.cli_utils.console import warn


def import_commands(
    module_paths: Iterable = None,
) -> list:
    """
    Retrieve a list of click Commands from module_paths. Default is every module in the built in
    subcommands directory, in name order.

    A valid randwall command module defines a "cli" function that is wrapped as a click Command
    object. This function will be exposed as a command to the end user. Set the 'name' keyword
    argument in the @click.command decorator to set the name of the command intended for the end user.
    """

    if module_paths is None:
        module_paths = sorted((Path(randwall.__file__).parent / "subcommands").glob("*.py"))

    commands = []

    for path in module_paths:
        name = inspect.getmodulename(path)
        if name != "__init__":

            # Recipe for loading and executing modules from given filepath
            # comes from importlib docs:
            # https://docs.python.org/3/library/importlib.html#importing-a-source-file-directly

            module_name = f"randwall.subcommands.{name}"
            spec = importlib.util.spec_from_file_location(module_name, path)
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            spec.loader.exec_module(module)

            try:
                cli = getattr(module, "cli")
                commands.append(cli)

            except AttributeError:
                warn(f"Cannot add command {name}: no 'cli' function found.")

    return commands


def attach_commands(group: click.Group, commands: list):
    """
    Attach each command in a list of click Command objects to a provided group. Useful when
    retrieving a dynamic list of subcommands with import_commands().
    """

    for command in commands:
        group.add_command(command)


class AliasedGroup(click.Group):
    """
    click Group that also accepts a short alias for each command, e.g. 'randwall n' for
    'randwall next'. aliases maps alias -> command name. Aliases are not listed in --help.
    """

    def __init__(self, *args, aliases: dict = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.aliases = dict(aliases or {})

    def get_command(self, ctx: click.Context, cmd_name: str):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))
