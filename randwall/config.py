"""
randwall Configuration Management

This file handles loading and saving the persisted settings: which folders to pick wallpapers
from and the defaults for the selection algorithm. Raise a RandwallConfigError for any issues
that arise in processing or retrieving these configuration variables.

The configuration file is "config.json" and lives at ~/.config/randwall/config.json unless the
RANDWALL_CONFIG_DIR environment variable points somewhere else. The selection history is
kept next to it (see history.py).
"""

import json
import os
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path

from randwall.exceptions import ExitCode, RandwallError

CONFIG_FILE_NAME = "config.json"
BACKENDS = ("gnome", "feh")


class RandwallConfigError(RandwallError):
    """Raise when an issue occurs with handling randwall configuration."""

    exit_code = ExitCode.CRASH


def config_dir() -> Path:
    """
    Return the directory holding config.json and history.json: RANDWALL_CONFIG_DIR if set,
    otherwise ~/.config/randwall.
    """

    try:
        return Path(os.environ["RANDWALL_CONFIG_DIR"]).expanduser()

    except KeyError:
        return Path("~/.config/randwall").expanduser()


@dataclass
class RandwallConfig:
    """
    Persisted settings. The selection defaults here can be overridden for a single run with
    the options of the 'next' command, and changed permanently with the 'config' command.

    skip_recent: percentage (0-99) of the most recently shown images to exclude.
    old_bias: how strongly to favour images that have not been shown for a long time
        (0 = all eligible images equally likely).
    min_time: minutes an image must stay before a scheduled run may replace it.
    paths: directories, files or filename masks to pick images from.
    backend: how the desktop wallpaper is read and changed.
    """

    paths: list = field(default_factory=list)
    skip_recent: int = 40
    old_bias: float = 1.5
    min_time: int = 10
    backend: str = "gnome"

    def __post_init__(self):
        self.paths = [str(path) for path in self.paths]

        if not 0 <= self.skip_recent <= 99:
            raise RandwallConfigError(
                f"skip_recent must be between 0 and 99, got {self.skip_recent}."
            )
        if self.old_bias < 0:
            raise RandwallConfigError(f"old_bias must be zero or greater, got {self.old_bias}.")
        if self.min_time < 0:
            raise RandwallConfigError(f"min_time must be zero or greater, got {self.min_time}.")
        if self.backend not in BACKENDS:
            raise RandwallConfigError(
                f"backend must be one of {', '.join(BACKENDS)}, got '{self.backend}'."
            )

    @classmethod
    def from_dict(cls, data: dict) -> "RandwallConfig":
        """
        Build a config from deserialized json. Unknown keys are ignored and missing keys
        take their defaults, so older and newer config files both load.
        """

        known = {f.name for f in fields(cls)}
        try:
            return cls(**{key: value for key, value in data.items() if key in known})

        except TypeError as error:
            raise RandwallConfigError(f"The config file has an invalid value: {error}")

    def generate_config_json(self, directory: Path) -> Path:
        """
        Write the config to directory/config.json and return the path of the written file.
        Overwrites any existing config file.
        """

        to_json = json.dumps(asdict(self), sort_keys=True, indent=4)

        try:
            directory.mkdir(parents=True, exist_ok=True)
            dest_file = directory / CONFIG_FILE_NAME
            with open(dest_file, "w") as file:
                file.write(to_json)

        except OSError as error:
            raise RandwallConfigError(
                f"There was an error saving the configuration file: {error}."
            )

        return dest_file


def load_config(directory: Path) -> RandwallConfig:
    """
    Load directory/config.json. A missing file gives the default configuration; a file that
    cannot be read or parsed raises RandwallConfigError.
    """

    config_src = directory / CONFIG_FILE_NAME

    try:
        with config_src.open("r") as file:
            from_json = json.loads(file.read())

    except FileNotFoundError:
        return RandwallConfig()

    except json.JSONDecodeError as error:
        raise RandwallConfigError(f"There was an issue reading the config: {error}")

    except OSError as error:
        raise RandwallConfigError(f"There was an issue opening the config: {error}")

    if not isinstance(from_json, dict):
        raise RandwallConfigError(f"There was an issue reading the config: {config_src} is not a json object.")

    return RandwallConfig.from_dict(from_json)
