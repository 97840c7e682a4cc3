"""
randwall state

This module defines the RandwallState dataclass, which holds everything a subcommand works on:
the configuration, the selection history, the wallpaper backend, the run's random source and
clock. The CLI group loads it once before the subcommand runs and saves it once afterwards.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from randwall.config import RandwallConfig, config_dir, load_config
from randwall.history import HISTORY_FILE_NAME, HistoryStore, ImageHistory, utc_now
from randwall.wallpaper_handler import WallpaperBackend, get_backend


@dataclass
class RandwallState:
    """
    Application data passed to subcommands. directory is where config.json and history.json
    are saved; with no directory, save() does nothing. The wallpaper backend is created from
    the config the first time it is needed, so commands that never touch the desktop work
    without it.
    """

    config: RandwallConfig
    history: ImageHistory
    wallpaper: Optional[WallpaperBackend] = None
    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], datetime] = utc_now
    directory: Optional[Path] = None

    def now(self) -> datetime:
        return self.clock()

    def desktop(self) -> WallpaperBackend:
        if self.wallpaper is None:
            self.wallpaper = get_backend(self.config.backend)
        return self.wallpaper

    def save(self):
        if self.directory is None:
            return
        self.config.generate_config_json(self.directory)
        HistoryStore(self.directory / HISTORY_FILE_NAME).save(self.history)


def load_state(directory: Path = None, seed: int = None) -> RandwallState:
    """Load config and history from directory (default: config_dir())."""

    directory = config_dir() if directory is None else Path(directory)

    return RandwallState(
        config=load_config(directory),
        history=HistoryStore(directory / HISTORY_FILE_NAME).load(),
        rng=random.Random(seed),
        directory=directory,
    )
