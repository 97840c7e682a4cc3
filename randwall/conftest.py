"""
conftest.py

Test configuration for randwall tests.

Defines Pytest fixtures for supplying test data to tests across the entire test suite: folders of
(empty) image files, a fixed clock, a seeded random source, a stand-in for the desktop and a
ready-made RandwallState using all of them. Fixtures used within only a single module are defined
directly in that module.
"""

import random
from datetime import datetime, timezone
from pathlib import Path

import pytest

from randwall.config import RandwallConfig
from randwall.history import ImageHistory
from randwall.state import RandwallState


class FakeWallpaper:
    """In-memory desktop: remembers the current image and everything applied to it."""

    def __init__(self, current=None):
        self.current = current
        self.applied = []

    def get_current(self):
        return self.current

    def apply(self, path):
        self.applied.append(str(path))
        self.current = str(path)


def make_images(directory: Path, *names) -> list:
    """Create empty files with the given names in directory and return their paths."""

    directory.mkdir(parents=True, exist_ok=True)
    paths = []
    for name in names:
        path = directory / name
        path.write_bytes(b"")
        paths.append(path)
    return paths


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def rng() -> random.Random:
    """
    Seeded so that every test sees the same sequence of draws.
    """

    return random.Random(1234)


@pytest.fixture
def image_dir(tmp_path) -> Path:
    """
    A wallpaper folder with three images and one file that is not an image.
    """

    directory = tmp_path / "wallpapers"
    make_images(directory, "alps.jpg", "beach.png", "city.jpeg", "notes.txt")
    return directory


@pytest.fixture
def desktop() -> FakeWallpaper:
    return FakeWallpaper()


@pytest.fixture
def state(tmp_path, image_dir, desktop, now) -> RandwallState:
    """
    State configured with image_dir, saving into tmp_path/config.
    """

    return RandwallState(
        config=RandwallConfig(paths=[str(image_dir)]),
        history=ImageHistory(),
        wallpaper=desktop,
        rng=random.Random(42),
        clock=lambda: now,
        directory=tmp_path / "config",
    )
