"""
Wallpaper Handler

This module reads and changes the desktop wallpaper. The rest of randwall only needs two
operations, so any desktop can be supported by an object providing them:

    get_current() -> the path of the image currently on the desktop, or None
    apply(path)   -> make path the desktop wallpaper, raising WallpaperUpdateError on failure

Two backends are provided:

GNOME: settings for desktop backgrounds are defined under the schema org.gnome.desktop.background,
accessed through the third-party package PyGObject (https://pygobject.readthedocs.io/en/latest/).
The schema is documented at
https://github.com/GNOME/gsettings-desktop-schemas/blob/master/schemas/org.gnome.desktop.background.gschema.xml.in

feh: for X11 window managers. feh records the command it last ran in ~/.fehbg, which is where the
current wallpaper is read from.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import unquote, urlparse

from randwall.exceptions import ExitCode, RandwallError

logger = logging.getLogger(__name__)

GNOME_BACKGROUND_SCHEMA = "org.gnome.desktop.background"


class WallpaperUpdateError(Exception):
    """
    Raised when an attempt to update the desktop background fails.
    """

    pass


class UnknownBackendError(RandwallError):
    """Raised when the configured backend name is not supported."""

    exit_code = ExitCode.USER_ERROR


class WallpaperBackend(Protocol):
    def get_current(self) -> Optional[str]: ...

    def apply(self, path) -> None: ...


def validate_wallpaper_path(img_path) -> Path:
    """
    Return img_path as an absolute Path, raising WallpaperUpdateError if it is not an existing file.
    Desktops usually accept a missing file silently and show a plain background instead, so this
    is checked up front.
    """

    try:
        wallpaper_location = Path(img_path).expanduser().absolute()
    except TypeError:
        raise WallpaperUpdateError(
            f"Invalid parameter: {img_path} is not a valid Pathlike object."
        )

    if not wallpaper_location.is_file():
        raise WallpaperUpdateError(
            f"Invalid path provided for image location: {img_path} does not exist."
        )

    return wallpaper_location


def uri_to_path(uri: str) -> Optional[str]:
    """Convert a picture-uri value (file:// uri or plain path) to a path."""

    if not uri:
        return None
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return unquote(parsed.path)
    if parsed.scheme:
        return None
    return uri


class GnomeWallpaper:
    """Reads and writes the GNOME desktop background through Gio.Settings."""

    def __init__(self, settings=None):
        if settings is None:
            try:
                # see PyGObject API ref for Gio.Settings or >>> help(Gio.Settings) in REPL
                from gi.repository import Gio
            except ImportError:
                raise UnknownBackendError(
                    "the gnome backend needs PyGObject, install it with: pip install randwall[gnome]"
                )

            settings = Gio.Settings(schema=GNOME_BACKGROUND_SCHEMA)
        self.settings = settings

    def get_current(self) -> Optional[str]:
        return uri_to_path(self.settings["picture-uri"])

    def apply(self, path) -> None:
        """
        Set picture-uri, and picture-uri-dark where the schema has it, to the image. The keys
        take a uri; no errors are raised by GNOME for invalid values, so the file is checked first.
        """

        uri = validate_wallpaper_path(path).as_uri()
        self.settings["picture-uri"] = uri
        if "picture-uri-dark" in self.settings.list_keys():
            self.settings["picture-uri-dark"] = uri
        logger.debug("Set %s to %s", GNOME_BACKGROUND_SCHEMA, uri)


class FehWallpaper:
    """Sets the wallpaper with feh and reads it back from ~/.fehbg."""

    def __init__(self, fehbg: Path = Path("~/.fehbg")):
        self.fehbg = Path(fehbg).expanduser()

    def get_current(self) -> Optional[str]:
        try:
            lines = self.fehbg.read_text(encoding="utf-8", errors="ignore").splitlines()
        except OSError:
            return None

        images = []
        for line in lines:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            try:
                parts = shlex.split(stripped)
            except ValueError:
                continue
            if parts and Path(parts[0]).name == "feh":
                images = [arg for arg in parts[1:] if not arg.startswith("-")]

        return str(Path(images[-1]).expanduser()) if images else None

    def apply(self, path) -> None:
        command = ["feh", "--bg-fill", str(validate_wallpaper_path(path))]
        try:
            subprocess.run(command, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
        except (OSError, subprocess.CalledProcessError) as error:
            raise WallpaperUpdateError(f"Could not run {' '.join(command)}: {error}")


BACKENDS = {
    "gnome": GnomeWallpaper,
    "feh": FehWallpaper,
}


def get_backend(name: str) -> WallpaperBackend:
    try:
        backend = BACKENDS[name]
    except KeyError:
        raise UnknownBackendError(
            f"unknown wallpaper backend '{name}', use one of: {', '.join(BACKENDS)}."
        )
    return backend()
