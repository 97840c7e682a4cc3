"""
Catalog scanner

Turns the configured path specifiers into the list of candidate image files. A specifier can be:

- a directory: every file directly inside it with an image extension (.jpg, .jpeg, .png,
  any case) is a candidate;
- a file: it is a candidate whatever its extension;
- a filename mask such as ~/Pictures/walls/beach-*.jpg: every file in the parent directory
  whose name matches the mask is a candidate.

A directory or mask that matches nothing, or a plain path that does not exist in an existing
directory, only produces a warning. A specifier whose parent directory does not exist fails
the whole scan.
"""

import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from randwall.exceptions import ExitCode, RandwallError
from randwall.history import normalize_key

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png"}
WILDCARDS = set("*?[")


class ScanError(RandwallError):
    """Raise when a path specifier can be used neither as a file, a directory nor a mask."""

    exit_code = ExitCode.USER_ERROR


@dataclass
class ScanResult:
    """Candidate files in scan order, plus warnings about specifiers that matched nothing."""

    files: List[Path] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def is_image_file(path: Path) -> bool:
    return path.suffix.lower() in IMAGE_EXTENSIONS


def has_wildcards(name: str) -> bool:
    return bool(WILDCARDS.intersection(name))


def _list_files(directory: Path) -> List[Path]:
    return sorted(child for child in directory.iterdir() if child.is_file())


def scan_paths(specifiers: Iterable) -> ScanResult:
    """
    Resolve specifiers into absolute candidate file paths. The result keeps specifier order,
    sorts the files found in each directory by name and drops duplicates (compared
    case-insensitively, the same way history keys are).
    """

    result = ScanResult()
    seen = set()

    def add(path: Path):
        path = path.absolute()
        key = normalize_key(path)
        if key not in seen:
            seen.add(key)
            result.files.append(path)

    for specifier in specifiers:
        path = Path(specifier).expanduser()

        try:
            if path.is_dir():
                matches = [child for child in _list_files(path) if is_image_file(child)]
                if not matches:
                    result.warnings.append(f"no images found at this path: {specifier}")
                for match in matches:
                    add(match)

            elif path.is_file():
                add(path)

            elif not path.parent.is_dir():
                raise ScanError(f"this path is either invalid or unsupported: {specifier}")

            elif has_wildcards(path.name):
                matches = [
                    child
                    for child in _list_files(path.parent)
                    if fnmatch.fnmatch(child.name, path.name)
                ]
                if not matches:
                    result.warnings.append(f"no images matched by filter: {specifier}")
                for match in matches:
                    add(match)

            else:
                result.warnings.append(f"no such path: {specifier}")

        except OSError as error:
            raise ScanError(f"this path is either invalid or unsupported: {specifier} ({error})")

        logger.debug("Scanned %s, %d candidates so far", specifier, len(result.files))

    return result
