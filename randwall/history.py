"""
Selection history

One ImageRecord is kept for every image that has ever been the wallpaper: its more/less bias
and when it was last applied and last replaced. Records are looked up case-insensitively by
path and are only created when an image is actually shown (or explicitly adjusted), never
for images that were merely scanned.

The history is stored as history.json next to config.json and is read once at startup and
written once at the end of a run.
"""

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from randwall.exceptions import ExitCode, RandwallError

logger = logging.getLogger(__name__)

HISTORY_FILE_NAME = "history.json"


class HistoryError(RandwallError):
    """Raise when the selection history cannot be loaded or saved."""

    exit_code = ExitCode.CRASH


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    timestamp = datetime.fromisoformat(value)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return None if value is None else value.isoformat()


@dataclass
class ImageRecord:
    """What is remembered about one image.

    Attributes:
        path: File path, spelled as first seen.
        bias: More/less preference in (-1, 1). 0 is neutral, positive means "show more",
            negative means "show less".
        applied: When the image was last set as the wallpaper.
        removed: When the image last stopped being the wallpaper.
    """
    path: str
    bias: float = 0.0
    applied: Optional[datetime] = None
    removed: Optional[datetime] = None

    @classmethod
    def from_dict(cls, path: str, data: Dict[str, Any]) -> "ImageRecord":
        return cls(
            path=path,
            bias=float(data.get("bias", 0.0)),
            applied=_parse_timestamp(data.get("applied")),
            removed=_parse_timestamp(data.get("removed")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage. The path is the key and is not repeated."""
        return {
            "bias": self.bias,
            "applied": _format_timestamp(self.applied),
            "removed": _format_timestamp(self.removed),
        }


def normalize_key(path) -> str:
    """History key for path: the same file spelled in different case maps to one key."""
    return os.path.normpath(str(path)).casefold()


class ImageHistory:
    """Case-insensitive mapping of path to ImageRecord."""

    def __init__(self, records=()):
        self._records: Dict[str, ImageRecord] = {}
        for record in records:
            self._records[normalize_key(record.path)] = record

    def __contains__(self, path) -> bool:
        return normalize_key(path) in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ImageRecord]:
        return iter(self._records.values())

    def get(self, path) -> Optional[ImageRecord]:
        return self._records.get(normalize_key(path))

    def add(self, record: ImageRecord) -> ImageRecord:
        """Store record, keeping an existing record for the same path if there is one."""
        return self._records.setdefault(normalize_key(record.path), record)

    def get_or_create(self, path) -> ImageRecord:
        return self.add(ImageRecord(path=str(path)))

    def to_dict(self) -> Dict[str, Any]:
        return {"images": {record.path: record.to_dict() for record in self}}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImageHistory":
        images = data.get("images", {})
        if not isinstance(images, dict):
            raise ValueError("'images' must be a json object")
        return cls(ImageRecord.from_dict(path, entry) for path, entry in images.items())


class HistoryStore:
    """Loads and saves an ImageHistory as json."""

    def __init__(self, history_file: Path):
        self.history_file = Path(history_file)

    def load(self) -> ImageHistory:
        """Load the history. A missing file is an empty history."""
        try:
            with open(self.history_file, "r") as f:
                data = json.load(f)
            history = ImageHistory.from_dict(data)

        except FileNotFoundError:
            logger.debug("No history at %s, starting empty", self.history_file)
            return ImageHistory()

        except (OSError, ValueError, TypeError, AttributeError) as error:
            raise HistoryError(f"Could not load the history from {self.history_file}: {error}")

        logger.debug("Loaded %d history records from %s", len(history), self.history_file)
        return history

    def save(self, history: ImageHistory) -> None:
        try:
            self.history_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.history_file, "w") as f:
                json.dump(history.to_dict(), f, indent=2)

        except OSError as error:
            raise HistoryError(f"Could not save the history to {self.history_file}: {error}")

        logger.debug("Saved %d history records to %s", len(history), self.history_file)
