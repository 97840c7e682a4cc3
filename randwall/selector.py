"""Weighted random wallpaper selection.

Chooses the next wallpaper from the scanned candidates and the selection history:

- the most recently removed SelectionConfig.skip_recent percent of the candidates are not
  eligible, except images that have never been removed;
- every eligible image gets a weight proportional to the time since it was last removed,
  scaled by old_bias, so that long-unseen images are more likely;
- an image with a negative ("less") bias may be rejected after being drawn, in which case it
  is recorded as shown and skipped and the draw is repeated without it.

Also holds the more/less bias adjustments and the check that lets a scheduled run leave the
current wallpaper alone.
"""

import bisect
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from randwall.exceptions import ExitCode, RandwallError
from randwall.history import ImageHistory, ImageRecord, normalize_key

logger = logging.getLogger(__name__)

# Every eligible image weighs at least this much, so a draw is possible even with
# old_bias = 0 or when nothing has been removed yet.
MIN_WEIGHT = 0.001

BIAS_STEP = 0.8
BIAS_FLOOR = 0.1


class NoImagesError(RandwallError):
    """Raise when there is no image left to choose from."""

    exit_code = ExitCode.NO_IMAGES


@dataclass
class SelectionConfig:
    """Per-run selection settings: persisted defaults merged with one-shot overrides.

    Attributes:
        skip_recent: Percentage (0-99) of the most recently removed images to exclude.
        old_bias: Weight per second since an image was last removed. 0 = uniform.
        min_time: Minutes before a scheduled run may replace the current image.
        uniform: Ignore more/less biases for this run.
    """
    skip_recent: int = 40
    old_bias: float = 1.5
    min_time: int = 10
    uniform: bool = False


@dataclass
class ScoredCandidate:
    """An eligible image with its selection weight for this run.

    Attributes:
        record: History record, or a transient zero-history record for a new image.
        effective_removed: Last removal time, or the synthetic never-shown time.
        weight: Selection weight (higher = more likely).
    """
    record: ImageRecord
    effective_removed: datetime
    weight: float = 0.0

    @property
    def path(self) -> str:
        return self.record.path


@dataclass
class Selection:
    """Outcome of a selection round.

    Attributes:
        record: History record of the chosen image, already stored in the history.
        skipped: Paths drawn first but rejected because of their "less" bias.
    """
    record: ImageRecord
    skipped: List[str] = field(default_factory=list)

    @property
    def path(self) -> str:
        return self.record.path

    @property
    def was_skipped(self) -> bool:
        return bool(self.skipped)


def keep_count(total: int, skip_recent: int) -> int:
    """Number of images kept by the recency cutoff: ceil(total * (100 - skip_recent) / 100)."""
    return -(-total * (100 - skip_recent) // 100)


def never_shown_date(records: Sequence[ImageRecord], old_bias: float, now: datetime) -> datetime:
    """Removal time assumed for images that were never removed.

    New images count as (1 + old_bias) times older than the oldest actual removal, so they
    surface reasonably soon without drowning out everything else.
    """
    removed = [record.removed for record in records if record.removed is not None]
    oldest = min(removed, default=now)
    return now - (now - oldest) * (1 + old_bias)


def score_candidates(
    candidates: Sequence,
    history: ImageHistory,
    config: SelectionConfig,
    now: datetime,
) -> List[ScoredCandidate]:
    """Apply the recency cutoff and weight the remaining candidates.

    Args:
        candidates: Candidate file paths.
        history: Selection history. Not modified; candidates without a record get a
            transient one.
        config: Selection settings.
        now: Current time.

    Returns:
        Eligible candidates, oldest first, with their weights.
    """
    records = [history.get(path) or ImageRecord(path=str(path)) for path in candidates]
    never_shown = never_shown_date(records, config.old_bias, now)

    scored = [
        ScoredCandidate(record=record, effective_removed=record.removed or never_shown)
        for record in records
    ]
    scored.sort(key=lambda candidate: candidate.effective_removed)

    keep = keep_count(len(scored), config.skip_recent)
    eligible = scored[:keep] + [c for c in scored[keep:] if c.record.removed is None]

    for candidate in eligible:
        age = (now - candidate.effective_removed).total_seconds()
        candidate.weight = MIN_WEIGHT + age * config.old_bias

    logger.debug(
        "%d of %d candidates eligible (keep %d, skip_recent %d%%)",
        len(eligible), len(scored), keep, config.skip_recent,
    )
    return eligible


def weighted_choice(scored: Sequence[ScoredCandidate], rng: random.Random) -> ScoredCandidate:
    """Inverse-CDF draw: the first candidate whose cumulative weight reaches the roll."""
    cumulative_weights = []
    cumsum = 0.0
    for candidate in scored:
        cumsum += candidate.weight
        cumulative_weights.append(cumsum)

    roll = rng.random() * cumsum
    idx = bisect.bisect_left(cumulative_weights, roll)

    # Clamp to valid range (handles float precision edge cases)
    return scored[min(idx, len(scored) - 1)]


def select_next(
    candidates: Sequence,
    history: ImageHistory,
    config: SelectionConfig,
    now: datetime,
    rng: random.Random,
) -> Selection:
    """Choose the next wallpaper and record it in the history.

    The caller marks the previous wallpaper as removed before calling this. The chosen image
    gets applied = now and is added to the history if it was not there yet. Images rejected
    by their "less" bias get applied = removed = now, so the rejection counts as a showing,
    and are left out of the following draws. Every rejection shrinks the candidate list, so
    the loop ends; if everything is rejected NoImagesError is raised.

    Args:
        candidates: Candidate file paths from the scanner.
        history: Selection history, updated in place.
        config: Selection settings.
        now: Current time.
        rng: The run's random source.

    Returns:
        The Selection, including the paths skipped along the way.

    Raises:
        NoImagesError: If there are no candidates or all of them were rejected.
    """
    remaining = list(candidates)
    skipped = []

    while remaining:
        eligible = score_candidates(remaining, history, config, now)
        chosen = weighted_choice(eligible, rng)
        record = history.add(chosen.record)

        if not config.uniform and record.bias < 0 and rng.random() < -record.bias:
            logger.debug("Rejected %s (bias %.2f)", record.path, record.bias)
            record.applied = record.removed = now
            skipped.append(record.path)
            rejected = normalize_key(record.path)
            remaining = [path for path in remaining if normalize_key(path) != rejected]
            continue

        record.applied = now
        logger.debug("Selected %s (weight %.3f)", record.path, chosen.weight)
        return Selection(record=record, skipped=skipped)

    if skipped:
        raise NoImagesError(
            "there are no images to choose from: every eligible image was skipped because it "
            "was configured to be shown less frequently."
        )
    raise NoImagesError("there are no images to choose from.")


def keep_current_reason(
    record: Optional[ImageRecord],
    config: SelectionConfig,
    now: datetime,
    rng: random.Random,
) -> Optional[str]:
    """Decide whether a scheduled run should leave the current wallpaper alone.

    Returns:
        "min_time" if the current image has been up for less than config.min_time minutes,
        "more" if its positive bias won the roll, otherwise None (go ahead and replace it).
    """
    if record is None:
        return None
    if record.applied is not None and now - record.applied < timedelta(minutes=config.min_time):
        return "min_time"
    if not config.uniform and rng.random() < record.bias:
        return "more"
    return None


def _scale(bias: float, scale: float) -> float:
    # 0, 0.20, 0.36, 0.49, 0.59 etc for repeated scale=0.8
    bias = 1 - (1 - bias) * scale
    return 0.0 if bias < BIAS_FLOOR else bias


def more(bias: float) -> float:
    """Show an image more often, or undo one 'less'."""
    if bias >= 0:
        return _scale(bias, BIAS_STEP)
    return -_scale(-bias, 1 / BIAS_STEP) or 0.0


def less(bias: float) -> float:
    """Undo one 'more'. A neutral bias stays neutral; a negative one grows in magnitude."""
    if bias >= 0:
        return _scale(bias, 1 / BIAS_STEP)
    return -_scale(-bias, BIAS_STEP)


def describe_bias(bias: float) -> str:
    if bias == 0:
        return "default"
    return f"{'more' if bias > 0 else 'less'}: {abs(bias) * 100:.0f}%"
