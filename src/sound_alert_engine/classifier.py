"""Heuristic pattern classifier for recent volume history.

The classifier looks at a short window of volume samples and maps it onto
one of a few coarse sound categories. Rules are evaluated in a fixed order
and the first one that matches wins:

1. doorbell  - 1 to 3 peaks and an average well above threshold
2. alarm     - sustained level with at least one peak
3. knocking  - 3 to 6 peaks
4. impact    - very loud average
5. unknown   - anything else above threshold
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from sound_alert_engine.history import DEFAULT_WINDOW
from sound_alert_engine.models import (
    ALARM,
    DOORBELL,
    IMPACT,
    KNOCKING,
    UNKNOWN,
    SoundClassification,
)

logger = logging.getLogger(__name__)

# Fraction of the window that must exceed threshold to count as sustained
SUSTAINED_RATIO = 0.7


@dataclass(frozen=True)
class WindowStats:
    """Features extracted from a history window.

    Attributes:
        avg_volume: Arithmetic mean of the window (0.0 for an empty window)
        peak_count: Interior local maxima strictly above threshold
        is_sustained: More than 70% of samples exceed threshold
        size: Number of samples in the window
    """

    avg_volume: float
    peak_count: int
    is_sustained: bool
    size: int


@dataclass(frozen=True)
class Rule:
    """One entry of the classification chain."""

    result: SoundClassification
    matches: Callable[[WindowStats, int], bool]


RULES: List[Rule] = [
    Rule(
        SoundClassification(DOORBELL, 0.8, "Doorbell or chime pattern"),
        lambda s, t: 1 <= s.peak_count <= 3 and s.avg_volume > t * 1.2,
    ),
    Rule(
        SoundClassification(ALARM, 0.6, "Continuous alarm or siren"),
        lambda s, t: s.is_sustained and s.peak_count >= 1,
    ),
    Rule(
        SoundClassification(KNOCKING, 0.7, "Knocking or tapping sounds"),
        lambda s, t: 3 <= s.peak_count <= 6,
    ),
    Rule(
        SoundClassification(IMPACT, 0.6, "Heavy impact or crash"),
        lambda s, t: s.avg_volume > t * 1.5,
    ),
]

FALLBACK = SoundClassification(UNKNOWN, 0.3, "Sound detected")


def count_peaks(values: Sequence[int], threshold: int) -> int:
    """Count interior samples above threshold that exceed both neighbours."""
    peaks = 0
    for i in range(1, len(values) - 1):
        if values[i] > threshold and values[i] > values[i - 1] and values[i] > values[i + 1]:
            peaks += 1
    return peaks


def window_stats(window: Sequence[int], threshold: int) -> WindowStats:
    """Compute the classification features of a window."""
    size = len(window)
    if size == 0:
        return WindowStats(avg_volume=0.0, peak_count=0, is_sustained=False, size=0)

    loud = sum(1 for v in window if v > threshold)
    return WindowStats(
        avg_volume=sum(window) / size,
        peak_count=count_peaks(window, threshold),
        is_sustained=loud > size * SUSTAINED_RATIO,
        size=size,
    )


def classify(
    current: int,
    history: Sequence[int],
    threshold: int,
    window: int = DEFAULT_WINDOW,
) -> Optional[SoundClassification]:
    """Classify the current sample against recent history.

    Args:
        current: Volume of the current tick, in [0, 100]
        history: Recent volume samples, oldest first (normally already
            including `current`)
        threshold: Sensitivity threshold in [10, 90]
        window: Number of most recent samples to consider

    Returns:
        The first matching SoundClassification, or None if `current` is
        below threshold
    """
    if current < threshold:
        return None

    recent = list(history)[-window:] if window > 0 else []
    stats = window_stats(recent, threshold)

    for rule in RULES:
        if rule.matches(stats, threshold):
            logger.debug(f"Classified as {rule.result.type}: {stats}")
            return rule.result

    logger.debug(f"No rule matched, falling back to {FALLBACK.type}: {stats}")
    return FALLBACK
