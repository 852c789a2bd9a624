"""Shared fixtures for the sound alert engine tests."""

from typing import Iterable, List

import numpy as np
import pytest

from sound_alert_engine.capture import ArrayCapture
from sound_alert_engine.timers import ManualTimerSource

BINS = 128


def frame(volume: int, bins: int = BINS) -> np.ndarray:
    """Flat frequency frame whose computed volume is exactly `volume`."""
    return np.full(bins, int(round(volume * 2.55)), dtype=np.uint8)


def frames(volumes: Iterable[int]) -> List[np.ndarray]:
    return [frame(v) for v in volumes]


@pytest.fixture
def timers() -> ManualTimerSource:
    return ManualTimerSource()


@pytest.fixture
def make_capture():
    """Factory for a replay capture source built from volume values."""

    def _make(volumes: Iterable[int] = (), **kwargs) -> ArrayCapture:
        return ArrayCapture(frames(volumes), bin_count=BINS, **kwargs)

    return _make
