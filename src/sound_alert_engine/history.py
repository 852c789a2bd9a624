"""Rolling history of recent volume samples."""

from collections import deque
from typing import Deque, List

DEFAULT_CAPACITY = 50
DEFAULT_WINDOW = 20


class HistoryBuffer:
    """Fixed-capacity FIFO of volume samples.

    The oldest sample is evicted once capacity is reached.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._samples: Deque[int] = deque(maxlen=capacity)

    def append(self, sample: int) -> None:
        """Add a sample to the tail, evicting the head on overflow."""
        self._samples.append(sample)

    def snapshot(self, window: int = DEFAULT_WINDOW) -> List[int]:
        """Return the last `window` samples in insertion order.

        Returns fewer samples if the history is shorter than `window`.
        """
        if window <= 0:
            return []
        skip = max(0, len(self._samples) - window)
        return list(self._samples)[skip:]

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def __repr__(self) -> str:
        return f"HistoryBuffer({len(self._samples)}/{self.capacity})"
