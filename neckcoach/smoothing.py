"""
Fixed-size smoothing window for deviation angles.
"""

from collections import deque
from typing import List


class SmoothingWindow:
    """
    Bounded FIFO of the most recent deviation values.

    Once full, each insert evicts the oldest value, so the mean only
    reflects the last `capacity` samples.
    """

    def __init__(self, capacity: int = 5):
        """
        Initialize smoothing window.

        Args:
            capacity: Number of recent values to average
        """
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._values = deque(maxlen=capacity)

    def add(self, value: float) -> float:
        """Push a value and return the updated mean."""
        self._values.append(value)
        return self.mean()

    def mean(self) -> float:
        """Arithmetic mean of the window (0.0 when empty)."""
        if not self._values:
            return 0.0
        return sum(self._values) / len(self._values)

    def get_values(self) -> List[float]:
        """Values in insertion order, oldest first."""
        return list(self._values)

    def size(self) -> int:
        return len(self._values)

    def clear(self):
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)
