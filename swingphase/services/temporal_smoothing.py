"""
Temporal smoothing of raw phase labels.

Keeps the most recent raw labels, club velocities and confidences in three
parallel bounded buffers and reduces the label buffer to a consensus by
majority vote.
"""

from collections import Counter, deque
from typing import Deque, List, Optional

from swingphase.config import consensus_count
from swingphase.services.phase_classifier import SwingPhase


class TemporalSmoother:
    """Rolling majority vote over the last `window` raw classifications"""

    def __init__(self, window: int = 5):
        self.window = window
        self._labels: Deque[SwingPhase] = deque(maxlen=window)
        self._velocities: Deque[float] = deque(maxlen=window)
        self._confidences: Deque[float] = deque(maxlen=window)

    def push(self, label: SwingPhase, velocity: float, confidence: float) -> None:
        """Add one frame; the oldest entry drops out once the window is full."""
        self._labels.append(label)
        self._velocities.append(velocity)
        self._confidences.append(confidence)

    def consensus(self) -> Optional[SwingPhase]:
        """
        Most frequent buffered label, if it holds at least 60% of the window.

        The required count is measured against the configured window size, not
        the number of frames buffered so far. Returns None when no label has
        enough support.
        """
        if not self._labels:
            return None

        label, count = Counter(self._labels).most_common(1)[0]
        if count >= consensus_count(self.window):
            return label
        return None

    def resize(self, window: int) -> None:
        """Change the window, keeping the most recent entries."""
        self.window = window
        self._labels = deque(self._labels, maxlen=window)
        self._velocities = deque(self._velocities, maxlen=window)
        self._confidences = deque(self._confidences, maxlen=window)

    def clear(self) -> None:
        self._labels.clear()
        self._velocities.clear()
        self._confidences.clear()

    @property
    def labels(self) -> List[SwingPhase]:
        return list(self._labels)

    @property
    def velocities(self) -> List[float]:
        return list(self._velocities)

    @property
    def confidences(self) -> List[float]:
        return list(self._confidences)

    def __len__(self) -> int:
        return len(self._labels)
