"""
Landmark snapshot types

One snapshot holds the pose estimator's output for a single video frame,
addressed by MediaPipe's 33-point index layout. Coordinates are normalized
to the frame (0..1) with y increasing downward.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# MediaPipe pose landmark indices
LANDMARKS = {
    'nose': 0,
    'left_eye_inner': 1, 'left_eye': 2, 'left_eye_outer': 3,
    'right_eye_inner': 4, 'right_eye': 5, 'right_eye_outer': 6,
    'left_ear': 7, 'right_ear': 8,
    'mouth_left': 9, 'mouth_right': 10,
    'left_shoulder': 11, 'right_shoulder': 12,
    'left_elbow': 13, 'right_elbow': 14,
    'left_wrist': 15, 'right_wrist': 16,
    'left_pinky': 17, 'right_pinky': 18,
    'left_index': 19, 'right_index': 20,
    'left_thumb': 21, 'right_thumb': 22,
    'left_hip': 23, 'right_hip': 24,
    'left_knee': 25, 'right_knee': 26,
    'left_ankle': 27, 'right_ankle': 28,
    'left_heel': 29, 'right_heel': 30,
    'left_foot_index': 31, 'right_foot_index': 32
}

LANDMARK_COUNT = 33


@dataclass(frozen=True)
class Landmark:
    """A single normalized landmark point"""
    x: float
    y: float
    z: Optional[float] = None
    visibility: Optional[float] = None

    def is_visible(self, threshold: float = 0.5) -> bool:
        """Missing visibility is treated as fully visible."""
        visibility = 1.0 if self.visibility is None else self.visibility
        return visibility > threshold


@dataclass(frozen=True)
class LandmarkSnapshot:
    """Pose landmarks for one frame; absent landmarks are stored as None"""
    landmarks: Tuple[Optional[Landmark], ...]
    timestamp_ms: Optional[float] = None

    def get(self, name: str) -> Optional[Landmark]:
        index = LANDMARKS[name]
        if index < len(self.landmarks):
            return self.landmarks[index]
        return None

    @classmethod
    def from_points(
        cls,
        points: Dict[str, Landmark],
        timestamp_ms: Optional[float] = None,
    ) -> "LandmarkSnapshot":
        """Build a full-size snapshot from a name -> landmark mapping."""
        slots: List[Optional[Landmark]] = [None] * LANDMARK_COUNT
        for name, point in points.items():
            slots[LANDMARKS[name]] = point
        return cls(landmarks=tuple(slots), timestamp_ms=timestamp_ms)
