#!/usr/bin/env python3
"""
Per-frame Swing Feature Extraction

Derives the biomechanical signals the phase classifier works from: weight
distribution between the feet, an estimated club-head position and angle, and
shoulder/hip rotation. Every calculation degrades to a neutral default when the
landmarks it needs are missing, so a bad frame never stops the pipeline.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import math

from swingphase.services.landmarks import Landmark, LandmarkSnapshot

# Club head hangs this far below the hands in the wrist-only estimate
CLUB_DROP_OFFSET = 0.1
# Normalized club length used when projecting along the forearm
CLUB_LENGTH = 0.25

# Shoulders, wrists, hips, ankles
KEY_LANDMARKS = (
    'left_shoulder', 'right_shoulder',
    'left_wrist', 'right_wrist',
    'left_hip', 'right_hip',
    'left_ankle', 'right_ankle',
)
KEY_LANDMARK_VISIBILITY = 0.5


@dataclass(frozen=True)
class WeightDistribution:
    """Share of body weight on each foot, in whole percent"""
    left: int = 50
    right: int = 50
    total: int = 100

    @property
    def asymmetry(self) -> int:
        return abs(self.left - self.right)

    @classmethod
    def balanced(cls) -> "WeightDistribution":
        return cls(left=50, right=50, total=100)

    @classmethod
    def from_left(cls, left: int) -> "WeightDistribution":
        # Right side is always derived so the pair sums to exactly 100
        left = max(0, min(100, left))
        return cls(left=left, right=100 - left, total=100)


@dataclass(frozen=True)
class ClubPosition:
    """Estimated club-head position (normalized) and shaft angle in degrees"""
    x: float = 0.5
    y: float = 0.5
    z: Optional[float] = None
    angle: float = 0.0

    @classmethod
    def center(cls) -> "ClubPosition":
        return cls(x=0.5, y=0.5, z=None, angle=0.0)

    def distance_to(self, other: "ClubPosition") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class BodyRotation:
    """Horizontal angle of the shoulder line and hip line, in degrees"""
    shoulder_angle: float = 0.0
    hip_angle: float = 0.0


@dataclass(frozen=True)
class FrameFeatures:
    """Everything the raw classifier needs to label one frame"""
    weight_distribution: WeightDistribution
    club_position: ClubPosition
    body_rotation: BodyRotation
    club_velocity: float
    hand_movement: float
    # Fraction of KEY_LANDMARKS present with visibility above 0.5
    key_landmark_visibility: float


class FeatureExtractor:
    """Extract golf-specific features from one landmark snapshot"""

    def __init__(self, use_elbow_projection: bool = False, min_visibility: float = 0.0):
        """
        Args:
            use_elbow_projection: Estimate the club head by projecting a fixed
                club length along the forearm instead of hanging it below the hands
            min_visibility: Landmarks below this visibility are treated as missing
        """
        self.use_elbow_projection = use_elbow_projection
        self.min_visibility = min_visibility

    def _landmark(self, snapshot: LandmarkSnapshot, name: str) -> Optional[Landmark]:
        landmark = snapshot.get(name)
        if landmark is None:
            return None
        if landmark.visibility is not None and landmark.visibility < self.min_visibility:
            return None
        return landmark

    # ------------------------------------------------------------------
    # Weight distribution
    # ------------------------------------------------------------------

    def weight_distribution(self, snapshot: LandmarkSnapshot) -> WeightDistribution:
        """Estimate left/right weight split from how low each foot sits in frame."""
        left_foot = self._landmark(snapshot, 'left_ankle') or self._landmark(snapshot, 'left_heel')
        right_foot = self._landmark(snapshot, 'right_ankle') or self._landmark(snapshot, 'right_heel')

        if left_foot is None or right_foot is None:
            return WeightDistribution.balanced()

        left_toe = self._landmark(snapshot, 'left_foot_index') or left_foot
        right_toe = self._landmark(snapshot, 'right_foot_index') or right_foot

        left_pressure = self._foot_pressure(left_foot, left_toe)
        right_pressure = self._foot_pressure(right_foot, right_toe)
        total_pressure = left_pressure + right_pressure

        if total_pressure <= 0:
            return WeightDistribution.balanced()

        left_percent = int(math.floor(left_pressure / total_pressure * 100 + 0.5))
        return WeightDistribution.from_left(left_percent)

    @staticmethod
    def _foot_pressure(heel: Landmark, toe: Landmark) -> float:
        # Higher up the frame reads as more planted for a face-on camera
        heel_pressure = 1.0 - max(0.0, min(1.0, heel.y))
        toe_pressure = 1.0 - max(0.0, min(1.0, toe.y))
        return (heel_pressure + toe_pressure) / 2

    # ------------------------------------------------------------------
    # Club position
    # ------------------------------------------------------------------

    def club_position(self, snapshot: LandmarkSnapshot) -> ClubPosition:
        if self.use_elbow_projection:
            return self.projected_club_position(snapshot)
        return self.wrist_club_position(snapshot)

    def wrist_club_position(self, snapshot: LandmarkSnapshot) -> ClubPosition:
        """Club head hangs a fixed offset below the midpoint of the hands."""
        left_wrist = self._landmark(snapshot, 'left_wrist')
        right_wrist = self._landmark(snapshot, 'right_wrist')

        if left_wrist is None or right_wrist is None:
            return ClubPosition.center()

        grip_x, grip_y = self._midpoint(left_wrist, right_wrist)
        angle = math.degrees(math.atan2(right_wrist.y - left_wrist.y, right_wrist.x - left_wrist.x))

        return ClubPosition(
            x=grip_x,
            y=grip_y + CLUB_DROP_OFFSET,
            z=self._mean_z(left_wrist, right_wrist),
            angle=angle,
        )

    def projected_club_position(self, snapshot: LandmarkSnapshot) -> ClubPosition:
        """
        Project a fixed club length from the grip along the forearm line.

        The shaft is taken to continue the elbow -> grip direction. Falls back
        to the wrist-only estimate when either elbow is missing.
        """
        left_wrist = self._landmark(snapshot, 'left_wrist')
        right_wrist = self._landmark(snapshot, 'right_wrist')
        left_elbow = self._landmark(snapshot, 'left_elbow')
        right_elbow = self._landmark(snapshot, 'right_elbow')

        if left_wrist is None or right_wrist is None:
            return ClubPosition.center()
        if left_elbow is None or right_elbow is None:
            return self.wrist_club_position(snapshot)

        grip_x, grip_y = self._midpoint(left_wrist, right_wrist)
        elbow_x, elbow_y = self._midpoint(left_elbow, right_elbow)

        shaft_angle = math.atan2(grip_y - elbow_y, grip_x - elbow_x)

        return ClubPosition(
            x=grip_x + CLUB_LENGTH * math.cos(shaft_angle),
            y=grip_y + CLUB_LENGTH * math.sin(shaft_angle),
            z=self._mean_z(left_wrist, right_wrist),
            angle=math.degrees(shaft_angle),
        )

    @staticmethod
    def _midpoint(a: Landmark, b: Landmark) -> Tuple[float, float]:
        return (a.x + b.x) / 2, (a.y + b.y) / 2

    @staticmethod
    def _mean_z(a: Landmark, b: Landmark) -> Optional[float]:
        if a.z is None or b.z is None:
            return None
        return (a.z + b.z) / 2

    # ------------------------------------------------------------------
    # Body rotation
    # ------------------------------------------------------------------

    def body_rotation(self, snapshot: LandmarkSnapshot) -> BodyRotation:
        left_shoulder = self._landmark(snapshot, 'left_shoulder')
        right_shoulder = self._landmark(snapshot, 'right_shoulder')
        left_hip = self._landmark(snapshot, 'left_hip')
        right_hip = self._landmark(snapshot, 'right_hip')

        if left_shoulder is None or right_shoulder is None or left_hip is None or right_hip is None:
            return BodyRotation()

        return BodyRotation(
            shoulder_angle=self._line_angle(left_shoulder, right_shoulder),
            hip_angle=self._line_angle(left_hip, right_hip),
        )

    @staticmethod
    def _line_angle(start: Landmark, end: Landmark) -> float:
        return math.degrees(math.atan2(end.y - start.y, end.x - start.x))

    # ------------------------------------------------------------------
    # Motion between frames
    # ------------------------------------------------------------------

    @staticmethod
    def club_velocity(previous: Optional[ClubPosition], current: ClubPosition) -> float:
        """Club-head displacement since the previous frame (normalized units per frame)."""
        if previous is None:
            return 0.0
        return current.distance_to(previous)

    def hand_movement(self, previous: Optional[LandmarkSnapshot], current: LandmarkSnapshot) -> float:
        """Displacement of the hands' midpoint since the previous frame."""
        if previous is None:
            return 0.0

        hands_now = self._hands(current)
        hands_before = self._hands(previous)
        if hands_now is None or hands_before is None:
            return 0.0

        return math.hypot(hands_now[0] - hands_before[0], hands_now[1] - hands_before[1])

    def _hands(self, snapshot: LandmarkSnapshot) -> Optional[Tuple[float, float]]:
        left_wrist = self._landmark(snapshot, 'left_wrist')
        right_wrist = self._landmark(snapshot, 'right_wrist')
        if left_wrist is None or right_wrist is None:
            return None
        return self._midpoint(left_wrist, right_wrist)

    # ------------------------------------------------------------------
    # Visibility
    # ------------------------------------------------------------------

    @staticmethod
    def key_landmark_visibility(snapshot: LandmarkSnapshot) -> float:
        visible = 0
        for name in KEY_LANDMARKS:
            landmark = snapshot.get(name)
            if landmark is not None and landmark.is_visible(KEY_LANDMARK_VISIBILITY):
                visible += 1
        return visible / len(KEY_LANDMARKS)

    # ------------------------------------------------------------------
    # Complete frame
    # ------------------------------------------------------------------

    def extract(
        self,
        snapshot: LandmarkSnapshot,
        previous: Optional[LandmarkSnapshot] = None,
    ) -> FrameFeatures:
        """Calculate all classifier features for one frame."""
        club_position = self.club_position(snapshot)
        previous_club = self.club_position(previous) if previous is not None else None

        return FrameFeatures(
            weight_distribution=self.weight_distribution(snapshot),
            club_position=club_position,
            body_rotation=self.body_rotation(snapshot),
            club_velocity=self.club_velocity(previous_club, club_position),
            hand_movement=self.hand_movement(previous, snapshot),
            key_landmark_visibility=self.key_landmark_visibility(snapshot),
        )
