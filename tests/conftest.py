import pytest

from swingphase.config import SmoothingConfig
from swingphase.services.feature_extraction import (
    BodyRotation,
    ClubPosition,
    FrameFeatures,
    WeightDistribution,
)
from swingphase.services.landmarks import Landmark, LandmarkSnapshot


def build_snapshot(timestamp_ms=None, **points):
    """Snapshot from name=(x, y) or name=(x, y, visibility) keyword arguments."""
    landmarks = {}
    for name, point in points.items():
        visibility = point[2] if len(point) > 2 else 1.0
        landmarks[name] = Landmark(x=point[0], y=point[1], visibility=visibility)
    return LandmarkSnapshot.from_points(landmarks, timestamp_ms=timestamp_ms)


def build_features(
    left=50,
    club=(0.5, 0.5),
    club_angle=0.0,
    shoulder=0.0,
    hip=0.0,
    velocity=0.0,
    hand_movement=0.0,
    visibility=1.0,
):
    return FrameFeatures(
        weight_distribution=WeightDistribution.from_left(left),
        club_position=ClubPosition(x=club[0], y=club[1], angle=club_angle),
        body_rotation=BodyRotation(shoulder_angle=shoulder, hip_angle=hip),
        club_velocity=velocity,
        hand_movement=hand_movement,
        key_landmark_visibility=visibility,
    )


@pytest.fixture
def make_snapshot():
    return build_snapshot


@pytest.fixture
def make_features():
    return build_features


@pytest.fixture
def address_snapshot():
    """Square stance, feet level, hands together at the center of the frame."""
    return build_snapshot(
        left_shoulder=(0.4, 0.3), right_shoulder=(0.6, 0.3),
        left_elbow=(0.45, 0.4), right_elbow=(0.55, 0.4),
        left_wrist=(0.5, 0.5), right_wrist=(0.5, 0.5),
        left_hip=(0.42, 0.6), right_hip=(0.58, 0.6),
        left_ankle=(0.4, 0.9), right_ankle=(0.6, 0.9),
    )


@pytest.fixture
def empty_snapshot():
    return LandmarkSnapshot.from_points({})


@pytest.fixture
def default_config():
    return SmoothingConfig()


ADDRESS_POSE = dict(
    left_shoulder=(0.4, 0.3), right_shoulder=(0.6, 0.3),
    left_wrist=(0.40, 0.45), right_wrist=(0.44, 0.45),
    left_hip=(0.42, 0.6), right_hip=(0.58, 0.6),
    left_ankle=(0.4, 0.9), right_ankle=(0.6, 0.9),
)

# Shoulders turned, hands back, weight 75/25 on the lead foot
BACKSWING_POSE = dict(
    left_shoulder=(0.4, 0.3), right_shoulder=(0.6, 0.4),
    left_wrist=(0.33, 0.45), right_wrist=(0.37, 0.45),
    left_hip=(0.42, 0.6), right_hip=(0.58, 0.6),
    left_ankle=(0.4, 0.7), right_ankle=(0.6, 0.9),
)


@pytest.fixture
def jittery_snapshots():
    """20 frames flipping between an address pose and a backswing pose."""
    return [
        build_snapshot(**(ADDRESS_POSE if frame % 2 == 0 else BACKSWING_POSE))
        for frame in range(20)
    ]
