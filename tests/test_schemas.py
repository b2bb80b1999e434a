import pytest
from pydantic import ValidationError

from swingphase.schemas.landmarks import SnapshotIn
from swingphase.schemas.phase import PhaseRecordOut, SwingTimelineOut
from swingphase.services.swing_analysis import analyze_swing
from swingphase.services.swing_phase_detector import SwingPhaseDetector


def pose_payload():
    landmarks = [None] * 33
    landmarks[15] = {"x": 0.4, "y": 0.5, "z": -0.1, "visibility": 0.9}
    landmarks[16] = {"x": 0.6, "y": 0.5, "visibility": 0.95}
    return {"landmarks": landmarks, "timestamp_ms": 40.0}


def test_snapshot_payload_parses():
    """Pose estimator output converts to a landmark snapshot."""
    snapshot = SnapshotIn.model_validate(pose_payload()).to_snapshot()

    left_wrist = snapshot.get("left_wrist")
    assert left_wrist.x == 0.4
    assert left_wrist.z == -0.1
    assert snapshot.get("right_wrist").z is None
    assert snapshot.get("nose") is None
    assert snapshot.timestamp_ms == 40.0


def test_short_landmark_list_is_accepted():
    """Trailing landmarks may be omitted and read back as missing."""
    snapshot = SnapshotIn(landmarks=[{"x": 0.5, "y": 0.1}]).to_snapshot()

    assert snapshot.get("nose").y == 0.1
    assert snapshot.get("right_foot_index") is None


@pytest.mark.parametrize("mutate", [
    lambda payload: payload["landmarks"][15].update(visibility=1.5),
    lambda payload: payload.update(timestamp_ms=-1.0),
    lambda payload: payload["landmarks"].append(None),
    lambda payload: payload["landmarks"][16].pop("x"),
])
def test_bad_payloads_rejected(mutate):
    """Out-of-range visibility, negative timestamps, oversize lists and missing coordinates fail."""
    payload = pose_payload()
    mutate(payload)

    with pytest.raises(ValidationError):
        SnapshotIn.model_validate(payload)


def test_phase_record_serialises(address_snapshot):
    """Records dump with wire phase names and nested feature objects."""
    record = SwingPhaseDetector().detect(address_snapshot, 0)

    data = PhaseRecordOut.model_validate(record).model_dump()

    assert data["name"] == "address"
    assert data["weight_distribution"] == {"left": 50, "right": 50, "total": 100}
    assert data["club_position"]["y"] == pytest.approx(0.6)
    assert data["body_rotation"] == {"shoulder_angle": 0.0, "hip_angle": 0.0}


def test_timeline_serialises(jittery_snapshots):
    """A whole timeline converts in one call."""
    timeline = analyze_swing(jittery_snapshots, fps=25)

    data = SwingTimelineOut.model_validate(timeline).model_dump()

    assert len(data["records"]) == 20
    assert data["transitions"][0]["from_phase"] == "address"
    assert data["transitions"][0]["to_phase"] == "backswing"
    assert [s["name"] for s in data["segments"]][:2] == ["address", "backswing"]
