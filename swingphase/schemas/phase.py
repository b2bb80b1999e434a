from pydantic import BaseModel, ConfigDict
from typing import List, Optional

from swingphase.services.phase_classifier import SwingPhase


class WeightDistributionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    left: int
    right: int
    total: int


class ClubPositionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    x: float
    y: float
    z: Optional[float] = None
    angle: float


class BodyRotationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    shoulder_angle: float
    hip_angle: float


class PhaseRecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    name: SwingPhase
    start_frame: int
    end_frame: int
    start_time_ms: float
    end_time_ms: float
    duration_ms: float
    confidence: float
    weight_distribution: WeightDistributionOut
    club_position: ClubPositionOut
    body_rotation: BodyRotationOut


class PhaseTransitionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    from_phase: SwingPhase
    to_phase: SwingPhase
    frame: int
    time_ms: float
    weight_distribution: WeightDistributionOut


class PhaseSegmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    name: SwingPhase
    start_frame: int
    end_frame: int
    start_time_ms: float
    end_time_ms: float
    duration_ms: float
    frame_count: int
    mean_confidence: float


class SwingTimelineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    records: List[PhaseRecordOut]
    transitions: List[PhaseTransitionOut]
    segments: List[PhaseSegmentOut]
