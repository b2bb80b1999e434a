from pydantic import BaseModel, Field
from typing import List, Optional

from swingphase.services.landmarks import LANDMARK_COUNT, Landmark, LandmarkSnapshot


class LandmarkIn(BaseModel):
    x: float
    y: float
    z: Optional[float] = None
    visibility: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    def to_landmark(self) -> Landmark:
        return Landmark(x=self.x, y=self.y, z=self.z, visibility=self.visibility)


class SnapshotIn(BaseModel):
    """One frame from the pose estimator; missing landmarks are sent as null"""
    landmarks: List[Optional[LandmarkIn]] = Field(max_length=LANDMARK_COUNT)
    timestamp_ms: Optional[float] = Field(default=None, ge=0.0)

    def to_snapshot(self) -> LandmarkSnapshot:
        points = [lm.to_landmark() if lm is not None else None for lm in self.landmarks]
        return LandmarkSnapshot(landmarks=tuple(points), timestamp_ms=self.timestamp_ms)
