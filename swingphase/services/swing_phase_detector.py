#!/usr/bin/env python3
"""
Swing Phase Detector

Frame-by-frame entry point: extracts features from each landmark snapshot,
labels the frame with the raw classifier and passes the label through the
smoothing/hysteresis layer to produce a stable phase for the frame.

Frames must be fed in increasing order. To re-process a video from an earlier
point, call reset() and replay from the first frame.
"""

from typing import List, Optional

import structlog

from swingphase.config import Settings, SmoothingConfig
from swingphase.services.feature_extraction import FeatureExtractor
from swingphase.services.landmarks import LandmarkSnapshot
from swingphase.services.phase_classifier import (
    PhaseThresholds,
    RawClassification,
    RawPhaseClassifier,
    SwingPhase,
)
from swingphase.services.phase_tracker import (
    PhaseRecord,
    PhaseTracker,
    PhaseTransition,
    SmoothingStats,
)

logger = structlog.get_logger()

DEFAULT_FPS = 30.0


class SwingPhaseDetector:
    """Stateful swing phase detector for a single swing analysis session"""

    def __init__(
        self,
        config: Optional[SmoothingConfig] = None,
        thresholds: PhaseThresholds = PhaseThresholds(),
        use_elbow_projection: bool = False,
        min_visibility: float = 0.0,
        fps: float = DEFAULT_FPS,
    ):
        """
        Args:
            config: Smoothing/hysteresis tuning; defaults to the medium preset
            thresholds: Raw classifier rule thresholds
            use_elbow_projection: Use the forearm-projected club estimate
            min_visibility: Landmarks below this visibility are treated as missing
            fps: Frame rate used to derive timestamps for snapshots without one
        """
        self.feature_extractor = FeatureExtractor(
            use_elbow_projection=use_elbow_projection,
            min_visibility=min_visibility,
        )
        self.classifier = RawPhaseClassifier(thresholds)
        self.tracker = PhaseTracker(config)
        self.fps = fps

        self._previous_snapshot: Optional[LandmarkSnapshot] = None
        self._last_classification: Optional[RawClassification] = None

        logger.info(
            "SwingPhaseDetector initialized",
            smoothing_window=self.tracker.config.smoothing_window,
            hysteresis_threshold=self.tracker.config.hysteresis_threshold,
            phase_change_cooldown_ms=self.tracker.config.phase_change_cooldown_ms,
            use_elbow_projection=use_elbow_projection,
            min_visibility=min_visibility,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SwingPhaseDetector":
        return cls(
            config=settings.smoothing_config(),
            use_elbow_projection=settings.use_elbow_projection,
            min_visibility=settings.min_landmark_visibility,
            fps=settings.default_fps,
        )

    def configure(self, config: SmoothingConfig) -> None:
        self.tracker.configure(config)

    @property
    def config(self) -> SmoothingConfig:
        return self.tracker.config

    def frame_time_ms(self, snapshot: LandmarkSnapshot, frame_index: int) -> float:
        if snapshot.timestamp_ms is not None:
            return float(snapshot.timestamp_ms)
        return frame_index * 1000.0 / self.fps

    def detect(
        self,
        snapshot: LandmarkSnapshot,
        frame_index: int,
        time_ms: Optional[float] = None,
    ) -> PhaseRecord:
        """
        Classify one frame and return the held phase for it.

        Args:
            snapshot: Landmarks for this frame
            frame_index: Position of the frame in the video
            time_ms: Frame time; defaults to the snapshot timestamp, then to
                frame_index / fps

        Returns:
            PhaseRecord for the phase held after this frame
        """
        if time_ms is None:
            time_ms = self.frame_time_ms(snapshot, frame_index)

        features = self.feature_extractor.extract(snapshot, self._previous_snapshot)
        classification = self.classifier.classify(features)

        self.tracker.update(
            label=classification.phase,
            velocity=features.club_velocity,
            confidence=classification.confidence,
            frame_index=frame_index,
            time_ms=time_ms,
            weight_distribution=features.weight_distribution,
        )

        self._previous_snapshot = snapshot
        self._last_classification = classification

        held_phase = self.tracker.current_phase
        start_time_ms = self.tracker.phase_start_time_ms

        return PhaseRecord(
            name=held_phase,
            start_frame=self.tracker.phase_start_frame,
            end_frame=frame_index,
            start_time_ms=start_time_ms,
            end_time_ms=time_ms,
            duration_ms=time_ms - start_time_ms,
            confidence=self.classifier.confidence(features, held_phase, classification.matched),
            weight_distribution=features.weight_distribution,
            club_position=features.club_position,
            body_rotation=features.body_rotation,
        )

    def detect_all(self, snapshots: List[LandmarkSnapshot]) -> List[PhaseRecord]:
        """Run every frame of a swing in order, continuing from the current state."""
        return [self.detect(snapshot, frame_index) for frame_index, snapshot in enumerate(snapshots)]

    @property
    def current_phase(self) -> SwingPhase:
        return self.tracker.current_phase

    @property
    def phase_history(self) -> List[PhaseTransition]:
        return self.tracker.history

    @property
    def last_classification(self) -> Optional[RawClassification]:
        """Raw, unsmoothed result for the most recent frame"""
        return self._last_classification

    def get_smoothing_stats(self) -> SmoothingStats:
        return self.tracker.stats()

    def reset(self) -> None:
        """Forget everything about the current swing."""
        self.tracker.reset()
        self._previous_snapshot = None
        self._last_classification = None
        logger.info("SwingPhaseDetector reset")
