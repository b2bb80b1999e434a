#!/usr/bin/env python3
"""
Whole-swing analysis built on the frame-by-frame detector.

Runs a complete snapshot sequence through a fresh detector session and
collapses the per-frame records into contiguous phase segments. Also provides
a raw-vs-smoothed comparison for tuning the anti-jitter settings.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import structlog

from swingphase.config import SMOOTHING_PRESETS, SmoothingConfig
from swingphase.services.landmarks import LandmarkSnapshot
from swingphase.services.phase_classifier import PhaseThresholds, SwingPhase
from swingphase.services.phase_tracker import PhaseRecord, PhaseTransition
from swingphase.services.phase_validation import count_phase_transitions
from swingphase.services.swing_phase_detector import DEFAULT_FPS, SwingPhaseDetector

logger = structlog.get_logger()


@dataclass(frozen=True)
class PhaseSegment:
    """A run of consecutive frames held in the same phase"""
    name: SwingPhase
    start_frame: int
    end_frame: int
    start_time_ms: float
    end_time_ms: float
    duration_ms: float
    frame_count: int
    mean_confidence: float


@dataclass
class SwingTimeline:
    """Full result of analysing one swing"""
    records: List[PhaseRecord] = field(default_factory=list)
    transitions: List[PhaseTransition] = field(default_factory=list)
    segments: List[PhaseSegment] = field(default_factory=list)

    @property
    def phases(self) -> List[SwingPhase]:
        return [record.name for record in self.records]

    def segment_for(self, phase: SwingPhase) -> Optional[PhaseSegment]:
        """First segment held in `phase`, if any."""
        for segment in self.segments:
            if segment.name == phase:
                return segment
        return None


@dataclass(frozen=True)
class SmoothingComparison:
    """Raw vs smoothed labelling of the same frames"""
    raw_phases: List[SwingPhase]
    smoothed_phases: List[SwingPhase]
    raw_transitions: int
    smoothed_transitions: int
    differing_frames: int

    @property
    def transition_reduction(self) -> int:
        return self.raw_transitions - self.smoothed_transitions


def build_segments(records: Sequence[PhaseRecord]) -> List[PhaseSegment]:
    """Collapse per-frame records into contiguous runs of the same phase."""
    segments: List[PhaseSegment] = []
    run: List[PhaseRecord] = []

    def close_run() -> None:
        first, last = run[0], run[-1]
        segments.append(PhaseSegment(
            name=first.name,
            start_frame=first.end_frame,
            end_frame=last.end_frame,
            start_time_ms=first.end_time_ms,
            end_time_ms=last.end_time_ms,
            duration_ms=last.end_time_ms - first.end_time_ms,
            frame_count=len(run),
            mean_confidence=float(np.mean([r.confidence for r in run])),
        ))

    for record in records:
        if run and record.name != run[-1].name:
            close_run()
            run = []
        run.append(record)

    if run:
        close_run()

    return segments


def analyze_swing(
    snapshots: Sequence[LandmarkSnapshot],
    config: Optional[SmoothingConfig] = None,
    thresholds: PhaseThresholds = PhaseThresholds(),
    use_elbow_projection: bool = False,
    fps: float = DEFAULT_FPS,
) -> SwingTimeline:
    """
    Classify every frame of one swing with a fresh detector session.

    Args:
        snapshots: Landmark snapshots in frame order
        config: Smoothing tuning; defaults to the medium preset

    Returns:
        SwingTimeline with per-frame records, accepted transitions and segments
    """
    detector = SwingPhaseDetector(
        config=config,
        thresholds=thresholds,
        use_elbow_projection=use_elbow_projection,
        fps=fps,
    )

    records = detector.detect_all(list(snapshots))
    timeline = SwingTimeline(
        records=records,
        transitions=detector.phase_history,
        segments=build_segments(records),
    )

    logger.info(
        "Swing analysis complete",
        total_frames=len(records),
        transitions=len(timeline.transitions),
        segments=[segment.name.value for segment in timeline.segments],
    )
    return timeline


def compare_smoothing(
    snapshots: Sequence[LandmarkSnapshot],
    config: Optional[SmoothingConfig] = None,
    thresholds: PhaseThresholds = PhaseThresholds(),
    use_elbow_projection: bool = False,
    fps: float = DEFAULT_FPS,
) -> SmoothingComparison:
    """Label the same frames with smoothing disabled and with `config`.

    Both runs share the classifier settings so only the anti-jitter layer differs.
    """
    raw = analyze_swing(
        snapshots,
        config=SMOOTHING_PRESETS["none"],
        thresholds=thresholds,
        use_elbow_projection=use_elbow_projection,
        fps=fps,
    ).phases
    smoothed = analyze_swing(
        snapshots,
        config=config or SmoothingConfig(),
        thresholds=thresholds,
        use_elbow_projection=use_elbow_projection,
        fps=fps,
    ).phases

    comparison = SmoothingComparison(
        raw_phases=raw,
        smoothed_phases=smoothed,
        raw_transitions=count_phase_transitions(raw),
        smoothed_transitions=count_phase_transitions(smoothed),
        differing_frames=sum(1 for a, b in zip(raw, smoothed) if a != b),
    )

    logger.info(
        "Smoothing comparison",
        total_frames=len(raw),
        raw_transitions=comparison.raw_transitions,
        smoothed_transitions=comparison.smoothed_transitions,
        differing_frames=comparison.differing_frames,
    )
    return comparison
