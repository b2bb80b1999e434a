"""
Phase session state.

Owns everything that changes from frame to frame during one swing: the held
phase and when it started, the smoothing buffers, the time of the last accepted
change and the transition history. One tracker per swing; call reset() before
replaying or analysing another swing.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import structlog

from swingphase.config import SmoothingConfig
from swingphase.services.feature_extraction import (
    BodyRotation,
    ClubPosition,
    WeightDistribution,
)
from swingphase.services.hysteresis_gate import GateDecision, HysteresisGate
from swingphase.services.phase_classifier import SwingPhase
from swingphase.services.temporal_smoothing import TemporalSmoother

logger = structlog.get_logger()


@dataclass(frozen=True)
class PhaseTransition:
    """An accepted change of held phase"""
    from_phase: SwingPhase
    to_phase: SwingPhase
    frame: int
    time_ms: float
    weight_distribution: WeightDistribution


@dataclass(frozen=True)
class PhaseRecord:
    """The held phase as reported for one frame"""
    name: SwingPhase
    start_frame: int
    end_frame: int
    start_time_ms: float
    end_time_ms: float
    duration_ms: float
    confidence: float
    weight_distribution: WeightDistribution
    club_position: ClubPosition
    body_rotation: BodyRotation


@dataclass(frozen=True)
class SmoothingStats:
    """Point-in-time view of the smoothing buffers"""
    phase_buffer: List[str] = field(default_factory=list)
    average_velocity: float = 0.0
    average_confidence: float = 0.0
    current_phase: str = SwingPhase.ADDRESS.value
    transition_count: int = 0


class PhaseTracker:
    """Smoother + hysteresis gate + held phase for one swing"""

    def __init__(self, config: Optional[SmoothingConfig] = None):
        self.config = config or SmoothingConfig()
        self._smoother = TemporalSmoother(self.config.smoothing_window)
        self._gate = HysteresisGate(self.config)

        self._current_phase = SwingPhase.ADDRESS
        self._phase_start_frame = 0
        self._phase_start_time_ms = 0.0
        self._last_transition_ms: Optional[float] = None
        self._history: List[PhaseTransition] = []

    def configure(self, config: SmoothingConfig) -> None:
        """Apply new tuning; buffered frames are kept up to the new window size."""
        self.config = config
        self._smoother.resize(config.smoothing_window)
        self._gate = HysteresisGate(config)

        logger.info(
            "Phase smoothing configured",
            smoothing_window=config.smoothing_window,
            hysteresis_threshold=config.hysteresis_threshold,
            phase_change_cooldown_ms=config.phase_change_cooldown_ms,
        )

    def update(
        self,
        label: SwingPhase,
        velocity: float,
        confidence: float,
        frame_index: int,
        time_ms: float,
        weight_distribution: Optional[WeightDistribution] = None,
    ) -> GateDecision:
        """Push one raw classification and apply the gate's verdict."""
        self._smoother.push(label, velocity, confidence)
        candidate = self._smoother.consensus()

        decision = self._gate.evaluate(
            candidate=candidate,
            current=self._current_phase,
            now_ms=time_ms,
            last_transition_ms=self._last_transition_ms,
            velocities=self._smoother.velocities,
            confidences=self._smoother.confidences,
        )

        if decision.accepted:
            self._accept(
                candidate,
                frame_index,
                time_ms,
                weight_distribution or WeightDistribution.balanced(),
            )
        elif decision.reason != "no_change":
            logger.debug(
                "Phase change rejected",
                current=self._current_phase.value,
                candidate=candidate.value,
                reason=decision.reason,
                frame=frame_index,
            )

        return decision

    def _accept(
        self,
        new_phase: SwingPhase,
        frame_index: int,
        time_ms: float,
        weight_distribution: WeightDistribution,
    ) -> None:
        transition = PhaseTransition(
            from_phase=self._current_phase,
            to_phase=new_phase,
            frame=frame_index,
            time_ms=time_ms,
            weight_distribution=weight_distribution,
        )
        self._history.append(transition)

        logger.info(
            "Phase transition",
            from_phase=transition.from_phase.value,
            to_phase=transition.to_phase.value,
            frame=frame_index,
            time_ms=time_ms,
            weight_left=weight_distribution.left,
            weight_right=weight_distribution.right,
        )

        self._current_phase = new_phase
        self._phase_start_frame = frame_index
        self._phase_start_time_ms = time_ms
        self._last_transition_ms = time_ms

    def reset(self) -> None:
        """Clear all per-swing state so the next swing starts from address."""
        self._smoother.clear()
        self._current_phase = SwingPhase.ADDRESS
        self._phase_start_frame = 0
        self._phase_start_time_ms = 0.0
        self._last_transition_ms = None
        self._history = []

    @property
    def current_phase(self) -> SwingPhase:
        return self._current_phase

    @property
    def phase_start_frame(self) -> int:
        return self._phase_start_frame

    @property
    def phase_start_time_ms(self) -> float:
        return self._phase_start_time_ms

    @property
    def history(self) -> List[PhaseTransition]:
        return list(self._history)

    def stats(self) -> SmoothingStats:
        velocities = self._smoother.velocities
        confidences = self._smoother.confidences

        return SmoothingStats(
            phase_buffer=[label.value for label in self._smoother.labels],
            average_velocity=float(np.mean(velocities)) if velocities else 0.0,
            average_confidence=float(np.mean(confidences)) if confidences else 0.0,
            current_phase=self._current_phase.value,
            transition_count=len(self._history),
        )
