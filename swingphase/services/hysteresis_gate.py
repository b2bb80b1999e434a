"""
Hysteresis gate for swing phase changes.

Decides whether the smoother's consensus may replace the currently held phase.
A change has to clear every check: it must be a real change, the cooldown since
the last accepted change must have elapsed, recent confidence must be high
enough, the club velocity must fit the target phase (skipped for a one-frame
window), and the move must follow the swing's phase order (one step forward,
or one step back to recover from a brief misclassification).
"""

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Optional, Sequence

from swingphase.config import SmoothingConfig
from swingphase.services.phase_classifier import SwingPhase

# Frames averaged for the confidence check
CONFIDENCE_LOOKBACK = 3

VALID_TRANSITIONS: Dict[SwingPhase, FrozenSet[SwingPhase]] = {
    SwingPhase.ADDRESS: frozenset({SwingPhase.BACKSWING}),
    SwingPhase.BACKSWING: frozenset({SwingPhase.TOP, SwingPhase.ADDRESS}),
    SwingPhase.TOP: frozenset({SwingPhase.DOWNSWING, SwingPhase.BACKSWING}),
    SwingPhase.DOWNSWING: frozenset({SwingPhase.IMPACT, SwingPhase.TOP}),
    SwingPhase.IMPACT: frozenset({SwingPhase.FOLLOW_THROUGH, SwingPhase.DOWNSWING}),
    SwingPhase.FOLLOW_THROUGH: frozenset({SwingPhase.ADDRESS, SwingPhase.IMPACT}),
}

# (latest velocity, change since previous frame) -> allowed
VELOCITY_PRECONDITIONS: Dict[SwingPhase, Callable[[float, float], bool]] = {
    SwingPhase.BACKSWING: lambda v, dv: dv > -0.1,  # not sharply decelerating
    SwingPhase.TOP: lambda v, dv: dv < 0.1,  # no longer accelerating
    SwingPhase.DOWNSWING: lambda v, dv: v > 0.5,
    SwingPhase.IMPACT: lambda v, dv: v > 0.8,
    SwingPhase.FOLLOW_THROUGH: lambda v, dv: dv < 0.2,
}


def is_valid_transition(from_phase: SwingPhase, to_phase: SwingPhase) -> bool:
    return to_phase in VALID_TRANSITIONS.get(from_phase, frozenset())


@dataclass(frozen=True)
class GateDecision:
    accepted: bool
    reason: str


class HysteresisGate:
    """Stateless check of a candidate phase against the held phase"""

    def __init__(self, config: SmoothingConfig):
        self.config = config

    def evaluate(
        self,
        candidate: Optional[SwingPhase],
        current: SwingPhase,
        now_ms: float,
        last_transition_ms: Optional[float],
        velocities: Sequence[float],
        confidences: Sequence[float],
    ) -> GateDecision:
        if candidate is None or candidate == current:
            return GateDecision(False, "no_change")

        if last_transition_ms is not None:
            if now_ms - last_transition_ms < self.config.phase_change_cooldown_ms:
                return GateDecision(False, "cooldown")

        if self.recent_confidence(confidences) < self.config.hysteresis_threshold:
            return GateDecision(False, "low_confidence")

        # A one-frame window has no velocity history to judge by
        if self.config.smoothing_enabled and not self.velocity_allows(candidate, velocities):
            return GateDecision(False, "velocity")

        if not is_valid_transition(current, candidate):
            return GateDecision(False, "invalid_transition")

        return GateDecision(True, "accepted")

    @staticmethod
    def recent_confidence(confidences: Sequence[float]) -> float:
        recent = list(confidences)[-CONFIDENCE_LOOKBACK:]
        if not recent:
            return 0.0
        return sum(recent) / len(recent)

    @staticmethod
    def velocity_allows(candidate: SwingPhase, velocities: Sequence[float]) -> bool:
        precondition = VELOCITY_PRECONDITIONS.get(candidate)
        if precondition is None:
            return True

        velocity = velocities[-1] if velocities else 0.0
        delta = velocities[-1] - velocities[-2] if len(velocities) >= 2 else 0.0
        return precondition(velocity, delta)
