"""
Offline validation and debugging helpers for phase detection output.

These checks only report problems; they never alter the results they inspect.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Union

import structlog

from swingphase.services.feature_extraction import WeightDistribution
from swingphase.services.hysteresis_gate import is_valid_transition
from swingphase.services.phase_classifier import PHASE_ORDER, SwingPhase
from swingphase.services.phase_tracker import PhaseRecord, PhaseTransition

logger = structlog.get_logger()

PhaseLike = Union[SwingPhase, str]


@dataclass
class ValidationResult:
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.is_valid = False
        self.errors.append(message)


def _as_phase(phase: PhaseLike) -> SwingPhase:
    return phase if isinstance(phase, SwingPhase) else SwingPhase(phase)


def validate_weight_distribution(weight: WeightDistribution) -> ValidationResult:
    """Check that a stored weight split still sums to 100."""
    result = ValidationResult()
    total = weight.left + weight.right

    if total != 100:
        result.add_error(f"Weight distribution sums to {total}% instead of 100%")
    if not (0 <= weight.left <= 100 and 0 <= weight.right <= 100):
        result.add_error(f"Weight distribution out of range: L:{weight.left}% R:{weight.right}%")

    if not result.is_valid:
        logger.warning(
            "Weight distribution validation failed",
            left=weight.left,
            right=weight.right,
            errors=result.errors,
        )
    return result


def validate_phase_sequence(phases: Sequence[PhaseLike]) -> ValidationResult:
    """
    Flag phases that deviate from the canonical swing order.

    A phase may repeat, advance by one step, or drop back by one step; a
    follow-through may be followed by a new address. Anything else is reported
    as an error and the expected position is left unchanged.
    """
    result = ValidationResult()
    if len(phases) < 2:
        return result

    position = PHASE_ORDER.index(_as_phase(phases[0]))

    for index, raw_phase in enumerate(phases[1:], start=1):
        phase = _as_phase(raw_phase)
        target = PHASE_ORDER.index(phase)

        if target == position:
            continue
        if target == position + 1 or target == position - 1:
            position = target
            continue
        if PHASE_ORDER[position] == SwingPhase.FOLLOW_THROUGH and phase == SwingPhase.ADDRESS:
            position = target
            continue

        result.add_error(
            f"Unexpected phase at position {index}: "
            f"{PHASE_ORDER[position].value} -> {phase.value}"
        )

    if not result.is_valid:
        logger.warning(
            "Invalid phase sequence",
            sequence=" -> ".join(_as_phase(p).value for p in phases),
            errors=result.errors,
        )
    return result


def validate_transition_history(
    history: Sequence[PhaseTransition],
    phase_change_cooldown_ms: float = 0.0,
) -> ValidationResult:
    """Check a recorded history against the transition table and the cooldown."""
    result = ValidationResult()

    for transition in history:
        if not is_valid_transition(transition.from_phase, transition.to_phase):
            result.add_error(
                f"Transition not allowed at frame {transition.frame}: "
                f"{transition.from_phase.value} -> {transition.to_phase.value}"
            )

    for previous, current in zip(history, history[1:]):
        if current.from_phase != previous.to_phase:
            result.add_error(
                f"Broken chain at frame {current.frame}: "
                f"expected from {previous.to_phase.value}, got {current.from_phase.value}"
            )
        gap = current.time_ms - previous.time_ms
        if gap < phase_change_cooldown_ms:
            result.add_error(
                f"Transitions at frames {previous.frame} and {current.frame} "
                f"are {gap:.0f}ms apart, below the {phase_change_cooldown_ms:.0f}ms cooldown"
            )

    if not result.is_valid:
        logger.warning("Transition history validation failed", errors=result.errors)
    return result


def count_phase_transitions(phases: Sequence[PhaseLike]) -> int:
    """Number of frame-to-frame label changes in a sequence."""
    labels = [_as_phase(p) for p in phases]
    return sum(1 for previous, current in zip(labels, labels[1:]) if previous != current)


def describe_phase(record: PhaseRecord) -> str:
    """Short human-readable summary of one frame's phase."""
    weight = record.weight_distribution
    club = record.club_position
    return (
        f"Phase: {record.name.value.upper()} (confidence {record.confidence:.2f})\n"
        f"Weight: {weight.left}% Left / {weight.right}% Right\n"
        f"Club Position: X={club.x:.2f}, Y={club.y:.2f}\n"
        f"Total: {weight.left + weight.right}%"
    )
