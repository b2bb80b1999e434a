import pytest

from swingphase.config import SmoothingConfig
from swingphase.services.feature_extraction import (
    BodyRotation,
    ClubPosition,
    WeightDistribution,
)
from swingphase.services.phase_classifier import PHASE_ORDER, SwingPhase
from swingphase.services.phase_tracker import PhaseRecord, PhaseTracker, PhaseTransition
from swingphase.services.phase_validation import (
    count_phase_transitions,
    describe_phase,
    validate_phase_sequence,
    validate_transition_history,
    validate_weight_distribution,
)


def transition(from_phase, to_phase, frame, time_ms):
    return PhaseTransition(
        from_phase=from_phase,
        to_phase=to_phase,
        frame=frame,
        time_ms=time_ms,
        weight_distribution=WeightDistribution.balanced(),
    )


def test_canonical_sequence_is_valid():
    """The full swing in order passes."""
    result = validate_phase_sequence(PHASE_ORDER)

    assert result.is_valid
    assert result.errors == []


def test_sequence_accepts_phase_names():
    """Wire names validate the same as enum members."""
    assert validate_phase_sequence(["address", "address", "backswing", "top", "backswing"]).is_valid


def test_new_swing_after_follow_through():
    """Follow-through may be followed by a new address."""
    phases = PHASE_ORDER + [SwingPhase.ADDRESS, SwingPhase.BACKSWING]

    assert validate_phase_sequence(phases).is_valid


def test_skipped_phase_is_reported():
    """Jumping ahead reports an error and keeps checking from the old position."""
    result = validate_phase_sequence(["address", "top", "backswing"])

    assert not result.is_valid
    assert len(result.errors) == 1
    assert "address -> top" in result.errors[0]


@pytest.mark.parametrize("phases", [[], ["impact"]])
def test_short_sequences_are_valid(phases):
    """Fewer than two phases cannot be out of order."""
    assert validate_phase_sequence(phases).is_valid


def test_unknown_phase_name_raises():
    """Names outside the phase set are rejected outright."""
    with pytest.raises(ValueError):
        validate_phase_sequence(["address", "waggle"])


def test_weight_distribution_checks():
    """Splits must sum to 100 with each side inside 0..100."""
    assert validate_weight_distribution(WeightDistribution.from_left(64)).is_valid

    wrong_sum = validate_weight_distribution(WeightDistribution(left=60, right=50))
    assert not wrong_sum.is_valid
    assert "110%" in wrong_sum.errors[0]

    out_of_range = validate_weight_distribution(WeightDistribution(left=120, right=-20))
    assert not out_of_range.is_valid
    assert len(out_of_range.errors) == 1


def test_tracker_history_validates():
    """History produced by the tracker passes its own checks."""
    config = SmoothingConfig()
    tracker = PhaseTracker(config)
    labels = [phase for phase in PHASE_ORDER for _ in range(5)]
    for frame, label in enumerate(labels):
        tracker.update(label, 0.9, 0.8, frame, frame * 100.0)

    result = validate_transition_history(tracker.history, config.phase_change_cooldown_ms)

    assert result.is_valid


def test_bad_history_is_reported():
    """Illegal jumps, broken chains and crowded changes are all flagged."""
    history = [
        transition(SwingPhase.ADDRESS, SwingPhase.TOP, 3, 100.0),
        transition(SwingPhase.BACKSWING, SwingPhase.TOP, 4, 140.0),
    ]

    result = validate_transition_history(history, phase_change_cooldown_ms=100)

    assert not result.is_valid
    assert len(result.errors) == 3


@pytest.mark.parametrize("phases,expected", [
    ([], 0),
    (["address"], 0),
    (["address", "address", "backswing", "backswing"], 1),
    (["top", "backswing", "top", "backswing"], 3),
    (PHASE_ORDER, 5),
])
def test_count_phase_transitions(phases, expected):
    """Counts frame-to-frame label changes."""
    assert count_phase_transitions(phases) == expected


def test_describe_phase():
    """Summary shows the phase, weight split and club position."""
    record = PhaseRecord(
        name=SwingPhase.FOLLOW_THROUGH,
        start_frame=30,
        end_frame=34,
        start_time_ms=1000.0,
        end_time_ms=1133.0,
        duration_ms=133.0,
        confidence=0.8,
        weight_distribution=WeightDistribution.from_left(82),
        club_position=ClubPosition(x=0.71, y=0.42),
        body_rotation=BodyRotation(),
    )

    text = describe_phase(record)

    assert "FOLLOW-THROUGH" in text
    assert "Weight: 82% Left / 18% Right" in text
    assert "Club Position: X=0.71, Y=0.42" in text
    assert "Total: 100%" in text
