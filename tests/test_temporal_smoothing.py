from swingphase.services.phase_classifier import SwingPhase
from swingphase.services.temporal_smoothing import TemporalSmoother

A = SwingPhase.ADDRESS
B = SwingPhase.BACKSWING
T = SwingPhase.TOP


def fill(smoother, labels, velocity=0.5, confidence=0.8):
    for label in labels:
        smoother.push(label, velocity, confidence)


def test_empty_buffer_has_no_consensus():
    """Nothing buffered means nothing to vote on."""
    assert TemporalSmoother(5).consensus() is None


def test_consensus_needs_sixty_percent_of_window():
    """Window 5 needs three matching labels."""
    smoother = TemporalSmoother(5)

    fill(smoother, [B, B])
    assert smoother.consensus() is None

    smoother.push(B, 0.5, 0.8)
    assert smoother.consensus() == B


def test_count_measured_against_configured_window():
    """Early frames cannot win a vote on a partially filled buffer."""
    smoother = TemporalSmoother(7)

    fill(smoother, [T, T, T, T])

    assert len(smoother) == 4
    assert smoother.consensus() is None

    smoother.push(T, 0.5, 0.8)
    assert smoother.consensus() == T


def test_split_vote_has_no_consensus():
    """Alternating labels never reach the required share."""
    smoother = TemporalSmoother(5)

    fill(smoother, [A, B, A, B, T])

    assert smoother.consensus() is None


def test_window_of_one_follows_latest_label():
    """A single-frame window passes every raw label straight through."""
    smoother = TemporalSmoother(1)

    for label in (A, B, A, T):
        smoother.push(label, 0.5, 0.8)
        assert smoother.consensus() == label


def test_buffers_are_bounded():
    """Oldest entries fall out once the window is full."""
    smoother = TemporalSmoother(3)

    for index in range(6):
        smoother.push(A, float(index), index / 10)

    assert len(smoother) == 3
    assert smoother.velocities == [3.0, 4.0, 5.0]
    assert smoother.confidences == [0.3, 0.4, 0.5]


def test_resize_keeps_most_recent_entries():
    """Shrinking the window keeps the newest frames."""
    smoother = TemporalSmoother(5)
    fill(smoother, [A, A, B, B, T])

    smoother.resize(3)

    assert smoother.window == 3
    assert smoother.labels == [B, B, T]
    assert smoother.consensus() == B


def test_clear_empties_all_buffers():
    """Clearing drops labels, velocities and confidences together."""
    smoother = TemporalSmoother(5)
    fill(smoother, [A, B, T])

    smoother.clear()

    assert len(smoother) == 0
    assert smoother.velocities == []
    assert smoother.confidences == []
    assert smoother.consensus() is None
