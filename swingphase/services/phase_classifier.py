#!/usr/bin/env python3
"""
Raw Golf Swing Phase Classifier

Labels a single frame from its extracted features using six independent
rule-sets, one per swing phase. Rules are evaluated in swing order and the
first match wins, so a frame that satisfies several rules resolves by priority
rather than by best fit. Frames matching nothing fall back to address.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, List, Tuple

import structlog

from swingphase.services.feature_extraction import FrameFeatures

logger = structlog.get_logger()


class SwingPhase(Enum):
    """Golf swing phases in canonical order"""
    ADDRESS = "address"
    BACKSWING = "backswing"
    TOP = "top"
    DOWNSWING = "downswing"
    IMPACT = "impact"
    FOLLOW_THROUGH = "follow-through"


PHASE_ORDER: List[SwingPhase] = [
    SwingPhase.ADDRESS,
    SwingPhase.BACKSWING,
    SwingPhase.TOP,
    SwingPhase.DOWNSWING,
    SwingPhase.IMPACT,
    SwingPhase.FOLLOW_THROUGH,
]

BASE_CONFIDENCE = 0.5
VISIBILITY_CONFIDENCE_WEIGHT = 0.3
CORROBORATION_BONUS = 0.2


@dataclass(frozen=True)
class PhaseThresholds:
    """Rule thresholds; empirically tuned, override per camera setup if needed"""
    # Address: balanced, club behind the ball, hands still
    address_max_weight_asymmetry: float = 20.0
    address_max_club_x: float = 0.5
    address_max_hand_movement: float = 0.1

    # Backswing: club raised and behind the body, shoulders turning
    backswing_max_club_y: float = 0.6
    backswing_min_shoulder_angle: float = 20.0
    backswing_max_club_x: float = 0.4

    # Top: full shoulder turn, club parallel to ground, weight moving
    top_min_shoulder_angle: float = 80.0
    top_max_club_angle_from_horizontal: float = 15.0
    top_min_weight_asymmetry: float = 30.0

    # Downswing: fast club coming down and forward
    downswing_min_velocity: float = 0.8
    downswing_min_club_y: float = 0.4
    downswing_min_club_x: float = 0.3

    # Impact: peak speed inside the ball zone, weight transferred
    impact_min_velocity: float = 0.9
    impact_zone_x: Tuple[float, float] = (0.4, 0.6)
    impact_zone_y: Tuple[float, float] = (0.3, 0.7)
    impact_min_weight_asymmetry: float = 70.0

    # Follow-through: club past the ball and rising, body still turning
    follow_through_min_club_x: float = 0.6
    follow_through_min_shoulder_angle: float = 0.0
    follow_through_max_club_y: float = 0.7


@dataclass(frozen=True)
class RawClassification:
    """Unsmoothed label for one frame"""
    phase: SwingPhase
    confidence: float
    # Every phase whose rule held on this frame, not just the winner
    matched: FrozenSet[SwingPhase]
    features: FrameFeatures


def club_angle_from_horizontal(angle: float) -> float:
    """Smallest angle between a line at `angle` degrees and the horizontal."""
    deviation = abs(angle) % 180.0
    return min(deviation, 180.0 - deviation)


class RawPhaseClassifier:
    """Frame-by-frame rule-based swing phase classifier"""

    def __init__(self, thresholds: PhaseThresholds = PhaseThresholds()):
        self.thresholds = thresholds

        # Priority order is load-bearing: first match wins
        self.rules: List[Tuple[SwingPhase, Callable[[FrameFeatures], bool]]] = [
            (SwingPhase.ADDRESS, self.is_address),
            (SwingPhase.BACKSWING, self.is_backswing),
            (SwingPhase.TOP, self.is_top),
            (SwingPhase.DOWNSWING, self.is_downswing),
            (SwingPhase.IMPACT, self.is_impact),
            (SwingPhase.FOLLOW_THROUGH, self.is_follow_through),
        ]

    def classify(self, features: FrameFeatures) -> RawClassification:
        """Label one frame and score the label's confidence."""
        matched = frozenset(phase for phase, rule in self.rules if rule(features))

        phase = SwingPhase.ADDRESS
        for candidate, _ in self.rules:
            if candidate in matched:
                phase = candidate
                break

        confidence = self.confidence(features, phase, matched)

        logger.debug(
            "Raw phase classified",
            phase=phase.value,
            confidence=round(confidence, 3),
            matched=sorted(p.value for p in matched),
        )

        return RawClassification(
            phase=phase,
            confidence=confidence,
            matched=matched,
            features=features,
        )

    # ------------------------------------------------------------------
    # Phase rules
    # ------------------------------------------------------------------

    def is_address(self, features: FrameFeatures) -> bool:
        t = self.thresholds
        balanced = features.weight_distribution.asymmetry < t.address_max_weight_asymmetry
        club_behind_ball = features.club_position.x < t.address_max_club_x
        stationary = features.hand_movement < t.address_max_hand_movement
        return balanced and club_behind_ball and stationary

    def is_backswing(self, features: FrameFeatures) -> bool:
        t = self.thresholds
        club_raised = features.club_position.y < t.backswing_max_club_y
        shoulders_turning = abs(features.body_rotation.shoulder_angle) > t.backswing_min_shoulder_angle
        club_behind_body = features.club_position.x < t.backswing_max_club_x
        return club_raised and shoulders_turning and club_behind_body

    def is_top(self, features: FrameFeatures) -> bool:
        t = self.thresholds
        full_turn = abs(features.body_rotation.shoulder_angle) > t.top_min_shoulder_angle
        club_parallel = (
            club_angle_from_horizontal(features.club_position.angle)
            < t.top_max_club_angle_from_horizontal
        )
        transfer_started = features.weight_distribution.asymmetry > t.top_min_weight_asymmetry
        return full_turn and club_parallel and transfer_started

    def is_downswing(self, features: FrameFeatures) -> bool:
        t = self.thresholds
        fast = features.club_velocity > t.downswing_min_velocity
        club_coming_down = features.club_position.y > t.downswing_min_club_y
        club_coming_forward = features.club_position.x > t.downswing_min_club_x
        return fast and club_coming_down and club_coming_forward

    def is_impact(self, features: FrameFeatures) -> bool:
        t = self.thresholds
        peak_speed = features.club_velocity > t.impact_min_velocity
        transfer_complete = features.weight_distribution.asymmetry > t.impact_min_weight_asymmetry
        return peak_speed and self.in_impact_zone(features) and transfer_complete

    def is_follow_through(self, features: FrameFeatures) -> bool:
        t = self.thresholds
        club_past_impact = features.club_position.x > t.follow_through_min_club_x
        still_rotating = abs(features.body_rotation.shoulder_angle) > t.follow_through_min_shoulder_angle
        club_rising = features.club_position.y < t.follow_through_max_club_y
        return club_past_impact and still_rotating and club_rising

    def in_impact_zone(self, features: FrameFeatures) -> bool:
        x_min, x_max = self.thresholds.impact_zone_x
        y_min, y_max = self.thresholds.impact_zone_y
        club = features.club_position
        return x_min < club.x < x_max and y_min < club.y < y_max

    # ------------------------------------------------------------------
    # Confidence
    # ------------------------------------------------------------------

    def confidence(
        self,
        features: FrameFeatures,
        phase: SwingPhase,
        matched: FrozenSet[SwingPhase],
    ) -> float:
        """
        Score how much to trust `phase` on this frame.

        Base 0.5, plus up to 0.3 for key-landmark visibility, plus 0.2 when the
        phase's own rule held and a phase-specific corroborating signal is
        present. A phase reached only through the address fallback gets no
        corroboration bonus.
        """
        confidence = BASE_CONFIDENCE
        confidence += features.key_landmark_visibility * VISIBILITY_CONFIDENCE_WEIGHT

        if phase in matched and self._corroborated(features, phase):
            confidence += CORROBORATION_BONUS

        return max(0.0, min(1.0, confidence))

    def _corroborated(self, features: FrameFeatures, phase: SwingPhase) -> bool:
        t = self.thresholds
        asymmetry = features.weight_distribution.asymmetry

        if phase == SwingPhase.ADDRESS:
            return asymmetry < t.address_max_weight_asymmetry
        if phase == SwingPhase.TOP:
            return abs(features.body_rotation.shoulder_angle) > t.top_min_shoulder_angle
        if phase == SwingPhase.IMPACT:
            return asymmetry > t.impact_min_weight_asymmetry
        return False
