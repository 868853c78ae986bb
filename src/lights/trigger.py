"""
Wrist-in-corner trigger rule.

Per frame, decides whether each light should be on:
- left light: left wrist in the top-left quadrant of the frame
- right light: right wrist in the top-right quadrant of the frame

Poses below the minimum pose confidence are ignored. If no pose qualifies,
both lights resolve to off.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from detect.types import MissingKeypointError, Pose

logger = logging.getLogger(__name__)

LEFT_WRIST = "leftWrist"
RIGHT_WRIST = "rightWrist"


@dataclass(frozen=True)
class TriggerConfig:
    """Thresholds and frame geometry for one run."""
    min_pose_confidence: float
    min_part_confidence: float
    frame_width: int
    frame_height: int

    @property
    def half_width(self) -> float:
        return self.frame_width / 2

    @property
    def half_height(self) -> float:
        return self.frame_height / 2


@dataclass(frozen=True)
class LightDecision:
    """Desired state of both lights for one frame."""
    left_on: bool = False
    right_on: bool = False

    def __or__(self, other: "LightDecision") -> "LightDecision":
        return LightDecision(
            left_on=self.left_on or other.left_on,
            right_on=self.right_on or other.right_on,
        )


class TriggerEvaluator:
    """
    Maps detected poses to a LightDecision.

    Raises MissingKeypointError if a qualifying pose lacks either wrist.
    """

    def __init__(self, config: TriggerConfig):
        self.config = config

    def pose_qualifies(self, pose: Pose) -> bool:
        return pose.score >= self.config.min_pose_confidence

    def left_triggered(self, pose: Pose) -> bool:
        wrist = pose.find(LEFT_WRIST)
        return (
            wrist.score >= self.config.min_part_confidence
            and wrist.position.x <= self.config.half_width
            and wrist.position.y <= self.config.half_height
        )

    def right_triggered(self, pose: Pose) -> bool:
        wrist = pose.find(RIGHT_WRIST)
        return (
            wrist.score >= self.config.min_part_confidence
            and wrist.position.x >= self.config.half_width
            and wrist.position.y <= self.config.half_height
        )

    def evaluate_pose(self, pose: Pose) -> LightDecision:
        """Decision for a single pose; all-off if the pose does not qualify."""
        if not self.pose_qualifies(pose):
            return LightDecision()

        decision = LightDecision(
            left_on=self.left_triggered(pose),
            right_on=self.right_triggered(pose),
        )
        if decision.left_on:
            logger.debug("leftWrist in top-left corner at %s", pose.find(LEFT_WRIST).position)
        if decision.right_on:
            logger.debug("rightWrist in top-right corner at %s", pose.find(RIGHT_WRIST).position)
        return decision

    def evaluate(self, poses: Iterable[Pose]) -> LightDecision:
        """
        Decision for a whole frame.

        A light is on if any qualifying pose turns it on.
        """
        decision = LightDecision()
        for pose in poses:
            decision = decision | self.evaluate_pose(pose)
        return decision


__all__ = [
    "LEFT_WRIST",
    "RIGHT_WRIST",
    "LightDecision",
    "MissingKeypointError",
    "TriggerConfig",
    "TriggerEvaluator",
]
