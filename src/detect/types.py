"""
Model-agnostic pose types.

Keypoint part names follow the PoseNet convention (camelCase, e.g. "leftWrist")
and coordinates are in pixels of the processed frame.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple


PART_NAMES = (
    "nose",
    "leftEye",
    "rightEye",
    "leftEar",
    "rightEar",
    "leftShoulder",
    "rightShoulder",
    "leftElbow",
    "rightElbow",
    "leftWrist",
    "rightWrist",
    "leftHip",
    "rightHip",
    "leftKnee",
    "rightKnee",
    "leftAnkle",
    "rightAnkle",
)


class MissingKeypointError(LookupError):
    """Raised when a pose lacks a keypoint the caller requires."""

    def __init__(self, part: str):
        super().__init__(f"Pose has no keypoint named '{part}'")
        self.part = part


class Position(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class Keypoint:
    """A single named 2D keypoint."""
    part: str
    position: Position
    score: float  # confidence [0..1]


@dataclass(frozen=True)
class Pose:
    """
    One detected person: overall score plus keypoints in PART_NAMES order.
    """
    score: float
    keypoints: Tuple[Keypoint, ...] = ()

    def find(self, part: str) -> Keypoint:
        """
        Return the keypoint named `part`.

        Raises MissingKeypointError if the pose does not carry it.
        """
        for keypoint in self.keypoints:
            if keypoint.part == part:
                return keypoint
        raise MissingKeypointError(part)

    def get(self, part: str) -> Optional[Keypoint]:
        try:
            return self.find(part)
        except MissingKeypointError:
            return None

    def bounding_box(self) -> Tuple[float, float, float, float]:
        """(x1, y1, x2, y2) spanning all keypoints."""
        if not self.keypoints:
            return (0.0, 0.0, 0.0, 0.0)
        xs = [k.position.x for k in self.keypoints]
        ys = [k.position.y for k in self.keypoints]
        return (min(xs), min(ys), max(xs), max(ys))


def make_pose(score: float, points: dict) -> Pose:
    """
    Build a Pose from {part: (x, y, score)}.

    Parts are ordered by PART_NAMES; unknown parts are appended after them.
    """
    ordered = [p for p in PART_NAMES if p in points]
    ordered += [p for p in points if p not in PART_NAMES]
    keypoints = tuple(
        Keypoint(part=p, position=Position(float(points[p][0]), float(points[p][1])), score=float(points[p][2]))
        for p in ordered
    )
    return Pose(score=float(score), keypoints=keypoints)
