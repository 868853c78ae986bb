"""
Preview overlay: keypoints, skeleton and bounding box drawn with OpenCV.
"""

from typing import Iterable, Optional

import cv2
import numpy as np

from . import config
from .types import Pose


def _pt(position) -> tuple:
    return (int(round(position.x)), int(round(position.y)))


def draw_keypoints(frame: np.ndarray, pose: Pose, min_confidence: float, color=None) -> np.ndarray:
    """Draw a dot for every keypoint at or above min_confidence (in place)."""
    color = color or config.KEYPOINT_COLOR
    for keypoint in pose.keypoints:
        if keypoint.score < min_confidence:
            continue
        cv2.circle(frame, _pt(keypoint.position), config.KEYPOINT_RADIUS, color, -1)
    return frame


def draw_skeleton(frame: np.ndarray, pose: Pose, min_confidence: float, color=None) -> np.ndarray:
    """Draw limbs whose two endpoints are both confident (in place)."""
    color = color or config.SKELETON_COLOR
    for part_a, part_b in config.CONNECTED_PARTS:
        a = pose.get(part_a)
        b = pose.get(part_b)
        if a is None or b is None:
            continue
        if a.score < min_confidence or b.score < min_confidence:
            continue
        cv2.line(frame, _pt(a.position), _pt(b.position), color, config.LINE_WIDTH)
    return frame


def draw_bounding_box(frame: np.ndarray, pose: Pose, color=None) -> np.ndarray:
    """Draw the box spanning all keypoints (in place)."""
    color = color or config.BOUNDING_BOX_COLOR
    x1, y1, x2, y2 = pose.bounding_box()
    cv2.rectangle(frame, (int(x1), int(y1)), (int(x2), int(y2)), color, 1)
    return frame


def render_overlay(
    frame: Optional[np.ndarray],
    poses: Iterable[Pose],
    min_pose_confidence: float,
    min_part_confidence: float,
    width: int,
    height: int,
    show_video: bool = False,
    show_skeleton: bool = True,
    show_points: bool = False,
    show_bounding_box: bool = False,
    mirror_video: bool = True
) -> np.ndarray:
    """
    Compose the preview image for one frame.

    With show_video the camera frame is the background (mirrored to match
    flipped keypoints when mirror_video is set), otherwise a black canvas.
    Only poses at or above min_pose_confidence are drawn.
    """
    if show_video and frame is not None:
        canvas = cv2.resize(frame, (width, height))
        if mirror_video:
            canvas = cv2.flip(canvas, 1)
    else:
        canvas = np.zeros((height, width, 3), dtype=np.uint8)

    for pose in poses:
        if pose.score < min_pose_confidence:
            continue
        if show_points:
            draw_keypoints(canvas, pose, min_part_confidence)
        if show_skeleton:
            draw_skeleton(canvas, pose, min_part_confidence)
        if show_bounding_box:
            draw_bounding_box(canvas, pose)

    return canvas
