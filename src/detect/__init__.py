# Pose detection module
from .config import (
    DEFAULT_POSE_MODEL,
    DETECTION_MODES,
    SINGLE_POSE,
    MULTI_POSE,
    get_mode_defaults,
)
from .types import PART_NAMES, Keypoint, Pose, Position, MissingKeypointError, make_pose
from .estimator import EstimationConfig, YOLOPoseEstimator, poses_from_arrays
from .drawing import draw_keypoints, draw_skeleton, draw_bounding_box, render_overlay

__all__ = [
    # Config
    "DEFAULT_POSE_MODEL",
    "DETECTION_MODES",
    "SINGLE_POSE",
    "MULTI_POSE",
    "get_mode_defaults",
    # Types
    "PART_NAMES",
    "Keypoint",
    "Pose",
    "Position",
    "MissingKeypointError",
    "make_pose",
    # Estimator
    "EstimationConfig",
    "YOLOPoseEstimator",
    "poses_from_arrays",
    # Drawing
    "draw_keypoints",
    "draw_skeleton",
    "draw_bounding_box",
    "render_overlay",
]
