"""
Configuration constants for pose detection.

Model choices, detection-mode defaults and skeleton layout live here so the
estimator, the drawing helpers and the agent settings agree on them.
"""

from typing import Dict, List, Tuple

# =============================================================================
# Model Selection
# =============================================================================
# Available models (weights auto-download on first use):
#   - 'yolov8n-pose': Nano - RECOMMENDED for CPU webcams
#   - 'yolov8s-pose': Small - better keypoints, still real-time on most laptops
#   - 'yolov8m-pose': Medium - needs a GPU for smooth frame rates
#   - 'yolov8l-pose': Large
#   - 'yolov8x-pose': Extra Large

DEFAULT_POSE_MODEL = 'yolov8n-pose'

POSE_MODELS = {
    'yolov8n-pose': 'yolov8n-pose.pt',
    'yolov8s-pose': 'yolov8s-pose.pt',
    'yolov8m-pose': 'yolov8m-pose.pt',
    'yolov8l-pose': 'yolov8l-pose.pt',
    'yolov8x-pose': 'yolov8x-pose.pt',
}

# =============================================================================
# Detection Modes
# =============================================================================
SINGLE_POSE = 'single-pose'
MULTI_POSE = 'multi-pose'
DETECTION_MODES = (SINGLE_POSE, MULTI_POSE)
DEFAULT_DETECTION_MODE = MULTI_POSE

# Single person: trust the one pose, be strict about individual parts
SINGLE_POSE_DEFAULTS = {
    "max_detections": 1,
    "min_pose_confidence": 0.1,
    "min_part_confidence": 0.5,
}

# Several people: be strict about the pose, lenient about parts
MULTI_POSE_DEFAULTS = {
    "max_detections": 2,
    "min_pose_confidence": 0.6,
    "min_part_confidence": 0.1,
}

# =============================================================================
# Frame Geometry
# =============================================================================
FRAME_WIDTH = 600
FRAME_HEIGHT = 500

# =============================================================================
# Skeleton Layout (PoseNet part names)
# =============================================================================
CONNECTED_PARTS: List[Tuple[str, str]] = [
    ("leftHip", "leftShoulder"),
    ("leftElbow", "leftShoulder"),
    ("leftElbow", "leftWrist"),
    ("leftHip", "leftKnee"),
    ("leftKnee", "leftAnkle"),
    ("rightHip", "rightShoulder"),
    ("rightElbow", "rightShoulder"),
    ("rightElbow", "rightWrist"),
    ("rightHip", "rightKnee"),
    ("rightKnee", "rightAnkle"),
    ("leftShoulder", "rightShoulder"),
    ("leftHip", "rightHip"),
]

# =============================================================================
# Drawing (BGR)
# =============================================================================
KEYPOINT_COLOR = (0, 255, 255)
SKELETON_COLOR = (0, 255, 255)
BOUNDING_BOX_COLOR = (255, 0, 0)
KEYPOINT_RADIUS = 3
LINE_WIDTH = 2


def get_mode_defaults(mode: str) -> Dict[str, float]:
    """
    Get default thresholds for a detection mode.

    Args:
        mode: 'single-pose' or 'multi-pose'

    Returns:
        Dictionary with max_detections, min_pose_confidence, min_part_confidence
    """
    if mode == SINGLE_POSE:
        return dict(SINGLE_POSE_DEFAULTS)
    if mode == MULTI_POSE:
        return dict(MULTI_POSE_DEFAULTS)
    raise ValueError(f"Unknown detection mode: {mode} (expected one of {DETECTION_MODES})")


def resolve_model_file(model_name: str) -> str:
    """Map a model key like 'yolov8n-pose' to its weights file name."""
    if model_name in POSE_MODELS:
        return POSE_MODELS[model_name]
    if model_name.endswith('.pt'):
        return model_name
    return model_name + '.pt'
