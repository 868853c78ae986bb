"""
Pose estimation backed by ultralytics YOLOv8-pose.

The estimator turns model output into detect.types.Pose objects using
PoseNet-style part names and scores, so downstream code never touches
ultralytics types.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from . import config
from .types import PART_NAMES, Keypoint, Pose, Position

logger = logging.getLogger(__name__)

# ultralytics (8.1 - 8.3.1xx) zeroes the xy of keypoints below this confidence.
MASKED_KEYPOINT_CONFIDENCE = 0.5


@dataclass(frozen=True)
class EstimationConfig:
    """Per-call estimation options."""
    decoding_method: str = config.DEFAULT_DETECTION_MODE
    max_detections: int = 2
    score_threshold: float = 0.1
    flip_horizontal: bool = True


def poses_from_arrays(
    xy: np.ndarray,
    keypoint_conf: Optional[np.ndarray],
    box_conf: Optional[np.ndarray],
    frame_width: int,
    flip_horizontal: bool = False
) -> List[Pose]:
    """
    Build poses from raw keypoint arrays.

    Args:
        xy: (N, 17, 2) keypoint pixel coordinates in COCO order
        keypoint_conf: (N, 17) keypoint confidences, or None
        box_conf: (N,) person box confidences, or None
        frame_width: Width of the frame the coordinates refer to
        flip_horizontal: Mirror x coordinates (part labels are kept)

    Returns:
        One Pose per person. The pose score is the mean keypoint confidence,
        or the box confidence when keypoint confidences are unavailable.
        Keypoints at exactly (0, 0) with confidence below
        MASKED_KEYPOINT_CONFIDENCE get score 0.0.
    """
    xy = np.asarray(xy, dtype=float)
    if xy.size == 0:
        return []

    poses = []
    for i in range(xy.shape[0]):
        if keypoint_conf is not None:
            scores = np.asarray(keypoint_conf[i], dtype=float)
            pose_score = float(scores.mean())
        else:
            box_score = float(box_conf[i]) if box_conf is not None else 0.0
            scores = np.full(len(PART_NAMES), box_score)
            pose_score = box_score

        keypoints = []
        for j, part in enumerate(PART_NAMES[:xy.shape[1]]):
            x, y = float(xy[i, j, 0]), float(xy[i, j, 1])
            score = float(scores[j])
            if x == 0.0 and y == 0.0 and score < MASKED_KEYPOINT_CONFIDENCE:
                # Blanked by the model wrapper: position unknown, not the frame origin
                score = 0.0
            if flip_horizontal:
                x = frame_width - 1 - x
            keypoints.append(Keypoint(part=part, position=Position(x, y), score=score))

        poses.append(Pose(score=pose_score, keypoints=tuple(keypoints)))

    return poses


class YOLOPoseEstimator:
    """
    Pose estimator using a YOLOv8-pose model.

    Requires: pip install ultralytics

    Model variants (speed vs accuracy):
        - yolov8n-pose: Nano - fastest, fine for a single webcam on CPU
        - yolov8s-pose: Small - steadier wrists at a modest cost
        - yolov8m/l/x-pose: need a GPU for real-time use
    """

    def __init__(self, model_name: str = None, device: str = None):
        """
        Initialize the estimator.

        Args:
            model_name: Model key ('yolov8n-pose', ...) or a path to .pt weights
            device: Device to run on ('cpu', 'cuda', or None for auto)
        """
        self.model_name = config.resolve_model_file(model_name or config.DEFAULT_POSE_MODEL)
        self.device = device
        self.model = None

    def load_model(self) -> bool:
        """Load the YOLO pose model (downloads automatically if not present)."""
        try:
            from ultralytics import YOLO

            logger.info("Loading pose model: %s", self.model_name)
            self.model = YOLO(self.model_name)

            if self.device:
                self.model.to(self.device)

            logger.info("Pose model loaded")
            return True

        except ImportError:
            logger.error("ultralytics package not installed (pip install ultralytics)")
            return False
        except Exception as e:
            logger.error("Error loading pose model %s: %s", self.model_name, e)
            return False

    def estimate_poses(self, frame: np.ndarray, options: EstimationConfig = None) -> List[Pose]:
        """
        Estimate poses in a BGR frame.

        Args:
            frame: Input image as numpy array (H, W, 3)
            options: Estimation options; defaults to multi-pose settings

        Returns:
            List of Pose objects (empty if the model could not be loaded)
        """
        options = options or EstimationConfig()

        if self.model is None:
            if not self.load_model():
                return []

        max_det = 1 if options.decoding_method == config.SINGLE_POSE else options.max_detections
        results = self.model(
            frame,
            conf=options.score_threshold,
            max_det=max_det,
            verbose=False,
        )

        width = int(frame.shape[1])
        poses: List[Pose] = []
        for result in results:
            keypoints = result.keypoints
            if keypoints is None or keypoints.xy is None:
                continue

            xy = keypoints.xy.cpu().numpy()
            kp_conf = keypoints.conf.cpu().numpy() if keypoints.conf is not None else None
            box_conf = result.boxes.conf.cpu().numpy() if result.boxes is not None else None

            poses.extend(poses_from_arrays(xy, kp_conf, box_conf, width, options.flip_horizontal))

        return poses
