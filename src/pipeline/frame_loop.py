"""
Per-frame processing loop.

Each iteration takes exactly one frame end to end:
estimate poses -> decide light states -> publish changes
and only then reads the next frame. There is never more than one frame in
flight, and the light state is touched only from this loop.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

import cv2
import numpy as np

from detect.drawing import render_overlay
from detect.estimator import EstimationConfig
from detect.types import Pose
from lights.gateway import PublisherGateway
from lights.trigger import LightDecision, TriggerEvaluator

from .video_source import CameraSource, TimestampedFrame

logger = logging.getLogger(__name__)


@dataclass
class FrameResult:
    """What happened for one processed frame."""
    frame_number: int
    poses: List[Pose] = field(default_factory=list)
    decision: LightDecision = field(default_factory=LightDecision)
    published: Dict[str, bool] = field(default_factory=dict)

    @property
    def any_published(self) -> bool:
        return any(self.published.values())


class PreviewWindow:
    """
    OpenCV window showing the skeleton overlay.

    show() returns False once the user presses 'q'.
    """

    def __init__(
        self,
        min_pose_confidence: float,
        min_part_confidence: float,
        width: int,
        height: int,
        show_video: bool = False,
        show_skeleton: bool = True,
        show_points: bool = False,
        show_bounding_box: bool = False,
        mirror_video: bool = True,
        title: str = "pose-lights"
    ):
        self.min_pose_confidence = min_pose_confidence
        self.min_part_confidence = min_part_confidence
        self.width = width
        self.height = height
        self.show_video = show_video
        self.show_skeleton = show_skeleton
        self.show_points = show_points
        self.show_bounding_box = show_bounding_box
        self.mirror_video = mirror_video
        self.title = title

    def render(self, frame: Optional[np.ndarray], poses: List[Pose]) -> np.ndarray:
        return render_overlay(
            frame,
            poses,
            self.min_pose_confidence,
            self.min_part_confidence,
            self.width,
            self.height,
            show_video=self.show_video,
            show_skeleton=self.show_skeleton,
            show_points=self.show_points,
            show_bounding_box=self.show_bounding_box,
            mirror_video=self.mirror_video,
        )

    def show(self, frame: Optional[np.ndarray], poses: List[Pose]) -> bool:
        cv2.imshow(self.title, self.render(frame, poses))
        return (cv2.waitKey(1) & 0xFF) != ord("q")

    def close(self) -> None:
        cv2.destroyWindow(self.title)


class PoseLightLoop:
    """
    Drives the estimator, the trigger rule and the publisher gateway.

    The estimator only needs an estimate_poses(frame, options) method, so tests
    can pass a stub instead of a YOLO model.
    """

    def __init__(
        self,
        source: Optional[CameraSource],
        estimator,
        evaluator: TriggerEvaluator,
        gateway: PublisherGateway,
        estimation_config: Optional[EstimationConfig] = None,
        preview: Optional[PreviewWindow] = None
    ):
        self.source = source
        self.estimator = estimator
        self.evaluator = evaluator
        self.gateway = gateway
        self.estimation_config = estimation_config or EstimationConfig()
        self.preview = preview

        self.frames_processed = 0
        self.last_frame_time: Optional[datetime] = None
        self._running = False

    def process_frame(self, frame: np.ndarray, frame_number: Optional[int] = None) -> FrameResult:
        """
        Run one frame through estimate -> evaluate -> publish.

        Raises MissingKeypointError if the estimator returns a pose without
        wrist keypoints.
        """
        poses = self.estimator.estimate_poses(frame, self.estimation_config)
        decision = self.evaluator.evaluate(poses)
        published = self.gateway.apply(decision)

        self.frames_processed += 1
        self.last_frame_time = datetime.now(timezone.utc)

        return FrameResult(
            frame_number=frame_number if frame_number is not None else self.frames_processed,
            poses=list(poses),
            decision=decision,
            published=published,
        )

    def process(self, ts_frame: TimestampedFrame) -> FrameResult:
        return self.process_frame(ts_frame.frame, ts_frame.frame_number)

    def run(self, max_frames: Optional[int] = None) -> int:
        """
        Process frames until the source ends, max_frames is reached,
        stop() is called, or the preview window is closed with 'q'.

        Returns:
            Number of frames processed by this call
        """
        if self.source is None:
            raise ValueError("PoseLightLoop.run() needs a frame source")

        self._running = True
        processed = 0
        logger.info("Frame loop started")

        try:
            while self._running:
                if max_frames is not None and processed >= max_frames:
                    break

                ts_frame = self.source.read()
                if ts_frame is None:
                    logger.info("Video source ended after %d frames", processed)
                    break

                result = self.process(ts_frame)
                processed += 1

                if self.preview is not None and not self.preview.show(ts_frame.frame, result.poses):
                    logger.info("Preview closed by user")
                    break
        finally:
            self._running = False
            if self.preview is not None:
                self.preview.close()

        logger.info("Frame loop stopped (%d frames)", processed)
        return processed

    def stop(self) -> None:
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def get_stats(self) -> dict:
        """Counters for the status API."""
        return {
            "running": self._running,
            "frames_processed": self.frames_processed,
            "last_frame_time": self.last_frame_time,
            "publish_count": self.gateway.publish_count,
        }
