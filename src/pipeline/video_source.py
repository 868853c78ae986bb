"""
Video Source Module

Pulls frames from a webcam or a video file, one at a time, at the frame size
the trigger rule expects. Coordinates produced by the pose model are only
meaningful against that size, so frames that arrive at a different size are
resized.

Usage:
    with CameraSource(0, width=600, height=500) as source:
        for ts_frame in source.frames():
            handle(ts_frame.frame)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Generator, Optional, Union

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class CameraUnavailableError(RuntimeError):
    """The camera or video file could not be opened."""


@dataclass
class TimestampedFrame:
    """A frame with its capture timestamp."""
    frame: np.ndarray
    timestamp: datetime
    frame_number: int


class CameraSource:
    """
    Pull-based frame source over cv2.VideoCapture.

    Nothing is read ahead: each read() grabs exactly one frame.
    """

    def __init__(
        self,
        source: Union[int, str] = 0,
        width: int = 600,
        height: int = 500,
        loop: bool = False
    ):
        """
        Initialize the source.

        Args:
            source: Webcam index or path to a video file
            width: Output frame width in pixels
            height: Output frame height in pixels
            loop: Restart a video file when it ends (ignored for webcams)
        """
        self.source = source
        self.width = width
        self.height = height
        self.loop = loop

        self._capture: Optional[cv2.VideoCapture] = None
        self._frame_number = 0

    @property
    def is_file(self) -> bool:
        return isinstance(self.source, str)

    @property
    def is_open(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    @property
    def frame_number(self) -> int:
        return self._frame_number

    def open(self) -> "CameraSource":
        """
        Open the capture device.

        Raises:
            CameraUnavailableError: if the device or file cannot be opened
        """
        if self.is_open:
            return self

        if self.is_file and not Path(self.source).exists():
            raise CameraUnavailableError(f"Video not found: {self.source}")

        capture = cv2.VideoCapture(self.source)
        if not capture.isOpened():
            raise CameraUnavailableError(
                f"Could not open video source {self.source!r}: this device may have no camera"
            )

        if not self.is_file:
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        self._capture = capture
        self._frame_number = 0

        logger.info(
            "Opened video source %r (%sx%s requested, %sx%s delivered)",
            self.source, self.width, self.height,
            int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)), int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        )
        return self

    def read(self) -> Optional[TimestampedFrame]:
        """
        Read the next frame.

        Returns:
            TimestampedFrame, or None when the stream has ended
        """
        if self._capture is None:
            self.open()

        ret, frame = self._capture.read()
        if not ret and self.loop and self.is_file:
            self._capture.set(cv2.CAP_PROP_POS_FRAMES, 0)
            logger.debug("Looping video: %s", self.source)
            ret, frame = self._capture.read()

        if not ret or frame is None:
            return None

        if frame.shape[1] != self.width or frame.shape[0] != self.height:
            frame = cv2.resize(frame, (self.width, self.height))

        self._frame_number += 1
        return TimestampedFrame(
            frame=frame,
            timestamp=datetime.now(),
            frame_number=self._frame_number
        )

    def frames(self) -> Generator[TimestampedFrame, None, None]:
        """Yield frames until the stream ends."""
        while True:
            ts_frame = self.read()
            if ts_frame is None:
                return
            yield ts_frame

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Released video source %r", self.source)

    def __enter__(self) -> "CameraSource":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
