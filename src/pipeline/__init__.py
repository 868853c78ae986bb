# Frame pipeline
from .video_source import CameraSource, CameraUnavailableError, TimestampedFrame
from .frame_loop import FrameResult, PoseLightLoop, PreviewWindow

__all__ = [
    # Video sources
    "CameraSource",
    "CameraUnavailableError",
    "TimestampedFrame",
    # Frame loop
    "FrameResult",
    "PoseLightLoop",
    "PreviewWindow",
]
