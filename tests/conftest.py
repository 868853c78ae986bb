import pytest

from detect.types import make_pose
from lights.trigger import TriggerConfig


@pytest.fixture
def trigger_config():
    # Multi-pose defaults on a 600x500 frame
    return TriggerConfig(
        min_pose_confidence=0.6,
        min_part_confidence=0.1,
        frame_width=600,
        frame_height=500,
    )


@pytest.fixture
def pose_factory():
    """
    Build a pose with both wrists plus a couple of other parts.
    Wrists default to the bottom middle of the frame (no trigger).
    """
    def _make(score=0.8, left=(300, 450, 0.9), right=(300, 450, 0.9), **extra):
        points = {
            "nose": (300, 100, 0.9),
            "leftShoulder": (350, 200, 0.9),
            "rightShoulder": (250, 200, 0.9),
            "leftWrist": left,
            "rightWrist": right,
        }
        points.update(extra)
        return make_pose(score, points)

    return _make
