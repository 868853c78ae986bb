import pytest

from detect.types import PART_NAMES, MissingKeypointError, Pose, make_pose


def test_make_pose_orders_parts_like_posenet():
    pose = make_pose(0.7, {"rightWrist": (5, 6, 0.2), "nose": (1, 2, 0.9), "leftWrist": (3, 4, 0.5)})

    assert [k.part for k in pose.keypoints] == ["nose", "leftWrist", "rightWrist"]
    assert pose.score == 0.7
    assert pose.find("leftWrist").position.x == 3.0
    assert pose.find("leftWrist").position.y == 4.0
    assert pose.find("leftWrist").score == 0.5


def test_find_missing_part_raises():
    pose = make_pose(0.9, {"nose": (1, 2, 0.9)})
    with pytest.raises(MissingKeypointError):
        pose.find("leftWrist")
    assert pose.get("leftWrist") is None


def test_missing_keypoint_error_is_lookup_error():
    assert issubclass(MissingKeypointError, LookupError)


def test_pose_is_immutable():
    pose = make_pose(0.9, {"nose": (1, 2, 0.9)})
    with pytest.raises(AttributeError):
        pose.score = 0.1


def test_bounding_box():
    pose = make_pose(0.9, {"nose": (10, 20, 0.9), "leftAnkle": (40, 200, 0.9), "rightAnkle": (5, 190, 0.9)})
    assert pose.bounding_box() == (5.0, 20.0, 40.0, 200.0)
    assert Pose(score=0.0).bounding_box() == (0.0, 0.0, 0.0, 0.0)


def test_part_names_cover_coco_keypoints():
    assert len(PART_NAMES) == 17
    assert PART_NAMES[9] == "leftWrist"
    assert PART_NAMES[10] == "rightWrist"
