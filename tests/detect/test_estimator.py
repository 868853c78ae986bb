import numpy as np
import pytest

from detect import config
from detect.estimator import EstimationConfig, YOLOPoseEstimator, poses_from_arrays
from lights.trigger import LightDecision, TriggerConfig, TriggerEvaluator


def _arrays(n=1):
    xy = np.zeros((n, 17, 2))
    conf = np.full((n, 17), 0.5)
    for i in range(n):
        xy[i, 9] = (100 + i, 50)    # left wrist
        xy[i, 10] = (500 + i, 60)   # right wrist
    return xy, conf


def test_poses_from_arrays_names_and_scores():
    xy, conf = _arrays()
    conf[0, 9] = 0.9

    poses = poses_from_arrays(xy, conf, np.array([0.95]), frame_width=600)

    assert len(poses) == 1
    pose = poses[0]
    assert len(pose.keypoints) == 17
    assert pose.find("leftWrist").position == (100.0, 50.0)
    assert pose.find("leftWrist").score == pytest.approx(0.9)
    # Pose score is the mean keypoint confidence
    assert pose.score == pytest.approx(conf[0].mean())


def test_poses_from_arrays_flip_mirrors_x_only():
    xy, conf = _arrays()

    pose = poses_from_arrays(xy, conf, None, frame_width=600, flip_horizontal=True)[0]

    assert pose.find("leftWrist").position == (499.0, 50.0)
    assert pose.find("rightWrist").position == (99.0, 60.0)


def test_poses_from_arrays_falls_back_to_box_confidence():
    xy, _ = _arrays(2)

    poses = poses_from_arrays(xy, None, np.array([0.8, 0.3]), frame_width=600)

    assert [p.score for p in poses] == pytest.approx([0.8, 0.3])
    assert poses[1].find("rightWrist").score == pytest.approx(0.3)


@pytest.mark.parametrize("flip", [True, False])
def test_blanked_wrists_do_not_trigger_lights(flip):
    xy, conf = _arrays()
    conf[:] = 0.9
    # Occluded wrists come back from ultralytics at the origin with low confidence
    xy[0, 9] = (0, 0)
    xy[0, 10] = (0, 0)
    conf[0, 9] = 0.3
    conf[0, 10] = 0.3

    pose = poses_from_arrays(xy, conf, None, frame_width=600, flip_horizontal=flip)[0]

    assert pose.find("leftWrist").score == 0.0
    assert pose.find("rightWrist").score == 0.0
    evaluator = TriggerEvaluator(TriggerConfig(0.6, 0.1, 600, 500))
    assert evaluator.evaluate([pose]) == LightDecision()


def test_confident_keypoint_at_origin_is_kept():
    xy, conf = _arrays()
    xy[0, 9] = (0, 0)
    conf[0, 9] = 0.8

    pose = poses_from_arrays(xy, conf, None, frame_width=600)[0]

    assert pose.find("leftWrist").score == pytest.approx(0.8)


def test_poses_from_arrays_empty():
    assert poses_from_arrays(np.zeros((0, 17, 2)), None, None, frame_width=600) == []


def test_resolve_model_file():
    assert YOLOPoseEstimator().model_name == "yolov8n-pose.pt"
    assert YOLOPoseEstimator("yolov8s-pose").model_name == "yolov8s-pose.pt"
    assert YOLOPoseEstimator("weights/custom.pt").model_name == "weights/custom.pt"
    assert YOLOPoseEstimator("custom").model_name == "custom.pt"


def test_mode_defaults():
    assert config.get_mode_defaults(config.SINGLE_POSE) == {
        "max_detections": 1, "min_pose_confidence": 0.1, "min_part_confidence": 0.5,
    }
    assert config.get_mode_defaults(config.MULTI_POSE) == {
        "max_detections": 2, "min_pose_confidence": 0.6, "min_part_confidence": 0.1,
    }
    with pytest.raises(ValueError):
        config.get_mode_defaults("three-pose")


class _Tensor:
    def __init__(self, array):
        self._array = np.asarray(array)

    def cpu(self):
        return self

    def numpy(self):
        return self._array


class _Keypoints:
    def __init__(self, xy, conf):
        self.xy = _Tensor(xy)
        self.conf = _Tensor(conf) if conf is not None else None


class _Boxes:
    def __init__(self, conf):
        self.conf = _Tensor(conf)


class _Result:
    def __init__(self, xy, conf, box_conf):
        self.keypoints = _Keypoints(xy, conf)
        self.boxes = _Boxes(box_conf)


class FakeYOLO:
    def __init__(self, results):
        self.results = results
        self.calls = []

    def __call__(self, frame, **kwargs):
        self.calls.append(kwargs)
        return self.results


def test_estimate_poses_converts_results_and_passes_options():
    xy, conf = _arrays(2)
    model = FakeYOLO([_Result(xy, conf, [0.9, 0.7])])
    estimator = YOLOPoseEstimator()
    estimator.model = model
    frame = np.zeros((500, 600, 3), dtype=np.uint8)

    options = EstimationConfig(decoding_method=config.MULTI_POSE, max_detections=2, score_threshold=0.1, flip_horizontal=False)
    poses = estimator.estimate_poses(frame, options)

    assert len(poses) == 2
    assert poses[1].find("leftWrist").position == (101.0, 50.0)
    assert model.calls == [{"conf": 0.1, "max_det": 2, "verbose": False}]


def test_single_pose_mode_limits_detections():
    xy, conf = _arrays(1)
    model = FakeYOLO([_Result(xy, conf, [0.9])])
    estimator = YOLOPoseEstimator()
    estimator.model = model
    frame = np.zeros((500, 600, 3), dtype=np.uint8)

    estimator.estimate_poses(frame, EstimationConfig(decoding_method=config.SINGLE_POSE, max_detections=5))

    assert model.calls[0]["max_det"] == 1


def test_estimate_poses_skips_results_without_keypoints():
    result = _Result(np.zeros((0, 17, 2)), None, [])
    result.keypoints = None
    estimator = YOLOPoseEstimator()
    estimator.model = FakeYOLO([result])

    assert estimator.estimate_poses(np.zeros((10, 10, 3), dtype=np.uint8)) == []


def test_estimate_poses_returns_empty_when_model_unavailable(monkeypatch):
    estimator = YOLOPoseEstimator()
    monkeypatch.setattr(estimator, "load_model", lambda: False)

    assert estimator.estimate_poses(np.zeros((10, 10, 3), dtype=np.uint8)) == []
