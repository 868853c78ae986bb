from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic_settings import BaseSettings, SettingsConfigDict

from detect import config as detect_config
from detect.estimator import EstimationConfig
from lights.trigger import TriggerConfig


class AgentSettings(BaseSettings):
    """
    Configuration for the Pose Lights agent.
    """

    # Load environment variables from .env if present.
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # ignore unknown env vars
    )

    # --- Identity ---
    agent_id: str = "pose_lights_demo"

    # --- Video input ---
    frame_width: int = detect_config.FRAME_WIDTH
    frame_height: int = detect_config.FRAME_HEIGHT
    camera_index: int = 0
    video_path: Optional[str] = None  # set to read a file instead of the webcam
    loop_video: bool = False
    # Mirror keypoints so the user sees themselves as in a mirror.
    flip_horizontal: bool = True

    # --- Pose model ---
    pose_model: str = detect_config.DEFAULT_POSE_MODEL
    pose_device: Optional[str] = None  # 'cpu', 'cuda', or None for auto
    detection_mode: Literal["single-pose", "multi-pose"] = detect_config.DEFAULT_DETECTION_MODE

    single_min_pose_confidence: float = detect_config.SINGLE_POSE_DEFAULTS["min_pose_confidence"]
    single_min_part_confidence: float = detect_config.SINGLE_POSE_DEFAULTS["min_part_confidence"]

    multi_max_pose_detections: int = detect_config.MULTI_POSE_DEFAULTS["max_detections"]
    multi_min_pose_confidence: float = detect_config.MULTI_POSE_DEFAULTS["min_pose_confidence"]
    multi_min_part_confidence: float = detect_config.MULTI_POSE_DEFAULTS["min_part_confidence"]

    # --- Lights (zigbee2mqtt device ids) ---
    left_light_id: str = "0x00158d0002d758f7"
    right_light_id: str = "0x00158d0002d71d98"
    topic_namespace: str = "zigbee2mqtt"

    # --- MQTT broker ---
    mqtt_host: str = "localhost"
    mqtt_port: int = 9001
    mqtt_transport: Literal["tcp", "websockets"] = "websockets"
    mqtt_client_id: str = ""
    mqtt_connect_timeout: float = 5.0  # seconds to wait for the broker before the first frame
    dry_run: bool = False  # log light commands instead of publishing

    # --- Preview window ---
    preview: bool = False
    show_video: bool = False
    show_skeleton: bool = True
    show_points: bool = False
    show_bounding_box: bool = False

    # --- Agent HTTP API ---
    agent_http_host: str = "127.0.0.1"
    agent_http_port: int = 8130

    # --- Logging ---
    log_level: str = "INFO"
    debug: bool = False

    @property
    def video_source(self) -> Union[int, str]:
        """Video file path if configured, otherwise the webcam index."""
        return self.video_path if self.video_path else self.camera_index

    def thresholds(self) -> tuple[float, float]:
        """(min_pose_confidence, min_part_confidence) for the active detection mode."""
        if self.detection_mode == detect_config.SINGLE_POSE:
            return self.single_min_pose_confidence, self.single_min_part_confidence
        return self.multi_min_pose_confidence, self.multi_min_part_confidence

    def trigger_config(self) -> TriggerConfig:
        min_pose, min_part = self.thresholds()
        return TriggerConfig(
            min_pose_confidence=min_pose,
            min_part_confidence=min_part,
            frame_width=self.frame_width,
            frame_height=self.frame_height,
        )

    def estimation_config(self) -> EstimationConfig:
        if self.detection_mode == detect_config.SINGLE_POSE:
            return EstimationConfig(
                decoding_method=detect_config.SINGLE_POSE,
                max_detections=1,
                score_threshold=self.single_min_pose_confidence,
                flip_horizontal=self.flip_horizontal,
            )
        return EstimationConfig(
            decoding_method=detect_config.MULTI_POSE,
            max_detections=self.multi_max_pose_detections,
            score_threshold=self.multi_min_part_confidence,
            flip_horizontal=self.flip_horizontal,
        )
