from __future__ import annotations

import argparse
import logging
import threading

from detect.estimator import YOLOPoseEstimator
from lights.gateway import PublisherGateway
from lights.mqtt import LoggingPublisher, MqttPublisher
from lights.trigger import TriggerEvaluator
from pipeline.frame_loop import PoseLightLoop, PreviewWindow
from pipeline.video_source import CameraSource, CameraUnavailableError

from .config import AgentSettings
from .logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pose Lights - toggle lights with your wrists")
    parser.add_argument("--print-config", action="store_true", help="Print resolved configuration and exit.")
    parser.add_argument("--http-serve", action="store_true", help="Also serve the status API (/health, /heartbeat, /lights).")
    parser.add_argument("--video", metavar="PATH", help="Read frames from a video file instead of the webcam.")
    parser.add_argument("--camera", type=int, metavar="INDEX", help="Webcam index to open.")
    parser.add_argument("--max-frames", type=int, metavar="N", help="Stop after N frames.")
    parser.add_argument("--preview", action="store_true", help="Show the skeleton overlay window ('q' quits).")
    parser.add_argument("--dry-run", action="store_true", help="Log light commands instead of publishing to MQTT.")
    return parser


def apply_overrides(cfg: AgentSettings, args: argparse.Namespace) -> AgentSettings:
    """Command-line flags win over environment / .env values."""
    update = {}
    if args.video:
        update["video_path"] = args.video
    if args.camera is not None:
        update["camera_index"] = args.camera
    if args.preview:
        update["preview"] = True
    if args.dry_run:
        update["dry_run"] = True
    return cfg.model_copy(update=update) if update else cfg


def build_publisher(cfg: AgentSettings):
    if cfg.dry_run:
        return LoggingPublisher()
    return MqttPublisher(
        host=cfg.mqtt_host,
        port=cfg.mqtt_port,
        transport=cfg.mqtt_transport,
        client_id=cfg.mqtt_client_id,
        connect_timeout=cfg.mqtt_connect_timeout,
    )


def build_loop(cfg: AgentSettings, source, estimator, publish) -> PoseLightLoop:
    trigger_config = cfg.trigger_config()
    gateway = PublisherGateway(
        publish,
        left_light_id=cfg.left_light_id,
        right_light_id=cfg.right_light_id,
        namespace=cfg.topic_namespace,
    )

    preview = None
    if cfg.preview:
        preview = PreviewWindow(
            min_pose_confidence=trigger_config.min_pose_confidence,
            min_part_confidence=trigger_config.min_part_confidence,
            width=cfg.frame_width,
            height=cfg.frame_height,
            show_video=cfg.show_video,
            show_skeleton=cfg.show_skeleton,
            show_points=cfg.show_points,
            show_bounding_box=cfg.show_bounding_box,
            mirror_video=cfg.flip_horizontal,
        )

    return PoseLightLoop(
        source=source,
        estimator=estimator,
        evaluator=TriggerEvaluator(trigger_config),
        gateway=gateway,
        estimation_config=cfg.estimation_config(),
        preview=preview,
    )


def start_http_api(cfg: AgentSettings, loop: PoseLightLoop) -> threading.Thread:
    """Serve the status API from a daemon thread; the frame loop keeps the main thread."""
    import uvicorn
    from .agent_api import create_app

    app = create_app(cfg, loop.gateway, loop)

    logger.info("Starting agent HTTP API at http://%s:%s", cfg.agent_http_host, cfg.agent_http_port)
    thread = threading.Thread(
        target=uvicorn.run,
        args=(app,),
        kwargs={
            "host": cfg.agent_http_host,
            "port": cfg.agent_http_port,
            "log_level": cfg.log_level.lower(),
        },
        name="agent-http-api",
        daemon=True,
    )
    thread.start()
    return thread


def run(argv: list[str] | None = None, cfg: AgentSettings | None = None) -> int:
    """
    Pose Lights entrypoint.

    Loads the pose model, opens the video source, connects the publisher and
    runs the frame loop until the source ends or the user stops it.
    """
    try:
        args = build_parser().parse_args(argv)

        # Load settings from environment / .env
        cfg = apply_overrides(cfg or AgentSettings(), args)

        # Setup logging using configured level
        configure_logging(cfg.log_level)

        logger.info("Pose Lights agent starting")
        logger.info(
            "Resolved config: source=%s mode=%s model=%s lights=%s/%s broker=%s:%s dry_run=%s",
            cfg.video_source, cfg.detection_mode, cfg.pose_model,
            cfg.left_light_id, cfg.right_light_id, cfg.mqtt_host, cfg.mqtt_port, cfg.dry_run
        )

        if args.print_config:
            print(cfg.model_dump())
            return 0

        estimator = YOLOPoseEstimator(cfg.pose_model, device=cfg.pose_device)
        if not estimator.load_model():
            logger.error("Pose model %s could not be loaded", cfg.pose_model)
            return 1

        source = CameraSource(
            cfg.video_source,
            width=cfg.frame_width,
            height=cfg.frame_height,
            loop=cfg.loop_video,
        )

        publisher = build_publisher(cfg)
        try:
            publisher.start()
            loop = build_loop(cfg, source, estimator, publisher)

            if args.http_serve:
                start_http_api(cfg, loop)

            with source:
                loop.run(max_frames=args.max_frames)
        finally:
            publisher.stop()

        return 0

    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 0

    except CameraUnavailableError as e:
        logger.error("%s", e)
        return 1

    except Exception:
        # Log unexpected exceptions so the agent is diagnosable.
        logger.exception("Pose Lights agent crashed due to an unexpected error")
        if cfg is not None and (cfg.debug or cfg.log_level.upper() == "DEBUG"):
            raise
        return 1


if __name__ == "__main__":
    raise SystemExit(run())
