# Light control
from .state import LightState, LightStateStore
from .trigger import LightDecision, TriggerConfig, TriggerEvaluator, MissingKeypointError
from .gateway import PublisherGateway, build_topic, build_payload
from .mqtt import MqttPublisher, LoggingPublisher

__all__ = [
    # State
    "LightState",
    "LightStateStore",
    # Trigger
    "LightDecision",
    "TriggerConfig",
    "TriggerEvaluator",
    "MissingKeypointError",
    # Publishing
    "PublisherGateway",
    "build_topic",
    "build_payload",
    "MqttPublisher",
    "LoggingPublisher",
]
