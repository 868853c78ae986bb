"""
Publisher gateway: the only place light state changes leave the process.

Publishing is edge-triggered. A message goes out only when the requested state
differs from the last one sent for that light (or nothing was sent yet).
"""

import json
import logging
from typing import Callable, Dict, Optional

from .state import LightState, LightStateStore
from .trigger import LightDecision

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "zigbee2mqtt"

# publish(topic, payload)
PublishFn = Callable[[str, str], object]


def build_topic(namespace: str, light_id: str) -> str:
    return f"{namespace}/{light_id}/set"


def build_payload(state: LightState) -> str:
    """JSON payload for a set command with an instant transition."""
    return json.dumps({"state": LightState(state).value, "transition": 0})


class PublisherGateway:
    """
    Owns the LightStateStore and forwards changes to a publish callable.

    The publish callable is fire-and-forget: its result is not inspected and
    the store keeps the attempted state either way.
    """

    def __init__(
        self,
        publish: PublishFn,
        left_light_id: str,
        right_light_id: str,
        namespace: str = DEFAULT_NAMESPACE,
        store: Optional[LightStateStore] = None
    ):
        self._publish = publish
        self.left_light_id = left_light_id
        self.right_light_id = right_light_id
        self.namespace = namespace
        self.store = store if store is not None else LightStateStore()
        self.publish_count = 0

    def set_light_state(self, light_id: str, state: LightState) -> bool:
        """
        Record and publish `state` for `light_id` if it changed.

        Returns True when a message was published.
        """
        state = LightState(state)
        if self.store.get(light_id) == state:
            return False

        self.store.set(light_id, state)
        topic = build_topic(self.namespace, light_id)
        self._publish(topic, build_payload(state))
        self.publish_count += 1
        logger.info("Light %s -> %s", light_id, state.value)
        return True

    def apply(self, decision: LightDecision) -> Dict[str, bool]:
        """Apply one frame's decision to both lights. Returns {light_id: published}."""
        return {
            self.left_light_id: self.set_light_state(
                self.left_light_id, LightState.from_bool(decision.left_on)
            ),
            self.right_light_id: self.set_light_state(
                self.right_light_id, LightState.from_bool(decision.right_on)
            ),
        }

    def snapshot(self) -> Dict[str, str]:
        return self.store.snapshot()
