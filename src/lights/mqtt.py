"""
MQTT publishing for light commands.

MqttPublisher wraps a paho-mqtt client: connect asynchronously, run the network
loop in paho's background thread, publish at QoS 0 without waiting for acks.
LoggingPublisher is a drop-in for dry runs without a broker.
"""

import logging
import threading
from typing import List, Optional, Tuple

import paho.mqtt.client as mqtt

logger = logging.getLogger(__name__)


class MqttPublisher:
    """
    Fire-and-forget publisher backed by paho-mqtt.

    Usage:
        publisher = MqttPublisher("localhost", 9001, transport="websockets")
        publisher.start()
        publisher("zigbee2mqtt/0x00158d0002d758f7/set", '{"state": "ON", "transition": 0}')
        publisher.stop()
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 9001,
        transport: str = "websockets",
        client_id: str = "",
        keepalive: int = 60,
        connect_timeout: float = 5.0
    ):
        self.host = host
        self.port = port
        self.transport = transport
        self.keepalive = keepalive
        self.connect_timeout = connect_timeout
        self.connected = False
        self._connected_event = threading.Event()

        self.client = mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2,
            client_id=client_id,
            transport=transport,
        )
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        if reason_code.is_failure:
            logger.warning("MQTT connect refused by %s:%s: %s", self.host, self.port, reason_code)
            return
        self.connected = True
        self._connected_event.set()
        logger.info("MQTT connected to %s:%s", self.host, self.port)

    def _on_disconnect(self, client, userdata, flags, reason_code, properties) -> None:
        self.connected = False
        self._connected_event.clear()
        logger.info("MQTT disconnected: %s", reason_code)

    def start(self) -> bool:
        """
        Connect in the background and wait up to connect_timeout for the session.

        paho drops QoS 0 messages published while offline, so the first light
        commands should go out after the broker has accepted the connection.
        An unreachable broker is not fatal: paho keeps reconnecting.

        Returns:
            True if connected within connect_timeout
        """
        logger.info("Connecting to MQTT broker %s:%s (%s)", self.host, self.port, self.transport)
        self.client.connect_async(self.host, self.port, keepalive=self.keepalive)
        self.client.loop_start()

        if self._connected_event.wait(self.connect_timeout):
            return True
        logger.warning(
            "MQTT broker %s:%s not reachable after %.1fs; continuing, light commands may be dropped",
            self.host, self.port, self.connect_timeout
        )
        return False

    def stop(self) -> None:
        self.client.disconnect()
        self.client.loop_stop()

    def publish(self, topic: str, payload: str) -> None:
        self.client.publish(topic, payload, qos=0)

    def __call__(self, topic: str, payload: str) -> None:
        self.publish(topic, payload)


class LoggingPublisher:
    """Publisher that only logs, and remembers what it would have sent."""

    def __init__(self, max_history: Optional[int] = 1000):
        self.max_history = max_history
        self.sent: List[Tuple[str, str]] = []

    def start(self) -> None:
        logger.info("Dry run: light commands are logged, not published")

    def stop(self) -> None:
        pass

    def publish(self, topic: str, payload: str) -> None:
        logger.info("[dry-run] %s %s", topic, payload)
        self.sent.append((topic, payload))
        if self.max_history is not None and len(self.sent) > self.max_history:
            del self.sent[0]

    def __call__(self, topic: str, payload: str) -> None:
        self.publish(topic, payload)
