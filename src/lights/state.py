"""
Last-published light state, kept per light identifier for one session.
"""

from enum import Enum
from typing import Dict, Optional


class LightState(str, Enum):
    """On/off state as sent to the broker."""
    ON = "ON"
    OFF = "OFF"

    @classmethod
    def from_bool(cls, on: bool) -> "LightState":
        return cls.ON if on else cls.OFF


class LightStateStore:
    """
    In-memory map of light id -> last published state.

    A light that has never been set has no entry (get() returns None).
    """

    def __init__(self):
        self._states: Dict[str, LightState] = {}

    def get(self, light_id: str) -> Optional[LightState]:
        return self._states.get(light_id)

    def set(self, light_id: str, state: LightState) -> None:
        self._states[light_id] = LightState(state)

    def snapshot(self) -> Dict[str, str]:
        """Copy of the current states as plain strings."""
        return {light_id: state.value for light_id, state in self._states.items()}

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, light_id: str) -> bool:
        return light_id in self._states
