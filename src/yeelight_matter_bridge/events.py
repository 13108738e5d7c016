"""Capability events and a synchronous event bus."""

from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Deque, Dict, List, Optional

from .constants import (
    COLOR_CONTROL_CAPABILITY,
    COLOR_TEMPERATURE_ATTRIBUTE,
    COLOR_TEMPERATURE_CAPABILITY,
    HUE_ATTRIBUTE,
    LIGHTING_EFFECT_ATTRIBUTE,
    LIGHTING_EFFECT_CAPABILITY,
    SATURATION_ATTRIBUTE,
)

if TYPE_CHECKING:
    from .device import MatterDevice

EventCallback = Callable[["CapabilityEvent"], Any]

DEFAULT_HISTORY_SIZE = 256


@dataclass(frozen=True)
class CapabilityValue:
    """Capability attribute value before it is bound to a device."""

    capability: str
    attribute: str
    value: Any


def lighting_effect_state(name: str) -> CapabilityValue:
    return CapabilityValue(LIGHTING_EFFECT_CAPABILITY, LIGHTING_EFFECT_ATTRIBUTE, name)


def hue(percent: int) -> CapabilityValue:
    return CapabilityValue(COLOR_CONTROL_CAPABILITY, HUE_ATTRIBUTE, percent)


def saturation(percent: int) -> CapabilityValue:
    return CapabilityValue(COLOR_CONTROL_CAPABILITY, SATURATION_ATTRIBUTE, percent)


def color_temperature(kelvin: int) -> CapabilityValue:
    return CapabilityValue(COLOR_TEMPERATURE_CAPABILITY, COLOR_TEMPERATURE_ATTRIBUTE, kelvin)


@dataclass(frozen=True)
class CapabilityEvent:
    """Capability state emitted for a device, optionally scoped to an endpoint."""

    device_id: str
    endpoint_id: Optional[int]
    capability: str
    attribute: str
    value: Any
    timestamp: str

    @classmethod
    def create(
        cls,
        device_id: str,
        value: CapabilityValue,
        endpoint_id: Optional[int] = None,
    ) -> CapabilityEvent:
        """Create a new capability event with current timestamp."""
        return cls(
            device_id=device_id,
            endpoint_id=endpoint_id,
            capability=value.capability,
            attribute=value.attribute,
            value=value.value,
            timestamp=datetime.now(tz=timezone.utc).isoformat(),
        )

    @property
    def event_type(self) -> str:
        return f"{self.capability}.{self.attribute}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        return {
            "event": self.event_type,
            "device_id": self.device_id,
            "endpoint_id": self.endpoint_id,
            "value": self.value,
            "timestamp": self.timestamp,
        }


class CapabilityEventBus:
    """
    Pub/sub bus for capability events.

    Subscribers register for an event type such as ``colorControl.hue`` or
    for ``*``. Publishing calls subscribers inline, in registration order,
    and keeps the most recent ``history_size`` events.
    """

    def __init__(self, history_size: int = DEFAULT_HISTORY_SIZE) -> None:
        self._subscribers: Dict[str, List[EventCallback]] = defaultdict(list)
        self._wildcard_subscribers: List[EventCallback] = []
        self._history: Deque[CapabilityEvent] = deque(maxlen=history_size)

    def publish(self, event: CapabilityEvent) -> None:
        """Record ``event`` and deliver it to matching subscribers."""
        self._history.append(event)
        subscribers = list(self._subscribers.get(event.event_type, ()))
        for callback in subscribers + list(self._wildcard_subscribers):
            callback(event)

    def subscribe(self, event_type: str, callback: EventCallback) -> Callable[[], None]:
        """
        Subscribe to specific event type.

        Args:
            event_type: ``capability.attribute`` to subscribe to, or '*' for all events
            callback: Function to call when an event is published

        Returns:
            Unsubscribe function
        """
        if event_type == "*":
            self._wildcard_subscribers.append(callback)
        else:
            self._subscribers[event_type].append(callback)

        def unsubscribe() -> None:
            if event_type == "*":
                if callback in self._wildcard_subscribers:
                    self._wildcard_subscribers.remove(callback)
            elif callback in self._subscribers[event_type]:
                self._subscribers[event_type].remove(callback)

        return unsubscribe

    def subscriber_count(self, event_type: Optional[str] = None) -> int:
        if event_type is None:
            total = len(self._wildcard_subscribers)
            total += sum(len(subs) for subs in self._subscribers.values())
            return total
        if event_type == "*":
            return len(self._wildcard_subscribers)
        return len(self._subscribers.get(event_type, ()))

    @property
    def history(self) -> List[CapabilityEvent]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()


# Predefined event types
EVENT_LIGHTING_EFFECT = f"{LIGHTING_EFFECT_CAPABILITY}.{LIGHTING_EFFECT_ATTRIBUTE}"
EVENT_HUE = f"{COLOR_CONTROL_CAPABILITY}.{HUE_ATTRIBUTE}"
EVENT_SATURATION = f"{COLOR_CONTROL_CAPABILITY}.{SATURATION_ATTRIBUTE}"
EVENT_COLOR_TEMPERATURE = f"{COLOR_TEMPERATURE_CAPABILITY}.{COLOR_TEMPERATURE_ATTRIBUTE}"


class CapabilityEmitter:
    """Bind capability values to devices and publish them on a bus."""

    def __init__(self, bus: CapabilityEventBus) -> None:
        self.bus = bus

    def emit(self, device: "MatterDevice", value: CapabilityValue) -> CapabilityEvent:
        event = CapabilityEvent.create(device.id, value)
        self.bus.publish(event)
        return event

    def emit_for_endpoint(
        self, device: "MatterDevice", endpoint_id: int, value: CapabilityValue
    ) -> CapabilityEvent:
        """Publish ``value`` on the child owning ``endpoint_id``, else on ``device``."""

        target = device.device_for_endpoint(endpoint_id)
        event = CapabilityEvent.create(target.id, value, endpoint_id=endpoint_id)
        self.bus.publish(event)
        return event
