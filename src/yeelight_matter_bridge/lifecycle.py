"""Device lifecycle handlers."""

from __future__ import annotations

from . import events
from .constants import (
    CUSTOM_EFFECT,
    PRIVATE_CLUSTER_ENDPOINT_ID,
    PRIVATE_CLUSTER_ID,
    PRIVATE_LIGHTING_EFFECT_ATTR_ID,
)
from .device import MatterDevice
from .events import CapabilityEmitter
from .logging import get_logger
from .protocol import SubscribeRequest
from .transport import Transport

LIGHTING_EFFECT_SUBSCRIPTION = SubscribeRequest(
    endpoint_id=PRIVATE_CLUSTER_ENDPOINT_ID,
    cluster_id=PRIVATE_CLUSTER_ID,
    attribute_id=PRIVATE_LIGHTING_EFFECT_ATTR_ID,
)


class LifecycleController:
    def __init__(self, transport: Transport, emitter: CapabilityEmitter) -> None:
        self._transport = transport
        self._emitter = emitter
        self._logger = get_logger("yeelight.lifecycle")

    def init(self, device: MatterDevice) -> None:
        """Subscribe to the standard attributes and the private effect attribute."""

        self._transport.subscribe_default(device)
        self._transport.send(device, LIGHTING_EFFECT_SUBSCRIPTION)
        self._logger.info("Subscribed to lighting effect attribute", extra={"device_id": device.id})

    def added(self, device: MatterDevice) -> None:
        self._emitter.emit(device, events.lighting_effect_state(CUSTOM_EFFECT))
