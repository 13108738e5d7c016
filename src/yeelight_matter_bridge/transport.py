"""Transport interface used to reach devices, plus a recording implementation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, Union

from .device import MatterDevice
from .logging import get_logger
from .protocol import ClusterCommand, SubscribeRequest

OutboundMessage = Union[ClusterCommand, SubscribeRequest]


class Transport(Protocol):
    """Session layer that owns subscriptions and frame delivery.

    Implementations raise on delivery failure; retries belong to the host.
    """

    def subscribe_default(self, device: MatterDevice) -> None: ...

    def send(self, device: MatterDevice, message: OutboundMessage) -> None: ...


@dataclass(frozen=True)
class SentMessage:
    device_id: str
    message: OutboundMessage


class RecordingTransport:
    """Transport that records outbound traffic instead of sending it."""

    def __init__(self) -> None:
        self.sent: List[SentMessage] = []
        self.default_subscriptions: List[str] = []
        self._logger = get_logger("yeelight.transport")

    def subscribe_default(self, device: MatterDevice) -> None:
        self.default_subscriptions.append(device.id)

    def send(self, device: MatterDevice, message: OutboundMessage) -> None:
        self._logger.debug(
            "Recording outbound message",
            extra={"device_id": device.id, "frame": message.to_dict()},
        )
        self.sent.append(SentMessage(device_id=device.id, message=message))
