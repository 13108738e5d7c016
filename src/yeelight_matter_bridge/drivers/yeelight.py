"""Sub-driver for Yeelight Matter lamps."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from ..config import Config
from ..constants import LIGHTING_EFFECT_CAPABILITY, STATE_CONTROL_COMMAND
from ..conversions import KelvinConverter
from ..decoder import AttributeDecoder
from ..device import MatterDevice
from ..eligibility import can_handle
from ..encoder import CommandEncoder
from ..events import CapabilityEmitter, CapabilityEventBus
from ..lifecycle import LifecycleController
from ..state import DeviceStateStore
from ..transport import Transport
from .base import AttributeHandler, CapabilityHandler, LifecycleHandler, SubDriver


class YeelightSubDriver(SubDriver):
    """Lighting effect, color and color temperature translation for Yeelight lamps."""

    NAME = "Yeelight Smart Lamp"

    def __init__(
        self,
        transport: Transport,
        bus: CapabilityEventBus,
        state: Optional[DeviceStateStore] = None,
        config: Optional[Config] = None,
    ) -> None:
        config = config or Config()
        self.state = state or DeviceStateStore()
        self.emitter = CapabilityEmitter(bus)
        self.decoder = AttributeDecoder(
            self.emitter,
            self.state,
            converter=KelvinConverter(hysteresis=config.hysteresis_enabled),
        )
        self.encoder = CommandEncoder(transport, self.emitter, self.state)
        self.lifecycle = LifecycleController(transport, self.emitter)

        self._lifecycle_handlers: Mapping[str, LifecycleHandler] = MappingProxyType(
            {
                "init": self.lifecycle.init,
                "added": self.lifecycle.added,
            }
        )
        self._capability_handlers: Mapping[Tuple[str, str], CapabilityHandler] = MappingProxyType(
            {(LIGHTING_EFFECT_CAPABILITY, STATE_CONTROL_COMMAND): self.encoder.handle}
        )

    @property
    def name(self) -> str:
        return self.NAME

    def can_handle(self, device: MatterDevice) -> bool:
        return can_handle(device)

    @property
    def lifecycle_handlers(self) -> Mapping[str, LifecycleHandler]:
        return self._lifecycle_handlers

    @property
    def attribute_handlers(self) -> Mapping[Tuple[int, int], AttributeHandler]:
        return self.decoder.handlers

    @property
    def capability_handlers(self) -> Mapping[Tuple[str, str], CapabilityHandler]:
        return self._capability_handlers
