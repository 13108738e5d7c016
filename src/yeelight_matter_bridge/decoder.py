"""Translate Matter attribute reports into capability events."""

from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional, Tuple

from . import events, metrics
from .constants import (
    COLOR_CONTROL_CLUSTER_ID,
    COLOR_TEMPERATURE_MIREDS_ATTR_ID,
    CURRENT_HUE_ATTR_ID,
    CURRENT_SATURATION_ATTR_ID,
    CUSTOM_EFFECT,
    PRIVATE_CLUSTER_ID,
    PRIVATE_LIGHTING_EFFECT_ATTR_ID,
)
from .conversions import (
    COLOR_TEMPERATURE_MIRED_MAX,
    COLOR_TEMPERATURE_MIRED_MIN,
    KelvinConverter,
    percent_from_raw,
)
from .device import MatterDevice
from .effects import LIGHTING_EFFECTS, EffectTable
from .events import CapabilityEmitter, CapabilityValue
from .logging import get_logger
from .protocol import AttributeReport
from .state import DeviceStateStore

AttributeHandler = Callable[[MatterDevice, AttributeReport], None]
AttributePath = Tuple[int, int]


class AttributeDecoder:
    """Dispatch attribute reports by (cluster id, attribute id).

    Decoding only emits capability events and updates cached device state;
    it never produces wire traffic.
    """

    def __init__(
        self,
        emitter: CapabilityEmitter,
        state: DeviceStateStore,
        *,
        effects: EffectTable = LIGHTING_EFFECTS,
        converter: Optional[KelvinConverter] = None,
    ) -> None:
        self._emitter = emitter
        self._state = state
        self._effects = effects
        self._converter = converter or KelvinConverter()
        self._logger = get_logger("yeelight.decoder")
        self._handlers: Dict[AttributePath, AttributeHandler] = {
            (PRIVATE_CLUSTER_ID, PRIVATE_LIGHTING_EFFECT_ATTR_ID): self.lighting_effect,
            (COLOR_CONTROL_CLUSTER_ID, CURRENT_HUE_ATTR_ID): self.hue,
            (COLOR_CONTROL_CLUSTER_ID, CURRENT_SATURATION_ATTR_ID): self.saturation,
            (COLOR_CONTROL_CLUSTER_ID, COLOR_TEMPERATURE_MIREDS_ATTR_ID): self.color_temperature,
        }

    @property
    def handlers(self) -> Mapping[AttributePath, AttributeHandler]:
        return dict(self._handlers)

    def decode(self, device: MatterDevice, report: AttributeReport) -> bool:
        """Route ``report`` to its handler; return False when no handler matches."""

        handler = self._handlers.get((report.cluster_id, report.attribute_id))
        if handler is None:
            self._logger.debug(
                "Ignoring attribute report without handler",
                extra={
                    "device_id": device.id,
                    "cluster_id": f"0x{report.cluster_id:04X}",
                    "attribute_id": f"0x{report.attribute_id:04X}",
                },
            )
            return False
        handler(device, report)
        return True

    def lighting_effect(self, device: MatterDevice, report: AttributeReport) -> None:
        if report.value is None:
            metrics.record_report_discarded("null_value")
            return
        name = self._effects.name_for(report.value)
        if name is None:
            self._logger.warning(
                "Can not find matched light effect: %s",
                report.value,
                extra={"device_id": device.id, "effect_code": report.value},
            )
            metrics.record_unknown_effect_code()
            self._emitter.emit(device, events.lighting_effect_state(CUSTOM_EFFECT))
        else:
            self._emitter.emit(device, events.lighting_effect_state(name))
            self._state.set_current_effect(device.id, name)
        metrics.record_report_decoded("lighting_effect")

    def hue(self, device: MatterDevice, report: AttributeReport) -> None:
        self._percent_channel(device, report, events.hue, "hue")

    def saturation(self, device: MatterDevice, report: AttributeReport) -> None:
        self._percent_channel(device, report, events.saturation, "saturation")

    def _percent_channel(
        self,
        device: MatterDevice,
        report: AttributeReport,
        build: Callable[[int], CapabilityValue],
        attribute: str,
    ) -> None:
        percent = percent_from_raw(report.value)
        if percent is None:
            metrics.record_report_discarded("null_value")
            return
        self._emitter.emit_for_endpoint(device, report.endpoint_id, build(percent))
        # A direct color report means the lamp left any named effect.
        self._emitter.emit(device, events.lighting_effect_state(CUSTOM_EFFECT))
        metrics.record_report_decoded(attribute)

    def color_temperature(self, device: MatterDevice, report: AttributeReport) -> None:
        mired = report.value
        if mired is None:
            metrics.record_report_discarded("null_value")
            return
        target = device.device_for_endpoint(report.endpoint_id)
        previous = self._state.most_recent_kelvin(target.id, report.endpoint_id)
        kelvin = self._converter.convert(mired, previous)
        if kelvin is None:
            self._logger.warning(
                "Device reported color temperature %d mired outside of sane range of %d-%d",
                mired,
                COLOR_TEMPERATURE_MIRED_MIN,
                COLOR_TEMPERATURE_MIRED_MAX,
                extra={"device_id": device.id, "endpoint_id": report.endpoint_id},
            )
            metrics.record_report_discarded("mired_out_of_range")
            return
        self._state.remember_kelvin(target.id, report.endpoint_id, kelvin)
        self._emitter.emit_for_endpoint(
            device, report.endpoint_id, events.color_temperature(kelvin)
        )
        self._emitter.emit(device, events.lighting_effect_state(CUSTOM_EFFECT))
        metrics.record_report_decoded("color_temperature")
