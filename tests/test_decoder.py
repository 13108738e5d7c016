import logging

from yeelight_matter_bridge.constants import (
    COLOR_CONTROL_CLUSTER_ID,
    COLOR_TEMPERATURE_MIREDS_ATTR_ID,
    CURRENT_HUE_ATTR_ID,
    CURRENT_SATURATION_ATTR_ID,
    PRIVATE_CLUSTER_ID,
    PRIVATE_LIGHTING_EFFECT_ATTR_ID,
)
from yeelight_matter_bridge.decoder import AttributeDecoder
from yeelight_matter_bridge.device import MatterDevice
from yeelight_matter_bridge.events import (
    EVENT_COLOR_TEMPERATURE,
    EVENT_HUE,
    EVENT_LIGHTING_EFFECT,
    EVENT_SATURATION,
    CapabilityEmitter,
    CapabilityEventBus,
)
from yeelight_matter_bridge.protocol import AttributeReport
from yeelight_matter_bridge.state import DeviceStateStore


def _effect_report(value):
    return AttributeReport(
        endpoint_id=0x02,
        cluster_id=PRIVATE_CLUSTER_ID,
        attribute_id=PRIVATE_LIGHTING_EFFECT_ATTR_ID,
        value=value,
    )


def _color_report(attribute_id: int, value, endpoint_id: int = 1) -> AttributeReport:
    return AttributeReport(
        endpoint_id=endpoint_id,
        cluster_id=COLOR_CONTROL_CLUSTER_ID,
        attribute_id=attribute_id,
        value=value,
    )


def _summary(bus: CapabilityEventBus):
    return [(e.event_type, e.device_id, e.endpoint_id, e.value) for e in bus.history]


def test_known_effect_code_emits_name_and_persists(
    lamp: MatterDevice, emitter: CapabilityEmitter, bus: CapabilityEventBus, state: DeviceStateStore, fields
) -> None:
    decoder = AttributeDecoder(emitter, state)

    assert decoder.decode(lamp, _effect_report(0x27)) is True

    assert _summary(bus) == [(EVENT_LIGHTING_EFFECT, "lamp-1", None, "rainbow")]
    assert state.current_effect("lamp-1") == "rainbow"
    assert fields.persisted_fields("lamp-1") == {"effectID": "rainbow"}


def test_unknown_effect_code_emits_custom_without_persisting(
    lamp: MatterDevice, emitter, bus: CapabilityEventBus, state: DeviceStateStore, caplog
) -> None:
    decoder = AttributeDecoder(emitter, state)
    state.set_current_effect("lamp-1", "aurora")

    with caplog.at_level(logging.WARNING, logger="yeelight.decoder"):
        decoder.decode(lamp, _effect_report(0x77))

    assert _summary(bus) == [(EVENT_LIGHTING_EFFECT, "lamp-1", None, "custom")]
    assert state.current_effect("lamp-1") == "aurora"
    assert any("can not find matched light effect" in r.getMessage().lower() for r in caplog.records)


def test_null_effect_value_is_ignored(lamp, emitter, bus, state) -> None:
    AttributeDecoder(emitter, state).decode(lamp, _effect_report(None))

    assert bus.history == []
    assert state.current_effect("lamp-1") is None


def test_hue_report_emits_percentage_then_custom_effect(lamp, emitter, bus, state) -> None:
    AttributeDecoder(emitter, state).decode(lamp, _color_report(CURRENT_HUE_ATTR_ID, 127))

    assert _summary(bus) == [
        (EVENT_HUE, "lamp-1", 1, 50),
        (EVENT_LIGHTING_EFFECT, "lamp-1", None, "custom"),
    ]


def test_saturation_report_emits_percentage_then_custom_effect(lamp, emitter, bus, state) -> None:
    AttributeDecoder(emitter, state).decode(lamp, _color_report(CURRENT_SATURATION_ATTR_ID, 254))

    assert _summary(bus) == [
        (EVENT_SATURATION, "lamp-1", 1, 100),
        (EVENT_LIGHTING_EFFECT, "lamp-1", None, "custom"),
    ]


def test_null_color_values_emit_nothing(lamp, emitter, bus, state) -> None:
    decoder = AttributeDecoder(emitter, state)
    for attribute_id in (CURRENT_HUE_ATTR_ID, CURRENT_SATURATION_ATTR_ID, COLOR_TEMPERATURE_MIREDS_ATTR_ID):
        decoder.decode(lamp, _color_report(attribute_id, None))

    assert bus.history == []


def test_color_temperature_hysteresis_keeps_previous_kelvin(lamp, emitter, bus, state) -> None:
    decoder = AttributeDecoder(emitter, state)

    decoder.decode(lamp, _color_report(COLOR_TEMPERATURE_MIREDS_ATTR_ID, 500))
    decoder.decode(lamp, _color_report(COLOR_TEMPERATURE_MIREDS_ATTR_ID, 501))

    temps = [e.value for e in bus.history if e.event_type == EVENT_COLOR_TEMPERATURE]
    assert temps == [2000, 2000]
    assert state.most_recent_kelvin("lamp-1", 1) == 2000
    assert bus.history[-1].event_type == EVENT_LIGHTING_EFFECT
    assert bus.history[-1].value == "custom"


def test_color_temperature_outside_band_reports_fresh_value(lamp, emitter, bus, state) -> None:
    decoder = AttributeDecoder(emitter, state)

    decoder.decode(lamp, _color_report(COLOR_TEMPERATURE_MIREDS_ATTR_ID, 500))
    decoder.decode(lamp, _color_report(COLOR_TEMPERATURE_MIREDS_ATTR_ID, 250))

    temps = [e.value for e in bus.history if e.event_type == EVENT_COLOR_TEMPERATURE]
    assert temps == [2000, 4000]
    assert state.most_recent_kelvin("lamp-1", 1) == 4000


def test_out_of_range_color_temperature_is_discarded(lamp, emitter, bus, state, caplog) -> None:
    decoder = AttributeDecoder(emitter, state)
    state.remember_kelvin("lamp-1", 1, 2700)

    with caplog.at_level(logging.WARNING, logger="yeelight.decoder"):
        decoder.decode(lamp, _color_report(COLOR_TEMPERATURE_MIREDS_ATTR_ID, 1200))
        decoder.decode(lamp, _color_report(COLOR_TEMPERATURE_MIREDS_ATTR_ID, 20))

    assert bus.history == []
    assert state.most_recent_kelvin("lamp-1", 1) == 2700
    messages = [r.getMessage() for r in caplog.records]
    assert any("1200 mired outside of sane range of 66-1000" in m for m in messages)


def test_color_temperature_state_is_tracked_per_child(lamp, emitter, bus, state) -> None:
    child = lamp.add_child(3)
    decoder = AttributeDecoder(emitter, state)

    decoder.decode(lamp, _color_report(COLOR_TEMPERATURE_MIREDS_ATTR_ID, 500, endpoint_id=3))
    decoder.decode(lamp, _color_report(COLOR_TEMPERATURE_MIREDS_ATTR_ID, 501, endpoint_id=1))

    temps = [
        (e.device_id, e.endpoint_id, e.value)
        for e in bus.history
        if e.event_type == EVENT_COLOR_TEMPERATURE
    ]
    assert temps == [(child.id, 3, 2000), ("lamp-1", 1, 1996)]
    assert state.most_recent_kelvin(child.id, 3) == 2000
    assert state.most_recent_kelvin("lamp-1", 1) == 1996


def test_unhandled_attribute_is_ignored(lamp, emitter, bus, state) -> None:
    decoder = AttributeDecoder(emitter, state)

    handled = decoder.decode(lamp, AttributeReport(endpoint_id=1, cluster_id=0x0006, attribute_id=0x0000, value=1))

    assert handled is False
    assert bus.history == []


def test_dispatch_table_covers_four_attributes(emitter, state) -> None:
    decoder = AttributeDecoder(emitter, state)

    assert set(decoder.handlers) == {
        (PRIVATE_CLUSTER_ID, PRIVATE_LIGHTING_EFFECT_ATTR_ID),
        (COLOR_CONTROL_CLUSTER_ID, CURRENT_HUE_ATTR_ID),
        (COLOR_CONTROL_CLUSTER_ID, CURRENT_SATURATION_ATTR_ID),
        (COLOR_CONTROL_CLUSTER_ID, COLOR_TEMPERATURE_MIREDS_ATTR_ID),
    }
