import pytest

from yeelight_matter_bridge.config import Config
from yeelight_matter_bridge.constants import (
    COLOR_CONTROL_CLUSTER_ID,
    CURRENT_HUE_ATTR_ID,
    NETWORK_TYPE_MATTER,
)
from yeelight_matter_bridge.device import ManufacturerInfo, MatterDevice
from yeelight_matter_bridge.drivers import SubDriverRegistry, YeelightSubDriver
from yeelight_matter_bridge.encoder import CapabilityCommand, UnsupportedCommandError
from yeelight_matter_bridge.events import EVENT_COLOR_TEMPERATURE, EVENT_LIGHTING_EFFECT
from yeelight_matter_bridge.protocol import AttributeReport


def test_registry_selects_yeelight_sub_driver(sub_driver, lamp) -> None:
    registry = SubDriverRegistry([sub_driver])

    assert registry.get_sub_driver(lamp) is sub_driver
    assert registry.names() == ["Yeelight Smart Lamp"]


def test_registry_falls_back_for_other_vendors(sub_driver) -> None:
    registry = SubDriverRegistry()
    registry.register(sub_driver)
    other = MatterDevice(
        id="bulb", network_type=NETWORK_TYPE_MATTER, manufacturer_info=ManufacturerInfo(vendor_id=0x1037)
    )

    assert registry.get_sub_driver(other) is None


def test_lifecycle_dispatch(sub_driver, lamp, transport, bus) -> None:
    assert sub_driver.handle_lifecycle("init", lamp) is True
    assert sub_driver.handle_lifecycle("added", lamp) is True
    assert sub_driver.handle_lifecycle("removed", lamp) is False

    assert transport.default_subscriptions == ["lamp-1"]
    assert len(transport.sent) == 1
    assert [e.value for e in bus.history] == ["custom"]


def test_attribute_dispatch(sub_driver, lamp, bus) -> None:
    handled = sub_driver.handle_attribute_report(
        lamp, AttributeReport(endpoint_id=1, cluster_id=COLOR_CONTROL_CLUSTER_ID, attribute_id=0x0007, value=370)
    )
    ignored = sub_driver.handle_attribute_report(
        lamp, AttributeReport(endpoint_id=1, cluster_id=0x0006, attribute_id=0x0000, value=1)
    )

    assert handled is True
    assert ignored is False
    assert [(e.event_type, e.value) for e in bus.history] == [
        (EVENT_COLOR_TEMPERATURE, 2703),
        (EVENT_LIGHTING_EFFECT, "custom"),
    ]


def test_attribute_handlers_cover_color_and_effect(sub_driver) -> None:
    assert (COLOR_CONTROL_CLUSTER_ID, CURRENT_HUE_ATTR_ID) in sub_driver.attribute_handlers
    assert (0x1312FC05, 0x13120000) in sub_driver.attribute_handlers


def test_capability_dispatch(sub_driver, lamp, transport) -> None:
    frame = sub_driver.handle_capability_command(lamp, CapabilityCommand.state_control("bonfire"))

    assert frame.fields[1].value == 0x22
    assert [sent.message for sent in transport.sent] == [frame]


def test_capability_dispatch_rejects_other_capabilities(sub_driver, lamp, transport) -> None:
    with pytest.raises(UnsupportedCommandError, match="Yeelight Smart Lamp"):
        sub_driver.handle_capability_command(
            lamp, CapabilityCommand(command="on", capability="switch")
        )
    assert transport.sent == []


def test_hysteresis_can_be_disabled(transport, bus, lamp) -> None:
    sub_driver = YeelightSubDriver(transport, bus, config=Config(hysteresis_enabled=False))
    report = AttributeReport(endpoint_id=1, cluster_id=COLOR_CONTROL_CLUSTER_ID, attribute_id=0x0007, value=500)
    sub_driver.handle_attribute_report(lamp, report)
    sub_driver.handle_attribute_report(lamp, AttributeReport(1, COLOR_CONTROL_CLUSTER_ID, 0x0007, 501))

    temperatures = [e.value for e in bus.history if e.event_type == EVENT_COLOR_TEMPERATURE]
    assert temperatures == [2000, 1996]
