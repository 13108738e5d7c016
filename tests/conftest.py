import logging

import pytest

from yeelight_matter_bridge.constants import YEELIGHT_VENDOR_ID
from yeelight_matter_bridge.device import ManufacturerInfo, MatterDevice
from yeelight_matter_bridge.drivers import YeelightSubDriver
from yeelight_matter_bridge.events import CapabilityEmitter, CapabilityEventBus
from yeelight_matter_bridge.state import DeviceStateStore, MemoryFieldStore
from yeelight_matter_bridge.transport import RecordingTransport


@pytest.fixture(autouse=True)
def _reset_yeelight_loggers():
    root = logging.getLogger()
    root_handlers = list(root.handlers)
    root_level = root.level
    yield
    root.handlers[:] = root_handlers
    root.setLevel(root_level)
    # configure_logging() turns propagation off; caplog relies on it.
    for name in list(logging.root.manager.loggerDict):
        if name == "yeelight" or name.startswith("yeelight."):
            logger = logging.getLogger(name)
            logger.handlers.clear()
            logger.propagate = True
            logger.setLevel(logging.NOTSET)


@pytest.fixture
def lamp() -> MatterDevice:
    return MatterDevice(id="lamp-1", manufacturer_info=ManufacturerInfo(vendor_id=YEELIGHT_VENDOR_ID))


@pytest.fixture
def bus() -> CapabilityEventBus:
    return CapabilityEventBus()


@pytest.fixture
def emitter(bus: CapabilityEventBus) -> CapabilityEmitter:
    return CapabilityEmitter(bus)


@pytest.fixture
def fields() -> MemoryFieldStore:
    return MemoryFieldStore()


@pytest.fixture
def state(fields: MemoryFieldStore) -> DeviceStateStore:
    return DeviceStateStore(fields)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def sub_driver(
    transport: RecordingTransport, bus: CapabilityEventBus, state: DeviceStateStore
) -> YeelightSubDriver:
    return YeelightSubDriver(transport, bus, state)
