"""Yeelight Matter lamp translation layer."""

from __future__ import annotations

from .config import Config
from .decoder import AttributeDecoder
from .device import ManufacturerInfo, MatterDevice
from .drivers import SubDriver, SubDriverRegistry, YeelightSubDriver
from .effects import LIGHTING_EFFECTS, EffectTable, UnknownEffectError
from .eligibility import can_handle
from .encoder import CapabilityCommand, CommandEncoder, UnsupportedCommandError
from .events import CapabilityEvent, CapabilityEventBus
from .lifecycle import LifecycleController
from .protocol import AttributeReport, ClusterCommand, SubscribeRequest, Uint64
from .state import DeviceStateStore, MemoryFieldStore

__version__ = "0.1.0"

__all__ = [
    "AttributeDecoder",
    "AttributeReport",
    "CapabilityCommand",
    "CapabilityEvent",
    "CapabilityEventBus",
    "ClusterCommand",
    "CommandEncoder",
    "Config",
    "DeviceStateStore",
    "EffectTable",
    "LIGHTING_EFFECTS",
    "LifecycleController",
    "ManufacturerInfo",
    "MatterDevice",
    "MemoryFieldStore",
    "SubDriver",
    "SubDriverRegistry",
    "SubscribeRequest",
    "Uint64",
    "UnknownEffectError",
    "UnsupportedCommandError",
    "YeelightSubDriver",
    "can_handle",
]
