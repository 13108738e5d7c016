"""Routing predicate for Yeelight Matter lamps."""

from __future__ import annotations

from .constants import NETWORK_TYPE_MATTER, YEELIGHT_VENDOR_ID
from .device import MatterDevice


def is_yeelight_product(network_type: str, vendor_id: object) -> bool:
    return network_type == NETWORK_TYPE_MATTER and vendor_id == YEELIGHT_VENDOR_ID


def can_handle(device: MatterDevice) -> bool:
    """Return True for Matter devices built by Yeelight.

    Child devices carry their own network type and are never matched.
    """

    return is_yeelight_product(device.network_type, device.vendor_id)
