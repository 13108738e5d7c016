"""Sub-driver registry for device-specific Matter translation."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..device import MatterDevice
from .base import SubDriver
from .yeelight import YeelightSubDriver


class SubDriverRegistry:
    """Ordered collection of sub-drivers; the first one that accepts a device wins."""

    def __init__(self, sub_drivers: Sequence[SubDriver] = ()) -> None:
        self._sub_drivers: List[SubDriver] = list(sub_drivers)

    def register(self, sub_driver: SubDriver) -> None:
        self._sub_drivers.append(sub_driver)

    def get_sub_driver(self, device: MatterDevice) -> Optional[SubDriver]:
        """Return the sub-driver owning ``device``, or None for the generic driver."""

        for sub_driver in self._sub_drivers:
            if sub_driver.can_handle(device):
                return sub_driver
        return None

    def names(self) -> List[str]:
        return [sub_driver.name for sub_driver in self._sub_drivers]


__all__ = [
    "SubDriver",
    "SubDriverRegistry",
    "YeelightSubDriver",
]
