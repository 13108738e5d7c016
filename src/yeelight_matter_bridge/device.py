"""Device model seen by the translation layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .constants import NETWORK_TYPE_CHILD, NETWORK_TYPE_MATTER


@dataclass(frozen=True)
class ManufacturerInfo:
    vendor_id: Optional[int] = None
    product_id: Optional[int] = None


@dataclass
class MatterDevice:
    """A hub device and the child sub-units it created for its endpoints."""

    id: str
    network_type: str = NETWORK_TYPE_MATTER
    manufacturer_info: ManufacturerInfo = field(default_factory=ManufacturerInfo)
    label: Optional[str] = None
    children: Dict[str, "MatterDevice"] = field(default_factory=dict)

    @property
    def vendor_id(self) -> Optional[int]:
        return self.manufacturer_info.vendor_id

    def add_child(self, endpoint_id: int, child_id: Optional[str] = None) -> "MatterDevice":
        """Register a child device for ``endpoint_id`` and return it."""

        key = _parent_assigned_key(endpoint_id)
        child = MatterDevice(
            id=child_id or f"{self.id}:{key}",
            network_type=NETWORK_TYPE_CHILD,
            manufacturer_info=self.manufacturer_info,
        )
        self.children[key] = child
        return child

    def find_child(self, endpoint_id: int) -> Optional["MatterDevice"]:
        return self.children.get(_parent_assigned_key(endpoint_id))

    def device_for_endpoint(self, endpoint_id: int) -> "MatterDevice":
        """Return the child registered for ``endpoint_id``, else this device."""

        return self.find_child(endpoint_id) or self


def _parent_assigned_key(endpoint_id: int) -> str:
    return f"{endpoint_id:d}"
