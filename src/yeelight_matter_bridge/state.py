"""Per-device field storage and the translation layer's cached state."""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Tuple

from .constants import CURRENT_LIGHTING_EFFECT_KEY, MOST_RECENT_TEMP_KEY
from .logging import get_logger


class FieldStore(Protocol):
    """Key-value fields attached to a device, optionally persisted."""

    def get_field(self, device_id: str, key: str) -> Any: ...

    def set_field(self, device_id: str, key: str, value: Any, *, persist: bool = False) -> None: ...


class MemoryFieldStore:
    """Process-local field store; persisted fields live as long as the object."""

    def __init__(self) -> None:
        self._fields: Dict[Tuple[str, str], Any] = {}
        self._persistent: set[Tuple[str, str]] = set()

    def get_field(self, device_id: str, key: str) -> Any:
        return self._fields.get((device_id, key))

    def set_field(self, device_id: str, key: str, value: Any, *, persist: bool = False) -> None:
        self._fields[(device_id, key)] = value
        if persist:
            self._persistent.add((device_id, key))

    def persisted_fields(self, device_id: str) -> Dict[str, Any]:
        return {
            key: self._fields[(dev, key)]
            for dev, key in sorted(self._persistent)
            if dev == device_id
        }


class DeviceStateStore:
    """Translation state addressed by device identity and endpoint.

    ``currentEffect`` is a persisted device field. The most recent Kelvin
    value is transient and kept per (device, endpoint) so each endpoint
    dampens its own conversion jitter.
    """

    def __init__(self, fields: Optional[FieldStore] = None) -> None:
        self._fields: FieldStore = fields if fields is not None else MemoryFieldStore()
        self._logger = get_logger("yeelight.state")

    @property
    def fields(self) -> FieldStore:
        return self._fields

    def current_effect(self, device_id: str) -> Optional[str]:
        return self._fields.get_field(device_id, CURRENT_LIGHTING_EFFECT_KEY)

    def set_current_effect(self, device_id: str, name: str) -> None:
        self._fields.set_field(device_id, CURRENT_LIGHTING_EFFECT_KEY, name, persist=True)

    def most_recent_kelvin(self, device_id: str, endpoint_id: int) -> Optional[int]:
        return self._fields.get_field(device_id, _kelvin_key(endpoint_id))

    def remember_kelvin(self, device_id: str, endpoint_id: int, kelvin: int) -> None:
        self._logger.debug(
            "Caching color temperature",
            extra={"device_id": device_id, "endpoint_id": endpoint_id, "kelvin": kelvin},
        )
        self._fields.set_field(device_id, _kelvin_key(endpoint_id), kelvin)


def _kelvin_key(endpoint_id: int) -> str:
    return f"{MOST_RECENT_TEMP_KEY}:{endpoint_id}"
