"""Matter interaction records exchanged with the transport layer."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

# Matter TLV control octets.
_TLV_ANONYMOUS_STRUCTURE = 0x15
_TLV_END_OF_CONTAINER = 0x18
_TLV_TAG_CONTEXT = 0x20
_TLV_TYPE_UINT64 = 0x07

_UINT64_MAX = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class AttributeReport:
    """Attribute value delivered by a subscription or read."""

    endpoint_id: int
    cluster_id: int
    attribute_id: int
    value: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AttributeReport":
        """Build a report from ``{endpoint_id, cluster_id, attribute_id, value}``.

        Ids may be ints or ``0x``-prefixed strings.
        """

        missing = [key for key in ("endpoint_id", "cluster_id", "attribute_id") if key not in data]
        if missing:
            raise ValueError(f"Attribute report missing fields: {', '.join(missing)}")
        value = data.get("value")
        return cls(
            endpoint_id=coerce_int(data["endpoint_id"], "endpoint_id"),
            cluster_id=coerce_int(data["cluster_id"], "cluster_id"),
            attribute_id=coerce_int(data["attribute_id"], "attribute_id"),
            value=None if value is None else coerce_int(value, "value"),
        )


@dataclass(frozen=True)
class SubscribeRequest:
    """Subscription to a single attribute path."""

    endpoint_id: int
    cluster_id: int
    attribute_id: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "subscribe",
            "endpoint_id": self.endpoint_id,
            "cluster_id": self.cluster_id,
            "attribute_id": self.attribute_id,
        }


@dataclass(frozen=True)
class Uint64:
    """Unsigned 64-bit command field."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= _UINT64_MAX:
            raise ValueError(f"Uint64 value out of range: {self.value}")

    def encode_tlv(self, tag: int) -> bytes:
        return struct.pack("<BBQ", _TLV_TAG_CONTEXT | _TLV_TYPE_UINT64, tag, self.value)


@dataclass(frozen=True)
class ClusterCommand:
    """Invoke request for a cluster command on one endpoint."""

    endpoint_id: int
    cluster_id: int
    command_id: int
    fields: Mapping[int, Uint64] = field(default_factory=dict)

    def encode_fields(self) -> bytes:
        """Render the command fields as a TLV anonymous structure."""

        payload = bytearray([_TLV_ANONYMOUS_STRUCTURE])
        for field_id in sorted(self.fields):
            if not 0 <= field_id <= 0xFF:
                raise ValueError(f"Context tag out of range: {field_id}")
            payload.extend(self.fields[field_id].encode_tlv(field_id))
        payload.append(_TLV_END_OF_CONTAINER)
        return bytes(payload)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "invoke",
            "endpoint_id": self.endpoint_id,
            "cluster_id": self.cluster_id,
            "command_id": self.command_id,
            "fields": {str(key): value.value for key, value in self.fields.items()},
            "tlv": self.encode_fields().hex(),
        }


def coerce_int(value: Any, name: str) -> int:
    """Parse an int or a decimal or ``0x``-prefixed string, naming ``name`` on failure."""

    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer; got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip(), 0)
        except ValueError as exc:
            raise ValueError(f"{name} must be an integer; got {value!r}") from exc
    raise ValueError(f"{name} must be an integer; got {value!r}")
