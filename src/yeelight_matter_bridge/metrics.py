"""Prometheus metrics helpers."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, generate_latest

_REGISTRY = CollectorRegistry()

REPORTS_DECODED = Counter(
    "yeelight_attribute_reports_decoded_total",
    "Attribute reports translated into capability events",
    ["attribute"],
    registry=_REGISTRY,
)
REPORTS_DISCARDED = Counter(
    "yeelight_attribute_reports_discarded_total",
    "Attribute reports dropped without emitting events",
    ["reason"],
    registry=_REGISTRY,
)
UNKNOWN_EFFECT_CODES = Counter(
    "yeelight_unknown_effect_codes_total",
    "Lighting effect reports carrying a code missing from the effect table",
    registry=_REGISTRY,
)
COMMANDS_ENCODED = Counter(
    "yeelight_effect_commands_encoded_total",
    "Lighting effect commands encoded and handed to the transport",
    ["effect"],
    registry=_REGISTRY,
)


def record_report_decoded(attribute: str) -> None:
    REPORTS_DECODED.labels(attribute=attribute).inc()


def record_report_discarded(reason: str) -> None:
    REPORTS_DISCARDED.labels(reason=reason).inc()


def record_unknown_effect_code() -> None:
    UNKNOWN_EFFECT_CODES.inc()


def record_command_encoded(effect: str) -> None:
    COMMANDS_ENCODED.labels(effect=effect).inc()


def render_metrics() -> bytes:
    """Return the Prometheus exposition payload for all bridge metrics."""

    return generate_latest(_REGISTRY)
