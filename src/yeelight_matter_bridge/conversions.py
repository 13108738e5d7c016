"""Numeric conversions between Matter wire units and capability units."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

COLOR_CHANNEL_MAX = 0xFE

MIRED_KELVIN_CONVERSION_CONSTANT = 1_000_000
COLOR_TEMPERATURE_KELVIN_MAX = 15000
COLOR_TEMPERATURE_KELVIN_MIN = 1000
COLOR_TEMPERATURE_MIRED_MAX = MIRED_KELVIN_CONVERSION_CONSTANT // COLOR_TEMPERATURE_KELVIN_MIN
COLOR_TEMPERATURE_MIRED_MIN = MIRED_KELVIN_CONVERSION_CONSTANT // COLOR_TEMPERATURE_KELVIN_MAX


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percent_from_raw(value: Optional[int]) -> Optional[int]:
    """Scale an 8-bit colorimetric channel value (0-254) to a 0-100 percentage."""

    if value is None:
        return None
    return round_half_up(value / COLOR_CHANNEL_MAX * 100)


def mired_to_kelvin(mired: int) -> int:
    return round_half_up(MIRED_KELVIN_CONVERSION_CONSTANT / mired)


def mired_in_range(mired: int) -> bool:
    return COLOR_TEMPERATURE_MIRED_MIN <= mired <= COLOR_TEMPERATURE_MIRED_MAX


def kelvin_band(mired: int) -> Tuple[int, int]:
    """Return the Kelvin values indistinguishable from ``mired`` after rounding.

    The band spans the conversions of the neighbouring mired values, so a
    Kelvin value that was sent to the device and read back lands inside it.
    """

    low = mired_to_kelvin(mired + 1)
    high = mired_to_kelvin(mired - 1)
    return low, high


@dataclass(frozen=True)
class KelvinConverter:
    """Mired to Kelvin conversion with range checks and jitter suppression."""

    hysteresis: bool = True

    def convert(self, mired: int, previous: Optional[int] = None) -> Optional[int]:
        """Return the Kelvin value to report for ``mired``.

        Returns None for readings outside the supported mired range. The
        result never exceeds ``COLOR_TEMPERATURE_KELVIN_MAX``. When
        ``previous`` falls inside :func:`kelvin_band` it is returned unchanged.
        """

        if not mired_in_range(mired):
            return None
        # 66 mired is in range but converts to 15152 K.
        kelvin = min(mired_to_kelvin(mired), COLOR_TEMPERATURE_KELVIN_MAX)
        if self.hysteresis and previous is not None:
            low, high = kelvin_band(mired)
            if low <= previous <= high:
                return previous
        return kelvin
