"""Lighting effect code table shared by the decoder and the encoder."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

from .constants import CUSTOM_EFFECT


class UnknownEffectError(ValueError):
    """Raised when an effect name has no vendor code."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unrecognized effect: {name!r}")
        self.name = name


class EffectTable:
    """Immutable, invertible mapping between effect names and vendor codes."""

    def __init__(self, codes: Mapping[str, int]) -> None:
        by_code: Dict[int, str] = {}
        for name, code in codes.items():
            if name == CUSTOM_EFFECT:
                raise ValueError(f"'{CUSTOM_EFFECT}' is reserved and cannot carry a code.")
            if code in by_code:
                raise ValueError(
                    f"Effect code 0x{code:02X} is shared by {by_code[code]!r} and {name!r}."
                )
            by_code[code] = name
        self._codes: Mapping[str, int] = MappingProxyType(dict(codes))

    def code_for(self, name: str) -> int:
        """Return the vendor code for ``name`` or raise :class:`UnknownEffectError`."""

        try:
            return self._codes[name]
        except KeyError:
            raise UnknownEffectError(name) from None

    def name_for(self, code: int) -> Optional[str]:
        """Return the effect name reported as ``code``, or None when unknown."""

        for name, value in self._codes.items():
            if value == code:
                return name
        return None

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._codes)

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self._codes.items())

    def __contains__(self, name: object) -> bool:
        return name in self._codes

    def __len__(self) -> int:
        return len(self._codes)


LIGHTING_EFFECTS = EffectTable(
    {
        "streamer": 0x03,  # a.k.a. ribbon
        "starrySky": 0x05,
        "aurora": 0x0F,
        "spectrum": 0x11,
        "waterfall": 0x20,
        "bonfire": 0x22,  # a.k.a. fire
        "rainbow": 0x27,
        "waves": 0x2A,
        "pinball": 0x25,  # a.k.a. bouncingBall
        "hacking": 0x2E,
        "meteor": 0x2F,
        "tide": 0x30,
        "buildingBlock": 0x31,
    }
)


def effect_code_for(name: str) -> int:
    return LIGHTING_EFFECTS.code_for(name)


def effect_name_for(code: int) -> Optional[str]:
    return LIGHTING_EFFECTS.name_for(code)


__all__ = [
    "EffectTable",
    "LIGHTING_EFFECTS",
    "UnknownEffectError",
    "effect_code_for",
    "effect_name_for",
]
