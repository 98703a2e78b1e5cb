"""Scene lights, their binary record, and the naming and colour helpers the editor uses."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Sequence

import numpy as np

# type, position, color, attribute, range; big-endian as stored in stage files.
_RAW_LIGHT = struct.Struct(">I3f3fI4f")
# Directional lights stop before the attribute field.
_ATTRIBUTE_OFFSET = struct.calcsize(">I3f3f")


class LightType(IntEnum):
    DIRECTIONAL = 0
    POINT = 1


def _vector(value: Iterable[float], size: int) -> np.ndarray:
    array = np.asarray(value, dtype=np.float64).copy()
    if array.shape != (size,):
        raise ValueError(f"expected {size} components, got shape {array.shape}")
    return array


@dataclass(eq=False)
class Light:
    """A directional or point light.

    For directional lights `position` holds the light's direction.
    `range` holds (unused, unused, inner radius, outer radius).
    """

    name: str = ""
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    color: np.ndarray = field(default_factory=lambda: np.zeros(3))
    type: LightType = LightType.DIRECTIONAL
    range: np.ndarray = field(default_factory=lambda: np.zeros(4))
    shadow_radius: float = 0.0
    cast_shadow: bool = True

    def __post_init__(self) -> None:
        self.position = _vector(self.position, 3)
        self.color = _vector(self.color, 3)
        self.range = _vector(self.range, 4)
        self.type = LightType(self.type)

    def compute_intensity(self) -> float:
        """Half the brightest channel, or 1 when no channel exceeds 1."""
        intensity = float(np.max(self.color))
        return intensity / 2.0 if intensity > 1.0 else 1.0

    def raw_bytes(self) -> bytes:
        """Return the light's big-endian record, without the file header."""
        first_range = (self.shadow_radius + 1.0) * (1.0 if self.cast_shadow else -1.0)
        packed = _RAW_LIGHT.pack(
            int(self.type),
            *(float(x) for x in self.position),
            *(float(x) for x in self.color),
            0,
            first_range,
            float(self.range[1]),
            float(self.range[2]),
            float(self.range[3]),
        )
        if self.type is LightType.POINT:
            return packed
        return packed[:_ATTRIBUTE_OFFSET]


def make_light_name(lights: Sequence[Light], original_name: str) -> str:
    """Build a name not used by any light, numbered after `original_name`.

    Trailing digits of `original_name` give the starting number; without
    them numbering starts at the count of lights. Numbers are zero-padded
    to three digits.
    """
    prefix = original_name
    index = 0
    digits = 1
    while prefix and prefix[-1] in "0123456789":
        index += int(prefix[-1]) * digits
        digits *= 10
        prefix = prefix[:-1]
    if digits == 1:
        index = len(lights)

    names = {light.name for light in lights}
    while True:
        name = f"{prefix}{index:03d}"
        if name not in names:
            return name
        index += 1


def split_color_intensity(color: Iterable[float]) -> tuple[np.ndarray, float]:
    """Split a light colour into a base colour and an intensity factor.

    The intensity is twice the brightest channel when that exceeds 1,
    otherwise 1; the base colour is the colour divided by it.
    """
    rgb = _vector(color, 3)
    intensity = float(np.max(rgb))
    intensity = intensity * 2.0 if intensity > 1.0 else 1.0
    return rgb / intensity, intensity