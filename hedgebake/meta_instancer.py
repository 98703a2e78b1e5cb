"""Meta instancer files: placed foliage-style instances with sway, rotation and baked colour."""

from __future__ import annotations

import math
import os
import struct
from dataclasses import dataclass, field
from typing import BinaryIO, Union

import numpy as np

from hedgebake.vecmath import PI

SIGNATURE = 0x4D544920
VERSION = 1

# signature, version, count, instance size, three unused words, instances offset.
_HEADER = struct.Struct(">8I")
# position, type, sway, pitch/yaw after sway, pitch/yaw before sway, A, R, G, B.
_INSTANCE = struct.Struct(">3f4B2h4B")

PathLike = Union[str, "os.PathLike[str]"]


def quantize_unorm(value: float, bits: int) -> int:
    """Map [0, 1] to an unsigned integer of `bits` bits, clamping and rounding."""
    scale = (1 << bits) - 1
    value = min(max(value, 0.0), 1.0)
    return int(value * scale + 0.5)


def quantize_snorm(value: float, bits: int) -> int:
    """Map [-1, 1] to a signed integer of `bits` bits, clamping and rounding away from zero."""
    scale = (1 << (bits - 1)) - 1
    rounding = 0.5 if value >= 0.0 else -0.5
    value = min(max(value, -1.0), 1.0)
    return int(value * scale + rounding)


@dataclass(eq=False)
class MetaInstance:
    """One placed instance. `color` is (R, G, B, shadow)."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    type: int = 0
    sway: float = 0.0
    pitch_after_sway: float = 0.0
    yaw_after_sway: float = 0.0
    pitch_before_sway: float = 0.0
    yaw_before_sway: float = 0.0
    color: np.ndarray = field(default_factory=lambda: np.zeros(4))

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=np.float64).copy()
        self.color = np.asarray(self.color, dtype=np.float64).copy()
        if self.position.shape != (3,) or self.color.shape != (4,):
            raise ValueError("position needs 3 components and color 4")


def _signed_angle(value: int) -> float:
    return PI * (value / (32767.0 if value >= 0 else 32768.0))


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ValueError("meta instancer data ends early")
    return data


@dataclass(eq=False)
class MetaInstancer:
    name: str = ""
    instances: list[MetaInstance] = field(default_factory=list)

    def read(self, stream: BinaryIO) -> None:
        """Append the instances stored in `stream`; files with another record size are ignored."""
        _, _, count, size, _, _, _, offset = _HEADER.unpack(_read_exact(stream, _HEADER.size))
        if size != _INSTANCE.size:
            return

        stream.seek(offset)
        for _ in range(count):
            (x, y, z, kind, sway, pitch_after, yaw_after,
             pitch_before, yaw_before, a, r, g, b) = _INSTANCE.unpack(_read_exact(stream, _INSTANCE.size))
            self.instances.append(MetaInstance(
                position=np.array([x, y, z]),
                type=kind,
                sway=sway / 255.0,
                pitch_after_sway=2.0 * PI * (pitch_after / 255.0),
                yaw_after_sway=2.0 * PI * (yaw_after / 255.0),
                pitch_before_sway=_signed_angle(pitch_before),
                yaw_before_sway=_signed_angle(yaw_before),
                color=np.array([r / 255.0, g / 255.0, b / 255.0, a / 255.0]),
            ))

    def write(self, stream: BinaryIO) -> None:
        stream.write(_HEADER.pack(
            SIGNATURE, VERSION, len(self.instances), _INSTANCE.size, 0, 0, 0, _HEADER.size,
        ))
        two_pi = 2.0 * PI
        for instance in self.instances:
            r, g, b, a = (float(c) for c in instance.color)
            stream.write(_INSTANCE.pack(
                *(float(v) for v in instance.position),
                int(instance.type) & 0xFF,
                quantize_unorm(instance.sway, 8),
                quantize_unorm(math.fmod(instance.pitch_after_sway, two_pi) / two_pi, 8),
                quantize_unorm(math.fmod(instance.yaw_after_sway, two_pi) / two_pi, 8),
                quantize_snorm(instance.pitch_before_sway / PI, 16),
                quantize_snorm(instance.yaw_before_sway / PI, 16),
                quantize_unorm(a, 8),
                quantize_unorm(r, 8),
                quantize_unorm(g, 8),
                quantize_unorm(b, 8),
            ))

    def save(self, path: PathLike) -> None:
        with open(path, "wb") as stream:
            self.write(stream)