"""Scene instances and the light map resolutions stored for them."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from typing import Iterable, Mapping, MutableMapping, Union

from hedgebake.aabb import AABB
from hedgebake.mesh import Mesh
from hedgebake.vecmath import get_radius, next_power_of_two

DEFAULT_RESOLUTION = 256

PathLike = Union[str, "os.PathLike[str]"]


def _u16(value: int) -> int:
    return int(value) & 0xFFFF


def _clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


@dataclass(eq=False)
class Instance:
    """A placed group of meshes that receives its own light map."""

    name: str = ""
    meshes: list[Mesh] = field(default_factory=list)
    aabb: AABB = field(default_factory=AABB)
    original_resolution: int = 0

    def build_aabb(self) -> None:
        """Recompute the bounds from the bounds of every mesh."""
        self.aabb.set_empty()
        for mesh in self.meshes:
            self.aabb.extend(mesh.aabb)

    @property
    def _key(self) -> str:
        return self.name + ".resolution"

    def get_resolution(self, property_bag: Mapping[str, int]) -> int:
        """Stored resolution, else the original one, else 256."""
        default = self.original_resolution if self.original_resolution > 0 else DEFAULT_RESOLUTION
        return int(property_bag.get(self._key, default))

    def set_resolution(self, property_bag: MutableMapping[str, int], resolution: int) -> None:
        """Store a 16-bit resolution; zero is ignored."""
        resolution = _u16(resolution)
        if resolution > 0:
            property_bag[self._key] = resolution


def compute_resolution(instance: Instance, base: float, bias: float, minimum: int, maximum: int) -> int:
    """Resolution that doubles each time the instance's radius grows by `base`."""
    radius = get_radius(instance.aabb)
    if radius > 0.0 and math.isfinite(radius):
        try:
            raw = 2.0 ** (bias + math.log(radius) / math.log(base))
        except OverflowError:
            raw = float(0x7FFFFFFF)
        raw = min(raw, float(0x7FFFFFFF))
    else:
        raw = 0.0
    resolution = _u16(next_power_of_two(int(raw)))
    return _clamp(resolution, minimum, maximum)


def compute_new_resolutions(
    instances: Iterable[Instance],
    property_bag: MutableMapping[str, int],
    base: float,
    bias: float,
    minimum: int,
    maximum: int,
) -> None:
    for instance in instances:
        instance.set_resolution(property_bag, compute_resolution(instance, base, bias, minimum, maximum))


def scale_resolutions(
    instances: Iterable[Instance],
    property_bag: MutableMapping[str, int],
    factor: float,
    minimum: int,
    maximum: int,
) -> None:
    """Multiply every resolution by `factor`, clamped to [minimum, maximum]."""
    for instance in instances:
        scaled = int(instance.get_resolution(property_bag) * factor)
        instance.set_resolution(property_bag, _clamp(scaled, minimum, maximum))


def restore_original_resolutions(instances: Iterable[Instance], property_bag: MutableMapping[str, int]) -> None:
    for instance in instances:
        instance.set_resolution(property_bag, instance.original_resolution)


def load_render_list(path: PathLike) -> dict[str, int]:
    """Read "resolution name" pairs; entries with a zero resolution are skipped."""
    with open(path, "r", encoding="utf-8") as stream:
        tokens = stream.read().split()

    resolutions: dict[str, int] = {}
    for resolution_text, name in zip(tokens[0::2], tokens[1::2]):
        try:
            resolution = int(resolution_text)
        except ValueError:
            break
        if resolution > 0 and name:
            resolutions[name] = resolution
    return resolutions


def apply_render_list(
    instances: Iterable[Instance], property_bag: MutableMapping[str, int], resolutions: Mapping[str, int]
) -> int:
    """Give each listed instance its resolution rounded up to a power of two; return how many matched."""
    applied = 0
    for instance in instances:
        resolution = resolutions.get(instance.name)
        if resolution is None:
            continue
        instance.set_resolution(property_bag, next_power_of_two(resolution))
        applied += 1
    return applied


def save_render_list(instances: Iterable[Instance], property_bag: Mapping[str, int], path: PathLike) -> int:
    """Write one "resolution name" line per instance; return the number written."""
    count = 0
    with open(path, "w", encoding="utf-8") as stream:
        for instance in instances:
            stream.write(f"{instance.get_resolution(property_bag)} {instance.name}\n")
            count += 1
    return count