"""Bounding volume hierarchy over point lights, plus the scene's sun light."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

import numpy as np

from hedgebake.aabb import AABB
from hedgebake.light import Light, LightType


@dataclass(eq=False)
class _Node:
    aabb: AABB
    center: np.ndarray
    radius: float
    light: Optional[Light] = None
    left: Optional["_Node"] = None
    right: Optional["_Node"] = None

    def contains(self, position: np.ndarray) -> bool:
        if self.light is not None:
            outer = float(self.light.range[3])
            offset = position - self.light.position
            return float(offset @ offset) < outer * outer
        return self.aabb.contains(position)

    def walk(self, position: np.ndarray) -> Iterator[Light]:
        if not self.contains(position):
            return
        if self.light is not None:
            yield self.light
        if self.left is not None:
            yield from self.left.walk(position)
        if self.right is not None:
            yield from self.right.walk(position)


def _build(lights: list[Light]) -> Optional[_Node]:
    if not lights:
        return None

    aabb = AABB()
    for light in lights:
        outer = float(light.range[3])
        aabb.extend(light.position - outer)
        aabb.extend(light.position + outer)

    node = _Node(
        aabb=aabb,
        center=aabb.center(),
        radius=float(np.linalg.norm(aabb.min - aabb.max)) / 2.0,
    )

    if len(lights) == 1:
        node.light = lights[0]
        return node

    axis = int(np.argmax(aabb.sizes()))
    left = [light for light in lights if light.position[axis] < node.center[axis]]
    right = [light for light in lights if not light.position[axis] < node.center[axis]]

    if not left:
        left, right = right, left

    if not right:
        # Move every second light across; the list shrinks as the loop runs.
        i = 0
        while i < len(left):
            if i & 1:
                right.append(left.pop())
            i += 1

    node.left = _build(left)
    node.right = _build(right)

    if node.left is not None and node.right is None:
        return node.left
    if node.left is None and node.right is not None:
        return node.right
    return node


class LightBVH:
    """Finds the lights whose range reaches a point."""

    def __init__(self) -> None:
        self._node: Optional[_Node] = None
        self._sun: Optional[Light] = None

    def valid(self) -> bool:
        return self._sun is not None or self._node is not None

    def sun_light(self) -> Optional[Light]:
        return self._sun

    def reset(self) -> None:
        self._sun = None
        self._node = None

    def build(self, lights: Iterable[Light]) -> None:
        """Rebuild from a scene's lights; the last directional light is the sun."""
        self._sun = None
        points: list[Light] = []
        for light in lights:
            if light.type is LightType.DIRECTIONAL:
                self._sun = light
            elif light.type is LightType.POINT:
                points.append(light)
        self._node = _build(points)

    def traverse(self, position: Iterable[float]) -> Iterator[Light]:
        """Yield the point lights reaching `position`, then the sun if any."""
        point = np.asarray(position, dtype=np.float64)
        if self._node is not None:
            yield from self._node.walk(point)
        if self._sun is not None:
            yield self._sun

    def collect(self, position: Iterable[float], limit: int) -> list[Light]:
        """Return the sun followed by up to `limit` lights in total reaching `position`."""
        point = np.asarray(position, dtype=np.float64)
        result: list[Light] = []
        if self._sun is not None:
            result.append(self._sun)
        if self._node is not None:
            for light in self._node.walk(point):
                if len(result) >= limit:
                    break
                result.append(light)
        return result