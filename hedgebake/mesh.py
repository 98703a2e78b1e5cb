"""Mesh geometry: vertices, triangles, bounds and tangent frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

import numpy as np

from hedgebake.aabb import AABB
from hedgebake.vecmath import barycentric_lerp, compute_tangent


def _zeros(size: int):
    return field(default_factory=lambda: np.zeros(size))


@dataclass(eq=False)
class Vertex:
    position: np.ndarray = _zeros(3)
    normal: np.ndarray = _zeros(3)
    tangent: np.ndarray = _zeros(3)
    binormal: np.ndarray = _zeros(3)
    uv: np.ndarray = _zeros(2)
    v_pos: np.ndarray = _zeros(2)
    color: np.ndarray = _zeros(4)

    def __post_init__(self) -> None:
        for name in ("position", "normal", "tangent", "binormal", "uv", "v_pos", "color"):
            setattr(self, name, np.asarray(getattr(self, name), dtype=np.float64).copy())

    def tangent_to_world_matrix(self) -> np.ndarray:
        """Matrix whose columns are the tangent, binormal and normal."""
        return np.column_stack((self.tangent, self.binormal, self.normal))


@dataclass(frozen=True)
class Triangle:
    a: int = 0
    b: int = 0
    c: int = 0


class MeshType(Enum):
    OPAQUE = 0
    TRANSPARENT = 1
    PUNCH = 2
    SPECIAL = 3


@dataclass(eq=False)
class Mesh:
    type: MeshType = MeshType.OPAQUE
    vertices: list[Vertex] = field(default_factory=list)
    triangles: list[Triangle] = field(default_factory=list)
    material: Any = None
    aabb: AABB = field(default_factory=AABB)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def build_aabb(self) -> None:
        self.aabb.set_empty()
        for vertex in self.vertices:
            self.aabb.extend(vertex.position)

    def generate_tangents(self) -> None:
        """Derive a tangent and binormal for every vertex from its normal."""
        for vertex in self.vertices:
            vertex.tangent, vertex.binormal = compute_tangent(vertex.normal)


def get_smooth_position(a: Vertex, b: Vertex, c: Vertex, bary_uv: Iterable[float]) -> np.ndarray:
    """Interpolated position pushed out along the vertex normals to follow a curved surface."""
    bary_uv = tuple(bary_uv)
    position = barycentric_lerp(a.position, b.position, c.position, bary_uv)

    def project(vertex: Vertex) -> np.ndarray:
        return position - min(0.0, float((position - vertex.position) @ vertex.normal)) * vertex.normal

    return barycentric_lerp(project(a), project(b), project(c), bary_uv)