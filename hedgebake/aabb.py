"""Axis-aligned bounding boxes in three dimensions."""

from __future__ import annotations

from typing import Iterable, Union

import numpy as np

_FLOAT_MAX = float(np.finfo(np.float32).max)

PointLike = Union[Iterable[float], np.ndarray]


def _as_point(value: PointLike) -> np.ndarray:
    point = np.asarray(value, dtype=np.float64)
    if point.shape != (3,):
        raise ValueError(f"expected a 3-component point, got shape {point.shape}")
    return point


class AABB:
    """A box described by its minimum and maximum corners.

    An empty box has its minimum set to the largest float and its maximum to
    the lowest, so that extending it by any point yields a box holding only
    that point.
    """

    def __init__(self, minimum: PointLike | None = None, maximum: PointLike | None = None):
        if (minimum is None) != (maximum is None):
            raise ValueError("both corners must be given, or neither")
        if minimum is None:
            self.min = np.full(3, _FLOAT_MAX)
            self.max = np.full(3, -_FLOAT_MAX)
        else:
            self.min = _as_point(minimum).copy()
            self.max = _as_point(maximum).copy()

    @classmethod
    def empty(cls) -> "AABB":
        """Return a new empty box."""
        return cls()

    def copy(self) -> "AABB":
        return AABB(self.min, self.max)

    def is_empty(self) -> bool:
        return bool(np.any(self.min > self.max))

    def set_empty(self) -> None:
        self.min = np.full(3, _FLOAT_MAX)
        self.max = np.full(3, -_FLOAT_MAX)

    def extend(self, other: Union["AABB", PointLike]) -> "AABB":
        """Grow the box to include a point or another box; returns self."""
        if isinstance(other, AABB):
            self.min = np.minimum(self.min, other.min)
            self.max = np.maximum(self.max, other.max)
        else:
            point = _as_point(other)
            self.min = np.minimum(self.min, point)
            self.max = np.maximum(self.max, point)
        return self

    def contains(self, point: PointLike) -> bool:
        p = _as_point(point)
        return bool(np.all(self.min <= p) and np.all(p <= self.max))

    def intersects(self, other: "AABB") -> bool:
        return bool(np.all(np.maximum(self.min, other.min) <= np.minimum(self.max, other.max)))

    def center(self) -> np.ndarray:
        return (self.min + self.max) / 2.0

    def sizes(self) -> np.ndarray:
        return self.max - self.min

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return bool(np.array_equal(self.min, other.min) and np.array_equal(self.max, other.max))

    def __repr__(self) -> str:
        return f"AABB(min={self.min.tolist()}, max={self.max.tolist()})"