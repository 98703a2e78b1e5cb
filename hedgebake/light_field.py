"""Light field probe trees: cells that split space down to probes holding eight corner colours."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable

import numpy as np

from hedgebake.aabb import AABB

# aabb (min.x, max.x, min.y, max.y, min.z, max.z), then (count, offset) for
# cells, probes and indices. Big-endian, offsets relative to the header start.
_HEADER = struct.Struct(">6f6I")
_CELL = struct.Struct(">2I")
_INDEX = struct.Struct(">I")
_CORNERS = 8
_PROBE_SIZE = _CORNERS * 3 + 1


class LightFieldCellType(IntEnum):
    X = 0
    Y = 1
    Z = 2
    PROBE = 3


@dataclass
class LightFieldCell:
    """A tree node: split along an axis into children at `index`, or a probe at `index`."""

    type: LightFieldCellType = LightFieldCellType.X
    index: int = 0

    def __post_init__(self) -> None:
        self.type = LightFieldCellType(self.type)


def _byte(value: int) -> int:
    value = int(value)
    if not 0 <= value <= 0xFF:
        raise ValueError(f"probe value {value} does not fit in a byte")
    return value


@dataclass(frozen=True)
class LightFieldProbe:
    """Eight RGB corner colours and a shadow term, all bytes."""

    colors: tuple[tuple[int, int, int], ...] = ((0, 0, 0),) * _CORNERS
    shadow: int = 0

    def __post_init__(self) -> None:
        colors = tuple(tuple(_byte(c) for c in corner) for corner in self.colors)
        if len(colors) != _CORNERS or any(len(corner) != 3 for corner in colors):
            raise ValueError("a probe holds exactly eight RGB colours")
        object.__setattr__(self, "colors", colors)
        object.__setattr__(self, "shadow", _byte(self.shadow))

    def to_bytes(self) -> bytes:
        return bytes(c for corner in self.colors for c in corner) + bytes([self.shadow])

    @classmethod
    def from_bytes(cls, data: bytes) -> "LightFieldProbe":
        if len(data) != _PROBE_SIZE:
            raise ValueError(f"a probe record is {_PROBE_SIZE} bytes, got {len(data)}")
        colors = tuple(tuple(data[i * 3:i * 3 + 3]) for i in range(_CORNERS))
        return cls(colors, data[-1])


@dataclass(eq=False)
class LightField:
    aabb: AABB = field(default_factory=AABB)
    cells: list[LightFieldCell] = field(default_factory=list)
    probes: list[LightFieldProbe] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)

    def optimize_probes(self) -> None:
        """Merge identical probes, numbering them in order of first appearance."""
        mapping: dict[LightFieldProbe, int] = {}
        for probe in self.probes:
            mapping.setdefault(probe, len(mapping))
        self.indices = [mapping[self.probes[index]] for index in self.indices]
        self.probes = list(mapping)

    def clear(self, clear_cells: bool) -> None:
        if clear_cells:
            self.cells.clear()
        self.probes.clear()
        self.indices.clear()

    def read(self, data: bytes) -> None:
        """Load the bounds and cell tree from a data block; probes and indices are dropped."""
        data = bytes(data)
        try:
            values = _HEADER.unpack_from(data, 0)
        except struct.error as error:
            raise ValueError("light field data is too short for its header") from error

        bounds = values[:6]
        cell_count, cell_offset = values[6], values[7]
        self.aabb = AABB(bounds[0::2], bounds[1::2])

        self.clear(True)
        try:
            cells = [
                _CELL.unpack_from(data, cell_offset + i * _CELL.size) for i in range(cell_count)
            ]
        except struct.error as error:
            raise ValueError("light field cells run past the end of the data") from error
        self.cells = [LightFieldCell(LightFieldCellType(kind), index) for kind, index in cells]

    def write(self) -> bytes:
        """Return the big-endian data block: header, cells, probes, indices."""
        cells_offset = _HEADER.size
        probes_offset = cells_offset + _CELL.size * len(self.cells)
        indices_offset = probes_offset + _PROBE_SIZE * len(self.probes)

        bounds = [float(v) for pair in zip(self.aabb.min, self.aabb.max) for v in pair]
        parts = [
            _HEADER.pack(
                *bounds,
                len(self.cells), cells_offset,
                len(self.probes), probes_offset,
                len(self.indices), indices_offset,
            )
        ]
        parts.extend(_CELL.pack(int(cell.type), cell.index) for cell in self.cells)
        parts.extend(probe.to_bytes() for probe in self.probes)
        parts.extend(_INDEX.pack(index) for index in self.indices)
        return b"".join(parts)


def probe_from_colors(colors: Iterable[Iterable[int]], shadow: int) -> LightFieldProbe:
    """Build a probe from any nested iterable of eight RGB byte triples."""
    return LightFieldProbe(tuple(tuple(np.asarray(list(c), dtype=int).tolist()) for c in colors), shadow)