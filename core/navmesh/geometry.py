"""Shared value types and grid helpers for the area navmesh.

An :class:`Area` is a free rectangle produced by grid decomposition.  Areas
reference each other through ``neighbors`` (so the graph is cyclic) and, once
pointized, through the ``neighbor`` attribute of each :class:`Portal`.  Areas
hash by identity: two rectangles with the same geometry coming from two
separate decompositions are different nodes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

GridCoord = Tuple[int, int]
Region = Tuple[int, int, int, int]  # (x, y, width, height)


class Point(NamedTuple):
    """A waypoint or query position; compares equal to a plain ``(x, y)``."""

    x: float
    y: float


PointLike = Union[Point, Tuple[float, float], Sequence[float]]


@dataclass(eq=False)
class Area:
    """Free rectangular region of the grid (a navmesh node)."""

    x: int
    y: int
    width: int
    height: int
    neighbors: List["Area"] = field(default_factory=list, repr=False)
    points: List["Portal"] = field(default_factory=list, repr=False)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def key(self) -> GridCoord:
        """Spatial key used to memoise conversions (``x:y`` of the origin)."""
        return (self.x, self.y)

    @property
    def cells(self) -> int:
        return self.width * self.height

    def contains(self, point: PointLike) -> bool:
        """Half-open containment test: the right and bottom edges are outside."""
        px, py = point[0], point[1]
        return self.x <= px < self.right and self.y <= py < self.bottom

    def add_neighbor(self, other: "Area") -> None:
        if other is self:
            return
        if not any(n is other for n in self.neighbors):
            self.neighbors.append(other)

    def is_neighbor(self, other: "Area") -> bool:
        return any(n is other for n in self.neighbors)


@dataclass(eq=False)
class Portal:
    """Crossing point from the owning Area into ``neighbor``."""

    x: int
    y: int
    neighbor: Area = field(repr=False)

    @property
    def key(self) -> Tuple[float, float]:
        """Coordinate of the search node placed on this portal."""
        return (float(self.x), float(self.y))


@dataclass(eq=False)
class SearchNode:
    """Transient frontier record ("place") used by a single path query."""

    x: float
    y: float
    area: Area = field(repr=False)
    running_cost: float = 0.0
    cost: float = 0.0
    came_from: Optional["SearchNode"] = field(default=None, repr=False)
    order: int = 0

    @property
    def key(self) -> Tuple[float, float]:
        return (self.x, self.y)


# ----------------------------------------------------------------------
# Distance helpers
#
def distance(a: PointLike, b: PointLike) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


# ----------------------------------------------------------------------
# Grid helpers
#
def occupancy_matrix(grid: Union[np.ndarray, Iterable[Iterable[int]]]) -> np.ndarray:
    """Return a ``(rows, cols)`` boolean matrix where ``True`` means blocked.

    Rows of uneven length are padded with free cells so that a missing column
    reads as free, matching how :func:`has_block` treats reads outside the grid.
    """
    if isinstance(grid, np.ndarray):
        if grid.ndim != 2:
            raise ValueError("occupancy grid must be two-dimensional")
        return grid > 0

    rows = [list(row) for row in grid]
    height = len(rows)
    width = max((len(row) for row in rows), default=0)
    blocked = np.zeros((height, width), dtype=np.bool_)
    for y, row in enumerate(rows):
        if row:
            blocked[y, : len(row)] = np.asarray(row) > 0
    return blocked


def has_block(blocked: np.ndarray, x: int, y: int, width: int, height: int) -> bool:
    """Return ``True`` if any cell of the rectangle is blocked.

    Cells outside ``blocked`` are free; numpy slicing clips to the matrix.
    """
    if width <= 0 or height <= 0:
        return False
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = x + width, y + height
    if x1 <= x0 or y1 <= y0:
        return False
    return bool(blocked[y0:y1, x0:x1].any())


def grid_region(blocked: np.ndarray) -> Region:
    """Bounding region ``(0, 0, cols, rows)`` of an occupancy matrix."""
    rows, cols = blocked.shape
    return (0, 0, int(cols), int(rows))
