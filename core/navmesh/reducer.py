"""Collapse a search backtrace into direction-change waypoints."""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

from core.navmesh.geometry import Point, PointLike, SearchNode

Direction = Tuple[float, float]

#: Tolerance used when comparing two directions for collinearity.
DIRECTION_EPSILON = 1e-9


def get_direction(node: SearchNode, previous: Optional[SearchNode]) -> Optional[Direction]:
    """Signed delta from ``previous`` to ``node``; ``None`` for the root."""
    if previous is None:
        return None
    return (node.x - previous.x, node.y - previous.y)


def same_direction(a: Optional[Direction], b: Optional[Direction]) -> bool:
    """True when ``a`` and ``b`` point the same way (collinear, not opposed)."""
    if a is None or b is None:
        return a is b
    cross = a[0] * b[1] - a[1] * b[0]
    dot = a[0] * b[0] + a[1] * b[1]
    scale = max(math.hypot(*a) * math.hypot(*b), 1.0)
    return abs(cross) <= DIRECTION_EPSILON * scale and dot > 0


def reduce_path(node: Optional[SearchNode], finish: PointLike) -> List[Point]:
    """Return the start→finish waypoints encoded by the ``came_from`` chain.

    Walking backwards from ``node``, a waypoint is emitted only where the
    movement direction changes, so a straight run through several portals
    keeps a single waypoint.  ``finish`` is always the last waypoint; the
    start position (the chain's root) is never included.
    """
    if node is None:
        return []

    finish_point = Point(finish[0], finish[1])
    path: List[Point] = []
    if (node.x, node.y) != (finish_point.x, finish_point.y):
        path.append(finish_point)

    last_direction: Optional[Direction] = None
    current = node
    while current is not None and current.came_from is not None:
        direction = get_direction(current, current.came_from)
        if direction == (0, 0):
            current = current.came_from
            continue
        if not same_direction(last_direction, direction):
            last_direction = direction
            path.append(Point(current.x, current.y))
        current = current.came_from

    if not path:
        path.append(finish_point)
    path.reverse()
    return path
