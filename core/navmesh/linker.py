"""Adjacency between decomposed areas.

Two areas are neighbours when they share a full edge and the shared span is at
least ``actor_size`` long, so any actor of that size can physically cross.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Sequence

from core.navmesh.geometry import Area


def _overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> int:
    return min(a_end, b_end) - max(a_start, b_start)


def are_neighbors(a: Area, b: Area, actor_size: int) -> bool:
    """Return ``True`` if ``a`` and ``b`` share a border an actor can cross."""
    if a is b:
        return False
    if a.right == b.x or b.right == a.x:
        return _overlap(a.y, a.bottom, b.y, b.bottom) >= actor_size
    if a.bottom == b.y or b.bottom == a.y:
        return _overlap(a.x, a.right, b.x, b.right) >= actor_size
    return False


def _link_pairs(first: Iterable[Area], second: Iterable[Area], actor_size: int) -> int:
    second = list(second)
    linked = 0
    for a in first:
        for b in second:
            if are_neighbors(a, b, actor_size):
                a.add_neighbor(b)
                b.add_neighbor(a)
                linked += 1
    return linked


def link_siblings(
    top_left: Sequence[Area],
    top_right: Sequence[Area],
    bottom_left: Sequence[Area],
    bottom_right: Sequence[Area],
    split_x: int,
    split_y: int,
    actor_size: int,
) -> int:
    """Cross-link the children of one parent split.

    Only edge-adjacent quadrants can share a border (top-left with top-right
    and bottom-left, bottom-right with top-right and bottom-left), and only
    areas touching the split line need to be compared.  Returns the number of
    links created.
    """
    linked = 0
    # Across the vertical split line.
    for west, east in ((top_left, top_right), (bottom_left, bottom_right)):
        linked += _link_pairs(
            (a for a in west if a.right == split_x),
            (b for b in east if b.x == split_x),
            actor_size,
        )
    # Across the horizontal split line.
    for north, south in ((top_left, bottom_left), (top_right, bottom_right)):
        linked += _link_pairs(
            (a for a in north if a.bottom == split_y),
            (b for b in south if b.y == split_y),
            actor_size,
        )
    return linked


def link_all(areas: Sequence[Area], actor_size: int) -> int:
    """Link an arbitrary list of non-overlapping areas by indexing their edges."""
    by_left: Dict[int, List[Area]] = defaultdict(list)
    by_top: Dict[int, List[Area]] = defaultdict(list)
    for area in areas:
        by_left[area.x].append(area)
        by_top[area.y].append(area)

    linked = 0
    for area in areas:
        linked += _link_pairs((area,), by_left.get(area.right, ()), actor_size)
        linked += _link_pairs((area,), by_top.get(area.bottom, ()), actor_size)
    return linked
