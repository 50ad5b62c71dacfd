"""Crossing points ("gateways") between two adjacent areas."""

from __future__ import annotations

from core.navmesh.geometry import Area, Point


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def compute_gateway(to: Area, from_: Area, actor_size: int) -> Point:
    """Return the point at which an actor crosses from ``from_`` into ``to``.

    The point sits inside ``to``, inset from the shared border by
    ``actor_size // 2`` and centred on the overlapping span, which keeps it
    away from wall corners.  Single-cell corridors have no room for a margin
    and use their origin instead.

    Raises
    ------
    ValueError
        If the two areas do not share a border.
    """
    if to.width == 1 or to.height == 1:
        return Point(to.x, to.y)

    inset = actor_size // 2

    if from_.right == to.x or to.right == from_.x:
        low, high = max(to.y, from_.y), min(to.bottom, from_.bottom)
        if high <= low:
            raise ValueError(f"areas {to!r} and {from_!r} do not share a border")
        if from_.right == to.x:
            x = to.x + inset
        else:
            x = to.right - 1 - inset
        return Point(_clamp(x, to.x, to.right - 1), (low + high - 1) // 2)

    if from_.bottom == to.y or to.bottom == from_.y:
        low, high = max(to.x, from_.x), min(to.right, from_.right)
        if high <= low:
            raise ValueError(f"areas {to!r} and {from_!r} do not share a border")
        if from_.bottom == to.y:
            y = to.y + inset
        else:
            y = to.bottom - 1 - inset
        return Point((low + high - 1) // 2, _clamp(y, to.y, to.bottom - 1))

    raise ValueError(f"areas {to!r} and {from_!r} do not share a border")
