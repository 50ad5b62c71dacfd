"""Conversion of the area adjacency graph into a portal (point) graph."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from core.navmesh.gateway import compute_gateway
from core.navmesh.geometry import Area, GridCoord, Portal

logger = logging.getLogger(__name__)


def pointize(areas: Sequence[Area], actor_size: int = 1) -> List[Area]:
    """Attach a ``points`` list (one :class:`Portal` per neighbour) to every area.

    The adjacency graph is cyclic, so conversion is memoised on the ``x:y``
    origin key: each distinct area is converted exactly once and every portal
    referring to it holds the same object.  Areas reachable only through
    neighbour links are converted as well.
    """
    converted: Dict[GridCoord, Area] = {}
    pending: List[Area] = list(reversed(areas))

    while pending:
        area = pending.pop()
        if area.key in converted:
            continue
        converted[area.key] = area

        points: List[Portal] = []
        for index, neighbor in enumerate(area.neighbors):
            shared = converted.get(neighbor.key)
            if shared is None:
                shared = neighbor
                pending.append(neighbor)
            elif shared is not neighbor:
                # Same origin seen through another reference; keep one node.
                area.neighbors[index] = shared
            gx, gy = compute_gateway(shared, area, actor_size)
            points.append(Portal(gx, gy, shared))
        area.points = points

    portal_count = sum(len(a.points) for a in converted.values())
    logger.debug("Pointized %d areas with %d portals", len(converted), portal_count)
    return [converted.get(area.key, area) for area in areas]
