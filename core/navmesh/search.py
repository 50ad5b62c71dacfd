"""A* search over the portal graph produced by :func:`pointize`.

Search nodes sit on portal coordinates.  Expanding a node walks the portals of
the area it has entered; the movement cost between two nodes is the straight
line between them (an area is free and convex, so the straight move is always
valid) and the heuristic is the straight-line distance to the finish.  Because
the heuristic from a node inside the finish area *is* the remaining cost, the
first finish-area node popped from the frontier closes an optimal route.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from core.navmesh.geometry import Area, Point, PointLike, SearchNode, distance
from core.navmesh.reducer import reduce_path

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Area lookup
#
def locate_area(graph: Sequence[Area], point: PointLike) -> Optional[Area]:
    """Return the first area containing ``point`` or ``None``."""
    for area in graph:
        if area.contains(point):
            return area
    return None


def nearest_area(graph: Sequence[Area], point: PointLike) -> Optional[Area]:
    """Approximate nearest area: closest by origin corner or far corner."""
    best: Optional[Area] = None
    best_distance = float("inf")
    for area in graph:
        d = min(distance(point, (area.x, area.y)), distance(point, (area.right, area.bottom)))
        if d < best_distance:
            best, best_distance = area, d
    return best


# ----------------------------------------------------------------------
# Search
#
def search(
    start: PointLike,
    start_area: Area,
    finish: PointLike,
    finish_area: Area,
    use_heuristic: bool = True,
) -> Optional[SearchNode]:
    """Run A* from ``start`` and return the first node that enters ``finish_area``.

    Returns ``None`` when the frontier is exhausted first.  Ties on cost are
    broken by discovery order.
    """
    counter = itertools.count()
    root = SearchNode(float(start[0]), float(start[1]), start_area, order=next(counter))
    root.cost = distance(root.key, finish) if use_heuristic else 0.0

    frontier: List[Tuple[float, int, SearchNode]] = [(root.cost, root.order, root)]
    best_cost: Dict[Tuple[float, float], float] = {root.key: 0.0}
    closed: Set[Tuple[float, float]] = set()
    expanded = 0

    while frontier:
        _, _, current = heapq.heappop(frontier)
        if current.key in closed:
            continue
        closed.add(current.key)
        expanded += 1

        if current.area is finish_area:
            logger.debug("A* reached finish area after expanding %d nodes", expanded)
            return current

        for portal in current.area.points:
            key = portal.key
            if key in closed:
                continue
            running_cost = current.running_cost + distance(current.key, key)
            if running_cost >= best_cost.get(key, float("inf")):
                continue
            best_cost[key] = running_cost
            cost = running_cost
            if use_heuristic:
                cost += distance(key, finish)
            candidate = SearchNode(
                key[0],
                key[1],
                portal.neighbor,
                running_cost=running_cost,
                cost=cost,
                came_from=current,
                order=next(counter),
            )
            heapq.heappush(frontier, (candidate.cost, candidate.order, candidate))

    logger.debug("A* frontier exhausted after expanding %d nodes", expanded)
    return None


def find_path(
    graph: Sequence[Area],
    start: PointLike,
    finish: PointLike,
    use_heuristic: bool = True,
) -> List[Point]:
    """Return the waypoints from ``start`` to ``finish`` across ``graph``.

    An empty list means the finish is unreachable (it lies outside every area,
    or no chain of portals connects the two areas).  When both points fall in
    the same area the result is ``[finish]``.  A start outside every area is
    snapped to the nearest area instead of failing.
    """
    if not graph:
        return []

    start_area = locate_area(graph, start)
    if start_area is None:
        start_area = nearest_area(graph, start)
        logger.debug("Start %s is off the mesh, using nearest area %r", tuple(start), start_area)

    finish_area = locate_area(graph, finish)
    if finish_area is None:
        logger.debug("Finish %s is not inside any area", tuple(finish))
        return []

    finish_point = Point(finish[0], finish[1])
    if start_area is finish_area:
        return [finish_point]

    node = search(start, start_area, finish_point, finish_area, use_heuristic=use_heuristic)
    return reduce_path(node, finish_point)
