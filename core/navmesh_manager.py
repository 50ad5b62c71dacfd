"""
Cached navmesh built from an occupancy grid.

:class:`NavMesh` owns the navigation graph for one grid.  The graph is built
once (grid decomposition, neighbour linking and pointization) and then shared
read-only by every path query, so path requests only pay for the A* search.
Recently computed paths are kept in an LRU cache keyed by ``(start, finish)``;
when its size exceeds ``max_cache_size`` the least recently used entry is
evicted.  Replacing the grid through :meth:`NavMesh.update_grid` builds a new
graph completely before swapping it in and clears the cache.

Typical use::

    mesh = NavMesh(grid, actor_size=2)
    waypoints = mesh.find_path((1.5, 1.5), (30.0, 12.0))
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from config.config_loader import NavMeshSettings
from core.event_bus import EventBus
from core.events.topics import EventTopic
from core.navmesh import decompose, find_path, locate_area, occupancy_matrix, pointize
from core.navmesh.geometry import Area, Point, PointLike, Region
from utils.logger import log_calls

logger = logging.getLogger(__name__)

PathKey = Tuple[Tuple[float, float], Tuple[float, float]]


class NavMesh:
    """Area navmesh over one occupancy grid with an LRU path cache."""

    def __init__(
        self,
        grid: Any,
        actor_size: int = 1,
        region: Optional[Region] = None,
        *,
        settings: Optional[NavMeshSettings] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        """Initialise the navmesh for ``grid``.

        Parameters
        ----------
        grid : array-like
            Rows of non-negative integers; a value greater than zero is blocked.
        actor_size : int
            Minimum clearance of the actors using this mesh.  Ignored when
            ``settings`` is provided.
        region : tuple, optional
            ``(x, y, width, height)`` to decompose, defaulting to the grid bounds.
        settings : NavMeshSettings, optional
            Cache size, heuristic toggle and actor size.
        event_bus : EventBus, optional
            Receives :class:`~core.events.topics.EventTopic` notifications.
        """
        self.settings: NavMeshSettings = settings or NavMeshSettings(actor_size=actor_size)
        self.actor_size: int = self.settings.actor_size
        self.region: Optional[Region] = region
        self.event_bus: Optional[EventBus] = event_bus

        self._blocked: np.ndarray = occupancy_matrix(grid)
        self._areas: List[Area] = []
        self._built: bool = False
        # Bumped on every rebuild; cache entries are only stored for the
        # generation their search ran on.
        self._generation: int = 0
        self.last_build_seconds: float = 0.0

        self.path_cache: "OrderedDict[PathKey, List[Point]]" = OrderedDict()
        self._cache_lock = threading.Lock()
        self._build_lock = threading.RLock()

    @classmethod
    def from_settings(
        cls,
        grid: Any,
        settings: NavMeshSettings,
        event_bus: Optional[EventBus] = None,
        region: Optional[Region] = None,
    ) -> "NavMesh":
        return cls(grid, region=region, settings=settings, event_bus=event_bus)

    # ------------------------------------------------------------------
    # Graph construction
    #
    @property
    def areas(self) -> List[Area]:
        """Pointized areas of the current graph (builds on first access)."""
        return self._snapshot()[0]

    @property
    def generation(self) -> int:
        """Number of builds so far; ``0`` until the graph is first built."""
        return self._generation

    def _snapshot(self) -> Tuple[List[Area], int]:
        if not self._built:
            with self._build_lock:
                if not self._built:
                    self.build()
        with self._cache_lock:
            return self._areas, self._generation

    @property
    def blocked(self) -> np.ndarray:
        return self._blocked

    @log_calls
    def build(self) -> List[Area]:
        """Decompose the grid, link neighbours and attach portals.

        The new graph replaces the previous one only once it is complete, and
        the path cache is cleared.
        """
        with self._build_lock:
            started = time.perf_counter()
            areas = decompose(self._blocked, self.region, self.actor_size, link=True)
            areas = pointize(areas, self.actor_size)
            elapsed = time.perf_counter() - started

            with self._cache_lock:
                self._areas = areas
                self._generation += 1
                self.path_cache.clear()
            self._built = True
            self.last_build_seconds = elapsed

        portal_count = sum(len(area.points) for area in areas)
        logger.info(
            "Built navmesh: %d areas, %d portals in %.4f s", len(areas), portal_count, elapsed
        )
        self._publish(
            EventTopic.NAVMESH_BUILT,
            area_count=len(areas),
            portal_count=portal_count,
            elapsed=elapsed,
        )
        return areas

    def update_grid(self, grid: Any) -> List[Area]:
        """Replace the occupancy grid and rebuild the graph.

        Searches already running on the previous graph finish normally but
        their results are not cached.
        """
        blocked = occupancy_matrix(grid)
        with self._build_lock:
            self._blocked = blocked
            return self.build()

    # ------------------------------------------------------------------
    # Queries
    #
    def area_at(self, point: PointLike) -> Optional[Area]:
        """Return the area containing ``point`` or ``None``."""
        return locate_area(self.areas, point)

    def find_path(self, start: PointLike, finish: PointLike) -> List[Point]:
        """Return the waypoints from ``start`` to ``finish`` (``[]`` if unreachable)."""
        areas, generation = self._snapshot()
        key: PathKey = ((float(start[0]), float(start[1])), (float(finish[0]), float(finish[1])))

        cached = self._cache_lookup(key)
        if cached is not None:
            self._publish_path(key, cached, cached=True)
            return list(cached)

        path = find_path(areas, key[0], key[1], use_heuristic=self.settings.use_heuristic)
        self._cache_store(key, path, generation)
        self._publish_path(key, path, cached=False)
        return list(path)

    def stats(self) -> Dict[str, Any]:
        areas = self.areas
        return {
            "area_count": len(areas),
            "portal_count": sum(len(area.points) for area in areas),
            "free_cells": sum(area.cells for area in areas),
            "cache_size": len(self.path_cache),
            "last_build_seconds": self.last_build_seconds,
        }

    # ------------------------------------------------------------------
    # Path cache
    #
    def clear_cache(self) -> None:
        with self._cache_lock:
            self.path_cache.clear()

    def _cache_lookup(self, key: PathKey) -> Optional[List[Point]]:
        with self._cache_lock:
            path = self.path_cache.get(key)
            if path is not None:
                self.path_cache.move_to_end(key)
            return path

    def _cache_store(self, key: PathKey, path: List[Point], generation: int) -> None:
        """Insert a path into the LRU cache, evicting the oldest entries.

        Paths searched on a graph that has since been rebuilt are dropped.
        """
        if self.settings.max_cache_size <= 0:
            return
        with self._cache_lock:
            if generation != self._generation:
                logger.debug("Discarding path %s searched on a replaced graph", key)
                return
            self.path_cache[key] = list(path)
            self.path_cache.move_to_end(key)
            while len(self.path_cache) > self.settings.max_cache_size:
                self.path_cache.popitem(last=False)

    # ------------------------------------------------------------------
    # Events
    #
    def _listening(self, topic: EventTopic) -> bool:
        return self.event_bus is not None and self.event_bus.has_subscribers(topic)

    def _publish(self, topic: EventTopic, **payload: Any) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(topic, **payload)

    def _publish_path(self, key: PathKey, path: List[Point], *, cached: bool) -> None:
        start, finish = key
        if path:
            if self._listening(EventTopic.PATH_FOUND):
                self._publish(EventTopic.PATH_FOUND, start=start, finish=finish, path=list(path), cached=cached)
        else:
            logger.debug("No path from %s to %s", start, finish)
            self._publish(EventTopic.PATH_UNREACHABLE, start=start, finish=finish)
