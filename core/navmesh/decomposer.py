"""Quadtree decomposition of an occupancy grid into free rectangles.

A region with no blocked cell becomes a single :class:`Area` and is not split
any further, so large open spaces stay as one node while cluttered spaces are
subdivided finely.  Blocked regions are quartered at ``w // 2`` / ``h // 2``
(odd remainders go to the right and bottom quadrants) until they are free,
smaller than the actor in both dimensions, or a single cell.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

import numpy as np

from core.navmesh.geometry import Area, Region, grid_region, has_block, occupancy_matrix
from core.navmesh.linker import link_siblings

logger = logging.getLogger(__name__)

Quadrants = Tuple[Region, Region, Region, Region]


def split_region(region: Region) -> Quadrants:
    """Return the ``(top_left, top_right, bottom_left, bottom_right)`` quadrants."""
    x, y, width, height = region
    sub_w, sub_h = width // 2, height // 2
    rest_w, rest_h = width - sub_w, height - sub_h
    return (
        (x, y, sub_w, sub_h),
        (x + sub_w, y, rest_w, sub_h),
        (x, y + sub_h, sub_w, rest_h),
        (x + sub_w, y + sub_h, rest_w, rest_h),
    )


def _decompose_region(
    blocked: np.ndarray,
    region: Region,
    actor_size: int,
    link: bool,
) -> List[Area]:
    x, y, width, height = region
    if width <= 0 or height <= 0:
        return []

    if not has_block(blocked, x, y, width, height):
        return [Area(x, y, width, height)]

    if width < actor_size and height < actor_size:
        return []
    if width == 1 and height == 1:
        return []

    top_left, top_right, bottom_left, bottom_right = (
        _decompose_region(blocked, quadrant, actor_size, link)
        for quadrant in split_region(region)
    )
    if link:
        link_siblings(
            top_left,
            top_right,
            bottom_left,
            bottom_right,
            x + width // 2,
            y + height // 2,
            actor_size,
        )
    return top_left + top_right + bottom_left + bottom_right


def decompose(
    grid: Union[np.ndarray, list],
    region: Optional[Region] = None,
    actor_size: int = 1,
    link: bool = True,
) -> List[Area]:
    """Partition the free space of ``region`` into areas.

    Parameters
    ----------
    grid : array-like
        Occupancy grid (rows of non-negative integers, ``> 0`` is blocked) or
        a boolean matrix from :func:`occupancy_matrix`.
    region : tuple, optional
        ``(x, y, width, height)`` to decompose.  Defaults to the grid bounds.
        Any part of the region outside the grid is treated as free.
    actor_size : int
        Minimum clearance of the actor; blocked regions narrower than this in
        both dimensions are dropped.
    link : bool
        When true, sibling quadrants are cross-linked after every split so the
        returned areas already carry their ``neighbors``.
    """
    if actor_size < 1:
        raise ValueError("actor_size must be at least 1")
    blocked = grid if isinstance(grid, np.ndarray) and grid.dtype == np.bool_ else occupancy_matrix(grid)
    if region is None:
        region = grid_region(blocked)

    areas = _decompose_region(blocked, tuple(int(v) for v in region), actor_size, link)
    logger.debug(
        "Decomposed region %s into %d areas (actor_size=%d)", region, len(areas), actor_size
    )
    return areas
