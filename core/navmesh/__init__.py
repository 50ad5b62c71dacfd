"""Area navmesh: grid decomposition, portal graph and A* path search."""

from .decomposer import decompose, split_region
from .gateway import compute_gateway
from .geometry import Area, Point, Portal, SearchNode, distance, has_block, occupancy_matrix
from .linker import are_neighbors, link_all, link_siblings
from .pointizer import pointize
from .reducer import reduce_path
from .search import find_path, locate_area, nearest_area

__all__ = [
    "Area",
    "Point",
    "Portal",
    "SearchNode",
    "are_neighbors",
    "compute_gateway",
    "decompose",
    "distance",
    "find_path",
    "has_block",
    "link_all",
    "link_siblings",
    "locate_area",
    "nearest_area",
    "occupancy_matrix",
    "pointize",
    "reduce_path",
    "split_region",
]
