"""Test bootstrap: ensure package root is on sys.path and share grid fixtures.

This allows absolute imports like `core.navmesh` and `config.config_loader`
which assume the working directory is the repository root.
"""
import sys, os
PACKAGE_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if PACKAGE_ROOT not in sys.path:
    sys.path.insert(0, PACKAGE_ROOT)

import numpy as np
import pytest


@pytest.fixture
def open_grid():
    """8x8 grid without any blocked cell."""
    return np.zeros((8, 8), dtype=np.uint8)


@pytest.fixture
def walled_grid():
    """8x8 grid split in two by a full-width wall on row 4."""
    grid = np.zeros((8, 8), dtype=np.uint8)
    grid[4, :] = 1
    return grid


@pytest.fixture
def gap_grid():
    """8x8 grid with a wall on column 4 and a single-cell gap at (4, 1)."""
    grid = np.zeros((8, 8), dtype=np.uint8)
    grid[:, 4] = 1
    grid[1, 4] = 0
    return grid


@pytest.fixture
def detour_grid():
    """4x4 grid whose only route from the top-left to the bottom-left bends
    around a wall through the right-hand column."""
    return [
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [1, 1, 1, 0],
        [0, 0, 0, 0],
    ]
