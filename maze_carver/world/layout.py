"""
World-space placement of a maze grid for scene builders and movement checks.

Column index maps to world X and row index to world Z; every block sits at a
fixed elevation on Y. Nothing here draws anything, it only produces arrays and
answers passability queries.
"""
import math
from typing import Dict, Tuple

import numpy as np

from maze_carver.core.grid import Grid

DEFAULT_CELL_SIZE = 4.0


def _check_cell_size(cell_size: float):
    if not cell_size > 0:
        raise ValueError(f"cell_size must be positive, got {cell_size}")


def cell_positions(grid: Grid, cell_size: float = DEFAULT_CELL_SIZE, elevation: float = 0.0) -> np.ndarray:
    """(width*height, 3) array of block centres, row-major like grid.cells."""
    _check_cell_size(cell_size)
    zs, xs = np.mgrid[0:grid.height, 0:grid.width]
    out = np.empty((grid.width * grid.height, 3), dtype=np.float64)
    out[:, 0] = xs.ravel() * cell_size
    out[:, 1] = elevation
    out[:, 2] = zs.ravel() * cell_size
    return out


def cell_states(grid: Grid) -> np.ndarray:
    return grid.to_numpy().ravel()


def border_positions(width: int, height: int, cell_size: float = DEFAULT_CELL_SIZE,
                     elevation: float = 0.0) -> np.ndarray:
    """
    One-cell ring of wall blocks around the grid extent.

    Top and bottom rows span x = -1..width (corners included), the left and
    right columns span z = 0..height-1.
    """
    Grid.validate_dimensions(width, height)
    _check_cell_size(cell_size)

    xs = np.arange(-1, width + 1)
    zs = np.arange(0, height)
    top = np.column_stack([xs, np.full_like(xs, -1)])
    bottom = np.column_stack([xs, np.full_like(xs, height)])
    left = np.column_stack([np.full_like(zs, -1), zs])
    right = np.column_stack([np.full_like(zs, width), zs])
    ring = np.concatenate([top, bottom, left, right]).astype(np.float64) * cell_size

    out = np.empty((len(ring), 3), dtype=np.float64)
    out[:, 0] = ring[:, 0]
    out[:, 1] = elevation
    out[:, 2] = ring[:, 1]
    return out


def world_to_cell(wx: float, wz: float, cell_size: float = DEFAULT_CELL_SIZE) -> Tuple[int, int]:
    # Round half up; builtin round() would send 0.5 to 0
    _check_cell_size(cell_size)
    return math.floor(wx / cell_size + 0.5), math.floor(wz / cell_size + 0.5)


def is_passable(grid: Grid, wx: float, wz: float, cell_size: float = DEFAULT_CELL_SIZE) -> bool:
    """True if the world position falls on a PATH cell; walls and the void are simply not passable."""
    x, y = world_to_cell(wx, wz, cell_size)
    return grid.in_bounds(x, y) and grid.is_path(x, y)


def build_layout(grid: Grid, cell_size: float = DEFAULT_CELL_SIZE, elevation: float = 0.0) -> Dict[str, np.ndarray]:
    return {
        "cell_positions": cell_positions(grid, cell_size, elevation),
        "cell_states": cell_states(grid),
        "border_positions": border_positions(grid.width, grid.height, cell_size, elevation),
        "cell_size": np.array(cell_size, dtype=np.float64),
    }
