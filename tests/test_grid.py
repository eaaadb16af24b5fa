import unittest
import sys
import os

import numpy as np

# Add project root to path so we can import maze_carver
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid, InvalidDimension, FrozenGridError


class TestGrid(unittest.TestCase):
    def test_initialization(self):
        w, h = 10, 10
        grid = Grid(w, h)
        self.assertEqual(len(grid.cells), w * h, f"Grid initialization size mismatch. Expected {w*h}, got {len(grid.cells)}")
        # Every cell starts as a wall
        for val in grid.cells:
            self.assertEqual(val, Grid.WALL)
        self.assertEqual(grid.path_count(), 0)
        self.assertFalse(grid.frozen)

    def test_invalid_dimensions(self):
        for w, h in [(0, 5), (5, 0), (-1, -1), (0, 0)]:
            with self.assertRaises(InvalidDimension):
                Grid(w, h)
        with self.assertRaises(InvalidDimension):
            Grid(2.5, 3)
        with self.assertRaises(InvalidDimension):
            Grid(True, 3)
        # Callers catching ValueError still see it
        self.assertTrue(issubclass(InvalidDimension, ValueError))

    def test_coordinates(self):
        grid = Grid(5, 5)
        idx = grid.get_index(2, 2)
        self.assertEqual(idx, 12) # 2 * 5 + 2

        with self.assertRaises(IndexError):
            grid.get_index(-1, 0)
        with self.assertRaises(IndexError):
            grid.get_index(0, 5)
        with self.assertRaises(IndexError):
            grid.is_path(5, 0)

        self.assertTrue(grid.in_bounds(4, 4))
        self.assertFalse(grid.in_bounds(4, 5))
        self.assertFalse(grid.in_bounds(-2, 0))

    def test_carve_and_link(self):
        grid = Grid(3, 1)
        grid.carve_cell(0, 0)
        grid.open_link(1, 0)

        self.assertTrue(grid.is_path(0, 0))
        self.assertTrue(grid.is_path(1, 0))
        self.assertTrue(grid.is_wall(2, 0))
        self.assertEqual(grid.state(1, 0), Grid.PATH)
        self.assertEqual(grid.path_count(), 2)

        with self.assertRaises(IndexError):
            grid.carve_cell(3, 0)

    def test_freeze(self):
        grid = Grid(3, 3)
        grid.carve_cell(0, 0)
        grid.freeze()

        self.assertTrue(grid.frozen)
        with self.assertRaises(FrozenGridError):
            grid.carve_cell(2, 2)
        with self.assertRaises(FrozenGridError):
            grid.open_link(1, 0)
        self.assertTrue(grid.is_path(0, 0))

    def test_neighbors(self):
        grid = Grid(3, 3)
        # Center cell (1,1) should have 4 neighbors
        neighbors = list(grid.get_neighbors(1, 1))
        self.assertEqual(len(neighbors), 4)

        # Corner cell (0,0) should have 2 neighbors (East, South)
        corner_neighbors = list(grid.get_neighbors(0, 0))
        self.assertEqual(len(corner_neighbors), 2)
        self.assertIn((1, 0), corner_neighbors)
        self.assertIn((0, 1), corner_neighbors)

    def test_open_neighbors(self):
        grid = Grid(3, 3)
        grid.carve_cell(1, 1)
        grid.open_link(1, 0)
        grid.open_link(2, 1)

        self.assertEqual(sorted(grid.get_open_neighbors(1, 1)), [(1, 0), (2, 1)])
        self.assertEqual(list(grid.get_open_neighbors(0, 0)), [(1, 0)])

    def test_exports(self):
        grid = Grid(3, 2)
        grid.carve_cell(0, 0)
        grid.open_link(1, 0)

        self.assertEqual(grid.rows(), ((True, True, False), (False, False, False)))
        self.assertEqual(grid.to_text(), "  #\n###")
        self.assertEqual(grid.to_text(wall="1", path="0"), "001\n111")

        arr = grid.to_numpy()
        self.assertEqual(arr.shape, (2, 3))
        self.assertEqual(arr[0, 1], Grid.PATH)
        self.assertEqual(arr[1, 0], Grid.WALL)

        # A copy, not a view into the grid
        arr[1, 1] = Grid.PATH
        self.assertTrue(grid.is_wall(1, 1))

    def test_from_cells(self):
        grid = Grid.from_cells(2, 2, [1, 0, 1, 1])
        self.assertTrue(grid.is_path(0, 0))
        self.assertTrue(grid.is_wall(1, 0))
        self.assertEqual(grid.path_count(), 3)

        with self.assertRaises(ValueError):
            Grid.from_cells(2, 2, [1, 0, 1])
        with self.assertRaises(ValueError):
            Grid.from_cells(2, 2, [1, 0, 2, 0])

    def test_equality(self):
        a = Grid.from_cells(2, 1, [1, 0])
        b = Grid.from_cells(2, 1, [1, 0])
        c = Grid.from_cells(1, 2, [1, 0])
        self.assertEqual(a, b)
        self.assertNotEqual(a, c)

    def test_frozen_grid_is_read_only(self):
        grid = Grid(3, 3)
        grid.carve_cell(0, 0)
        grid.freeze()

        with self.assertRaises(TypeError):
            grid.cells[4] = Grid.PATH
        with self.assertRaises(FrozenGridError):
            grid.width = 1
        with self.assertRaises(FrozenGridError):
            grid.height = 9
        with self.assertRaises(FrozenGridError):
            grid.cells = bytes(9)
        self.assertEqual((grid.width, grid.height), (3, 3))
        self.assertTrue(grid.is_wall(1, 1))
        self.assertEqual(grid.cells.tobytes(), bytes([1, 0, 0, 0, 0, 0, 0, 0, 0]))

        # Freezing twice is harmless
        grid.freeze()
        self.assertTrue(grid.frozen)

    def test_cells_cannot_be_replaced(self):
        grid = Grid(2, 2)
        with self.assertRaises(AttributeError):
            grid.cells = bytes(4)

    def test_numpy_integer_dimensions(self):
        grid = Grid(np.int64(4), np.int32(3))
        self.assertEqual((grid.width, grid.height), (4, 3))
        self.assertIs(type(grid.width), int)
        self.assertEqual(len(grid.cells), 12)
        with self.assertRaises(InvalidDimension):
            Grid(np.int64(0), 3)
        with self.assertRaises(InvalidDimension):
            Grid(np.float64(4.0), 3)

    def test_memory_sanity(self):
        # 4600 * 4600 = ~21 million cells at one byte each
        w, h = 4600, 4600
        grid = Grid(w, h)
        size_bytes = grid.cells.buffer_info()[1] * grid.cells.itemsize
        mb = size_bytes / (1024 * 1024)
        self.assertLess(mb, 25.0) # Should be ~20.1 MB


if __name__ == '__main__':
    unittest.main()
