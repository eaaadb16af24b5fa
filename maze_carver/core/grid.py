import numbers
from array import array
from typing import Iterator, Tuple

import numpy as np


class InvalidDimension(ValueError):
    """Raised when a grid is requested with a non-positive width or height."""


class FrozenGridError(RuntimeError):
    """Raised when a finished (frozen) grid is modified."""


class Grid:
    # Cell states
    WALL = 0
    PATH = 1

    __slots__ = ('width', 'height', '_cells', 'event_writer', '_frozen')

    def __init__(self, width: int, height: int, event_writer=None):
        self.validate_dimensions(width, height)
        self.width = int(width)
        self.height = int(height)
        self.event_writer = event_writer
        self._frozen = False
        # One byte per cell, row-major, everything starts as wall
        self._cells = array('B', [self.WALL]) * (self.width * self.height)

        if self.event_writer:
            self.event_writer.write_header(self.width, self.height)

    def __setattr__(self, name, value):
        # Slots are unset during __init__, so getattr falls back to False
        if getattr(self, '_frozen', False):
            raise FrozenGridError(f"Cannot set {name}: grid is frozen")
        object.__setattr__(self, name, value)

    @staticmethod
    def validate_dimensions(width, height):
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidDimension(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise InvalidDimension(f"{name} must be >= 1, got {value}")

    @classmethod
    def from_cells(cls, width: int, height: int, data) -> "Grid":
        """Builds a grid from a flat row-major sequence of cell states."""
        grid = cls(width, height)
        cells = array('B', data)
        if len(cells) != grid.width * grid.height:
            raise ValueError(
                f"Expected {grid.width * grid.height} cells for {width}x{height}, got {len(cells)}"
            )
        if any(v not in (cls.WALL, cls.PATH) for v in cells):
            raise ValueError("Cell data contains values other than WALL/PATH")
        grid._cells = cells
        return grid

    @property
    def cells(self):
        """Flat row-major cell states; a read-only view once the grid is frozen."""
        if self._frozen:
            return memoryview(self._cells).toreadonly()
        return self._cells

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        """Makes the grid read-only and drops any event writer reference."""
        if self._frozen:
            return
        self.event_writer = None
        self._frozen = True

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_index(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def state(self, x: int, y: int) -> int:
        return self._cells[self.get_index(x, y)]

    def is_path(self, x: int, y: int) -> bool:
        return self._cells[self.get_index(x, y)] == self.PATH

    def is_wall(self, x: int, y: int) -> bool:
        return self._cells[self.get_index(x, y)] == self.WALL

    def _set_path(self, x: int, y: int):
        if self._frozen:
            raise FrozenGridError(f"Cannot carve ({x}, {y}): grid is frozen")
        self._cells[self.get_index(x, y)] = self.PATH

    def carve_cell(self, x: int, y: int):
        """Opens a cell the carving walk has stepped onto."""
        self._set_path(x, y)
        if self.event_writer:
            self.event_writer.log_visit(x, y)

    def open_link(self, x: int, y: int):
        """Opens the connecting cell between two carved cells."""
        self._set_path(x, y)
        if self.event_writer:
            self.event_writer.log_link(x, y)

    def get_neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int]]:
        """
        Yields (nx, ny) for all in-bounds 4-neighbours, regardless of state.
        """
        if y > 0:
            yield (x, y - 1)
        if y < self.height - 1:
            yield (x, y + 1)
        if x > 0:
            yield (x - 1, y)
        if x < self.width - 1:
            yield (x + 1, y)

    def get_open_neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int]]:
        """
        Yields (nx, ny) for 4-neighbours that are PATH.
        """
        for nx, ny in self.get_neighbors(x, y):
            if self._cells[ny * self.width + nx] == self.PATH:
                yield (nx, ny)

    def path_count(self) -> int:
        return self._cells.count(self.PATH)

    def rows(self) -> Tuple[Tuple[bool, ...], ...]:
        """Grid as [row][col] booleans, True where the cell is a path."""
        w = self.width
        return tuple(
            tuple(v == self.PATH for v in self._cells[y * w:(y + 1) * w])
            for y in range(self.height)
        )

    def to_numpy(self) -> np.ndarray:
        return np.frombuffer(self._cells.tobytes(), dtype=np.uint8).reshape(self.height, self.width).copy()

    def to_text(self, wall: str = "#", path: str = " ") -> str:
        lines = []
        for row in self.rows():
            lines.append("".join(path if p else wall for p in row))
        return "\n".join(lines)

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.width, self.height) == (other.width, other.height) and self._cells == other._cells

    def __repr__(self):
        state = "frozen" if self._frozen else "open"
        return f"Grid({self.width}x{self.height}, paths={self.path_count()}, {state})"
