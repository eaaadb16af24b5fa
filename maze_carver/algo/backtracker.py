import logging
import random
from typing import Iterator, List, Optional

from maze_carver.core.grid import Grid
from maze_carver.algo.base import Generator

logger = logging.getLogger(__name__)

# Up, down, left, right as (dx, dy)
DIRECTIONS = ((0, -1), (0, 1), (-1, 0), (1, 0))


class RecursiveBacktracker(Generator):
    """
    Randomized depth-first carving that steps two cells at a time, opening the
    cell in between. Cells at even coordinates are carve nodes; the result is a
    spanning tree over them with one-cell walls between corridors.

    The walk is iterative: each stack frame is [x, y, directions, next_index],
    which keeps the visiting order and the number of shuffles identical to the
    recursive formulation without touching the interpreter's recursion limit.
    """

    def _visit(self, x: int, y: int, visited: bytearray, stack: List[list]):
        visited[y * self.grid.width + x] = 1
        self.grid.carve_cell(x, y)

        directions = list(DIRECTIONS)
        self.rng.shuffle(directions)
        stack.append([x, y, directions, 0])

    def run(self) -> Iterator[str]:
        grid = self.grid
        width, height = grid.width, grid.height
        visited = bytearray(width * height)

        stack: List[list] = []
        self._visit(0, 0, visited, stack)

        while stack:
            frame = stack[-1]
            cx, cy, directions, i = frame

            if i == len(directions):
                # Backtrack
                stack.pop()
                continue

            frame[3] = i + 1
            dx, dy = directions[i]
            nx, ny = cx + 2 * dx, cy + 2 * dy

            if 0 <= nx < width and 0 <= ny < height and not visited[ny * width + nx]:
                grid.open_link(cx + dx, cy + dy)
                self._visit(nx, ny, visited, stack)
                self.step_count += 1

                # Yield every N steps to keep callers responsive without spamming
                if self.step_count % 100 == 0:
                    yield f"Carving... Stack: {len(stack)}"

        grid.freeze()
        logger.debug("Carved %dx%d maze in %d steps", width, height, self.step_count)
        yield "Done"


def generate(width: int, height: int, rng: Optional[random.Random] = None,
             seed: Optional[int] = None, event_writer=None) -> Grid:
    """
    Generates a perfect maze of width x height cells starting at (0, 0).

    Pass `rng` to drive the shuffles from an existing random stream, or `seed`
    to get a fresh reproducible one; passing both raises ValueError. Raises
    InvalidDimension for width or height below 1. The returned grid is frozen.
    """
    Grid.validate_dimensions(width, height)
    if seed is not None and rng is not None:
        raise ValueError("Pass either seed or rng, not both")
    grid = Grid(width, height, event_writer=event_writer)
    return RecursiveBacktracker(grid, seed=seed, rng=rng).run_all()
