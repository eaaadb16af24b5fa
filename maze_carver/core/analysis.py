from collections import deque
from typing import Dict, Set, Tuple

from maze_carver.core.grid import Grid


class MazeAnalyzer:
    @staticmethod
    def reachable_from(grid: Grid, start: Tuple[int, int] = (0, 0)) -> Set[Tuple[int, int]]:
        """
        Flood fill over PATH cells using 4-directional adjacency.
        Returns an empty set if the start cell is a wall.
        """
        sx, sy = start
        if not grid.is_path(sx, sy):
            return set()

        seen = {start}
        queue = deque([start])
        while queue:
            x, y = queue.popleft()
            for n in grid.get_open_neighbors(x, y):
                if n not in seen:
                    seen.add(n)
                    queue.append(n)
        return seen

    @staticmethod
    def count_edges(grid: Grid) -> int:
        """Number of horizontally or vertically adjacent PATH/PATH pairs."""
        w, h = grid.width, grid.height
        cells = grid.cells
        path = Grid.PATH
        edges = 0
        for y in range(h):
            row = y * w
            for x in range(w):
                if cells[row + x] != path:
                    continue
                # Only look right and down so each pair is counted once
                if x + 1 < w and cells[row + x + 1] == path:
                    edges += 1
                if y + 1 < h and cells[row + w + x] == path:
                    edges += 1
        return edges

    @staticmethod
    def is_connected(grid: Grid) -> bool:
        return len(MazeAnalyzer.reachable_from(grid)) == grid.path_count()

    @staticmethod
    def is_acyclic(grid: Grid) -> bool:
        # Holds for a connected path graph only when it is a tree
        return MazeAnalyzer.count_edges(grid) == grid.path_count() - 1

    @staticmethod
    def is_perfect(grid: Grid) -> bool:
        return grid.path_count() > 0 and MazeAnalyzer.is_connected(grid) and MazeAnalyzer.is_acyclic(grid)

    @staticmethod
    def calculate_stats(grid: Grid) -> Dict[str, float]:
        isolated = 0
        dead_ends = 0
        corridors = 0
        junctions = 0

        for y in range(grid.height):
            for x in range(grid.width):
                if not grid.is_path(x, y):
                    continue
                degree = sum(1 for _ in grid.get_open_neighbors(x, y))
                if degree == 0: isolated += 1
                elif degree == 1: dead_ends += 1
                elif degree == 2: corridors += 1
                else: junctions += 1

        total = grid.width * grid.height
        paths = grid.path_count()
        return {
            "path_cells": paths,
            "wall_cells": total - paths,
            "isolated": isolated,
            "dead_ends": dead_ends,
            "corridors": corridors,
            "junctions": junctions,
            "path_percent": (paths / total) * 100,
        }
