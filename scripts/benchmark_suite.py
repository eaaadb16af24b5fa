import sys
import os
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_carver.core.grid import Grid
from maze_carver.algo.backtracker import RecursiveBacktracker
from maze_carver.core.analysis import MazeAnalyzer


def benchmark_size(width: int, height: int):
    print(f"\n--- Benchmarking {width}x{height} ({width*height/1e6:.2f}M cells) ---")

    # 1. Memory
    start_time = time.time()
    grid = Grid(width, height)
    mem_mb = (width * height) / (1024 * 1024)  # 1 byte per cell + 1 byte visited during the walk
    print(f"Grid Init: {time.time() - start_time:.4f}s")
    print(f"Memory (Grid Data): ~{mem_mb:.2f} MB (x2 while carving)")

    # 2. Generation
    algo = RecursiveBacktracker(grid, seed=42)
    gen_start = time.time()
    algo.run_all()
    gen_time = max(time.time() - gen_start, 1e-9)
    print(f"Generation Time: {gen_time:.4f}s")
    print(f"Speed: {(width*height)/gen_time:,.0f} cells/sec")

    # 3. Validation
    check_start = time.time()
    perfect = MazeAnalyzer.is_perfect(grid)
    print(f"Perfect: {perfect} (checked in {time.time() - check_start:.4f}s)")


def run_suite():
    sizes = [
        (101, 101),
        (501, 501),
        (1001, 1001),    # 1M
        (2001, 2001),    # 4M, deep walk with no recursion
    ]

    for w, h in sizes:
        benchmark_size(w, h)


if __name__ == "__main__":
    run_suite()
