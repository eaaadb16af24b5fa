import argparse
import sys
import os
import logging
import time

# Ensure project root is in path so we can import 'maze_carver' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

logger = logging.getLogger("maze_carver")


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maze Carver: randomized perfect-maze generator")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    gen_parser.add_argument("--width", type=int, default=21, help="Maze width in cells")
    gen_parser.add_argument("--height", type=int, default=21, help="Maze height in cells")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    gen_parser.add_argument("--out", type=str, help="Output .maze file path (optional)")
    gen_parser.add_argument("--compress", action="store_true", help="zlib-compress the saved cells")
    gen_parser.add_argument("--seed-only", action="store_true", help="Save only size + seed (requires --seed)")
    gen_parser.add_argument("--record-events", type=str, help="Save the carving walk to a binary event log")
    gen_parser.add_argument("--print", dest="print_maze", action="store_true", help="Print the maze as text")

    # Stats Command
    stats_parser = subparsers.add_parser("stats", help="Analyse a saved maze")
    stats_parser.add_argument("input_file", help="Path to .maze file")

    # Replay Command
    replay_parser = subparsers.add_parser("replay", help="Rebuild a maze from an event log")
    replay_parser.add_argument("event_file", help="Path to event log file")
    replay_parser.add_argument("--out", type=str, help="Save the rebuilt maze to a .maze file")
    replay_parser.add_argument("--print", dest="print_maze", action="store_true", help="Print the maze as text")

    # Layout Command
    layout_parser = subparsers.add_parser("layout", help="Export world-space block layout (.npz)")
    layout_parser.add_argument("input_file", help="Path to .maze file")
    layout_parser.add_argument("--out", type=str, required=True, help="Output .npz path")
    layout_parser.add_argument("--cell-size", type=float, default=4.0, help="World units per cell")
    layout_parser.add_argument("--elevation", type=float, default=0.0, help="Block Y position")

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Time generation on a square grid")
    bench_parser.add_argument("--size", type=int, default=1001, help="Benchmark size")
    bench_parser.add_argument("--seed", type=int, default=123, help="Random seed")

    return parser


def cmd_generate(args):
    from maze_carver.algo.backtracker import generate
    from maze_carver.core.analysis import MazeAnalyzer
    from maze_carver.core.events import EventWriter
    from maze_carver.core.grid import Grid

    # Check everything before the event log file is created
    Grid.validate_dimensions(args.width, args.height)
    if args.seed_only and args.seed is None:
        raise ValueError("--seed-only needs an explicit --seed")
    if args.seed_only and not args.out:
        raise ValueError("--seed-only needs --out")
    if args.compress and not args.out:
        raise ValueError("--compress needs --out")

    logger.info(f"Generating {args.width}x{args.height} maze (seed={args.seed})...")

    evt_writer = None
    if args.record_events:
        evt_writer = EventWriter(args.record_events)
        logger.info(f"Recording events to {args.record_events}...")

    try:
        t0 = time.time()
        grid = generate(args.width, args.height, seed=args.seed, event_writer=evt_writer)
        logger.info(f"Generation complete in {time.time() - t0:.4f}s")
    finally:
        if evt_writer:
            evt_writer.close()

    stats = MazeAnalyzer.calculate_stats(grid)
    logger.info(f"Stats: {stats}")

    if args.out:
        logger.info(f"Saving maze to {args.out}...")
        from maze_carver.io.serializer import MazeSerializer
        meta = {"algo": "backtracker", "seed": args.seed}
        MazeSerializer.save(grid, args.out, meta=meta, seed_only=args.seed_only, compress=args.compress)
        logger.info("Save complete.")

    if args.print_maze:
        print(grid.to_text())


def cmd_stats(args):
    from maze_carver.core.analysis import MazeAnalyzer
    from maze_carver.io.serializer import MazeSerializer

    logger.info(f"Loading {args.input_file}...")
    grid, meta = MazeSerializer.load(args.input_file)
    logger.info(f"Loaded {grid.width}x{grid.height} maze. Meta: {meta}")

    stats = MazeAnalyzer.calculate_stats(grid)
    for key, value in stats.items():
        print(f"{key:<14} {value}")
    print(f"{'perfect':<14} {MazeAnalyzer.is_perfect(grid)}")


def cmd_replay(args):
    from maze_carver.io.replay import replay_file

    logger.info(f"Replaying {args.event_file}...")
    grid = replay_file(args.event_file)
    logger.info(f"Rebuilt {grid.width}x{grid.height} maze with {grid.path_count()} path cells")

    if args.out:
        from maze_carver.io.serializer import MazeSerializer
        MazeSerializer.save(grid, args.out, meta={"source": os.path.basename(args.event_file)})
        logger.info(f"Saved maze to {args.out}")

    if args.print_maze:
        print(grid.to_text())


def cmd_layout(args):
    import numpy as np
    from maze_carver.io.serializer import MazeSerializer
    from maze_carver.world.layout import build_layout

    grid, _ = MazeSerializer.load(args.input_file)
    layout = build_layout(grid, cell_size=args.cell_size, elevation=args.elevation)
    np.savez(args.out, **layout)
    logger.info(
        f"Wrote {len(layout['cell_positions'])} cell blocks and "
        f"{len(layout['border_positions'])} border blocks to {args.out}"
    )


def cmd_benchmark(args):
    from maze_carver.core.grid import Grid
    from maze_carver.algo.backtracker import RecursiveBacktracker

    logger.info(f"Running generation benchmark (Size: {args.size}x{args.size})...")
    t0 = time.time()
    grid = Grid(args.size, args.size)
    gen = RecursiveBacktracker(grid, seed=args.seed)
    gen.run_all()
    duration = max(time.time() - t0, 1e-9)

    cells = args.size * args.size
    print(f"\n{'SIZE':<12} | {'TIME (s)':<10} | {'STEPS':<10} | {'CELLS/SEC':<12}")
    print("-" * 54)
    print(f"{args.size}x{args.size:<8} | {duration:<10.4f} | {gen.step_count:<10} | {cells / duration:<12,.0f}")


COMMANDS = {
    "generate": cmd_generate,
    "stats": cmd_stats,
    "replay": cmd_replay,
    "layout": cmd_layout,
    "benchmark": cmd_benchmark,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")
    try:
        COMMANDS[args.command](args)
    except (ValueError, OSError) as e:
        # InvalidDimension is a ValueError too
        logger.error(f"{args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
