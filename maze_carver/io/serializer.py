import json
import logging
import struct
import zlib
from typing import Any, Dict, Optional, Tuple

import numpy as np

from maze_carver.core.grid import Grid

logger = logging.getLogger(__name__)


class MazeSerializer:
    MAGIC = b"MAZC"
    VERSION = 1

    # Flags
    FLAG_COMPRESSED = 1
    FLAG_SEED_ONLY = 2
    FLAG_PACKED = 4

    @staticmethod
    def encode_cells(grid: Grid, pack: bool = True) -> bytes:
        if pack:
            # 1 bit per cell, row-major, padded to a whole byte at the end
            return np.packbits(np.frombuffer(grid.cells.tobytes(), dtype=np.uint8)).tobytes()
        return grid.cells.tobytes()

    @staticmethod
    def decode_cells(data: bytes, width: int, height: int, packed: bool) -> np.ndarray:
        count = width * height
        raw = np.frombuffer(data, dtype=np.uint8)
        if packed:
            if len(raw) * 8 < count:
                raise ValueError("Packed cell data is shorter than the grid")
            return np.unpackbits(raw, count=count)
        if len(raw) != count:
            raise ValueError(f"Expected {count} cells, file holds {len(raw)}")
        return raw

    @staticmethod
    def save(grid: Grid, filepath: str, meta: Optional[Dict[str, Any]] = None,
             seed_only=False, compress=False, pack=True):
        """
        Saves the maze to a binary file.
        Format (little-endian):
        - MAGIC (4 bytes)
        - VERSION (1 byte)
        - FLAGS (1 byte)
        - WIDTH (4 bytes)
        - HEIGHT (4 bytes)
        - META_LEN (2 bytes)
        - META_JSON (META_LEN bytes)
        - DATA_LEN (4 bytes, 0 if seed_only)
        - DATA (bit-packed or one byte per cell, optionally zlib-compressed)
        """
        if meta is None:
            meta = {}

        if seed_only and meta.get("seed") is None:
            raise ValueError("seed_only requires meta['seed'] to regenerate the maze")

        flags = 0
        if compress:
            flags |= MazeSerializer.FLAG_COMPRESSED
        if seed_only:
            flags |= MazeSerializer.FLAG_SEED_ONLY
        if pack:
            flags |= MazeSerializer.FLAG_PACKED

        meta_bytes = json.dumps(meta).encode('utf-8')
        if len(meta_bytes) > 0xFFFF:
            raise ValueError("Metadata too large")

        with open(filepath, "wb") as f:
            f.write(MazeSerializer.MAGIC)
            f.write(struct.pack("<BB", MazeSerializer.VERSION, flags))
            f.write(struct.pack("<II", grid.width, grid.height))
            f.write(struct.pack("<H", len(meta_bytes)))
            f.write(meta_bytes)

            if seed_only:
                f.write(struct.pack("<I", 0))
            else:
                data = MazeSerializer.encode_cells(grid, pack=pack)
                if compress:
                    data = zlib.compress(data)

                f.write(struct.pack("<I", len(data)))
                f.write(data)

        logger.debug("Saved %dx%d maze to %s (flags=%d)", grid.width, grid.height, filepath, flags)

    @staticmethod
    def _read(f, fmt: str):
        """Unpacks one header field, treating a short read as a truncated file."""
        size = struct.calcsize(fmt)
        data = f.read(size)
        if len(data) != size:
            raise ValueError("Truncated maze file")
        return struct.unpack(fmt, data)

    @staticmethod
    def load(filepath: str) -> Tuple[Grid, Dict[str, Any]]:
        read = MazeSerializer._read
        with open(filepath, "rb") as f:
            magic = f.read(4)
            if magic != MazeSerializer.MAGIC:
                raise ValueError("Invalid file format")

            version, flags = read(f, "<BB")
            if version != MazeSerializer.VERSION:
                raise ValueError(f"Unsupported maze file version {version}")
            width, height = read(f, "<II")
            meta_len = read(f, "<H")[0]
            meta_bytes = f.read(meta_len)
            if len(meta_bytes) != meta_len:
                raise ValueError("Truncated maze file")
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            meta = json.loads(meta_bytes.decode('utf-8'))
            if not isinstance(meta, dict):
                raise ValueError("Maze metadata must be a JSON object")
            data_len = read(f, "<I")[0]

            if flags & MazeSerializer.FLAG_SEED_ONLY:
                # Deterministic under a fixed seed, so rebuild instead of storing cells
                from maze_carver.algo.backtracker import generate
                seed = meta.get("seed")
                if isinstance(seed, bool) or not isinstance(seed, int):
                    raise ValueError(f"Seed-only maze file needs an integer seed, got {seed!r}")
                logger.debug("Regenerating %dx%d maze from seed %s", width, height, meta["seed"])
                return generate(width, height, seed=meta["seed"]), meta

            data = f.read(data_len)
            if len(data) != data_len:
                raise ValueError("Truncated maze file")

        if flags & MazeSerializer.FLAG_COMPRESSED:
            try:
                data = zlib.decompress(data)
            except zlib.error as e:
                raise ValueError(f"Corrupt compressed cell data: {e}") from e

        cells = MazeSerializer.decode_cells(data, width, height, bool(flags & MazeSerializer.FLAG_PACKED))
        grid = Grid.from_cells(width, height, cells.tobytes())
        grid.freeze()
        return grid, meta
