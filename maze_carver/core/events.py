import struct
from typing import Iterator, Tuple

MAGIC = b"MAZELOG"

# Event Types
EVT_VISIT = 0x02  # carve node opened
EVT_LINK = 0x03   # connecting cell opened

# Coordinates are packed as unsigned shorts
MAX_COORD = 0xFFFF

_COORDS = struct.Struct(">HH")


class EventWriter:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "wb")

    def write_header(self, width: int, height: int):
        # Header: Magic "MAZELOG" + Width (4b) + Height (4b)
        self.file.write(MAGIC)
        self.file.write(struct.pack(">II", width, height))

    def _log(self, type_code: int, x: int, y: int):
        if not (0 <= x <= MAX_COORD and 0 <= y <= MAX_COORD):
            raise ValueError(f"Coordinate ({x}, {y}) does not fit the event log format")
        # 1 byte type + 2b X + 2b Y
        self.file.write(struct.pack(">BHH", type_code, x, y))

    def log_visit(self, x: int, y: int):
        self._log(EVT_VISIT, x, y)

    def log_link(self, x: int, y: int):
        self._log(EVT_LINK, x, y)

    def close(self):
        if self.file:
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class EventReader:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "rb")
        self.width = 0
        self.height = 0

    def read_header(self) -> Tuple[int, int]:
        magic = self.file.read(len(MAGIC))
        if magic != MAGIC:
            raise ValueError("Invalid event log file")
        data = self.file.read(8)
        if len(data) != 8:
            raise ValueError("Truncated event log header")
        self.width, self.height = struct.unpack(">II", data)
        return self.width, self.height

    def stream_events(self) -> Iterator[Tuple[int, Tuple[int, int]]]:
        while True:
            type_byte = self.file.read(1)
            if not type_byte:
                break

            type_code = type_byte[0]
            if type_code not in (EVT_VISIT, EVT_LINK):
                raise ValueError(f"Unknown event type 0x{type_code:02x}")

            data = self.file.read(_COORDS.size)
            if len(data) != _COORDS.size:
                raise ValueError("Truncated event record")
            yield (type_code, _COORDS.unpack(data))

    def close(self):
        if self.file:
            self.file.close()
            self.file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
