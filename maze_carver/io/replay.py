from typing import Iterator

from maze_carver.core.grid import Grid
from maze_carver.core.events import EventReader, EVT_VISIT, EVT_LINK


class EventReplayer:
    """
    Rebuilds a maze from a recorded carving walk.
    Behaves like a Generator: run() applies events stepwise and yields progress.
    """
    def __init__(self, reader: EventReader):
        self.reader = reader
        width, height = reader.read_header()
        self.grid = Grid(width, height)
        self.visit_count = 0
        self.link_count = 0

    def run(self) -> Iterator[str]:
        count = 0
        for type_code, (x, y) in self.reader.stream_events():
            count += 1

            if type_code == EVT_VISIT:
                self.grid.carve_cell(x, y)
                self.visit_count += 1
            elif type_code == EVT_LINK:
                self.grid.open_link(x, y)
                self.link_count += 1

            if count % 50 == 0:
                yield "Replay"

        self.grid.freeze()
        yield "Done"

    def run_all(self) -> Grid:
        for _ in self.run():
            pass
        return self.grid


def replay_file(filename: str) -> Grid:
    with EventReader(filename) as reader:
        return EventReplayer(reader).run_all()
