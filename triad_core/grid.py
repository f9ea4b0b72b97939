from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

Coord = Tuple[int, int]


class Direction(Enum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    def opposite(self) -> 'Direction':
        return _OPPOSITES[self]

    def offset(self) -> Coord:
        return _OFFSETS[self]


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

_OFFSETS = {
    Direction.NORTH: (-1, 0),
    Direction.EAST: (0, 1),
    Direction.SOUTH: (1, 0),
    Direction.WEST: (0, -1),
}

# Capture order used by the board after each placement.
CAPTURE_ORDER: Tuple[Direction, ...] = (Direction.NORTH, Direction.SOUTH, Direction.WEST, Direction.EAST)


@dataclass(frozen=True)
class Grid:
    """Static cell topology: row-major flat indices with precomputed neighbor links."""
    rows: int
    cols: int
    links: Tuple[Dict[Direction, Optional[int]], ...] = field(repr=False, compare=False)

    @property
    def size(self) -> int:
        return self.rows * self.cols

    def index(self, r: int, c: int) -> int:
        """Calculates the flat index for a given row and column."""
        return r * self.cols + c

    def coord(self, cell: int) -> Coord:
        return divmod(cell, self.cols)

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def coords(self) -> Iterable[Coord]:
        """Iterates over all coordinates in row-major order."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def neighbor(self, cell: int, direction: Direction) -> Optional[int]:
        """Returns the adjacent cell index, or None at an edge."""
        return self.links[cell][direction]


def build_grid(rows: int = 3, cols: int = 3) -> Grid:
    """Builds an R x C grid with 4-directional neighbor links (no wrap-around)."""
    if rows <= 0 or cols <= 0:
        raise ValueError('Grid dimensions must be positive')
    links = []
    for r in range(rows):
        for c in range(cols):
            entry: Dict[Direction, Optional[int]] = {}
            for direction in Direction:
                dr, dc = direction.offset()
                nr, nc = r + dr, c + dc
                entry[direction] = nr * cols + nc if 0 <= nr < rows and 0 <= nc < cols else None
            links.append(entry)
    return Grid(rows=rows, cols=cols, links=tuple(links))


STANDARD_GRID = build_grid(3, 3)
