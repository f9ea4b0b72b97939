from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .grid import Grid


@dataclass(frozen=True)
class Move:
    """Place `card` (by name) on flat cell index `cell`."""
    cell: int
    card: str


class MoveOutcome(Enum):
    APPLIED = 'applied'
    CELL_OCCUPIED = 'cell_occupied'
    CARD_UNAVAILABLE = 'card_unavailable'
    UNKNOWN_CELL = 'unknown_cell'

    def __bool__(self) -> bool:
        return self is MoveOutcome.APPLIED


def format_move(move: Move, grid: Grid) -> str:
    """Human-readable move with 1-based coordinates, e.g. '(1, 3) Gesper'."""
    r, c = grid.coord(move.cell)
    return f"({r + 1}, {c + 1}) {move.card}"
