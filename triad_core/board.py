from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Tuple, Union

from .cards import CATALOG, Card, Element
from .deck import Deck
from .grid import CAPTURE_ORDER, STANDARD_GRID, Direction, Grid
from .moves import Move, MoveOutcome, format_move

if TYPE_CHECKING:
    from .search import SearchResult


class Player(Enum):
    RED = 'red'
    BLUE = 'blue'

    def other(self) -> 'Player':
        return Player.BLUE if self is Player.RED else Player.RED

    @classmethod
    def parse(cls, text: str) -> 'Player':
        try:
            return cls(text.strip().lower())
        except ValueError:
            raise ValueError(f'Unknown player: {text!r}') from None


class IllegalMoveError(ValueError):
    """Raised by Board.trial when asked to explore a move the rules reject."""


class Board:
    """
    Mutable match state: cell contents and ownership, both decks, the player to move,
    and the move/flip history stacks that make every placement exactly reversible.

    The flip history holds cell indices. Each placement pushes its own cell first
    (the sentinel), then every cell it captured; undo pops back down to the sentinel.
    """

    def __init__(self, first_player: Player = Player.RED, elemental: bool = False, grid: Optional[Grid] = None) -> None:
        self.grid: Grid = grid or STANDARD_GRID
        self.elemental = elemental
        self.first_player = first_player
        self._current = first_player
        self._cards: List[Optional[Card]] = [None] * self.grid.size
        self._owners: List[Optional[Player]] = [None] * self.grid.size
        self._terrain: List[Element] = [Element.NONE] * self.grid.size
        self._decks: Dict[Player, Deck] = {Player.RED: Deck(), Player.BLUE: Deck()}
        self._move_history: List[Move] = []
        self._flip_history: List[int] = []

    # ---------- setup ----------

    def activate_card(self, player: Player, name: str) -> bool:
        """Grants one copy of `name` to `player`; False if the name is not a known card."""
        if name not in CATALOG:
            return False
        self._decks[player].grant(name)
        return True

    def activate_card_level(self, player: Player, level: int) -> None:
        self._decks[player].grant_level(level)

    def set_terrain(self, r: int, c: int, element: Union[Element, str]) -> None:
        if not self.grid.in_bounds(r, c):
            raise ValueError(f'Cell out of bounds: ({r}, {c})')
        if isinstance(element, str):
            element = Element.parse(element)
        self._terrain[self.grid.index(r, c)] = element

    def lookup_move(self, r: int, c: int, name: str) -> Optional[Move]:
        """Resolves a (row, col, card name) request against the grid and catalog."""
        if not self.grid.in_bounds(r, c) or name not in CATALOG:
            return None
        return Move(cell=self.grid.index(r, c), card=name)

    # ---------- queries ----------

    @property
    def current_player(self) -> Player:
        return self._current

    @property
    def history_depth(self) -> int:
        return len(self._move_history)

    def deck(self, player: Player) -> Deck:
        return self._decks[player]

    def cell_card(self, cell: int) -> Optional[Card]:
        return self._cards[cell]

    def cell_owner(self, cell: int) -> Optional[Player]:
        # Ownership is only meaningful for occupied cells.
        return self._owners[cell] if self._cards[cell] is not None else None

    def terrain(self, cell: int) -> Element:
        return self._terrain[cell]

    def moves_played(self) -> List[Move]:
        return list(self._move_history)

    def score(self, player: Player) -> int:
        """Unplaced copies held by `player` plus cells it currently owns."""
        owned = sum(1 for card, owner in zip(self._cards, self._owners) if card is not None and owner is player)
        return self._decks[player].remaining() + owned

    def is_complete(self) -> bool:
        return all(card is not None for card in self._cards)

    def winner(self) -> Optional[Player]:
        """Leader on score once the board is complete; None while in progress or on a draw."""
        if not self.is_complete():
            return None
        red, blue = self.score(Player.RED), self.score(Player.BLUE)
        if red == blue:
            return None
        return Player.RED if red > blue else Player.BLUE

    def empty_cells(self) -> List[int]:
        return [cell for cell, card in enumerate(self._cards) if card is None]

    def valid_moves(self) -> List[Move]:
        """Empty cells (row-major) crossed with the mover's available cards (catalog order)."""
        names = self._decks[self._current].available_names()
        return [Move(cell=cell, card=name) for cell in self.empty_cells() for name in names]

    def snapshot(self) -> Tuple:
        """Hashable image of the full state, for equality checks."""
        return (
            self._current,
            tuple(card.name if card else None for card in self._cards),
            tuple(self.cell_owner(cell) for cell in range(self.grid.size)),
            tuple(self._terrain),
            tuple(sorted(self._decks[Player.RED].counts().items())),
            tuple(sorted(self._decks[Player.BLUE].counts().items())),
            tuple(self._move_history),
            tuple(self._flip_history),
        )

    # ---------- transitions ----------

    def move(self, move: Move) -> MoveOutcome:
        """Places a card for the current player and resolves captures; rejected moves change nothing."""
        if not 0 <= move.cell < self.grid.size:
            return MoveOutcome.UNKNOWN_CELL
        if self._cards[move.cell] is not None:
            return MoveOutcome.CELL_OCCUPIED
        card = self._decks[self._current].consume(move.card)
        if card is None:
            return MoveOutcome.CARD_UNAVAILABLE

        self._cards[move.cell] = card
        self._owners[move.cell] = self._current
        self._flip_history.append(move.cell)
        self._move_history.append(move)

        for direction in CAPTURE_ORDER:
            self._capture(move.cell, direction)

        self._current = self._current.other()
        return MoveOutcome.APPLIED

    def undo(self) -> bool:
        """Reverts the most recent move; False when there is nothing to undo."""
        if not self._move_history:
            return False
        move = self._move_history.pop()
        self._current = self._current.other()

        while self._flip_history[-1] != move.cell:
            flipped = self._flip_history.pop()
            self._owners[flipped] = self._owners[flipped].other()  # type: ignore[union-attr]
        self._flip_history.pop()

        self._decks[self._current].restore(move.card)
        self._cards[move.cell] = None
        self._owners[move.cell] = None
        return True

    @contextmanager
    def trial(self, move: Move) -> Iterator['Board']:
        """Applies `move` for the duration of the block and always undoes it on exit."""
        outcome = self.move(move)
        if not outcome:
            raise IllegalMoveError(f'{format_move(move, self.grid)}: {outcome.value}')
        try:
            yield self
        finally:
            self.undo()

    def apply_move(self, move: Optional[Move]) -> MoveOutcome:
        if move is None:
            return MoveOutcome.UNKNOWN_CELL
        return self.move(move)

    def suggest_move(self) -> Move:
        return self.search().move

    def search(self) -> 'SearchResult':
        from .search import search_best_move
        return search_best_move(self)

    # ---------- capture rule ----------

    def elemental_adjustment(self, cell: int) -> int:
        """+1 when the cell's terrain matches its card's element, -1 on a mismatch, 0 otherwise."""
        terrain = self._terrain[cell]
        card = self._cards[cell]
        if not self.elemental or terrain is Element.NONE or card is None:
            return 0
        return 1 if card.element is terrain else -1

    def _capture(self, source: int, direction: Direction) -> None:
        target = self.grid.neighbor(source, direction)
        if target is None or self._cards[target] is None:
            return
        if self._owners[target] is self._owners[source]:
            return
        attack = self._cards[source].strength(direction) + self.elemental_adjustment(source)  # type: ignore[union-attr]
        defense = self._cards[target].strength(direction.opposite()) + self.elemental_adjustment(target)  # type: ignore[union-attr]
        if attack - defense > 0:
            self._owners[target] = self._owners[source]
            self._flip_history.append(target)

    # ---------- rendering ----------

    def pretty(self) -> str:
        """Text grid: owner initial and card name per cell, terrain in brackets for empty cells."""
        lines: List[str] = []
        for r in range(self.grid.rows):
            row: List[str] = []
            for c in range(self.grid.cols):
                cell = self.grid.index(r, c)
                card = self._cards[cell]
                if card is not None:
                    owner = self._owners[cell]
                    row.append(f"{'R' if owner is Player.RED else 'B'}:{card.name}")
                elif self._terrain[cell] is not Element.NONE:
                    row.append(f"[{self._terrain[cell].value}]")
                else:
                    row.append('.')
            lines.append(' | '.join(f'{text:<18}' for text in row).rstrip())
        return '\n'.join(lines)


def new_match(first_player: Player = Player.RED, elemental: bool = False) -> Board:
    """Starts an empty 3x3 match; decks are filled afterwards with activate_card*."""
    return Board(first_player=first_player, elemental=elemental)
