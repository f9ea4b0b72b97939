from __future__ import annotations

# Facade module that re-exports the Triple Triad core.
# The Flask app and the tests import from here; single-responsibility modules live under triad_core/*.

from triad_core.board import Board, IllegalMoveError, Player, new_match
from triad_core.cards import (
    CATALOG,
    Card,
    Element,
    UnknownCardError,
    cards_of_level,
    lookup_card,
)
from triad_core.deck import MAX_COPIES, Deck
from triad_core.grid import CAPTURE_ORDER, STANDARD_GRID, Direction, Grid, build_grid
from triad_core.moves import Move, MoveOutcome, format_move
from triad_core.search import (
    SearchError,
    SearchResult,
    brute_force_best_move,
    brute_force_value,
    evaluate,
    search_best_move,
)
from triad_core.session import Session

__all__ = [
    'Board', 'IllegalMoveError', 'Player', 'new_match',
    'CATALOG', 'Card', 'Element', 'UnknownCardError', 'cards_of_level', 'lookup_card',
    'MAX_COPIES', 'Deck',
    'CAPTURE_ORDER', 'STANDARD_GRID', 'Direction', 'Grid', 'build_grid',
    'Move', 'MoveOutcome', 'format_move',
    'SearchError', 'SearchResult', 'brute_force_best_move', 'brute_force_value', 'evaluate', 'search_best_move',
    'Session',
    'main',
]


def main() -> None:
    # CLI driver delegated to triad_core.cli
    from triad_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
