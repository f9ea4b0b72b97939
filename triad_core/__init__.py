"""
Triple Triad core Python package.

This package holds the rules engine and the search opponent behind game.py and app.py.
Modules:
- cards.py: Card, Element, the read-only CATALOG
- grid.py: Grid topology and Direction
- deck.py: Deck (per-player copy counts)
- moves.py: Move, MoveOutcome
- board.py: Board state machine with exact move/undo
- search.py: exhaustive alpha-beta search
- session.py, cli.py: text command loop and argparse entry point
"""
