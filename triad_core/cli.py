from __future__ import annotations

import argparse
from typing import List, Optional

from .board import Board, Player, new_match
from .cards import Element
from .moves import format_move
from .search import SearchError
from .session import Session
from .settings import elemental_default


def _parse_hand(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [name.strip() for name in text.split(',') if name.strip()]


def _split_triplet(text: str) -> List[str]:
    """'r,c,Name' -> ['r', 'c', 'Name'] (the card name may itself contain spaces)."""
    parts = text.split(',', 2)
    if len(parts) != 3:
        raise ValueError(f'Expected r,c,value but got {text!r}')
    return [p.strip() for p in parts]


def build_board(args: argparse.Namespace) -> Board:
    board = new_match(Player.parse(args.first), args.elemental or elemental_default())
    for player, level in ((Player.RED, args.red_level), (Player.BLUE, args.blue_level)):
        if level is not None:
            board.activate_card_level(player, level)
    for player, hand in ((Player.RED, args.red), (Player.BLUE, args.blue)):
        for name in _parse_hand(hand):
            if not board.activate_card(player, name):
                raise SystemExit(f'error: unknown card {name!r}')
    for item in args.element or []:
        r_s, c_s, element = _split_triplet(item)
        board.set_terrain(int(r_s) - 1, int(c_s) - 1, Element.parse(element))
    for item in args.moves or []:
        r_s, c_s, name = _split_triplet(item)
        move = board.lookup_move(int(r_s) - 1, int(c_s) - 1, name)
        outcome = board.apply_move(move)
        if not outcome:
            raise SystemExit(f'error: move {item!r} rejected ({outcome.value})')
    return board


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Triple Triad board with an exhaustive alpha-beta opponent')
    parser.add_argument('--first', choices=['red', 'blue'], default='red', help='Player who moves first')
    parser.add_argument('--elemental', action='store_true', help='Enable the elemental terrain rule')
    parser.add_argument('--red', help='Comma-separated card names granted to Red')
    parser.add_argument('--blue', help='Comma-separated card names granted to Blue')
    parser.add_argument('--red-level', type=int, default=None, help='Unlock every card of this level for Red')
    parser.add_argument('--blue-level', type=int, default=None, help='Unlock every card of this level for Blue')
    parser.add_argument('--element', action='append', help='Terrain as r,c,element (1-based); repeatable')
    parser.add_argument('--moves', action='append', help='Pre-play a move as r,c,Card Name (1-based); repeatable')
    parser.add_argument('--play', action='store_true', help='Start the interactive command loop')
    args = parser.parse_args(argv)

    if args.play:
        session = Session()
        print("Enter 'new <red|blue> [elemental]', set up cards, then 'start'.")
        session.run()
        return

    board = build_board(args)
    print(board.pretty())
    print(f"SCORE:    Red: {board.score(Player.RED)}   Blue: {board.score(Player.BLUE)}")
    try:
        result = board.search()
    except SearchError as e:
        print(f'error: {e}')
        return
    print(f"Suggested move for {board.current_player.value}: {format_move(result.move, board.grid)}")
    print(f"Utility: {result.score}  Positions: {result.positions}")


if __name__ == '__main__':
    main()
