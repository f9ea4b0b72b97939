#!/usr/bin/env python3
"""
Cross-check the alpha-beta search against unpruned minimax on random late-game positions.

For each seed: deal two random 5-card hands from the catalog, play random moves until only
`--empty` cells remain, then compare search_best_move with brute_force_best_move (move and
score) and confirm the board is unchanged after both searches.

Usage:
  python tools/crosscheck.py                 # 20 positions, 3 empty cells
  python tools/crosscheck.py --count 100 --empty 4 --elemental
"""
from __future__ import annotations

import argparse
import os
import random
import sys
import time
from typing import Tuple

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import game  # noqa: E402


def random_position(rng: random.Random, empty: int, elemental: bool) -> game.Board:
    names = list(game.CATALOG)
    board = game.new_match(rng.choice(list(game.Player)), elemental)
    for player in game.Player:
        for name in rng.sample(names, 5):
            board.activate_card(player, name)
    if elemental:
        for r, c in board.grid.coords():
            if rng.random() < 0.3:
                board.set_terrain(r, c, rng.choice([e for e in game.Element if e is not game.Element.NONE]))
    while len(board.empty_cells()) > empty:
        board.move(rng.choice(board.valid_moves()))
    return board


def check(board: game.Board) -> Tuple[bool, int, int]:
    before = board.snapshot()
    t0 = time.time()
    fast = game.search_best_move(board)
    t1 = time.time()
    slow = game.brute_force_best_move(board)
    t2 = time.time()
    same = fast.move == slow.move and fast.score == slow.score and board.snapshot() == before
    return same, int((t1 - t0) * 1000), int((t2 - t1) * 1000)


def main() -> None:
    ap = argparse.ArgumentParser(description="Alpha-beta vs brute-force cross-check")
    ap.add_argument("--count", type=int, default=20)
    ap.add_argument("--empty", type=int, default=3)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--elemental", action="store_true")
    args = ap.parse_args()

    rng = random.Random(args.seed)
    mismatches = 0
    for i in range(args.count):
        board = random_position(rng, args.empty, args.elemental)
        same, ms_fast, ms_slow = check(board)
        print(f"case={i} to_move={board.current_player.value} ab={ms_fast}ms brute={ms_slow}ms {'ok' if same else 'MISMATCH'}")
        if not same:
            mismatches += 1
            print(board.pretty())
    print(f"Checked {args.count} positions, mismatches={mismatches}")
    sys.exit(1 if mismatches else 0)


if __name__ == "__main__":
    main()
