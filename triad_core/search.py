from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .moves import Move, format_move
from .settings import debug_enabled

if TYPE_CHECKING:
    from .board import Board, Player

# Scores are bounded by the number of cards in play, so these act as infinities.
LOWER_BOUND = -(10 ** 9)
UPPER_BOUND = 10 ** 9


class SearchError(RuntimeError):
    """Raised when search is requested for a position with no moves left."""


@dataclass
class SearchResult:
    """Best move for the player to move at the root, with its exact score for that player."""
    move: Move
    score: int
    positions: int


@dataclass
class _Counter:
    positions: int = 0


def evaluate(board: 'Board', player: 'Player') -> int:
    return board.score(player) - board.score(player.other())


def _alphabeta(board: 'Board', self_player: 'Player', alpha: int, beta: int, counter: _Counter) -> int:
    """
    Fail-hard alpha-beta over the board's current state, always scored from `self_player`'s side.

    A node maximizes when its mover is `self_player` and minimizes otherwise. This is
    sound because every applied move hands the turn to the other player.
    """
    moves = board.valid_moves()
    if not moves:
        return evaluate(board, self_player)

    maximizing = board.current_player is self_player
    for move in moves:
        with board.trial(move):
            score = _alphabeta(board, self_player, alpha, beta, counter)

        if maximizing:
            if score >= beta:
                return beta
            if score > alpha:
                alpha = score
        else:
            if score <= alpha:
                return alpha
            if score < beta:
                beta = score

        counter.positions += 1

    return alpha if maximizing else beta


def search_best_move(board: 'Board') -> SearchResult:
    """
    Exhaustive search to the end of the game for the player to move.

    Every first move gets a full window, so each root score is exact; ties keep the
    earliest move in valid_moves() order. The board is restored before returning.
    """
    if board.is_complete():
        raise SearchError('Board is complete; no move to suggest')
    moves = board.valid_moves()
    if not moves:
        raise SearchError('No valid moves for the current player')

    debug = debug_enabled()
    self_player = board.current_player
    counter = _Counter()
    best_move: Optional[Move] = None
    best_score = LOWER_BOUND

    for move in moves:
        if debug:
            print(f"[search] evaluating {format_move(move, board.grid)}")
        with board.trial(move):
            score = _alphabeta(board, self_player, LOWER_BOUND, UPPER_BOUND, counter)
        if best_move is None or score > best_score:
            best_score = score
            best_move = move
        counter.positions += 1

    assert best_move is not None
    if debug:
        print(
            f"[search] {self_player.value}: positions={counter.positions} "
            f"move={format_move(best_move, board.grid)} utility={best_score}"
        )
    return SearchResult(move=best_move, score=best_score, positions=counter.positions)


def brute_force_value(board: 'Board', player: 'Player') -> int:
    """Plain minimax with no pruning; used to verify search_best_move."""
    moves = board.valid_moves()
    if not moves:
        return evaluate(board, player)
    values = []
    for move in moves:
        with board.trial(move):
            values.append(brute_force_value(board, player))
    return max(values) if board.current_player is player else min(values)


def brute_force_best_move(board: 'Board') -> SearchResult:
    """Unpruned counterpart of search_best_move with the same tie-break."""
    moves = board.valid_moves()
    if not moves:
        raise SearchError('No valid moves for the current player')
    player = board.current_player
    best_move: Optional[Move] = None
    best_score = LOWER_BOUND
    for move in moves:
        with board.trial(move):
            score = brute_force_value(board, player)
        if best_move is None or score > best_score:
            best_score = score
            best_move = move
    assert best_move is not None
    return SearchResult(move=best_move, score=best_score, positions=len(moves))
