from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request, send_from_directory

from game import (
    CATALOG,
    MAX_COPIES,
    Board,
    Element,
    Move,
    Player,
    SearchError,
    search_best_move,
)
from triad_core.settings import elemental_default, flask_debug, server_port

STATIC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "static"))
app = Flask(__name__, static_url_path="/static", static_folder=STATIC_DIR)


# ---------- JSON codec ----------
#
# A state is carried as its setup (first player, rule, terrain, starting decks) plus the
# move list; json_to_state replays the moves so the rebuilt board can still undo them.
# The derived fields (cells, currentPlayer, score, complete) are for the client only.

def move_to_json(board: Board, move: Move) -> List[Any]:
    r, c = board.grid.coord(move.cell)
    return [r, c, move.card]


def _json_to_move(board: Board, obj: Any) -> Optional[Move]:
    r, c, name = obj
    return board.lookup_move(int(r), int(c), str(name))


def legal_moves_json(board: Board) -> List[List[Any]]:
    return [move_to_json(board, m) for m in board.valid_moves()]


def _starting_decks(board: Board) -> Dict[str, Dict[str, int]]:
    decks = {p.value: dict(board.deck(p).counts()) for p in Player}
    mover = board.first_player
    for move in board.moves_played():
        counts = decks[mover.value]
        counts[move.card] = counts.get(move.card, 0) + 1
        mover = mover.other()
    return decks


def state_to_json(board: Board, human_side: Optional[str] = None) -> Dict[str, Any]:
    cells: List[Optional[Dict[str, Any]]] = []
    for cell in range(board.grid.size):
        card = board.cell_card(cell)
        owner = board.cell_owner(cell)
        cells.append(None if card is None else {"card": card.name, "owner": owner.value if owner else None})
    winner = board.winner()
    return {
        "firstPlayer": board.first_player.value,
        "elemental": board.elemental,
        "terrain": [board.terrain(cell).value for cell in range(board.grid.size)],
        "decks": _starting_decks(board),
        "moves": [move_to_json(board, m) for m in board.moves_played()],
        "cells": cells,
        "currentPlayer": board.current_player.value,
        "score": {p.value: board.score(p) for p in Player},
        "complete": board.is_complete(),
        "winner": winner.value if winner else None,
        "humanSide": human_side,
    }


def _decode_decks(board: Board, decks: Any) -> None:
    if not isinstance(decks, dict):
        raise ValueError("decks must map player to {card: count}")
    for player_name, counts in decks.items():
        player = Player.parse(str(player_name))
        if not isinstance(counts, dict):
            raise ValueError(f"deck for {player.value} must map card to count")
        for name, n in counts.items():
            n = int(n)
            if n < 0:
                raise ValueError(f"negative count for {name}")
            # Decks never hold more than MAX_COPIES of a card.
            for _ in range(min(n, MAX_COPIES)):
                if not board.activate_card(player, str(name)):
                    raise ValueError(f"unknown card: {name}")


def json_to_state(obj: Dict[str, Any]) -> Board:
    """Rebuilds a Board from state_to_json output; raises ValueError on inconsistent input."""
    elemental = obj.get("elemental", False)
    if not isinstance(elemental, bool):
        raise ValueError("elemental must be true or false")
    board = Board(first_player=Player.parse(str(obj.get("firstPlayer", "red"))), elemental=elemental)
    terrain = obj.get("terrain") or []
    if terrain and len(terrain) != board.grid.size:
        raise ValueError("terrain must list every cell")
    for cell, element in enumerate(terrain):
        r, c = board.grid.coord(cell)
        board.set_terrain(r, c, Element.parse(str(element)))
    _decode_decks(board, obj.get("decks") or {})
    for raw in obj.get("moves") or []:
        outcome = board.apply_move(_json_to_move(board, raw))
        if not outcome:
            raise ValueError(f"move {raw} rejected: {outcome.value}")
    return board


def _board_from_request(body: Dict[str, Any]) -> Board:
    s_in = body.get("state")
    if not isinstance(s_in, dict):
        raise ValueError("state required")
    return json_to_state(s_in)


def _bad_request(message: str, **extra: Any) -> Any:
    payload: Dict[str, Any] = {"ok": False, "error": message}
    payload.update(extra)
    return jsonify(payload), 400


# ---------- Static routes ----------

@app.get("/")
def index() -> Any:
    return send_from_directory(app.static_folder, "index.html")


@app.get("/api/cards")
def api_cards() -> Any:
    return jsonify({
        "ok": True,
        "cards": [
            {
                "name": card.name,
                "level": card.level,
                "top": card.top,
                "right": card.right,
                "bottom": card.bottom,
                "left": card.left,
                "element": card.element.value,
            }
            for card in CATALOG.values()
        ],
    })


# ---------- Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        first = Player.parse(str(body.get("first", "red")))
        elemental = body.get("elemental", elemental_default())
        if not isinstance(elemental, bool):
            raise ValueError("elemental must be true or false")
        board = Board(first_player=first, elemental=elemental)
        for player in Player:
            level = body.get(f"{player.value}Level")
            if level is not None:
                board.activate_card_level(player, int(level))
            for name in body.get(player.value, []) or []:
                if not board.activate_card(player, str(name)):
                    return _bad_request(f"unknown card: {name}")
        for r, c, element in body.get("terrain", []) or []:
            board.set_terrain(int(r), int(c), Element.parse(str(element)))
    except (ValueError, TypeError) as e:
        return _bad_request(f"bad setup: {e}")
    human = body.get("human")
    return jsonify({
        "ok": True,
        "state": state_to_json(board, human_side=human),
        "legalMoves": legal_moves_json(board),
    })


@app.post("/api/legal")
def api_legal() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board = _board_from_request(body)
    except (ValueError, TypeError, KeyError) as e:
        return _bad_request(f"bad state: {e}")
    return jsonify({"ok": True, "legalMoves": legal_moves_json(board)})


@app.post("/api/move")
def api_move() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board = _board_from_request(body)
        move = _json_to_move(board, body["move"])
    except (ValueError, TypeError, KeyError) as e:
        return _bad_request(f"bad request: {e}")
    outcome = board.apply_move(move)
    if not outcome:
        return _bad_request(f"Illegal move: {outcome.value}", legalMoves=legal_moves_json(board))
    return jsonify({"ok": True, "state": state_to_json(board), "legalMoves": legal_moves_json(board)})


@app.post("/api/ai")
def api_ai() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board = _board_from_request(body)
    except (ValueError, TypeError, KeyError) as e:
        return _bad_request(f"bad state: {e}")
    try:
        result = search_best_move(board)
    except SearchError as e:
        return jsonify({"ok": False, "error": f"No AI move available: {e}"}), 500
    if not board.apply_move(result.move):
        return jsonify({"ok": False, "error": "AI produced an illegal move"}), 500
    return jsonify({
        "ok": True,
        "move": move_to_json(board, result.move),
        "utility": result.score,
        "positions": result.positions,
        "state": state_to_json(board),
        "legalMoves": legal_moves_json(board),
    })


@app.post("/api/undo")
def api_undo() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        board = _board_from_request(body)
    except (ValueError, TypeError, KeyError) as e:
        return _bad_request(f"bad state: {e}")
    if not board.undo():
        return _bad_request("Nothing to undo", legalMoves=legal_moves_json(board))
    return jsonify({"ok": True, "state": state_to_json(board), "legalMoves": legal_moves_json(board)})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=server_port(), debug=flask_debug())
