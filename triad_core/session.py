from __future__ import annotations

from typing import Callable, List, Optional, Set

from .board import Board, Player, new_match
from .cards import Element
from .moves import format_move
from .settings import elemental_default

SETUP_HELP = (
    "commands: new <red|blue> [elemental] | human <red|blue> | card <red|blue> <name> | "
    "level <red|blue> <n> | element <row> <col> <element> | start | exit"
)


class Session:
    """
    Text command loop over one Board.

    Setup commands are accepted until `start`; afterwards human players enter
    `play <row> <col> <card name>` and computer players move on their own.
    Rows and columns are 1-based.
    """

    def __init__(self, output: Callable[[str], None] = print) -> None:
        self.board: Optional[Board] = None
        self.humans: Set[Player] = set()
        self.started = False
        self.running = True
        self._out = output

    # ---------- dispatch ----------

    def handle(self, line: str) -> None:
        tokens = line.split()
        if not tokens:
            return
        command, args = tokens[0].lower(), tokens[1:]
        if command == 'exit':
            self.running = False
            return
        try:
            if self.started:
                self._handle_play(command, args)
            else:
                self._handle_setup(command, args)
        except (ValueError, IndexError) as e:
            self._out(f"WARNING:  {e if str(e) else 'Bad arguments'}")
        self._check_complete()

    def _handle_setup(self, command: str, args: List[str]) -> None:
        if command == 'new':
            first = Player.parse(args[0]) if args else Player.RED
            elemental = 'elemental' in (a.lower() for a in args[1:]) or elemental_default()
            self.board = new_match(first, elemental)
            self.started = False
            return
        if command == 'human':
            self.humans.add(Player.parse(args[0]))
            return
        if command not in ('card', 'level', 'element', 'start'):
            self._out(f"WARNING:  Unknown command '{command}'. {SETUP_HELP}")
            return

        board = self._require_board()
        if board is None:
            return
        if command == 'card':
            name = ' '.join(args[1:])
            if not board.activate_card(Player.parse(args[0]), name):
                self._out('WARNING:  Invalid card')
        elif command == 'level':
            board.activate_card_level(Player.parse(args[0]), int(args[1]))
        elif command == 'element':
            board.set_terrain(int(args[0]) - 1, int(args[1]) - 1, Element.parse(args[2]))
        else:
            self.started = True
            self._out(board.pretty())
            self.print_score()

    def _handle_play(self, command: str, args: List[str]) -> None:
        board = self.board
        assert board is not None
        if board.current_player not in self.humans:
            self._out('WARNING:  Waiting for the computer to move')
            return
        if command != 'play':
            self._out("WARNING:  Expected 'play <row> <col> <card name>' or 'exit'")
            return
        move = board.lookup_move(int(args[0]) - 1, int(args[1]) - 1, ' '.join(args[2:]))
        if not board.apply_move(move):
            self._out('Invalid move, Captain. Try again.')
            return
        self._out(board.pretty())
        self.print_score()

    # ---------- helpers ----------

    def _require_board(self) -> Optional[Board]:
        if self.board is None:
            self._out("WARNING:  No match; use 'new' first")
        return self.board

    def _check_complete(self) -> None:
        if self.board is not None and self.board.is_complete():
            self.running = False

    def print_score(self) -> None:
        if self.board is None:
            return
        self._out(f"SCORE:    Red: {self.board.score(Player.RED)}   Blue: {self.board.score(Player.BLUE)}")

    def awaiting_human(self) -> bool:
        return self.board is not None and self.board.current_player in self.humans

    def advance(self) -> None:
        """Plays computer turns until a human is to move or the match ends."""
        while self.running and self.started and self.board is not None:
            board = self.board
            if not board.valid_moves():
                self._out(f"{board.current_player.value.capitalize()} has no cards left to play.")
                self.running = False
                return
            if self.awaiting_human():
                return
            result = board.search()
            board.apply_move(result.move)
            self._out(
                f"COMPUTER: Positions: {result.positions}  Move: {format_move(result.move, board.grid)}  "
                f"Utility: {result.score}"
            )
            self._out(board.pretty())
            self.print_score()
            self._check_complete()

    def run(self, read_line: Callable[[str], str] = input) -> None:
        while self.running:
            if self.started:
                self.advance()
                if not self.running:
                    break
            try:
                line = read_line('>>> ')
            except EOFError:
                break
            self.handle(line)
        self.print_score()
