import io
import unittest
from contextlib import redirect_stdout

from game import Element, Move, Player, Session
from triad_core.cli import main as cli_main


class TestSession(unittest.TestCase):
    def setUp(self):
        self.lines = []
        self.session = Session(output=self.lines.append)

    def _feed(self, *commands):
        for c in commands:
            self.session.handle(c)

    def test_given_setup_commands_when_handled_then_board_configured(self):
        self._feed(
            'new blue elemental',
            'human red',
            'card red Red Bat',
            'card blue Geezard',
            'level red 2',
            'element 3 3 fire',
        )
        board = self.session.board
        self.assertIsNotNone(board)
        self.assertIs(board.current_player, Player.BLUE)
        self.assertTrue(board.elemental)
        self.assertEqual(self.session.humans, {Player.RED})
        self.assertEqual(board.deck(Player.RED).count('Red Bat'), 1)
        self.assertEqual(board.deck(Player.RED).count('Grat'), 5)
        self.assertIs(board.terrain(8), Element.FIRE)
        self.assertFalse(self.session.started)

    def test_given_unknown_card_when_activating_then_warning(self):
        self._feed('new red', 'card red Shiva')
        self.assertIn('WARNING:  Invalid card', self.lines)

    def test_given_no_match_when_card_command_then_warning(self):
        self._feed('card red Geezard')
        self.assertTrue(any('use \'new\' first' in line for line in self.lines))

    def test_given_bad_arguments_when_handled_then_warning_not_crash(self):
        self._feed('new red', 'element x 1 fire', 'human green')
        warnings = [line for line in self.lines if line.startswith('WARNING:')]
        self.assertEqual(len(warnings), 2)

    def test_given_humans_when_playing_then_moves_applied_and_invalid_rejected(self):
        self._feed('new red', 'human red', 'human blue', 'card red Geezard', 'card blue Red Bat', 'start')
        self.assertTrue(self.session.started)
        self._feed('play 1 1 Geezard')
        self.assertEqual(self.session.board.moves_played(), [Move(0, 'Geezard')])
        self._feed('play 1 1 Red Bat')
        self.assertIn('Invalid move, Captain. Try again.', self.lines)
        self._feed('play 2 1 Red Bat')
        self.assertIs(self.session.board.cell_owner(0), Player.BLUE)
        self.assertIn('SCORE:    Red: 0   Blue: 2', self.lines)

    def test_given_computer_opponent_when_advancing_then_best_reply_played(self):
        self._feed('new red', 'human red', 'card red Geezard', 'card blue Red Bat', 'start', 'play 1 1 Geezard')
        self.session.advance()
        self.assertTrue(any(line.startswith('COMPUTER:') and '(2, 1) Red Bat' in line for line in self.lines))
        self.assertIs(self.session.board.cell_owner(0), Player.BLUE)
        # Red has nothing left to place.
        self.assertFalse(self.session.running)

    def test_given_scripted_input_when_run_then_match_completes(self):
        script = iter([
            'new red',
            'human red',
            'card red Geezard',
            'card blue Red Bat',
            'start',
            'play 1 1 Geezard',
        ])

        def read_line(prompt):
            try:
                return next(script)
            except StopIteration:
                raise EOFError

        self.session.run(read_line)
        self.assertFalse(self.session.running)
        self.assertEqual(self.lines[-1], 'SCORE:    Red: 0   Blue: 2')

    def test_given_exit_when_handled_then_stops(self):
        self._feed('exit')
        self.assertFalse(self.session.running)


class TestCli(unittest.TestCase):
    def _run(self, argv):
        buf = io.StringIO()
        with redirect_stdout(buf):
            cli_main(argv)
        return buf.getvalue()

    def test_given_position_when_cli_runs_then_suggestion_printed(self):
        out = self._run(['--red', 'Geezard', '--blue', 'Red Bat', '--moves', '1,1,Geezard'])
        self.assertIn('Suggested move for blue: (2, 1) Red Bat', out)
        self.assertIn('Utility: 2', out)

    def test_given_elemental_terrain_when_cli_runs_then_terrain_shown(self):
        out = self._run(['--elemental', '--red', 'Geezard', '--element', '2,2,holy'])
        self.assertIn('[holy]', out)
        self.assertIn('Suggested move for red: (1, 1) Geezard', out)

    def test_given_unknown_card_when_cli_runs_then_exits(self):
        with self.assertRaises(SystemExit):
            self._run(['--red', 'Nope'])

    def test_given_illegal_premove_when_cli_runs_then_exits(self):
        with self.assertRaises(SystemExit):
            self._run(['--red', 'Geezard', '--moves', '1,1,Gesper'])

    def test_given_no_cards_when_cli_runs_then_error_reported(self):
        out = self._run([])
        self.assertIn('error:', out)


if __name__ == '__main__':
    unittest.main(verbosity=2)
