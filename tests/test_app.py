import json
import unittest

from app import app as flask_app
from app import json_to_state, state_to_json
import app as app_mod
from game import MAX_COPIES, Element, Move, Player, SearchError, new_match


def _post(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


class TestStateJson(unittest.TestCase):
    def test_given_played_board_when_roundtrip_json_then_identical_state(self):
        b = new_match(Player.BLUE, elemental=True)
        for name in ("Geezard", "Funguar"):
            b.activate_card(Player.RED, name)
        for name in ("Gayla", "Red Bat"):
            b.activate_card(Player.BLUE, name)
        b.set_terrain(0, 0, Element.THUNDER)
        b.move(Move(1, "Gayla"))
        b.move(Move(4, "Geezard"))
        b.move(Move(7, "Red Bat"))

        sj = state_to_json(b, human_side="red")
        self.assertEqual(sj["firstPlayer"], "blue")
        self.assertEqual(sj["decks"]["blue"], {"Gayla": 1, "Red Bat": 1})
        self.assertEqual(sj["moves"], [[0, 1, "Gayla"], [1, 1, "Geezard"], [2, 1, "Red Bat"]])
        self.assertEqual(sj["humanSide"], "red")
        self.assertEqual(sj["terrain"][0], "thunder")

        back = json_to_state(json.loads(json.dumps(sj)))
        self.assertEqual(back.snapshot(), b.snapshot())
        self.assertTrue(back.undo())

    def test_given_inconsistent_moves_when_decoding_then_value_error(self):
        b = new_match()
        sj = state_to_json(b)
        sj["moves"] = [[0, 0, "Geezard"]]
        with self.assertRaises(ValueError):
            json_to_state(sj)

    def test_given_misshapen_decks_when_decoding_then_value_error(self):
        for decks in (["Geezard"], {"red": ["Geezard"]}, {"red": {"Geezard": -1}}, {"red": {"Geezard": "many"}}):
            with self.subTest(decks=decks):
                with self.assertRaises(ValueError):
                    json_to_state({"decks": decks})

    def test_given_non_bool_elemental_when_decoding_then_value_error(self):
        with self.assertRaises(ValueError):
            json_to_state({"elemental": "false"})
        self.assertFalse(json_to_state({"elemental": False}).elemental)

    def test_given_huge_card_count_when_decoding_then_capped_at_max_copies(self):
        b = json_to_state({"decks": {"red": {"Geezard": 10 ** 12}}})
        self.assertEqual(b.deck(Player.RED).count("Geezard"), MAX_COPIES)


class TestFlaskAPI(unittest.TestCase):
    def setUp(self):
        self._orig_search = app_mod.search_best_move
        self.client = flask_app.test_client()

    def tearDown(self):
        app_mod.search_best_move = self._orig_search

    def _new(self, **extra):
        payload = {"first": "red", "red": ["Geezard"], "blue": ["Red Bat"]}
        payload.update(extra)
        r = _post(self.client, "/api/new", payload)
        self.assertEqual(r.status_code, 200)
        return r.get_json()

    def test_given_index_when_requested_then_html(self):
        r = self.client.get("/")
        self.assertEqual(r.status_code, 200)
        self.assertIn(b"Triple Triad", r.data)

    def test_given_cards_endpoint_when_requested_then_catalog_listed(self):
        r = self.client.get("/api/cards")
        d = r.get_json()
        self.assertTrue(d["ok"])
        self.assertEqual(d["cards"][0]["name"], "Geezard")

    def test_given_new_game_when_posted_then_state_and_legal_moves(self):
        d = self._new(terrain=[[1, 1, "fire"]], elemental=True)
        self.assertTrue(d["ok"])
        self.assertEqual(len(d["legalMoves"]), 9)
        self.assertEqual(d["legalMoves"][0], [0, 0, "Geezard"])
        self.assertEqual(d["state"]["terrain"][4], "fire")
        self.assertEqual(d["state"]["score"], {"red": 1, "blue": 1})

        r2 = _post(self.client, "/api/legal", {"state": d["state"]})
        self.assertEqual(r2.get_json()["legalMoves"], d["legalMoves"])

    def test_given_unknown_card_when_new_then_400(self):
        r = _post(self.client, "/api/new", {"red": ["Nope"]})
        self.assertEqual(r.status_code, 400)
        self.assertFalse(r.get_json()["ok"])

    def test_given_move_then_ai_reply_when_posted_then_capture_applied(self):
        d = self._new()
        r1 = _post(self.client, "/api/move", {"state": d["state"], "move": [0, 0, "Geezard"]})
        self.assertEqual(r1.status_code, 200)
        d1 = r1.get_json()
        self.assertEqual(d1["state"]["currentPlayer"], "blue")

        r2 = _post(self.client, "/api/ai", {"state": d1["state"]})
        self.assertEqual(r2.status_code, 200)
        d2 = r2.get_json()
        self.assertEqual(d2["move"], [1, 0, "Red Bat"])
        self.assertEqual(d2["utility"], 2)
        self.assertEqual(d2["state"]["cells"][0], {"card": "Geezard", "owner": "blue"})
        self.assertEqual(d2["state"]["score"], {"red": 0, "blue": 2})

    def test_given_illegal_move_when_posted_then_400_with_legal_moves(self):
        d = self._new()
        r = _post(self.client, "/api/move", {"state": d["state"], "move": [0, 0, "Red Bat"]})
        self.assertEqual(r.status_code, 400)
        body = r.get_json()
        self.assertFalse(body["ok"])
        self.assertIn("card_unavailable", body["error"])
        self.assertIsInstance(body["legalMoves"], list)

        r2 = _post(self.client, "/api/move", {"state": d["state"], "move": [5, 5, "Geezard"]})
        self.assertEqual(r2.status_code, 400)

    def test_given_missing_state_when_posted_then_400(self):
        r = _post(self.client, "/api/legal", {})
        self.assertEqual(r.status_code, 400)

    def test_given_list_deck_in_state_when_posted_then_400(self):
        r = _post(self.client, "/api/legal", {"state": {"decks": {"red": ["Geezard"]}}})
        self.assertEqual(r.status_code, 400)
        self.assertFalse(r.get_json()["ok"])

    def test_given_string_elemental_when_new_then_400(self):
        r = _post(self.client, "/api/new", {"red": ["Geezard"], "elemental": "false"})
        self.assertEqual(r.status_code, 400)

    def test_given_played_move_when_undo_then_previous_state(self):
        d = self._new()
        r1 = _post(self.client, "/api/move", {"state": d["state"], "move": [2, 2, "Geezard"]})
        r2 = _post(self.client, "/api/undo", {"state": r1.get_json()["state"]})
        self.assertEqual(r2.status_code, 200)
        d2 = r2.get_json()
        self.assertEqual(d2["state"]["moves"], [])
        self.assertEqual(d2["legalMoves"], d["legalMoves"])

        r3 = _post(self.client, "/api/undo", {"state": d2["state"]})
        self.assertEqual(r3.status_code, 400)

    def test_given_search_fails_when_ai_called_then_500(self):
        def _raise(board):
            raise SearchError("no moves")
        app_mod.search_best_move = _raise
        d = self._new()
        r = _post(self.client, "/api/ai", {"state": d["state"]})
        self.assertEqual(r.status_code, 500)
        self.assertIn("no ai move", r.get_json()["error"].lower())


if __name__ == "__main__":
    unittest.main(verbosity=2)
