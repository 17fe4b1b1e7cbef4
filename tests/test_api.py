"""Tests for the HTTP endpoints and the WebSocket game flow."""

import pytest
from fastapi.testclient import TestClient

from app.main import app


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def connect(ws):
    hello = ws.receive_json()
    assert hello["type"] == "connected"
    return hello["participant_id"]


class TestHttp:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_status_labels(self, client):
        assert client.get("/api/game_status").json() == {
            "SEARCHING": "Searching for players",
            "IN_PROGRESS": "Game in progress",
            "FINISHED": "Game finished",
        }

    def test_winner_labels(self, client):
        assert client.get("/api/game_winner").json() == {"NO_WINNER": "No Winner", "TIE": "Tie"}

    def test_pools_start_empty(self, client):
        assert client.get("/api/sessions/pending").json() == []
        assert client.get("/api/sessions/active").json() == []


class TestWebSocketFlow:
    def test_match_move_and_abandon(self, client):
        with client.websocket_connect("/ws") as a:
            a_id = connect(a)
            a.send_json({"type": "find_game"})
            waiting = a.receive_json()
            assert waiting["type"] == "game_state"
            assert waiting["game"]["status"] == "Searching for players"
            assert waiting["game"]["players"] == {a_id: {"marker": "X"}}
            game_id = waiting["game"]["id"]

            with client.websocket_connect("/ws") as b:
                b_id = connect(b)
                b.send_json({"type": "find_game"})
                started_a = a.receive_json()["game"]
                started_b = b.receive_json()["game"]
                assert started_a == started_b
                assert started_a["status"] == "Game in progress"
                assert started_a["players"][b_id] == {"marker": "O"}
                assert started_a["player_turn"] in (a_id, b_id)

                mover, mover_id = (a, a_id) if started_a["player_turn"] == a_id else (b, b_id)
                mover.send_json({"type": "make_move", "game_id": game_id, "row": 1, "col": 1})
                moved = a.receive_json()["game"]
                assert b.receive_json()["game"] == moved
                assert moved["board"][1][1] in ("X", "O")
                assert moved["player_turn"] != mover_id

                active = client.get("/api/sessions/active").json()
                assert [g["id"] for g in active] == [game_id]

            ended = a.receive_json()["game"]
            assert ended["status"] == "Game finished"
            assert ended["winner"] == "No Winner"
            assert client.get("/api/sessions/active").json() == []

            # The game is over, so searching again is allowed right away
            a.send_json({"type": "find_game"})
            again = a.receive_json()
            assert again["type"] == "game_state"
            assert again["game"]["id"] != game_id

    def test_second_find_game_is_rejected(self, client):
        with client.websocket_connect("/ws") as a:
            connect(a)
            a.send_json({"type": "find_game"})
            a.receive_json()
            a.send_json({"type": "find_game"})
            error = a.receive_json()
            assert error == {
                "type": "error",
                "code": "already_in_session",
                "message": error["message"],
            }

    def test_garbage_is_ignored(self, client):
        with client.websocket_connect("/ws") as a:
            connect(a)
            a.send_text("not json")
            a.send_json(["list"])
            a.send_json({"type": "make_move", "game_id": "nope", "row": 0, "col": 0})
            a.send_json({"type": "find_game"})
            assert a.receive_json()["type"] == "game_state"

    def test_malformed_game_id_keeps_game_running(self, client):
        with client.websocket_connect("/ws") as a:
            a_id = connect(a)
            a.send_json({"type": "find_game"})
            game_id = a.receive_json()["game"]["id"]

            with client.websocket_connect("/ws") as b:
                connect(b)
                b.send_json({"type": "find_game"})
                started = a.receive_json()["game"]
                b.receive_json()

                for bad_id in (["x"], {"id": "x"}, 7):
                    a.send_json({"type": "make_move", "game_id": bad_id, "row": 0, "col": 0})
                # Same connection answers afterwards, so the bad moves were handled in place
                a.send_json({"type": "find_game"})
                assert a.receive_json()["code"] == "already_in_session"

                mover = a if started["player_turn"] == a_id else b
                mover.send_json({"type": "make_move", "game_id": game_id, "row": 2, "col": 2})
                moved = b.receive_json()["game"]
                assert a.receive_json()["game"] == moved
                assert moved["status"] == "Game in progress"
                assert moved["board"][2][2] in ("X", "O")
                assert moved["winner"] == ""
