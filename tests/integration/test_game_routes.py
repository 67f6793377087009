"""Tests for the HTMX game routes."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from http import HTTPStatus

import pytest
from fastapi.testclient import TestClient

from src.broadside.api.routes.game import _ENGINES, get_engine
from src.broadside.game.engine import GameEngine
from src.broadside.game.state import Phase
from src.broadside.main import app

PlaceFn = Callable[[GameEngine], None]


@pytest.fixture()
def client(engine: GameEngine) -> Iterator[TestClient]:
    """Client whose session is pinned to the seeded test engine."""
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _place_fleet(client: TestClient, engine: GameEngine, board: int) -> None:
    for row, ship in enumerate(list(engine.state.active.fleet.unplaced())):
        client.post("/game/select", data={"ship": ship.name})
        resp = client.post("/game/place", data={"row": row, "col": 0, "board": board})
        assert resp.status_code == HTTPStatus.OK


class TestGameRoutes:
    def test_board_starts_with_mode_selection(self, client: TestClient) -> None:
        resp = client.get("/game/board")
        assert resp.status_code == HTTPStatus.OK
        assert "text/html" in resp.headers["content-type"]
        assert "game-mode-selection" in resp.text
        assert "Choose a game mode to begin." in resp.text

    def test_select_mode(self, client: TestClient, engine: GameEngine) -> None:
        resp = client.post("/game/mode", data={"mode": "vs-player"})
        assert resp.status_code == HTTPStatus.OK
        assert "Ship Placement" in resp.text
        assert "player1-board" in resp.text
        assert engine.phase is Phase.PLACEMENT

    def test_invalid_mode_is_validation_error(self, client: TestClient) -> None:
        resp = client.post("/game/mode", data={"mode": "vs-cat"})
        assert resp.status_code == HTTPStatus.UNPROCESSABLE_ENTITY

    def test_place_without_selection_reports(self, client: TestClient) -> None:
        client.post("/game/mode", data={"mode": "vs-player"})
        resp = client.post("/game/place", data={"row": 0, "col": 0, "board": 1})
        assert resp.status_code == HTTPStatus.OK
        assert "Please select a ship first!" in resp.text

    def test_rotate_and_orientation(self, client: TestClient, engine: GameEngine) -> None:
        client.post("/game/mode", data={"mode": "vs-player"})
        resp = client.post("/game/rotate")
        assert "Rotate (vertical)" in resp.text
        client.post("/game/orientation", data={"orientation": "horizontal"})
        assert engine.state.orientation.value == "horizontal"

    def test_full_placement_and_first_shot(self, client: TestClient, engine: GameEngine) -> None:
        client.post("/game/mode", data={"mode": "vs-player"})
        _place_fleet(client, engine, board=1)
        assert "Player 2: Place your ships!" in client.post("/game/ready").text
        _place_fleet(client, engine, board=2)
        resp = client.post("/game/ready")
        assert "Battle begins!" in resp.text

        resp = client.post("/game/attack", data={"row": 5, "col": 5, "board": 2})

        assert "Miss!" in resp.text
        assert engine.current_player == 2

    def test_attack_own_board_is_rejected(self, client: TestClient, engine: GameEngine) -> None:
        client.post("/game/mode", data={"mode": "vs-player"})
        _place_fleet(client, engine, board=1)
        client.post("/game/ready")
        _place_fleet(client, engine, board=2)
        client.post("/game/ready")

        client.post("/game/attack", data={"row": 0, "col": 0, "board": 1})

        assert engine.message == "It is Player 1's turn."
        assert engine.state.player1.board.marks == {}

    def test_state_json(self, client: TestClient) -> None:
        client.post("/game/mode", data={"mode": "vs-ai"})
        client.post("/game/select", data={"ship": "carrier"})

        data = client.get("/game/state").json()

        assert data["phase"] == "placement"
        assert data["mode"] == "vs-ai"
        assert data["selected_ship"] == "carrier"
        assert data["stats"]["1"]["shots_fired"] == 0

    def test_pending_ai_move_asks_for_refresh(
        self, client: TestClient, engine: GameEngine, place_in_rows: PlaceFn
    ) -> None:
        engine.select_mode("vs-ai")
        place_in_rows(engine)
        engine.ready()
        board = engine.state.player2.board
        row, col = next(
            (r, c)
            for r in range(board.size)
            for c in range(board.size)
            if not board.is_occupied(r, c)
        )

        resp = client.post("/game/attack", data={"row": row, "col": col, "board": 2})

        assert "AI is thinking..." in resp.text
        assert "hx-trigger='load delay:" in resp.text

    def test_new_game(self, client: TestClient, engine: GameEngine) -> None:
        client.post("/game/mode", data={"mode": "vs-player"})
        resp = client.post("/game/new")
        assert "game-mode-selection" in resp.text
        assert engine.phase is Phase.MODE_SELECTION
        assert engine.state.epoch == 1


class TestSessionEngines:
    def test_engine_follows_session_cookie(self) -> None:
        _ENGINES.clear()
        client = TestClient(app)
        try:
            client.post("/game/mode", data={"mode": "vs-player"})
            data = client.get("/game/state").json()
            assert data["phase"] == "placement"
            assert len(_ENGINES) == 1

            other = TestClient(app)
            assert other.get("/game/state").json()["phase"] == "mode-selection"
            assert len(_ENGINES) == 2
        finally:
            _ENGINES.clear()
