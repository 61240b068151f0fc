"""
Tests for API layer.

Tests:
- API service methods
- HTTP endpoints through the FastAPI test client
- Saving and resuming games via API
- Error handling
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    CreateGameRequest,
    ErrorCode,
    ErrorResponse,
    SaveRequest,
    SessionStatus,
)
from ..api.service import APIService
from ..session import SessionManager
from ..storage import GameStore


@pytest.fixture
def service(tmp_path):
    """A fresh API service with its own saved games file."""
    return APIService(session_manager=SessionManager(), store=GameStore(tmp_path / "data.txt"))


@pytest.fixture
def client(service):
    """HTTP client bound to the service."""
    return TestClient(create_app(service))


def _feed(service, game_id, *indices):
    for index in indices:
        response = service.apply_input(game_id, index)
        assert response.accepted, response.error
    return response


class TestAPIService:
    """Tests for APIService."""

    def test_create_game(self, service):
        """A new game starts with Cat to place."""
        state = service.create_game(CreateGameRequest(name="Friday"))

        assert state.game_id
        assert state.status == SessionStatus.ACTIVE
        assert state.name == "Friday"
        assert state.current_player_name == "Cat"
        assert state.phase == "place"
        assert state.expected_action == "place"
        assert state.history_length == 1
        assert [t.unplaced_tokens for t in state.teams] == [9, 9]
        assert len(state.board.positions) == 24

    def test_get_unknown_game(self, service):
        """Unknown ids come back as GAME_NOT_FOUND."""
        response = service.get_game_state("missing")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.GAME_NOT_FOUND

    def test_apply_input(self, service):
        """An accepted input updates the game state."""
        state = service.create_game(CreateGameRequest())

        response = service.apply_input(state.game_id, 4)

        assert response.accepted
        assert response.action_type == "place"
        assert response.game_state.current_player_name == "Dog"
        assert response.game_state.board.positions[4].player == 0
        assert response.game_state.history_length == 2

    def test_rejected_input(self, service):
        """A rejection is a normal response carrying the reason."""
        state = service.create_game(CreateGameRequest())
        _feed(service, state.game_id, 4)

        response = service.apply_input(state.game_id, 4)

        assert not response.accepted
        assert response.reject_reason == "POSITION_OCCUPIED"
        assert response.game_state.history_length == 2

    def test_mill_reported(self, service):
        """Mill formation switches the expected action to capture."""
        state = service.create_game(CreateGameRequest())

        response = _feed(service, state.game_id, 0, 9, 1, 10, 2)

        assert response.mill_formed
        assert response.game_state.expected_action == "capture"
        assert response.game_state.mill_positions == [0, 1, 2]

    def test_undo(self, service):
        """Undo steps back one snapshot and stops at the first."""
        state = service.create_game(CreateGameRequest())
        _feed(service, state.game_id, 4)

        response = service.undo(state.game_id)
        assert response.undone
        assert response.game_state.history_length == 1

        response = service.undo(state.game_id)
        assert not response.undone

    def test_end_game(self, service):
        """Ended games disappear from the live list."""
        state = service.create_game(CreateGameRequest())

        assert service.end_game(state.game_id).success
        assert service.list_games().count == 0
        assert not service.end_game(state.game_id).success

    def test_save_requires_name(self, service):
        """Saving an unnamed game without a name is a validation error."""
        state = service.create_game(CreateGameRequest())

        response = service.save_game(state.game_id, SaveRequest())

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.VALIDATION_ERROR

    def test_save_and_resume(self, service):
        """A saved game lists, loads, and keeps overwriting its entry."""
        state = service.create_game(CreateGameRequest(name="Friday"))
        _feed(service, state.game_id, 0, 9)

        saved = service.save_game(state.game_id, SaveRequest())
        assert saved.game_index == 0
        assert saved.name == "Friday"

        listing = service.list_saved()
        assert listing.count == 1
        assert listing.games[0].num_boards == 3

        resumed = service.load_saved(0)
        assert resumed.game_id != state.game_id
        assert resumed.game_index == 0
        assert resumed.history_length == 3

        _feed(service, resumed.game_id, 1)
        again = service.save_game(resumed.game_id, SaveRequest())
        assert again.game_index == 0
        assert service.list_saved().games[0].num_boards == 4

    def test_save_as_new(self, service):
        """as_new appends even for a loaded game."""
        state = service.create_game(CreateGameRequest(name="Base"))
        service.save_game(state.game_id, SaveRequest())
        resumed = service.load_saved(0)

        saved = service.save_game(resumed.game_id, SaveRequest(name="Copy", as_new=True))

        assert saved.game_index == 1
        assert [g.name for g in service.list_saved().games] == ["Base", "Copy"]

    def test_load_unknown_saved_game(self, service):
        """Missing indices are SAVED_GAME_NOT_FOUND."""
        response = service.load_saved(3)
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SAVED_GAME_NOT_FOUND

    def test_load_corrupt_saved_game(self, service):
        """A malformed record is a storage error listing the problems."""
        service.store.path.write_text('Broken\n{"teams": []}\n', encoding="utf-8")

        response = service.load_saved(0)

        assert response.error_code == ErrorCode.STORAGE_ERROR
        assert response.details["problems"]


class TestHTTPEndpoints:
    """Tests for the FastAPI routes."""

    def test_health(self, client):
        """Health check reports the service."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "morris-engine"

    def test_root(self, client):
        """Root points at the docs."""
        assert client.get("/").json()["docs"] == "/api/docs"

    def test_create_without_body(self, client):
        """The request body is optional."""
        response = client.post("/api/v1/games")
        assert response.status_code == 200
        assert response.json()["name"] is None

    def test_play_over_http(self, client):
        """Inputs, rejections and captures over HTTP."""
        game_id = client.post("/api/v1/games", json={"name": "Web"}).json()["game_id"]

        for index in (0, 9, 1, 10, 2):
            response = client.post(f"/api/v1/games/{game_id}/input", json={"index": index})
            assert response.status_code == 200
            assert response.json()["accepted"]

        rejected = client.post(f"/api/v1/games/{game_id}/input", json={"index": 0}).json()
        assert not rejected["accepted"]
        assert rejected["reject_reason"] == "NOT_OPPONENT_TOKEN"

        captured = client.post(f"/api/v1/games/{game_id}/input", json={"index": 9}).json()
        assert captured["accepted"]
        state = captured["game_state"]
        assert state["current_player_name"] == "Dog"
        assert state["teams"][1]["alive_tokens"] == 8
        assert state["board"]["positions"][9] == {}

    def test_index_out_of_range_is_422(self, client):
        """Points outside 0-23 fail request validation."""
        game_id = client.post("/api/v1/games").json()["game_id"]
        response = client.post(f"/api/v1/games/{game_id}/input", json={"index": 24})
        assert response.status_code == 422

    def test_unknown_game_is_404(self, client):
        """Unknown ids map to 404 with the error body."""
        response = client.get("/api/v1/games/nope")
        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "GAME_NOT_FOUND"
        assert data["api_version"] == "v1"

        response = client.post("/api/v1/games/nope/input", json={"index": 1})
        assert response.status_code == 404

    def test_save_without_name_is_400(self, client):
        """Validation errors map to 400."""
        game_id = client.post("/api/v1/games").json()["game_id"]
        response = client.post(f"/api/v1/games/{game_id}/save", json={})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_save_list_load(self, client):
        """Saved games round-trip over HTTP."""
        game_id = client.post("/api/v1/games").json()["game_id"]
        client.post(f"/api/v1/games/{game_id}/input", json={"index": 5})

        saved = client.post(f"/api/v1/games/{game_id}/save", json={"name": "Http"})
        assert saved.status_code == 200
        assert saved.json()["game_index"] == 0

        listing = client.get("/api/v1/saved").json()
        assert listing["games"] == [{"game_index": 0, "name": "Http", "num_boards": 2}]

        loaded = client.post("/api/v1/saved/0/load")
        assert loaded.status_code == 200
        assert loaded.json()["board"]["positions"][5]["player"] == 0

        assert client.post("/api/v1/saved/9/load").status_code == 404

    def test_undo_and_delete(self, client):
        """Undo then end the game."""
        game_id = client.post("/api/v1/games").json()["game_id"]
        client.post(f"/api/v1/games/{game_id}/input", json={"index": 5})

        undo = client.post(f"/api/v1/games/{game_id}/undo").json()
        assert undo["undone"]
        assert undo["game_state"]["history_length"] == 1

        assert client.delete(f"/api/v1/games/{game_id}").json()["success"]
        assert client.get("/api/v1/games").json()["count"] == 0
