"""Tests for API endpoints."""
import pytest
from fastapi.testclient import TestClient
from vita_mahjong.main import app
from vita_mahjong.api.deps import get_advice
from vita_mahjong.clients.advice import AdviceClient, MISSING_KEY_ADVICE
from vita_mahjong.models.game_config import Language


@pytest.fixture
def client():
    """Create test client with an unconfigured advice service."""
    def offline_advice():
        advice = AdviceClient()
        advice.base_url = ""
        return advice

    app.dependency_overrides[get_advice] = offline_advice
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def game(client):
    """Create an EASY level 1 game and return its state."""
    response = client.post("/api/games", json={"difficulty": "EASY", "level": 1})
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def sample_board():
    """Small board: two free dots, one bamboo under a wind."""
    return [
        {"id": "a", "category": "DOTS", "value": 1, "x": 0, "y": 0, "z": 0},
        {"id": "b", "category": "DOTS", "value": 1, "x": 8, "y": 0, "z": 0},
        {"id": "c", "category": "BAMBOO", "value": 2, "x": 16, "y": 0, "z": 0},
        {"id": "d", "category": "WIND", "value": "E", "x": 16, "y": 0, "z": 1},
    ]


def first_playable(state):
    return next(t["id"] for t in state["tiles"] if t["is_playable"])


class TestHealthEndpoints:
    """Test health check endpoints."""

    def test_root(self, client):
        """Test root endpoint."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "name" in data
        assert "endpoints" in data

    def test_health(self, client):
        """Test health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestGameEndpoints:
    """Test game session endpoints."""

    def test_create_game(self, game):
        """Test a new EASY game deals 12 tiles."""
        assert game["status"] == "playing"
        assert game["level"] == 1
        assert game["coins"] == 10000
        assert len(game["tiles"]) == 12
        assert game["dock"] == []

    def test_get_unknown_game(self, client):
        response = client.get("/api/games/does-not-exist")
        assert response.status_code == 404

    def test_select_and_arrive(self, client, game):
        """Test a tile flies and lands in the dock."""
        sid = game["session_id"]
        tile_id = first_playable(game)

        response = client.post(f"/api/games/{sid}/select", json={"tile_id": tile_id})
        assert response.status_code == 200
        assert response.json()["accepted"] is True

        response = client.post(f"/api/games/{sid}/arrive", json={"tile_id": tile_id})
        data = response.json()
        assert data["arrival"]["tile_id"] == tile_id
        assert data["state"]["dock"] == [tile_id]

    def test_select_unknown_tile_is_ignored(self, client, game):
        sid = game["session_id"]
        response = client.post(f"/api/games/{sid}/select", json={"tile_id": "nope"})

        assert response.status_code == 200
        assert response.json()["accepted"] is False

    def test_advance_lands_flight(self, client, game):
        sid = game["session_id"]
        tile_id = first_playable(game)
        client.post(f"/api/games/{sid}/select", json={"tile_id": tile_id})

        response = client.post(f"/api/games/{sid}/advance", json={"seconds": 1.0})
        data = response.json()

        assert "flight_landed" in data["fired"]
        assert data["state"]["dock"] == [tile_id]

    def test_shuffle_costs_coins(self, client, game):
        sid = game["session_id"]

        response = client.post(f"/api/games/{sid}/actions/shuffle")
        assert response.status_code == 200
        assert response.json()["gate_opened"] is True
        assert response.json()["cost"] == 3000
        assert response.json()["state"]["pending_action"] == "shuffle"

        response = client.post(f"/api/games/{sid}/actions/confirm")
        data = response.json()
        assert data["outcome"]["applied"] is True
        assert data["state"]["coins"] == 7000
        assert data["state"]["pending_action"] is None

    def test_action_without_coins(self, client, game):
        sid = game["session_id"]
        for _ in range(3):
            client.post(f"/api/games/{sid}/actions/shuffle")
            client.post(f"/api/games/{sid}/actions/confirm")

        response = client.post(f"/api/games/{sid}/actions/shuffle")
        assert response.status_code == 402

    def test_cancel_action(self, client, game):
        sid = game["session_id"]
        client.post(f"/api/games/{sid}/actions/hint")

        response = client.post(f"/api/games/{sid}/actions/cancel")
        assert response.json()["pending_action"] is None
        assert response.json()["coins"] == 10000

    def test_unknown_action_rejected(self, client, game):
        response = client.post(f"/api/games/{game['session_id']}/actions/teleport")
        assert response.status_code == 422

    def test_next_level_requires_win(self, client, game):
        response = client.post(f"/api/games/{game['session_id']}/next-level")
        assert response.status_code == 409

    def test_settings_and_pause(self, client, game):
        sid = game["session_id"]
        response = client.put(
            f"/api/games/{sid}/settings",
            json={"theme": "WOOD", "language": "en", "paused": True},
        )
        data = response.json()
        assert data["theme"] == "WOOD"
        assert data["language"] == "en"
        assert data["paused"] is True

        response = client.post(f"/api/games/{sid}/tick")
        assert response.json()["elapsed_seconds"] == 0

    def test_tick_advances_clock(self, client, game):
        response = client.post(f"/api/games/{game['session_id']}/tick")
        assert response.json()["elapsed_seconds"] == 1

    def test_advice_fallback(self, client, game):
        response = client.get(f"/api/games/{game['session_id']}/advice")
        data = response.json()

        assert data["language"] == "ru"
        assert data["text"] == MISSING_KEY_ADVICE[Language.RU]

    def test_commentary_unconfigured_stays_offline(self, client, game):
        response = client.post(
            f"/api/games/{game['session_id']}/commentary", json={"enabled": True}
        )
        assert response.status_code == 200
        assert response.json()["commentary_live"] is False

    def test_delete_game(self, client, game):
        sid = game["session_id"]
        assert client.delete(f"/api/games/{sid}").status_code == 200
        assert client.get(f"/api/games/{sid}").status_code == 404


class TestGenerateEndpoint:
    """Test board generation endpoint."""

    def test_generate_basic(self, client):
        response = client.post("/api/generate", json={"difficulty": "MEDIUM", "level": 1})
        assert response.status_code == 200

        data = response.json()
        assert data["requested_count"] == 16
        assert data["placed_count"] == len(data["tiles"])

    def test_generate_past_deck_limit(self, client):
        response = client.post("/api/generate", json={"difficulty": "NIGHTMARE", "level": 11})
        data = response.json()

        assert data["placed_count"] == 144
        assert data["shortfall"] is True

    def test_generate_invalid_level(self, client):
        response = client.post("/api/generate", json={"level": 0})
        assert response.status_code == 422


class TestAnalyzeEndpoint:
    """Test board analysis endpoint."""

    def test_analyze_board(self, client, sample_board):
        response = client.post("/api/analyze", json={"tiles": sample_board})
        assert response.status_code == 200

        data = response.json()
        assert set(data["playable_ids"]) == {"a", "b", "d"}
        assert set(data["hint_pair"]) == {"a", "b"}
        assert data["pairable"] is False
        assert data["statistics"]["layers"] == 2

    def test_analyze_rejects_unhashable_value(self, client):
        tiles = [
            {"id": "a", "category": "DOTS", "value": [1], "x": 0, "y": 0, "z": 0},
            {"id": "b", "category": "DOTS", "value": [1], "x": 4, "y": 0, "z": 0},
        ]
        response = client.post("/api/analyze", json={"tiles": tiles})

        assert response.status_code == 400
        assert "invalid value" in response.json()["detail"]

    def test_analyze_rejects_string_visibility(self, client, sample_board):
        sample_board[0]["is_visible"] = "false"
        response = client.post("/api/analyze", json={"tiles": sample_board})

        assert response.status_code == 400

    def test_analyze_invalid_board(self, client):
        response = client.post(
            "/api/analyze",
            json={"tiles": [{"id": "a", "category": "JOKER", "value": 1, "x": 0, "y": 0, "z": 0}]},
        )
        assert response.status_code == 400
