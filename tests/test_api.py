import pytest

from conftest import auth
from routers.services.game_log_service import GameLogService
from storage.repositories.game_log_repository import GameLogRepository

pytestmark = pytest.mark.anyio


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


async def test_list_without_session_is_empty(client):
    r = await client.get("/game-logs")
    assert r.status_code == 200
    assert r.json()["data"] == []
    assert r.json()["total"] == 0

    r = await client.get("/diary/logged-games")
    assert r.status_code == 200
    assert r.json()["data"] == []


async def test_create_requires_session(client):
    r = await client.post("/game-logs", json={"game_id": "G1", "mode": "attended"})
    assert r.status_code == 401


async def test_create_with_invalid_rating_is_rejected(client):
    r = await client.post(
        "/game-logs",
        json={"game_id": "G1", "mode": "attended", "rating": 6},
        headers=auth("U")
    )
    assert r.status_code == 400
    assert "Rating" in r.json()["detail"]

    r = await client.get("/game-logs", headers=auth("U"))
    assert r.json()["total"] == 0


async def test_create_missing_mode_is_rejected(client):
    r = await client.post("/game-logs", json={"game_id": "G1"}, headers=auth("U"))
    assert r.status_code == 400


async def test_crud_flow(client):
    r = await client.post(
        "/game-logs",
        json={"game_id": "G1", "mode": "attended", "company": "  Alex  ", "user_id": "intruder"},
        headers=auth("U")
    )
    assert r.status_code == 201
    created = r.json()["data"]
    assert created["company"] == "Alex"
    assert created["user_id"] == "U"

    r = await client.get("/game-logs", headers=auth("U"))
    assert [log["id"] for log in r.json()["data"]] == [created["id"]]

    r = await client.put(
        f"/game-logs/{created['id']}",
        json={"mode": "watched", "rating": 3, "rooted_for": "New York Yankees"},
        headers=auth("U")
    )
    assert r.status_code == 200
    assert r.json()["data"]["mode"] == "watched"
    assert r.json()["data"]["company"] is None

    r = await client.get("/diary/logged-games", params={"mode": "watched"}, headers=auth("U"))
    assert [game["game_id"] for game in r.json()["data"]] == ["G1"]
    assert r.json()["data"][0]["log_data"]["rating"] == 3

    r = await client.delete(f"/game-logs/{created['id']}", headers=auth("U"))
    assert r.status_code == 200
    assert r.json()["data"] == created["id"]

    r = await client.get("/game-logs", headers=auth("U"))
    assert r.json()["total"] == 0
    r = await client.get("/diary/logged-games", params={"mode": "watched"}, headers=auth("U"))
    assert r.json()["data"] == []


async def test_other_user_cannot_update_or_delete(client):
    r = await client.post("/game-logs", json={"game_id": "G1", "mode": "attended"}, headers=auth("U"))
    game_log_id = r.json()["data"]["id"]

    r = await client.put(f"/game-logs/{game_log_id}", json={"mode": "watched"}, headers=auth("V"))
    assert r.status_code == 404

    r = await client.delete(f"/game-logs/{game_log_id}", headers=auth("V"))
    assert r.status_code == 404

    r = await client.get("/game-logs", headers=auth("V"))
    assert r.json()["total"] == 0
    r = await client.get("/game-logs", headers=auth("U"))
    assert r.json()["data"][0]["mode"] == "attended"


async def test_duplicate_and_unknown_game(client):
    r = await client.post("/game-logs", json={"game_id": "G1", "mode": "attended"}, headers=auth("U"))
    assert r.status_code == 201
    r = await client.post("/game-logs", json={"game_id": "G1", "mode": "watched"}, headers=auth("U"))
    assert r.status_code == 409
    r = await client.post("/game-logs", json={"game_id": "missing", "mode": "watched"}, headers=auth("U"))
    assert r.status_code == 404


async def test_timeline(client):
    await client.post(
        "/game-logs",
        json={"game_id": "G2", "mode": "attended", "rating": 5, "rooted_for": "Los Angeles Dodgers"},
        headers=auth("U")
    )
    await client.post("/game-logs", json={"game_id": "G4", "mode": "watched"}, headers=auth("U"))

    r = await client.get("/diary/timeline", headers=auth("U"))
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["show_filters"] is True
    assert data["total"] == 2

    upcoming, playoff = data["cards"]
    assert upcoming["game_id"] == "G4"
    assert upcoming["boxscore_url"] is None
    assert upcoming["company"] == "Solo"

    assert playoff["status_tag"] == "Playoff"
    assert playoff["rooted_for"]["label"] == "LAD (W)"
    assert playoff["rating_stars"] == [True] * 5
    assert playoff["boxscore_url"].endswith("/LAN/LAN202410200.shtml")

    r = await client.get("/diary/timeline", params={"playoff": "false", "search": "yankees"}, headers=auth("U"))
    data = r.json()["data"]
    assert data["total"] == 0
    assert data["show_filters"] is True
    assert data["empty_state"]["title"] == "No games logged yet"


async def test_browse_games(client):
    r = await client.get("/games")
    assert r.status_code == 200
    assert r.json()["total"] == 4
    assert r.json()["data"][0]["game_id"] == "G4"

    r = await client.get("/games", params={"season": 2024, "limit": 1})
    assert r.json()["total"] == 2
    assert [game["game_id"] for game in r.json()["data"]] == ["G2"]

    r = await client.get("/games", params={"search": "stadium"})
    assert {game["game_id"] for game in r.json()["data"]} == {"G1", "G2"}


async def test_welcome_shown_once(client, fake_redis):
    r = await client.get("/welcome")
    assert r.json()["data"]["show"] is True

    r = await client.post("/welcome/dismiss")
    assert r.status_code == 401

    r = await client.get("/welcome", headers=auth("U"))
    assert r.json()["data"]["show"] is True
    assert r.json()["data"]["title"] == "Welcome to GamedayDiary!"

    r = await client.post("/welcome/dismiss", headers=auth("U"))
    assert r.status_code == 200

    r = await client.get("/welcome", headers=auth("U"))
    assert r.json()["data"]["show"] is False
    r = await client.get("/welcome", headers=auth("V"))
    assert r.json()["data"]["show"] is True


async def test_rating_types_are_not_coerced(client):
    for rating in (True, "5", 4.5):
        r = await client.post(
            "/game-logs",
            json={"game_id": "G1", "mode": "attended", "rating": rating},
            headers=auth("U")
        )
        assert r.status_code == 400, rating
        assert "Rating" in r.json()["detail"]

    r = await client.get("/game-logs", headers=auth("U"))
    assert r.json()["total"] == 0

    r = await client.post(
        "/game-logs",
        json={"game_id": "G1", "mode": "attended", "rating": 4.0},
        headers=auth("U")
    )
    assert r.status_code == 201
    assert r.json()["data"]["rating"] == 4

    r = await client.put(
        f"/game-logs/{r.json()['data']['id']}",
        json={"mode": "attended", "rating": False},
        headers=auth("U")
    )
    assert r.status_code == 400


async def test_failed_delete_keeps_entry_and_clears_cache(client, cache, monkeypatch):
    first = (await client.post("/game-logs", json={"game_id": "G1", "mode": "watched"}, headers=auth("U"))).json()["data"]
    second = (await client.post("/game-logs", json={"game_id": "G2", "mode": "attended"}, headers=auth("U"))).json()["data"]
    await client.get("/game-logs", headers=auth("U"))
    assert await cache.read(GameLogService.game_logs_key("U")) is not None

    async def failing_delete(self, game_log_id, user_id):
        raise RuntimeError("network failure")

    monkeypatch.setattr(GameLogRepository, "delete_owned", failing_delete)

    r = await client.delete(f"/game-logs/{second['id']}", headers=auth("U"))
    assert r.status_code == 500

    assert await cache.read(GameLogService.game_logs_key("U")) is None
    r = await client.get("/game-logs", headers=auth("U"))
    assert [log["id"] for log in r.json()["data"]] == [second["id"], first["id"]]
