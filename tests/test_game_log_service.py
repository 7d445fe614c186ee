import pytest

from exceptions import AuthenticationError, ValidationError, RemoteStoreError
from models import LoggedGamesFilters
from routers.services.game_log_service import GameLogService

pytestmark = pytest.mark.anyio


@pytest.fixture
def service(session, cache, games):
    return GameLogService(session, cache)


async def test_unauthenticated_reads_return_empty_without_store_access():
    # session和cache都为None，一旦被访问就会报错
    service = GameLogService(None, None)

    assert await service.list_game_logs(None) == []
    assert await service.list_logged_games(None, LoggedGamesFilters()) == []


async def test_writes_require_session(service):
    with pytest.raises(AuthenticationError):
        await service.add_game_log(None, {"game_id": "G1", "mode": "attended"})
    with pytest.raises(AuthenticationError):
        await service.update_game_log(None, "some-id", {"mode": "attended"})
    with pytest.raises(AuthenticationError):
        await service.delete_game_log(None, "some-id")


async def test_update_and_delete_require_id(service):
    with pytest.raises(ValidationError):
        await service.update_game_log("U", "", {"mode": "attended"})
    with pytest.raises(ValidationError):
        await service.delete_game_log("U", None)


async def test_invalid_rating_performs_no_write(service):
    with pytest.raises(ValidationError):
        await service.add_game_log("U", {"game_id": "G1", "mode": "attended", "rating": 6})

    assert await service.list_game_logs("U") == []


async def test_create_trims_and_forces_owner(service):
    created = await service.add_game_log("U", {
        "game_id": "G1",
        "mode": "attended",
        "company": "  Alex  ",
        "user_id": "someone-else",
    })

    assert created["company"] == "Alex"
    assert created["user_id"] == "U"
    assert created["id"]
    assert created["created_at"]

    logs = await service.list_game_logs("U")
    assert [log["id"] for log in logs] == [created["id"]]
    assert await service.list_game_logs("someone-else") == []


async def test_create_invalidates_cached_list(service, cache):
    assert await service.list_game_logs("U") == []
    assert await cache.read(service.game_logs_key("U")) == []

    await service.add_game_log("U", {"game_id": "G1", "mode": "watched"})

    assert await cache.read(service.game_logs_key("U")) is None
    assert len(await service.list_game_logs("U")) == 1


async def test_list_is_newest_first(service):
    first = await service.add_game_log("U", {"game_id": "G1", "mode": "watched"})
    second = await service.add_game_log("U", {"game_id": "G2", "mode": "attended"})

    logs = await service.list_game_logs("U")
    assert [log["id"] for log in logs] == [second["id"], first["id"]]


async def test_create_unknown_game_and_duplicate(service):
    with pytest.raises(RemoteStoreError) as missing:
        await service.add_game_log("U", {"game_id": "NOPE", "mode": "watched"})
    assert missing.value.status_code == 404

    await service.add_game_log("U", {"game_id": "G1", "mode": "watched"})
    with pytest.raises(RemoteStoreError) as duplicate:
        await service.add_game_log("U", {"game_id": "G1", "mode": "attended"})
    assert duplicate.value.status_code == 409


async def test_update_changes_mutable_fields_only(service):
    created = await service.add_game_log("U", {"game_id": "G1", "mode": "watched", "notes": "rain delay"})

    updated = await service.update_game_log("U", created["id"], {
        "game_id": "G2",
        "mode": "attended",
        "rating": 5,
        "notes": "  walk-off  ",
    })

    assert updated["game_id"] == "G1"
    assert updated["mode"] == "attended"
    assert updated["rating"] == 5
    assert updated["notes"] == "walk-off"
    assert updated["updated_at"]


async def test_update_of_other_users_entry_fails_without_touching_cache(service, cache):
    created = await service.add_game_log("U", {"game_id": "G1", "mode": "watched"})
    other_view = await service.list_game_logs("V")
    owner_view = await service.list_game_logs("U")

    with pytest.raises(RemoteStoreError) as error:
        await service.update_game_log("V", created["id"], {"mode": "attended"})

    assert error.value.status_code == 404
    assert await cache.read(service.game_logs_key("V")) == other_view
    assert await cache.read(service.game_logs_key("U")) == owner_view
    assert (await service.list_game_logs("U"))[0]["mode"] == "watched"


async def test_delete_removes_entry_and_invalidates(service, cache):
    kept = await service.add_game_log("U", {"game_id": "G1", "mode": "watched"})
    removed = await service.add_game_log("U", {"game_id": "G2", "mode": "attended"})
    await service.list_game_logs("U")
    await service.list_logged_games("U", LoggedGamesFilters())

    assert await service.delete_game_log("U", removed["id"]) == removed["id"]

    assert await cache.read(service.game_logs_key("U")) is None
    assert [log["id"] for log in await service.list_game_logs("U")] == [kept["id"]]
    logged = await service.list_logged_games("U", LoggedGamesFilters())
    assert [game["log_data"]["id"] for game in logged] == [kept["id"]]


async def test_delete_patches_cache_then_rolls_back_on_failure(service, cache, monkeypatch):
    entry_f = await service.add_game_log("U", {"game_id": "G1", "mode": "watched"})
    entry_e = await service.add_game_log("U", {"game_id": "G2", "mode": "attended"})
    cached = await service.list_game_logs("U")
    assert [log["id"] for log in cached] == [entry_e["id"], entry_f["id"]]
    filters = LoggedGamesFilters(mode="attended")
    await service.list_logged_games("U", filters)

    observed = {}
    restored = {}

    async def failing_delete(game_log_id, user_id):
        observed["entries"] = await cache.read(service.game_logs_key("U"))
        observed["logged"] = await cache.read(service.logged_games_key("U", filters))
        raise RuntimeError("network failure")

    original_restore = cache.restore

    async def tracking_restore(snapshots):
        await original_restore(snapshots)
        restored["entries"] = await cache.read(service.game_logs_key("U"))

    monkeypatch.setattr(service.game_log_repo, "delete_owned", failing_delete)
    monkeypatch.setattr(cache, "restore", tracking_restore)

    with pytest.raises(RuntimeError):
        await service.delete_game_log("U", entry_e["id"])

    # 存储调用时缓存已经移除了E
    assert [log["id"] for log in observed["entries"]] == [entry_f["id"]]
    assert observed["logged"] == []
    # 失败后恢复为[E, F]
    assert [log["id"] for log in restored["entries"]] == [entry_e["id"], entry_f["id"]]
    # 最后两类缓存都被失效
    assert await cache.read(service.game_logs_key("U")) is None
    assert await cache.read(service.logged_games_key("U", filters)) is None
    assert len(await service.list_game_logs("U")) == 2


async def test_delete_of_other_users_entry_fails(service):
    created = await service.add_game_log("U", {"game_id": "G1", "mode": "watched"})

    with pytest.raises(RemoteStoreError) as error:
        await service.delete_game_log("V", created["id"])

    assert error.value.status_code == 404
    assert len(await service.list_game_logs("U")) == 1


async def test_logged_games_filters_pass_through(service):
    await service.add_game_log("U", {"game_id": "G1", "mode": "watched"})
    await service.add_game_log("U", {"game_id": "G2", "mode": "attended"})
    await service.add_game_log("U", {"game_id": "G3", "mode": "attended"})

    all_games = await service.list_logged_games("U", LoggedGamesFilters())
    assert [game["game_id"] for game in all_games] == ["G3", "G2", "G1"]

    attended = await service.list_logged_games("U", LoggedGamesFilters(mode="attended"))
    assert [game["game_id"] for game in attended] == ["G3", "G2"]

    playoff = await service.list_logged_games("U", LoggedGamesFilters(playoff=True))
    assert [game["game_id"] for game in playoff] == ["G2"]

    season = await service.list_logged_games("U", LoggedGamesFilters(season=2024, search="yankee"))
    assert [game["game_id"] for game in season] == ["G1"]
    assert season[0]["log_data"]["mode"] == "watched"


async def test_writes_leave_other_users_cache_alone(service, cache):
    await service.add_game_log("a:b", {"game_id": "G1", "mode": "watched"})
    cached = await service.list_game_logs("a:b")

    created = await service.add_game_log("a", {"game_id": "G2", "mode": "attended"})
    await service.delete_game_log("a", created["id"])

    assert await cache.read(service.game_logs_key("a:b")) == cached
