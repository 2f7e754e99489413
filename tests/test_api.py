import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from waiveriq.api import create_app
from waiveriq.ingest import SleeperClient
from waiveriq.persistence import LeagueStore
from waiveriq.settings import Settings

from tests.helpers import SEASON, WEEK, add_player
from tests.test_sync import FakeSleeper


@pytest.fixture(scope="module")
async def client(tmp_path_factory):
    db_path = tmp_path_factory.mktemp("api") / "waiveriq.sqlite"
    sleeper = SleeperClient("https://sleeper.test/v1", transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    app = create_app(Settings(db_path=db_path), store=LeagueStore(db_path), sleeper=sleeper)
    store = app.state.store
    add_player(store, "rb1", "RB", 10.0)
    add_player(store, "rb2", "RB", 15.0)
    add_player(store, "wr1", "WR", 11.0, team="BUF")
    add_player(store, "te1", "TE", 9.0, team="DAL")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


async def _register(client, league_id: str, **overrides) -> None:
    payload = {"league_id": league_id, "faab_budget": 100, "current_faab": 100, **overrides}
    resp = await client.post("/leagues", json=payload)
    assert resp.status_code == 200


async def _generate(client, league_id: str) -> dict:
    resp = await client.post(
        "/waivers/recommendations/generate",
        json={"league_id": league_id, "week": WEEK, "season": SEASON},
    )
    assert resp.status_code == 200
    return resp.json()


@pytest.mark.anyio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_register_league_and_roster(client):
    await _register(client, "api-league", name="Test League")
    resp = await client.post("/leagues/api-league/roster", json={"entries": [{"player_id": "rb1"}]})
    assert resp.status_code == 200

    resp = await client.get("/leagues/api-league")
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Test League"
    assert [entry["player_id"] for entry in data["roster"]] == ["rb1"]

    resp = await client.post("/leagues/api-league/roster", json={"entries": [{"player_id": "ghost"}]})
    assert resp.status_code == 404
    assert (await client.get("/leagues/missing")).status_code == 404


@pytest.mark.anyio
async def test_generate_and_read_recommendations(client):
    await _register(client, "gen-league")
    data = await _generate(client, "gen-league")
    assert data["week"] == WEEK
    assert data["season"] == SEASON
    assert data["use_faab"] is True
    assert data["count"] == 4
    assert len(data["recommendations"]) == 4
    assert all(rec["recommended_bid"] >= 1 for rec in data["recommendations"])

    resp = await client.get(
        "/waivers/recommendations",
        params={"league_id": "gen-league", "week": WEEK, "season": SEASON},
    )
    assert resp.status_code == 200
    stored = resp.json()
    assert [rec["priority_rank"] for rec in stored] == [1, 2, 3, 4]

    resp = await client.get(f"/waivers/recommendations/{stored[0]['recommendation_id']}")
    assert resp.status_code == 200
    assert resp.json()["player_id"] == stored[0]["player_id"]
    assert (await client.get("/waivers/recommendations/missing")).status_code == 404


@pytest.mark.anyio
async def test_generate_unknown_league_returns_404(client):
    resp = await client.post("/waivers/recommendations/generate", json={"league_id": "nope", "week": WEEK})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_generate_rejects_out_of_range_max(client):
    resp = await client.post(
        "/waivers/recommendations/generate",
        json={"league_id": "gen-league", "max_recommendations": 50},
    )
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_calculate_bid(client):
    await _register(client, "bid-league")
    resp = await client.post(
        "/waivers/calculate-bid",
        json={"league_id": "bid-league", "player_id": "rb2", "week": WEEK, "season": SEASON, "add_trend_percentage": 25},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["median_historical_bid"] == 5
    assert 1 <= data["recommended_bid"] <= 40
    assert data["positional_need"] == 1.0


@pytest.mark.anyio
async def test_calculate_bid_errors(client):
    await _register(client, "priority-league", faab_budget=0)
    resp = await client.post("/waivers/calculate-bid", json={"league_id": "priority-league", "player_id": "rb2"})
    assert resp.status_code == 400

    resp = await client.post("/waivers/calculate-bid", json={"league_id": "bid-league", "player_id": "ghost"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Player ghost not found"

    resp = await client.post("/waivers/calculate-bid", json={"league_id": "nope", "player_id": "rb2"})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_targets_filtering(client):
    await _register(client, "target-league")
    resp = await client.get(
        "/waivers/targets",
        params={"league_id": "target-league", "week": WEEK, "season": SEASON, "position": "rb"},
    )
    assert resp.status_code == 200
    assert [target["player_id"] for target in resp.json()] == ["rb2", "rb1"]

    resp = await client.get(
        "/waivers/targets",
        params={"league_id": "target-league", "week": WEEK, "season": SEASON, "min_opportunity": 0.99},
    )
    assert resp.json() == []


@pytest.mark.anyio
async def test_positional_needs_sorted(client):
    resp = await client.get(
        "/waivers/positional-needs",
        params={"league_id": "api-league", "week": WEEK, "season": SEASON},
    )
    assert resp.status_code == 200
    needs = resp.json()
    scores = [need["need_score"] for need in needs]
    assert scores == sorted(scores, reverse=True)
    rb = next(need for need in needs if need["position"] == "RB")
    assert rb["need_score"] == 1.0


@pytest.mark.anyio
async def test_track_claim_and_history(client):
    await _register(client, "history-league")
    await _generate(client, "history-league")
    resp = await client.get(
        "/waivers/recommendations",
        params={"league_id": "history-league", "week": WEEK, "season": SEASON},
    )
    first, second = resp.json()[:2]

    resp = await client.post("/waivers/track-claim", json={"recommendation_id": first["recommendation_id"], "action": "claimed"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "claimed"
    await client.post("/waivers/track-claim", json={"recommendation_id": second["recommendation_id"], "action": "missed"})

    resp = await client.post("/waivers/track-claim", json={"recommendation_id": "missing", "action": "claimed"})
    assert resp.status_code == 404
    resp = await client.post("/waivers/track-claim", json={"recommendation_id": first["recommendation_id"], "action": "archived"})
    assert resp.status_code == 422

    resp = await client.get("/waivers/history", params={"league_id": "history-league", "season": SEASON})
    assert resp.status_code == 200
    history = resp.json()
    assert history["total"] == 2
    assert history["claimed"] == 1
    assert history["success_rate"] == 0.5


@pytest.mark.anyio
async def test_projection_sync_and_top(client):
    resp = await client.post("/projections/sync", json={"week": 6, "season": SEASON})
    assert resp.status_code == 200
    assert resp.json() == {"week": 6, "season": SEASON, "created": 4, "updated": 0}

    resp = await client.get("/projections/top", params={"week": 6, "season": SEASON, "position": "WR"})
    assert resp.status_code == 200
    assert [(row["player_id"], row["projected_points"]) for row in resp.json()] == [("wr1", 11.0)]


@pytest.mark.anyio
async def test_generate_defaults_to_configured_max(tmp_path):
    db_path = tmp_path / "capped.sqlite"
    store = LeagueStore(db_path)
    for index, points in enumerate([9.0, 12.0, 15.0]):
        add_player(store, f"rb{index}", "RB", points)
    sleeper = SleeperClient("https://sleeper.test/v1", transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    app = create_app(Settings(db_path=db_path, max_recommendations=2), store=store, sleeper=sleeper)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as capped:
        await _register(capped, "capped-league")
        data = await _generate(capped, "capped-league")
        assert data["count"] == 2

        resp = await capped.post(
            "/waivers/recommendations/generate",
            json={"league_id": "capped-league", "week": WEEK, "season": SEASON, "max_recommendations": 3},
        )
        assert resp.json()["count"] == 3


@pytest.mark.anyio
async def test_player_search_and_detail(client):
    resp = await client.get("/players/search", params={"query": "player rb"})
    assert resp.status_code == 200
    assert [player["player_id"] for player in resp.json()] == ["rb1", "rb2"]

    resp = await client.get("/players/search", params={"query": "player", "position": "te"})
    assert [player["player_id"] for player in resp.json()] == ["te1"]
    assert (await client.get("/players/search", params={"query": "p"})).status_code == 422

    resp = await client.get("/players/rb1", params={"week": WEEK, "season": SEASON})
    assert resp.status_code == 200
    data = resp.json()
    assert data["player"]["full_name"] == "Player rb1"
    assert data["projection"]["projected_points"] == 10.0
    assert (await client.get("/players/rb1")).json()["projection"] is None
    assert (await client.get("/players/ghost")).status_code == 404

    resp = await client.get("/players/rb1/projections", params={"season": SEASON})
    assert resp.status_code == 200
    assert (resp.json()[0]["week"], resp.json()[0]["projected_points"]) == (WEEK, 10.0)
    assert (await client.get("/players/ghost/projections")).status_code == 404


@pytest.mark.anyio
async def test_trending_without_sleeper_is_empty(client):
    resp = await client.get("/players/trending")
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.anyio
async def test_sync_routes(tmp_path):
    trending = [{"player_id": "4046", "count": 80}, {"player_id": "rb2", "count": "n/a"}, {"player_id": "zz", "count": 20}]
    sleeper = FakeSleeper(**{"/v1/players/nfl/trending/add": trending})
    db_path = tmp_path / "sync.sqlite"
    app = create_app(Settings(db_path=db_path), store=LeagueStore(db_path), sleeper=sleeper.client())
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as synced:
        resp = await synced.post("/players/sync")
        assert resp.status_code == 200
        assert resp.json() == {"total": 6, "created": 4, "updated": 0, "skipped": 2}

        resp = await synced.post(
            "/leagues/L9/sync",
            json={"platform_league_id": "sl1", "owner_id": "u1", "through_week": 2},
        )
        assert resp.status_code == 200
        assert resp.json()["transactions"] == 3
        resp = await synced.post("/leagues/L9/sync")
        assert resp.status_code == 200
        league = (await synced.get("/leagues/L9")).json()
        assert league["current_faab"] == 65
        assert sorted(entry["player_id"] for entry in league["roster"]) == ["4046", "rb2"]
        assert (await synced.post("/leagues/nope/sync", json={"through_week": 1})).status_code == 502

        resp = await synced.post("/stats/sync", json={"season": 2024, "week": 4})
        assert resp.json() == {"season": 2024, "week": 4, "processed": 4, "stored": 2}
        assert (await synced.post("/stats/sync", json={"season": 2024, "week": 5})).status_code == 502
        assert (await synced.post("/stats/sync", json={"season": 2024, "week": 19})).status_code == 422

        resp = await synced.get("/players/trending")
        rows = resp.json()
        assert [(row["player_id"], row["add_trend_percentage"]) for row in rows] == [("4046", 40.0), ("zz", 10.0)]
        assert rows[0]["player"]["full_name"] == "Patrick Mahomes"
        assert rows[1]["player"] is None
