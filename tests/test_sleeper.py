import httpx
import pytest

from waiveriq.ingest import SleeperClient, rostered_player_ids, trend_percentages


def _client(handler) -> SleeperClient:
    return SleeperClient("https://sleeper.test/v1", transport=httpx.MockTransport(handler))


@pytest.mark.anyio
async def test_get_rosters_hits_league_endpoint():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=[{"roster_id": 1, "players": ["1", "2"]}])

    rosters = await _client(handler).get_rosters("123")
    assert seen == ["/v1/league/123/rosters"]
    assert rostered_player_ids(rosters) == {"1", "2"}


@pytest.mark.anyio
async def test_trending_players_passes_query():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/players/nfl/trending/add"
        assert request.url.params["lookback_hours"] == "24"
        assert request.url.params["limit"] == "200"
        return httpx.Response(200, json=[{"player_id": "9", "count": 50}])

    assert await _client(handler).get_trending_players() == [{"player_id": "9", "count": 50}]


@pytest.mark.anyio
async def test_error_status_returns_none():
    client = _client(lambda request: httpx.Response(500))
    assert await client.get_league("123") is None


@pytest.mark.anyio
async def test_transport_error_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    assert await _client(handler).get_transactions("123", 4) is None


@pytest.mark.anyio
async def test_invalid_json_returns_none():
    client = _client(lambda request: httpx.Response(200, content=b"not json"))
    assert await client.get_rosters("123") is None


def test_rostered_player_ids_skips_empty_rosters():
    assert rostered_player_ids(None) == set()
    assert rostered_player_ids([{"players": None}, {"players": [7]}]) == {"7"}


def test_trend_percentages_scale_to_top_player():
    trends = trend_percentages(
        [{"player_id": "a", "count": 200}, {"player_id": "b", "count": 50}, {"count": 10}]
    )
    assert trends == {"a": 40.0, "b": 10.0}
    assert trend_percentages([]) == {}
    assert trend_percentages([{"player_id": "a", "count": 0}]) == {"a": 0.0}


def test_rostered_player_ids_skips_malformed_payloads(caplog):
    assert rostered_player_ids({"message": "league not found"}) == set()
    rosters = ["oops", {"roster_id": 2, "players": "rb1"}, {"roster_id": 3, "players": ["wr1", None]}]
    assert rostered_player_ids(rosters) == {"wr1"}
    assert "malformed Sleeper roster entry" in caplog.text
    assert "non-list players" in caplog.text


def test_trend_percentages_skip_unparseable_counts(caplog):
    trending = [
        {"player_id": "rb2", "count": "n/a"},
        {"player_id": "wr1", "count": 30},
        {"player_id": "te1", "count": "15"},
        "garbage",
    ]
    assert trend_percentages(trending) == {"wr1": 40.0, "te1": 20.0}
    assert "Skipping trending player rb2" in caplog.text
    assert trend_percentages({"message": "rate limited"}) == {}
