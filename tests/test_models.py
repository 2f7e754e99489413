import pytest
from pydantic import ValidationError

from waiveriq.models import League, Player, PlayerProjection, Transaction


def test_player_is_frozen():
    player = Player(player_id="p1", full_name="Test Player", position="RB", team="KC")

    assert player.player_id == "p1"

    with pytest.raises((TypeError, ValidationError)):
        player.player_id = "p2"  # type: ignore[attr-defined]


def test_projection_bounds():
    with pytest.raises(ValidationError):
        PlayerProjection(player_id="p1", week=19, season=2024, projected_points=1.0)
    with pytest.raises(ValidationError):
        PlayerProjection(player_id="p1", week=1, season=2024, projected_points=1.0, confidence=1.5)


def test_league_uses_faab_only_with_positive_budget():
    assert League(league_id="L1", faab_budget=100).uses_faab
    assert not League(league_id="L1", faab_budget=0).uses_faab
    assert not League(league_id="L1").uses_faab


def test_transaction_waiver_bid_reads_settings():
    txn = Transaction(
        transaction_id="t1",
        league_id="L1",
        transaction_type="waiver",
        week=3,
        season=2024,
        metadata={"settings": {"waiver_bid": 12}},
    )
    assert txn.waiver_bid == 12.0

    missing = txn.model_copy(update={"metadata": {"settings": {"waiver_bid": "12"}}})
    assert missing.waiver_bid is None
    assert txn.model_copy(update={"metadata": {}}).waiver_bid is None
