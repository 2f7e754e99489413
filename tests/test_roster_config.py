import pytest

from waiveriq.config import STANDARD_REQUIREMENTS, starter_requirements


def test_empty_settings_use_standard_table():
    assert starter_requirements(None) is STANDARD_REQUIREMENTS
    assert starter_requirements({}) is STANDARD_REQUIREMENTS


def test_mapping_overrides_only_named_positions():
    requirements = starter_requirements({"rb": 3, "D/ST": 2, "bench": 6})
    assert requirements.required("RB") == 3
    assert requirements.required("DEF") == 2
    assert requirements.required("WR") == 2


def test_slot_list_counts_starters_and_zeroes_missing_positions():
    requirements = starter_requirements(["QB", "RB", "RB", "WR", "FLEX", "BN", "BN", "IR"])
    assert requirements.required("RB") == 2
    assert requirements.required("WR") == 1
    assert requirements.required("TE") == 0
    assert requirements.required("K") == 0
    assert requirements.FLEX == 1


def test_nested_sleeper_roster_positions():
    requirements = starter_requirements({"roster_positions": ["QB", "QB", "RB", "DEF", "K"]})
    assert requirements.required("QB") == 2
    assert requirements.required("PK") == 1


def test_unknown_position_requires_nobody():
    assert STANDARD_REQUIREMENTS.required("LB") == 0


def test_invalid_settings_raise():
    with pytest.raises(TypeError):
        starter_requirements("QB,RB")
    with pytest.raises(ValueError):
        starter_requirements({"RB": "two"})
    with pytest.raises(ValueError):
        starter_requirements({"RB": -1})
