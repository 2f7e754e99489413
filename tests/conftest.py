from __future__ import annotations

import pytest

from waiveriq.persistence import LeagueStore


@pytest.fixture
def store(tmp_path) -> LeagueStore:
    return LeagueStore(tmp_path / "waiveriq.sqlite")


@pytest.fixture(scope="module")
def anyio_backend() -> str:
    return "asyncio"
