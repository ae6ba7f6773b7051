from __future__ import annotations

from datetime import datetime

import pytest

from tests.fakes import EPOCH, FakeEphemeris, sky


@pytest.fixture
def epoch() -> datetime:
    return EPOCH


@pytest.fixture
def fake_sky() -> FakeEphemeris:
    return FakeEphemeris(sky(), ascendant_longitude=187.0)


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("SACREDSTAR_HOME", str(tmp_path / "home"))
