"""Shared pytest fixtures for sns2ps tests."""

from pathlib import Path
from typing import Any

import pytest

from sns2ps.config import Settings
from sns2ps.models import Match, Squad
from sns2ps.pipeline import RegistrationPipeline
from sns2ps.sources.local_source import LocalSource


@pytest.fixture
def match() -> Match:
    """A match with a space in its name."""
    return Match(id="4242", name="Spring Classic")


@pytest.fixture
def squads() -> list[Squad]:
    return [
        Squad(id=1, name="Squad 1", number=1, competitors=(10, 11)),
        Squad(id=2, name="Squad 2", number=2, competitors=(12,)),
    ]


@pytest.fixture
def competitor_records() -> list[dict[str, Any]]:
    """Raw competitor records as the API returns them."""
    return [
        {
            "id": 10,
            "first_name": "Alice",
            "last_name": "Archer",
            "email": "alice@example.com",
            "member_number": "GBR-1",
            "category": "L",
            "division": 3,
            "region": "GBR",
            "power_factor": "MINOR",
            "classification": "B",
            "squad": 1,
        },
        {
            "id": 11,
            "first_name": "Bob",
            "last_name": "Baker",
            "email": "bob@example.com",
            "member_number": "SWE-2",
            "category": "-",
            "division": 1,
            "region": "SWE",
            "power_factor": "MAJOR",
            "classification": "A",
            "squad": 1,
        },
        {
            "id": 12,
            "first_name": "Cleo",
            "last_name": "Cole",
            "email": "cleo@example.com",
            "member_number": "DEU-3",
            "category": "S",
            "division": 2,
            "region": "DEU",
            "power_factor": "MAJOR",
            "classification": "M",
            "squad": 2,
        },
    ]


@pytest.fixture
def dummy_settings() -> Settings:
    return Settings(live_mode=False)


@pytest.fixture
def local_pipeline(dummy_settings: Settings) -> RegistrationPipeline:
    """Pipeline backed by the bundled fixture data."""
    return RegistrationPipeline(LocalSource(), dummy_settings.base_url)


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    """Provides an empty directory for custom fixture files."""
    data_dir = tmp_path / "fixtures"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir
