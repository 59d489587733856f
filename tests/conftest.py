"""Pytest configuration and fixtures for Tippy tests."""
import asyncio
from datetime import datetime, timezone

import pytest

from tippy.core.store import Store
from tippy.models import Team


# Fixed "now" for store tests: 2024-06-01 12:00 UTC
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def future_time():
    """Kick-off after NOW"""
    return "2024 06 14 21:00"


@pytest.fixture
def past_time():
    """Kick-off before NOW"""
    return "2024 05 01 18:00"


@pytest.fixture
def store():
    """In-memory store with a frozen clock"""
    return Store(clock=lambda: NOW)


@pytest.fixture
def teams():
    return [
        Team(name="Germany", iso="GER", flag="🇩🇪"),
        Team(name="Scotland", iso="SCO", flag="🏴"),
        Team(name="France", iso="FRA", flag="🇫🇷"),
    ]


@pytest.fixture
def seeded_store(store, teams, future_time, past_time):
    """
    Store with three teams, an open game OPEN (GER vs SCO) and a started
    game DONE (FRA vs GER)
    """
    async def seed():
        async with store.session() as s:
            for team in teams:
                s.add_team(team)
            s.add_game("Opening match", "OPEN", "GER", "SCO", future_time)
            s.add_game("Group A", "DONE", "FRA", "GER", past_time)

    asyncio.run(seed())
    return store
