"""Shared pytest fixtures and markers for all tests."""

import random

import pytest

TEAM_ONE = ["Jett", "Sova", "Omen", "Killjoy", "KAY/O"]
TEAM_TWO = ["Raze", "Fade", "Viper", "Cypher", "Neon"]


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


def make_team(names, map_name=None):
    """Build a complete TeamComposition from names."""
    from valsim.models.team import TeamComposition

    team = TeamComposition(map_name)
    for name in names:
        assert team.add_agent(name).ok
    return team


@pytest.fixture
def rng():
    """Seeded random generator."""
    return random.Random(1234)


@pytest.fixture
def team_one():
    """Complete team 1 composition (no map balancing)."""
    return make_team(TEAM_ONE)


@pytest.fixture
def team_two():
    """Complete team 2 composition (no map balancing)."""
    return make_team(TEAM_TWO)


@pytest.fixture
def batch_request():
    """Small seeded batch request."""
    from valsim.simulation.batch_runner import BatchRequest

    return BatchRequest(
        team1=TEAM_ONE,
        team2=TEAM_TWO,
        map_name="bind",
        match_count=40,
        seed=99,
        workers=4,
    )


@pytest.fixture
def team_factory():
    """make_team() as a fixture, for tests that need custom compositions."""
    return make_team
