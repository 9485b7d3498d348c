"""Shared fixtures for the Geocoin tests."""

import pytest

from geocoin import CacheGenerator, GeoGrid, MemoryStore


class FakeLuck:
    """Oracle returning fixed values per key, and a default for the rest.

    Records every key it is asked for, so tests can check how often the
    oracle was consulted.
    """

    def __init__(self, values=None, default=0.99):
        self.values = dict(values or {})
        self.default = default
        self.calls = []

    def __call__(self, key):
        self.calls.append(key)
        return self.values.get(key, self.default)


@pytest.fixture
def make_luck():
    """Factory for FakeLuck oracles."""
    return FakeLuck


@pytest.fixture
def fake_luck():
    """Cell 0,0 spawns a cache of 2 coins (min 1, max 5); every other cell is empty."""
    return FakeLuck({"0,0": 0.05, "0,0_coins": 0.3})


@pytest.fixture
def generator(fake_luck):
    return CacheGenerator(spawn_probability=0.1, min_coins=1, max_coins=5, luck=fake_luck)


@pytest.fixture
def grid():
    return GeoGrid(1e-4, neighborhood_radius=2)


@pytest.fixture
def storage():
    return MemoryStore()
