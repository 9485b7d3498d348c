"""Geocoin: a location-based coin collection game.

Core Objects: GameSession, GeoGrid, CacheStore, Inventory.
"""

__version__ = "0.1.0"

from geocoin.cache_store import CacheStore
from geocoin.discrete_space import Cell, GeoGrid, LatLng
from geocoin.geocache import (
    CacheGenerator,
    Coin,
    Geocache,
    format_coin,
    from_memento,
    parse_coin,
    to_memento,
)
from geocoin.inventory import Inventory, deposit, withdraw
from geocoin.luck import luck
from geocoin.scenario import GameScenario
from geocoin.session import GameSession
from geocoin.storage import JSONFileStore, KeyValueStore, MemoryStore

__all__ = [
    "CacheGenerator",
    "CacheStore",
    "Cell",
    "Coin",
    "GameScenario",
    "GameSession",
    "GeoGrid",
    "Geocache",
    "Inventory",
    "JSONFileStore",
    "KeyValueStore",
    "LatLng",
    "MemoryStore",
    "deposit",
    "format_coin",
    "from_memento",
    "luck",
    "parse_coin",
    "to_memento",
    "withdraw",
]
