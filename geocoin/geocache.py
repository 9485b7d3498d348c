"""Coins, caches and the snapshots they persist as.

A Geocache is a plain mutable record ``{i, j, coins}``. Its durable form is a
snapshot (memento): JSON text produced by ``to_memento`` and validated by
``from_memento``. Restoring a snapshot and serializing it again gives back
the same text.

The CacheGenerator decides, from the luck oracle alone, whether a cell holds
a cache and which coins it starts with.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from numbers import Integral, Real

from geocoin.discrete_space import Cell
from geocoin.exceptions import CoinDecodeError, ConfigurationError, CorruptSnapshotError
from geocoin.luck import luck as default_luck

__all__ = [
    "CacheGenerator",
    "Coin",
    "Geocache",
    "format_coin",
    "from_memento",
    "parse_coin",
    "to_memento",
]

_COIN_PATTERN = re.compile(r"^(-?\d+):(-?\d+)#(\d+)$")


@dataclass(frozen=True, slots=True)
class Coin:
    """A collectible coin, minted in cell ``(i, j)`` with a per-cell serial."""

    i: int
    j: int
    serial: int

    @property
    def id(self) -> str:
        """The canonical ``"i:j#serial"`` identifier."""
        return format_coin(self)


@dataclass(slots=True)
class Geocache:
    """The mutable coin contents of one cell."""

    i: int
    j: int
    coins: list[Coin] = field(default_factory=list)

    @property
    def key(self) -> str:
        """The ``"i,j"`` key of the cell holding this cache."""
        return f"{self.i},{self.j}"

    @property
    def coin_ids(self) -> list[str]:
        """Canonical identifiers of the coins, in cache order."""
        return [format_coin(coin) for coin in self.coins]

    def has_coin(self, coin: Coin) -> bool:
        """Return whether a coin with the same identity is in the cache."""
        return coin in self.coins


def format_coin(coin: Coin, max_serial_digits: int | None = None) -> str:
    """Return the canonical ``"i:j#serial"`` string of a coin.

    Args:
        coin: the coin to format
        max_serial_digits: truncate the serial to this many digits; for
            display only, a truncated string no longer identifies the coin

    """
    serial = str(coin.serial)
    if max_serial_digits is not None:
        serial = serial[:max_serial_digits]
    return f"{coin.i}:{coin.j}#{serial}"


def parse_coin(text: str) -> Coin:
    """Decode a canonical coin identifier.

    Raises:
        CoinDecodeError: if text is not of the form ``"i:j#serial"``

    """
    if not isinstance(text, str):
        raise CoinDecodeError(text)
    match = _COIN_PATTERN.match(text.strip())
    if match is None:
        raise CoinDecodeError(text)
    i, j, serial = (int(group) for group in match.groups())
    return Coin(i, j, serial)


def to_memento(cache: Geocache) -> str:
    """Serialize a cache into its snapshot text."""
    return json.dumps(
        {
            "i": cache.i,
            "j": cache.j,
            "coins": [
                {"i": coin.i, "j": coin.j, "serial": coin.serial}
                for coin in cache.coins
            ],
        }
    )


def _require_int(record: dict, name: str, key: str) -> int:
    value = record.get(name)
    if not isinstance(value, int) or isinstance(value, bool):
        raise CorruptSnapshotError(key, f"field '{name}' must be an integer")
    return value


def from_memento(memento: str, key: str | None = None) -> Geocache:
    """Restore a cache from its snapshot text.

    Args:
        memento: snapshot text produced by ``to_memento``
        key: the cell key the snapshot is stored under; when given, the
            snapshot must describe that cell

    Raises:
        CorruptSnapshotError: if the text does not decode into ``{i, j, coins}``

    """
    label = key if key is not None else "?"
    try:
        state = json.loads(memento)
    except (TypeError, ValueError) as e:
        raise CorruptSnapshotError(label, f"not valid JSON ({e})") from e

    if not isinstance(state, dict):
        raise CorruptSnapshotError(label, "snapshot is not an object")
    i = _require_int(state, "i", label)
    j = _require_int(state, "j", label)
    if key is not None and key != f"{i},{j}":
        raise CorruptSnapshotError(label, f"snapshot describes cell {i},{j}")

    coins = state.get("coins")
    if not isinstance(coins, list):
        raise CorruptSnapshotError(label, "field 'coins' must be a list")

    restored = []
    for record in coins:
        if not isinstance(record, dict):
            raise CorruptSnapshotError(label, "coin entries must be objects")
        restored.append(
            Coin(
                _require_int(record, "i", label),
                _require_int(record, "j", label),
                _require_int(record, "serial", label),
            )
        )
    return Geocache(i, j, restored)


class CacheGenerator:
    """Deterministic spawn decisions and initial coins per cell.

    Attributes:
        spawn_probability (float): chance that a cell holds a cache
        min_coins (int): fewest coins a new cache starts with
        max_coins (int): most coins a new cache starts with
        luck (Callable[[str], float]): the oracle all decisions derive from

    """

    def __init__(
        self,
        spawn_probability: float = 0.1,
        min_coins: int = 1,
        max_coins: int = 5,
        luck: Callable[[str], float] = default_luck,
    ) -> None:
        """Create a generator.

        Args:
            spawn_probability: chance in [0, 1] that a cell holds a cache
            min_coins: lower bound (inclusive) on the initial coin count
            max_coins: upper bound (inclusive) on the initial coin count
            luck: pseudo-random oracle mapping a string key to [0, 1)
        """
        if (
            not isinstance(spawn_probability, Real)
            or not math.isfinite(spawn_probability)
            or not 0 <= spawn_probability <= 1
        ):
            raise ConfigurationError("spawn_probability", "must be within [0, 1]")
        if not isinstance(min_coins, Integral) or min_coins < 0:
            raise ConfigurationError("min_coins", "must be a non-negative integer")
        if not isinstance(max_coins, Integral) or max_coins < min_coins:
            raise ConfigurationError("max_coins", "must be an integer >= min_coins")

        self.spawn_probability = spawn_probability
        self.min_coins = int(min_coins)
        self.max_coins = int(max_coins)
        self.luck = luck

    def should_spawn(self, cell: Cell) -> bool:
        """Return whether the cell holds a cache."""
        return self.luck(cell.key) < self.spawn_probability

    def coin_count(self, cell: Cell) -> int:
        """Return how many coins a new cache in the cell starts with."""
        span = self.max_coins - self.min_coins + 1
        count = math.floor(self.luck(f"{cell.key}_coins") * span) + self.min_coins
        # an oracle value of exactly 1.0 would give max_coins + 1
        return min(count, self.max_coins)

    def generate_coins(self, cell: Cell) -> list[Coin]:
        """Return the initial coins of a cache in the cell, serials 0..n-1."""
        return [Coin(cell.i, cell.j, serial) for serial in range(self.coin_count(cell))]

    def create_cache(self, cell: Cell) -> Geocache | None:
        """Return a freshly spawned cache for the cell, or None if it has none."""
        if not self.should_spawn(cell):
            return None
        return Geocache(cell.i, cell.j, self.generate_coins(cell))
