"""The player's inventory and coin transfers between it and caches.

The inventory is an ordered, bounded list of canonical coin identifiers.
Duplicate identifiers are rejected: a coin is a unique item and can only be
in one place at a time.

``withdraw`` and ``deposit`` move a single coin between a cache and the
inventory. Either the coin moves, or neither side changes.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from geocoin.exceptions import CoinDecodeError
from geocoin.geocache import Coin, Geocache, format_coin, parse_coin
from geocoin.geocoin_logging import create_module_logger

__all__ = ["Inventory", "deposit", "withdraw"]

_geocoin_logger = create_module_logger()


class Inventory:
    """Bounded ordered collection of coin identifiers.

    Attributes:
        capacity (int | None): the most coins the inventory holds, None for no limit

    """

    def __init__(self, capacity: int | None = 10, items: Iterable[str] = ()):
        """Create an inventory.

        Args:
            capacity: maximum number of coins, None for unbounded
            items: initial coin identifiers, added in order; items beyond
                capacity or repeated identifiers are dropped with a warning
        """
        if capacity is not None and capacity < 0:
            raise ValueError("Capacity must be a non-negative integer or None.")
        self.capacity = capacity
        self._items: list[str] = []
        for item in items:
            if not self.add(item):
                _geocoin_logger.warning(f"dropped coin {item} while loading inventory")

    @property
    def is_full(self) -> bool:
        """Whether the inventory is at capacity."""
        return self.capacity is not None and len(self._items) >= self.capacity

    @property
    def is_empty(self) -> bool:
        """Whether the inventory holds no coins."""
        return not self._items

    def add(self, coin_id: str) -> bool:
        """Append a coin, returning whether it was accepted.

        A full inventory or an identifier already held is a rejection, not an error.
        """
        if self.is_full:
            _geocoin_logger.info(f"inventory full, cannot add {coin_id}")
            return False
        if coin_id in self._items:
            _geocoin_logger.warning(f"coin {coin_id} is already in the inventory")
            return False
        self._items.append(coin_id)
        return True

    def remove(self, coin_id: str) -> bool:
        """Remove the coin if present, returning whether anything was removed."""
        try:
            self._items.remove(coin_id)
        except ValueError:
            return False
        return True

    def take_one(self) -> str | None:
        """Remove and return the most recently added coin, or None if empty."""
        if not self._items:
            return None
        return self._items.pop()

    def peek(self) -> str | None:
        """Return the most recently added coin without removing it."""
        return self._items[-1] if self._items else None

    def clear(self) -> None:
        """Drop every coin."""
        self._items.clear()

    def to_list(self) -> list[str]:
        """Return a copy of the coin identifiers, oldest first."""
        return list(self._items)

    def __contains__(self, coin_id) -> bool:  # noqa: D105
        return coin_id in self._items

    def __iter__(self) -> Iterator[str]:  # noqa: D105
        return iter(list(self._items))

    def __len__(self) -> int:  # noqa: D105
        return len(self._items)

    def __repr__(self) -> str:  # noqa: D105
        return f"Inventory(capacity={self.capacity}, items={self._items})"


def withdraw(
    cache: Geocache, inventory: Inventory, coin_id: str | None = None
) -> str | None:
    """Move one coin from the cache into the inventory.

    Args:
        cache: the cache to take from
        inventory: the inventory to put into
        coin_id: the coin to take; defaults to the last coin in the cache

    Returns:
        The identifier of the moved coin, or None if nothing moved.

    """
    if not cache.coins:
        return None

    if coin_id is None:
        index = len(cache.coins) - 1
    else:
        ids = cache.coin_ids
        if coin_id not in ids:
            _geocoin_logger.warning(f"coin {coin_id} is not in cache {cache.key}")
            return None
        index = ids.index(coin_id)

    coin = cache.coins.pop(index)
    moved = format_coin(coin)
    if not inventory.add(moved):
        cache.coins.insert(index, coin)
        return None
    return moved


def deposit(
    inventory: Inventory, cache: Geocache, coin_id: str | None = None
) -> Coin | None:
    """Move one coin from the inventory into the cache.

    Args:
        inventory: the inventory to take from
        cache: the cache to put into
        coin_id: the coin to deposit; defaults to the most recently added one

    Returns:
        The moved coin, or None if nothing moved.

    """
    if coin_id is None:
        coin_id = inventory.peek()
        if coin_id is None:
            return None
    elif coin_id not in inventory:
        return None

    # validate before touching either side
    try:
        coin = parse_coin(coin_id)
    except CoinDecodeError as e:
        _geocoin_logger.warning(e.original_message)
        return None
    if cache.has_coin(coin):
        _geocoin_logger.warning(f"coin {coin_id} is already in cache {cache.key}")
        return None

    inventory.remove(coin_id)
    cache.coins.append(coin)
    return coin
