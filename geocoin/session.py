"""The game session for Geocoin.

Core Objects: GameSession
"""

from __future__ import annotations

import json
import math
from collections.abc import Callable

from geocoin.cache_store import CacheStore
from geocoin.discrete_space import Cell, LatLng
from geocoin.exceptions import NoCacheError
from geocoin.geocache import Coin, Geocache
from geocoin.geocoin_logging import create_module_logger, method_logger
from geocoin.inventory import Inventory, deposit, withdraw
from geocoin.luck import luck as default_luck
from geocoin.scenario import GameScenario
from geocoin.storage import KeyValueStore, MemoryStore

_geocoin_logger = create_module_logger()

INVENTORY_KEY = "inventory"
LOCATION_KEY = "playerLocation"
HISTORY_KEY = "movementHistory"
CACHE_KEY = "cacheData"

DIRECTIONS: dict[str, tuple[int, int]] = {
    "north": (0, 1),
    "south": (0, -1),
    "east": (1, 0),
    "west": (-1, 0),
}


class GameSession:
    """All mutable state of one player's game.

    A session owns the grid, the cache store, the inventory, the player's
    location and movement history. UIs drive it through the methods below and
    render what ``visible_caches`` returns.

    Attributes:
        scenario: the constants of this game
        grid: the cell index
        generator: the cache content generator
        caches: the snapshot store of caches
        inventory: the player's coins
        player_location: the player's current coordinate
        movement_history: every coordinate the player has moved to, in order
        notices: user-facing messages produced by the last operations

    """

    @method_logger(__name__)
    def __init__(
        self,
        scenario: GameScenario | None = None,
        storage: KeyValueStore | None = None,
        luck: Callable[[str], float] = default_luck,
    ) -> None:
        """Create a session and load any state found in storage.

        Args:
            scenario: game constants, defaults to GameScenario()
            storage: durable key-value store, defaults to an in-memory one
            luck: pseudo-random oracle for cache generation
        """
        if scenario is None:
            scenario = GameScenario()
        scenario.validate()
        scenario.session = self
        self.scenario = scenario
        self.storage = storage if storage is not None else MemoryStore()

        self.grid = scenario.build_grid()
        self.generator = scenario.build_generator(luck=luck)
        self.caches = CacheStore(self.generator, self.storage, storage_key=CACHE_KEY)
        self.inventory = Inventory(capacity=scenario.max_inventory_size)
        self.player_location: LatLng = scenario.start_location
        self.movement_history: list[LatLng] = []
        self.notices: list[str] = []

        self.load()

    def notify(self, message: str) -> None:
        """Record a user-facing notice."""
        _geocoin_logger.warning(message)
        self.notices.append(message)

    def load(self) -> None:
        """Restore location, inventory, history and caches from storage."""
        location = self._load_json(LOCATION_KEY)
        if location is not None:
            try:
                self.player_location = LatLng.from_dict(location)
            except (KeyError, TypeError, ValueError):
                _geocoin_logger.warning(f"ignoring malformed player location {location!r}")

        items = self._load_json(INVENTORY_KEY)
        self.inventory = Inventory(
            capacity=self.scenario.max_inventory_size,
            items=[item for item in items if isinstance(item, str)]
            if isinstance(items, list)
            else (),
        )

        history = self._load_json(HISTORY_KEY)
        self.movement_history = []
        if isinstance(history, list):
            for point in history:
                try:
                    self.movement_history.append(LatLng.from_dict(point))
                except (KeyError, TypeError, ValueError):
                    _geocoin_logger.warning(f"skipping malformed history point {point!r}")

        self.caches.load()

    def _load_json(self, key: str):
        raw = self.storage.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            _geocoin_logger.warning(f"ignoring unreadable '{key}' state: {e}")
            return None

    def save(self) -> None:
        """Persist location, inventory, history and caches."""
        self.storage.set(LOCATION_KEY, json.dumps(self.player_location.to_dict()))
        self.storage.set(INVENTORY_KEY, json.dumps(self.inventory.to_list()))
        self.storage.set(
            HISTORY_KEY, json.dumps([point.to_dict() for point in self.movement_history])
        )
        self.caches.flush()

    @property
    def player_cell(self) -> Cell:
        """The cell the player stands in."""
        return self.grid.coordinate_to_cell(self.player_location)

    def move_player(self, dx: int, dy: int) -> LatLng:
        """Move the player by whole tiles; ``dy`` is north, ``dx`` is east.

        The player lands on the center of the target cell, so every unit
        step crosses exactly one cell boundary.
        """
        width = self.grid.tile_width
        center = self.grid.cell_to_position(self.player_cell)
        return self.update_location(center.lat + dy * width, center.lng + dx * width)

    def update_location(self, lat: float, lng: float) -> LatLng:
        """Place the player at a coordinate, e.g. from a geolocation fix.

        Raises:
            ValueError: if either coordinate is not a finite number

        """
        lat, lng = float(lat), float(lng)
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError(f"Location ({lat}, {lng}) is not finite.")
        self.player_location = LatLng(lat, lng)
        self.movement_history.append(self.player_location)
        _geocoin_logger.debug(f"player moved to {self.player_location}")
        self.save()
        return self.player_location

    def visible_cells(self) -> list[Cell]:
        """Return the neighborhood of cells around the player."""
        return self.grid.get_cells_near_point(self.player_location)

    def visible_caches(self) -> list[tuple[Cell, Geocache]]:
        """Return the caches in the player's neighborhood, in cell order.

        Cells without a cache are skipped.
        """
        visible = []
        for cell in self.visible_cells():
            try:
                visible.append((cell, self.caches.get(cell)))
            except NoCacheError as e:
                _geocoin_logger.debug(e.original_message)
        return visible

    def cache_at(self, cell: Cell) -> Geocache | None:
        """Return the cache of the cell, or None if it has none."""
        return self.caches.find(cell)

    def in_reach(self, cell: Cell) -> bool:
        """Whether the cell lies in the player's neighborhood."""
        here = self.player_cell
        distance = max(abs(cell.i - here.i), abs(cell.j - here.j))
        return distance <= self.grid.neighborhood_radius

    def _reachable_cache(self, cell: Cell) -> Geocache | None:
        if not self.in_reach(cell):
            self.notify(f"Cache {cell.key} is out of reach.")
            return None
        cache = self.cache_at(cell)
        if cache is None:
            self.notify(f"No cache exists at {cell.key}.")
        return cache

    def collect_coin(self, cell: Cell, coin_id: str | None = None) -> str | None:
        """Move a coin from the cell's cache into the inventory.

        Only caches in the player's neighborhood can be used.
        Returns the collected coin id, or None if nothing moved.
        """
        cache = self._reachable_cache(cell)
        if cache is None:
            return None
        if not cache.coins:
            self.notify(f"Cache {cell.key} is empty.")
            return None
        if self.inventory.is_full:
            self.notify("Inventory full!")
            return None

        moved = withdraw(cache, self.inventory, coin_id)
        if moved is None:
            self.notify(f"Could not collect {coin_id or 'a coin'} from {cell.key}.")
            return None
        self.caches.save(cache)
        self.save()
        return moved

    def deposit_coin(self, cell: Cell, coin_id: str | None = None) -> Coin | None:
        """Move a coin from the inventory into the cell's cache.

        Only caches in the player's neighborhood can be used.
        Returns the deposited coin, or None if nothing moved.
        """
        cache = self._reachable_cache(cell)
        if cache is None:
            return None
        if self.inventory.is_empty:
            self.notify("Inventory is empty.")
            return None

        moved = deposit(self.inventory, cache, coin_id)
        if moved is None:
            self.notify(f"Could not deposit {coin_id or 'a coin'} into {cell.key}.")
            return None
        self.caches.save(cache)
        self.save()
        return moved

    def status(self) -> str:
        """Return the status line shown to the player."""
        return f"Coins: {len(self.inventory)}"

    @method_logger(__name__)
    def reset(self) -> None:
        """Erase all game state and put the player back at the start."""
        self.inventory.clear()
        self.caches.reset()
        self.movement_history.clear()
        self.notices.clear()
        self.player_location = self.scenario.start_location
        for key in (LOCATION_KEY, INVENTORY_KEY, HISTORY_KEY):
            self.storage.remove(key)
