"""Game configuration as a Scenario mapping."""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import MutableMapping
from functools import partial
from itertools import count
from typing import TYPE_CHECKING, Any, ClassVar

from geocoin.discrete_space import GeoGrid, LatLng
from geocoin.exceptions import ConfigurationError, ScenarioLockedError
from geocoin.geocache import CacheGenerator

if TYPE_CHECKING:
    from geocoin.session import GameSession

OAKES_CLASSROOM = LatLng(36.98949379578401, -122.06277128548504)

DEFAULTS: dict[str, Any] = {
    "start_location": OAKES_CLASSROOM,
    "grid_origin": LatLng(0.0, 0.0),
    "tile_width": 1e-4,
    "neighborhood_radius": 8,
    "spawn_probability": 0.1,
    "min_coins": 1,
    "max_coins": 5,
    "max_inventory_size": 10,
}


class GameScenario(MutableMapping):
    """The tunable constants of a game.

    Attributes:
        session : the session this scenario is bound to, if any
        scenario_id : a unique identifier for this scenario, auto-generated, starting from 0

    Notes:
        in essence, this is a mutable mapping with protection: once a
        session has been built from it, it can no longer be changed, since
        the grid and generator were derived from its values.

    """

    _ids: ClassVar[defaultdict] = defaultdict(partial(count, 0))

    __slots__ = ("__dict__", "scenario_id", "session")

    def __init__(self, **kwargs):
        """Initialize a scenario.

        Args:
            kwargs: values overriding DEFAULTS; unknown keys are rejected
        """
        unknown = set(kwargs) - set(DEFAULTS)
        if unknown:
            raise ConfigurationError(
                ", ".join(sorted(unknown)), "unknown scenario parameter"
            )
        self.session: GameSession | None = None
        self.scenario_id: int = next(self._ids[self.__class__])
        self.__dict__.update(DEFAULTS)
        self.__dict__.update(kwargs)
        for name in ("start_location", "grid_origin"):
            self.__dict__[name] = LatLng(*self.__dict__[name])

    def validate(self) -> None:
        """Check all values by building the objects derived from them.

        Raises:
            ConfigurationError: if any value is invalid

        """
        self.build_grid()
        self.build_generator()
        if not all(math.isfinite(c) for c in self.start_location):
            raise ConfigurationError("start_location", "must be a finite (lat, lng) pair")
        size = self.max_inventory_size
        if size is not None and (
            not isinstance(size, int) or isinstance(size, bool) or size < 0
        ):
            raise ConfigurationError(
                "max_inventory_size", "must be a non-negative integer or None"
            )

    def build_grid(self) -> GeoGrid:
        """Return the grid described by this scenario."""
        return GeoGrid(
            self.tile_width,
            neighborhood_radius=self.neighborhood_radius,
            origin=self.grid_origin,
        )

    def build_generator(self, **kwargs) -> CacheGenerator:
        """Return the cache generator described by this scenario."""
        return CacheGenerator(
            spawn_probability=self.spawn_probability,
            min_coins=self.min_coins,
            max_coins=self.max_coins,
            **kwargs,
        )

    def __setitem__(self, key, value):  # noqa: D105
        if self.session is not None:
            raise ScenarioLockedError(
                f"Cannot change '{key}' of a scenario bound to a session"
            )
        if key not in DEFAULTS:
            raise ConfigurationError(key, "unknown scenario parameter")
        self.__dict__[key] = value

    def __getitem__(self, key):  # noqa: D105
        return self.__dict__[key]

    def __delitem__(self, key):  # noqa: D105
        raise ScenarioLockedError(f"Cannot delete scenario parameter '{key}'")

    def __iter__(self):  # noqa: D105
        return iter(self.__dict__)

    def __len__(self):  # noqa: D105
        return len(self.__dict__)

    def __setattr__(self, key, value):  # noqa: D105
        if key not in self.__slots__:
            self.__setitem__(key, value)
        else:
            super().__setattr__(key, value)

    def to_dict(self):
        """Return a JSON-compatible dict of the scenario values."""
        content = {}
        for key, value in self.__dict__.items():
            content[key] = list(value) if isinstance(value, tuple) else value
        content["scenario_id"] = self.scenario_id
        return content
