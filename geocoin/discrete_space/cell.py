"""Cells and coordinates of the geographic grid.

A Cell is the discrete identity of one grid square. Cells are immutable value
objects; the grid interns them so that the same ``(i, j)`` always maps onto
the same object and identity comparison can stand in for equality.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple


class LatLng(NamedTuple):
    """A continuous geographic coordinate."""

    lat: float
    lng: float

    @classmethod
    def from_dict(cls, data: dict) -> LatLng:
        """Build a coordinate from a ``{"lat": .., "lng": ..}`` mapping."""
        lat, lng = float(data["lat"]), float(data["lng"])
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError(f"Coordinate ({lat}, {lng}) is not finite.")
        return cls(lat, lng)

    def to_dict(self) -> dict[str, float]:
        """Return the JSON-compatible form of this coordinate."""
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True, slots=True)
class Cell:
    """A discrete grid square identified by its integer ``(i, j)`` pair.

    Attributes:
        i: row index, counted along latitude
        j: column index, counted along longitude

    """

    i: int
    j: int

    @property
    def coordinate(self) -> tuple[int, int]:
        """The ``(i, j)`` tuple of this cell."""
        return self.i, self.j

    @property
    def key(self) -> str:
        """The ``"i,j"`` string that keys this cell in persisted state."""
        return f"{self.i},{self.j}"

    def __repr__(self) -> str:  # noqa: D105
        return f"Cell({self.i}, {self.j})"
