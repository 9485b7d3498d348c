"""Unbounded square tiling of the latitude/longitude plane.

The grid maps continuous coordinates onto discrete cells of fixed width
``tile_width`` measured from a fixed ``origin``. Unlike a bounded model
grid, cells are not created up front: they are interned lazily the first
time they are requested and kept for the lifetime of the grid, so that
``grid[i, j] is grid[i, j]`` always holds.

Cells are enumerated in row-major order (``i`` outer, ``j`` inner, both
ascending), which keeps neighborhood queries reproducible.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from itertools import product
from numbers import Integral, Real

import numpy as np

from geocoin.discrete_space.cell import Cell, LatLng
from geocoin.exceptions import ConfigurationError
from geocoin.geocoin_logging import create_module_logger

_geocoin_logger = create_module_logger()

Bounds = tuple[tuple[float, float], tuple[float, float]]


class GeoGrid:
    """Flyweight index of square cells over the geographic plane.

    Attributes:
        tile_width (float): width and height of one cell in degrees
        neighborhood_radius (int): default radius for neighborhood queries
        origin (LatLng): the south-west corner of cell ``(0, 0)``

    Notes:
        The grid is meant to be used from a single thread. Interning a new
        cell is a read-then-insert on ``_cells``; concurrent callers would
        need to guard it per cell key.

    """

    def __init__(
        self,
        tile_width: float,
        neighborhood_radius: int = 8,
        origin: Sequence[float] = (0.0, 0.0),
    ) -> None:
        """Initialise the grid.

        Args:
            tile_width: width of a cell in degrees, must be positive
            neighborhood_radius: default radius used by get_cells_near_point
            origin: (lat, lng) of the south-west corner of cell (0, 0)
        """
        self.tile_width = tile_width
        self.neighborhood_radius = neighborhood_radius
        self.origin = LatLng(*(float(c) for c in origin))
        self._validate_parameters()
        self._origin_array = np.array(self.origin, dtype=float)
        self._cells: dict[tuple[int, int], Cell] = {}

    def _validate_parameters(self):
        if (
            not isinstance(self.tile_width, Real)
            or isinstance(self.tile_width, bool)
            or not math.isfinite(self.tile_width)
            or self.tile_width <= 0
        ):
            raise ConfigurationError("tile_width", "must be a positive finite number")
        self._validate_radius(self.neighborhood_radius)
        if not all(math.isfinite(c) for c in self.origin):
            raise ConfigurationError("origin", "must be a finite (lat, lng) pair")

    @staticmethod
    def _validate_radius(radius):
        if not isinstance(radius, Integral) or isinstance(radius, bool) or radius < 0:
            raise ConfigurationError("radius", "must be a non-negative integer")

    def get_cell(self, i: int, j: int) -> Cell:
        """Return the interned cell for ``(i, j)``, creating it on first use."""
        coordinate = (int(i), int(j))
        try:
            return self._cells[coordinate]
        except KeyError:
            cell = Cell(*coordinate)
            self._cells[coordinate] = cell
            _geocoin_logger.debug(f"interned cell {cell.key}")
            return cell

    def coordinate_to_cell(self, coordinate: Sequence[float]) -> Cell:
        """Return the cell containing the given coordinate.

        Args:
            coordinate: a (lat, lng) pair

        Returns:
            Cell: the interned cell containing the coordinate
        """
        position = np.asarray(coordinate, dtype=float)
        if position.shape != (2,):
            raise ValueError(f"Coordinate {coordinate} is not a (lat, lng) pair.")
        if not np.all(np.isfinite(position)):
            raise ValueError(f"Coordinate {coordinate} is not finite.")

        i, j = np.floor((position - self._origin_array) / self.tile_width).astype(int)
        return self.get_cell(i, j)

    def get_cell_bounds(self, cell: Cell) -> Bounds:
        """Return ``((south, west), (north, east))`` of the cell."""
        lat0, lng0 = self.origin
        width = self.tile_width
        return (
            (lat0 + cell.i * width, lng0 + cell.j * width),
            (lat0 + (cell.i + 1) * width, lng0 + (cell.j + 1) * width),
        )

    def cell_to_position(self, cell: Cell) -> LatLng:
        """Return the center of the cell."""
        (south, west), (north, east) = self.get_cell_bounds(cell)
        return LatLng((south + north) / 2, (west + east) / 2)

    def get_cells_near_point(
        self, coordinate: Sequence[float], radius: int | None = None
    ) -> list[Cell]:
        """Return the square neighborhood of cells around a coordinate.

        Args:
            coordinate: a (lat, lng) pair
            radius: half the side of the square, in cells; defaults to
                ``neighborhood_radius``

        Returns:
            list[Cell]: ``(2 * radius + 1) ** 2`` interned cells in row-major order
        """
        if radius is None:
            radius = self.neighborhood_radius
        self._validate_radius(radius)

        center = self.coordinate_to_cell(coordinate)
        offsets = range(-radius, radius + 1)
        return [
            self.get_cell(center.i + di, center.j + dj)
            for di, dj in product(offsets, offsets)
        ]

    def __getitem__(self, key: tuple[int, int]) -> Cell:  # noqa: D105
        return self.get_cell(*key)

    def __contains__(self, key: tuple[int, int]) -> bool:  # noqa: D105
        return tuple(key) in self._cells

    def __iter__(self) -> Iterator[Cell]:  # noqa: D105
        return iter(list(self._cells.values()))

    def __len__(self) -> int:  # noqa: D105
        return len(self._cells)

    def __repr__(self) -> str:  # noqa: D105
        return (
            f"GeoGrid(tile_width={self.tile_width}, "
            f"neighborhood_radius={self.neighborhood_radius}, origin={tuple(self.origin)})"
        )
