"""Discrete geographic space for Geocoin.

Cells tile the latitude/longitude plane in fixed-width squares. The grid is
unbounded and interns cells lazily, so each ``(i, j)`` pair has exactly one
Cell object for the lifetime of the grid.
"""

from geocoin.discrete_space.cell import Cell, LatLng
from geocoin.discrete_space.grid import GeoGrid

__all__ = [
    "Cell",
    "GeoGrid",
    "LatLng",
]
