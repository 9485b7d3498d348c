"""Tests for the GeoGrid cell index."""

import math

import numpy as np
import pytest

from geocoin.discrete_space import Cell, GeoGrid, LatLng
from geocoin.exceptions import ConfigurationError

OAKES = (36.9895, -122.0628)


class TestGeoGridConstruction:
    """Tests for GeoGrid parameter validation."""

    def test_defaults(self):
        """Test GeoGrid defaults and an empty cell map."""
        grid = GeoGrid(1e-4)
        assert grid.tile_width == 1e-4
        assert grid.neighborhood_radius == 8
        assert grid.origin == LatLng(0.0, 0.0)
        assert len(grid) == 0

    @pytest.mark.parametrize("tile_width", [0, -1e-4, math.inf, math.nan, "1"])
    def test_invalid_tile_width(self, tile_width):
        """Test invalid tile widths are rejected."""
        with pytest.raises(ConfigurationError, match="tile_width"):
            GeoGrid(tile_width)

    @pytest.mark.parametrize("radius", [-1, 1.5, True])
    def test_invalid_radius(self, radius):
        """Test invalid neighborhood radii are rejected."""
        with pytest.raises(ConfigurationError, match="radius"):
            GeoGrid(1e-4, neighborhood_radius=radius)

    def test_invalid_origin(self):
        """Test a non-finite origin is rejected."""
        with pytest.raises(ConfigurationError, match="origin"):
            GeoGrid(1e-4, origin=(math.nan, 0.0))

    def test_configuration_error_is_value_error(self):
        """Test ConfigurationError can be caught as a ValueError."""
        with pytest.raises(ValueError):
            GeoGrid(-1)


class TestFlyweight:
    """Tests for identity stability of cells."""

    @pytest.mark.parametrize("i, j", [(0, 0), (1, -1), (-3, 5), (123456, -987654)])
    def test_same_identity(self, i, j):
        """Test repeated lookups return the same cell object."""
        grid = GeoGrid(1e-4)
        assert grid.get_cell(i, j) is grid.get_cell(i, j)
        assert grid[i, j] is grid.get_cell(i, j)

    def test_coordinate_lookup_returns_interned_cell(self):
        """Test coordinate lookup returns the interned cell."""
        grid = GeoGrid(1.0)
        cell = grid.coordinate_to_cell((2.5, -0.5))
        assert cell is grid[2, -1]
        assert grid.coordinate_to_cell((2.1, -0.9)) is cell

    def test_numpy_indices_are_normalised(self):
        """Test numpy integer indices map onto plain int cells."""
        grid = GeoGrid(1.0)
        cell = grid.get_cell(np.int64(3), np.int64(4))
        assert type(cell.i) is int
        assert cell is grid[3, 4]

    def test_cells_are_created_lazily(self):
        """Test cells exist only once requested."""
        grid = GeoGrid(1.0)
        assert (5, 5) not in grid
        grid[5, 5]
        assert (5, 5) in grid
        assert len(grid) == 1
        assert list(grid) == [Cell(5, 5)]

    def test_neighborhood_cells_are_interned(self, grid):
        """Test neighborhood queries return interned cells."""
        first = grid.get_cells_near_point(OAKES, 1)
        second = grid.get_cells_near_point(OAKES, 1)
        assert all(a is b for a, b in zip(first, second))


class TestCoordinateToCell:
    """Tests for mapping coordinates onto cells."""

    def test_floor_division(self):
        """Test coordinates are floored relative to the origin."""
        grid = GeoGrid(0.5, origin=(10.0, 20.0))
        assert grid.coordinate_to_cell((10.0, 20.0)).coordinate == (0, 0)
        assert grid.coordinate_to_cell((10.49, 20.51)).coordinate == (0, 1)
        assert grid.coordinate_to_cell((9.99, 19.99)).coordinate == (-1, -1)
        assert grid.coordinate_to_cell((8.0, 21.0)).coordinate == (-4, 2)

    def test_accepts_latlng_and_arrays(self):
        """Test LatLng and numpy arrays are accepted as coordinates."""
        grid = GeoGrid(1.0)
        assert grid.coordinate_to_cell(LatLng(1.5, 2.5)) is grid[1, 2]
        assert grid.coordinate_to_cell(np.array([1.5, 2.5])) is grid[1, 2]

    def test_rejects_bad_shape(self):
        """Test coordinates that are not pairs are rejected."""
        grid = GeoGrid(1.0)
        with pytest.raises(ValueError):
            grid.coordinate_to_cell((1.0, 2.0, 3.0))

    @pytest.mark.parametrize("coordinate", [(math.nan, 0.0), (0.0, math.inf), (-math.inf, 1.0)])
    def test_rejects_non_finite(self, coordinate):
        """Test NaN and infinite coordinates are rejected."""
        grid = GeoGrid(1.0)
        with pytest.raises(ValueError):
            grid.coordinate_to_cell(coordinate)
        assert len(grid) == 0

    def test_oakes_with_zero_origin(self):
        """Test the start location lies within its cell bounds."""
        grid = GeoGrid(1e-4)
        cell = grid.coordinate_to_cell((36.98949379578401, -122.06277128548504))
        (south, west), (north, east) = grid.get_cell_bounds(cell)
        assert south <= 36.98949379578401 < north
        assert west <= -122.06277128548504 < east


class TestCellBounds:
    """Tests for cell bounding rectangles."""

    @pytest.mark.parametrize("i, j", [(0, 0), (1, -1), (-3, 5)])
    def test_bounds_exact(self, i, j):
        """Test bounds follow the origin and tile width exactly."""
        origin = OAKES
        width = 1e-4
        grid = GeoGrid(width, origin=origin)
        bounds = grid.get_cell_bounds(grid[i, j])
        expected = (
            (origin[0] + i * width, origin[1] + j * width),
            (origin[0] + (i + 1) * width, origin[1] + (j + 1) * width),
        )
        assert bounds == expected

    def test_bounds_are_pure(self):
        """Test bounds depend only on the cell coordinate."""
        grid = GeoGrid(1e-4)
        cell = grid[7, -2]
        assert grid.get_cell_bounds(cell) == grid.get_cell_bounds(cell)
        assert grid.get_cell_bounds(Cell(7, -2)) == grid.get_cell_bounds(cell)

    def test_cell_center(self):
        """Test cell_to_position returns the cell center."""
        grid = GeoGrid(2.0, origin=(1.0, 1.0))
        np.testing.assert_array_almost_equal(grid.cell_to_position(grid[0, 1]), [2.0, 4.0])
        assert grid.coordinate_to_cell(grid.cell_to_position(grid[-3, 4])) is grid[-3, 4]


class TestNeighborhood:
    """Tests for neighborhood enumeration."""

    @pytest.mark.parametrize("radius", [0, 1, 2, 5, 8])
    def test_size(self, radius):
        """Test a neighborhood holds (2r+1)^2 distinct cells."""
        grid = GeoGrid(1e-4)
        cells = grid.get_cells_near_point(OAKES, radius)
        assert len(cells) == (2 * radius + 1) ** 2
        assert len(set(cells)) == len(cells)

    def test_square_around_center(self):
        """Test the neighborhood is the square around the center cell."""
        grid = GeoGrid(1.0)
        cells = grid.get_cells_near_point((0.5, 0.5), 2)
        for cell in cells:
            assert abs(cell.i) <= 2
            assert abs(cell.j) <= 2

    def test_row_major_order(self):
        """Test cells are listed row by row."""
        grid = GeoGrid(1.0)
        cells = grid.get_cells_near_point((10.5, -4.5), 1)
        assert [c.coordinate for c in cells] == [
            (9, -6), (9, -5), (9, -4),
            (10, -6), (10, -5), (10, -4),
            (11, -6), (11, -5), (11, -4),
        ]  # fmt: skip

    def test_default_radius(self):
        """Test the grid radius is used when none is given."""
        grid = GeoGrid(1.0, neighborhood_radius=3)
        assert len(grid.get_cells_near_point((0, 0))) == 49

    def test_restartable(self):
        """Test repeated queries give the same result."""
        grid = GeoGrid(1.0)
        assert grid.get_cells_near_point((0, 0), 1) == grid.get_cells_near_point((0, 0), 1)

    def test_negative_radius(self):
        """Test a negative radius is rejected."""
        grid = GeoGrid(1.0)
        with pytest.raises(ConfigurationError):
            grid.get_cells_near_point((0, 0), -1)

    def test_oakes_scenario(self):
        """Radius 0 at the origin yields exactly the cell containing it."""
        grid = GeoGrid(1e-4, origin=OAKES)
        cells = grid.get_cells_near_point(OAKES, 0)
        assert cells == [grid.coordinate_to_cell(OAKES)]
        assert cells[0] is grid[0, 0]

        (south, west), (north, east) = grid.get_cell_bounds(cells[0])
        assert south <= OAKES[0] <= north
        assert west <= OAKES[1] <= east
