"""Tests for the Cell and LatLng value types."""

import dataclasses

import pytest

from geocoin.discrete_space import Cell, LatLng


class TestCell:
    """Tests for the Cell class."""

    def test_cell_initialization(self):
        """Test Cell stores its indices."""
        cell = Cell(1, -2)
        assert cell.i == 1
        assert cell.j == -2
        assert cell.coordinate == (1, -2)

    def test_cell_key(self):
        """Test the persisted key of a cell."""
        assert Cell(-3, 5).key == "-3,5"

    def test_cell_equality(self):
        """Test cells compare and hash by value."""
        assert Cell(1, 2) == Cell(1, 2)
        assert Cell(1, 2) != Cell(2, 1)
        assert hash(Cell(1, 2)) == hash(Cell(1, 2))

    def test_cell_is_immutable(self):
        """Test cells cannot be modified."""
        cell = Cell(0, 0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            cell.i = 4

    def test_cell_repr(self):
        """Test the cell representation."""
        assert repr(Cell(0, 7)) == "Cell(0, 7)"


class TestLatLng:
    """Tests for the LatLng coordinate."""

    def test_dict_round_trip(self):
        """Test LatLng converts to and from a dictionary."""
        point = LatLng(36.98949379578401, -122.06277128548504)
        assert point.to_dict() == {"lat": 36.98949379578401, "lng": -122.06277128548504}
        assert LatLng.from_dict(point.to_dict()) == point

    def test_from_dict_missing_field(self):
        """Test a missing field raises KeyError."""
        with pytest.raises(KeyError):
            LatLng.from_dict({"lat": 1.0})

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_from_dict_rejects_non_finite(self, value):
        """Test non-finite values are rejected."""
        with pytest.raises(ValueError):
            LatLng.from_dict({"lat": value, "lng": 0.0})

    def test_tuple_behaviour(self):
        """Test LatLng unpacks like a tuple."""
        lat, lng = LatLng(1.0, 2.0)
        assert (lat, lng) == (1.0, 2.0)
