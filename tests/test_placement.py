"""Tests for grid-tiling AP placement."""

import sys
import os
import math
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ap_planner.geometry.coordinates import MetricPoint, OptimizationResult, round_coordinate
from ap_planner.placement.grid_tiling import (
    MSG_DEGENERATE_CELL,
    MSG_GRID_TOO_LARGE,
    MSG_NON_POSITIVE,
    MSG_SMALL_BUILDING,
    calculate_ap_placement,
    place_for_coverage_area,
    radius_from_coverage_area,
    visualization_radius,
)


class TestGridPlacement:
    """Test placement on well-formed inputs."""

    def test_reference_building(self):
        """A 50 x 30 m building with 10 m radius gets 8 APs on a 4 x 3 grid."""
        result = calculate_ap_placement(10, 50, 30)

        assert result.count == 8
        assert result.message is None
        expected = [(6.25, 5.0), (18.75, 5.0), (31.25, 5.0), (43.75, 5.0),
                    (6.25, 15.0), (18.75, 15.0), (31.25, 15.0), (43.75, 15.0)]
        assert [p.as_tuple() for p in result.coordinates] == expected

    def test_coverage_area_entry_point(self):
        """200 m² per AP is the same as a 10 m radius."""
        assert radius_from_coverage_area(200) == pytest.approx(10.0)
        assert place_for_coverage_area(200, 50, 30) == calculate_ap_placement(10, 50, 30)

    @pytest.mark.parametrize("radius,length,width", [
        (7, 100, 40),
        (3, 12, 9),
        (25, 80, 60),
        (4.2, 33.3, 17.9),
    ])
    def test_count_matches_area_ratio(self, radius, length, width):
        """Number of APs is ceil(building area / cell area), at least 1."""
        cell = math.sqrt(2) * radius
        expected = max(1, math.ceil(length * width / (cell * cell)))

        result = calculate_ap_placement(radius, length, width)
        assert result.count == expected

    @pytest.mark.parametrize("radius,length,width", [
        (7, 100, 40),
        (1.5, 9.7, 3.3),
        (40, 10, 10),
    ])
    def test_points_inside_building(self, radius, length, width):
        """Every AP lies inside the footprint."""
        result = calculate_ap_placement(radius, length, width)
        assert not result.is_empty
        for p in result.coordinates:
            assert 0 <= p.x <= length
            assert 0 <= p.y <= width

    def test_row_major_order(self):
        """APs fill a row left to right before moving down."""
        result = calculate_ap_placement(7, 100, 40)
        ys = [p.y for p in result.coordinates]
        assert ys == sorted(ys)
        first_row = [p for p in result.coordinates if p.y == ys[0]]
        xs = [p.x for p in first_row]
        assert xs == sorted(xs)

    def test_deterministic(self):
        """Same inputs give the same result."""
        assert calculate_ap_placement(6, 70, 45) == calculate_ap_placement(6, 70, 45)

    def test_numeric_strings_accepted(self):
        """Form values arrive as strings."""
        assert calculate_ap_placement("10", "50", "30").count == 8


class TestSmallBuilding:
    """Test buildings smaller than a single cell."""

    def test_single_centered_ap(self):
        """One AP at the center plus the advisory message."""
        result = calculate_ap_placement(10, 5, 5)

        assert result.coordinates == (MetricPoint(2.5, 2.5),)
        assert result.message == MSG_SMALL_BUILDING

    def test_narrow_building(self):
        """Message is set when only one dimension is below the cell size."""
        result = calculate_ap_placement(10, 60, 8)

        assert result.message == MSG_SMALL_BUILDING
        assert all(p.y == 4.0 for p in result.coordinates)


class TestDegenerateInputs:
    """Test inputs that produce no placement."""

    @pytest.mark.parametrize("radius,length,width", [
        (0, 50, 30),
        (10, -5, 30),
        (10, 50, 0),
        (float('nan'), 50, 30),
        (10, float('inf'), 30),
        ("abc", 50, 30),
        (None, 50, 30),
    ])
    def test_rejected(self, radius, length, width):
        """Empty result with a message, never an exception."""
        result = calculate_ap_placement(radius, length, width)
        assert result.is_empty
        assert result.message == MSG_NON_POSITIVE

    def test_tiny_radius(self):
        """A cell below the minimum size is rejected."""
        result = calculate_ap_placement(1e-7, 50, 30)
        assert result.is_empty
        assert result.message == MSG_DEGENERATE_CELL

    @pytest.mark.parametrize("radius,length,width", [
        (1e-5, 1e200, 1e200),
        (1e-5, 1e308, 1.0),
        (0.01, 500, 500),
    ])
    def test_grid_too_large(self, radius, length, width):
        """Grids that overflow or exceed the AP cap give an empty result instead of raising."""
        result = calculate_ap_placement(radius, length, width)
        assert result.is_empty
        assert result.message == MSG_GRID_TOO_LARGE

    def test_bad_coverage_area(self):
        """Coverage area entry point rejects the same way."""
        assert place_for_coverage_area(-200, 50, 30).message == MSG_NON_POSITIVE
        assert place_for_coverage_area("x", 50, 30).is_empty

    def test_visualization_radius_fallback(self):
        """Overlay radius falls back to the default area."""
        assert visualization_radius(None) == pytest.approx(10.0)
        assert visualization_radius(-1) == pytest.approx(10.0)
        assert visualization_radius(50) == pytest.approx(5.0)


class TestRounding:
    """Test fixed-point coordinate rounding."""

    def test_half_up(self):
        """Exact halves round away from zero."""
        assert round_coordinate(0.125) == 0.13
        assert round_coordinate(2.5, 0) == 3.0

    def test_binary_value_respected(self):
        """2.675 is stored just below the half, so it rounds down."""
        assert round_coordinate(2.675) == 2.67
        assert round_coordinate(1.005) == 1.0


class TestOptimizationResult:
    """Test the result container."""

    def test_to_dict(self):
        """Message key only appears when set."""
        result = OptimizationResult([MetricPoint(1.0, 2.0)])
        assert result.to_dict() == {'nAP': 1, 'coordinates': [{'x': 1.0, 'y': 2.0}]}

        with_message = OptimizationResult((), "note")
        assert with_message.to_dict()['message'] == "note"
        assert with_message.is_empty

    def test_coordinates_stored_as_tuple(self):
        """A list argument is frozen into a tuple."""
        result = OptimizationResult([MetricPoint(1.0, 2.0)])
        assert isinstance(result.coordinates, tuple)
