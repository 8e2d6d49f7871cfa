"""Tests for validation of suggested AP placements."""

import sys
import os
import json
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ap_planner.geometry.coordinates import MetricPoint
from ap_planner.suggestions.validation import (
    MSG_ALL_INVALID,
    MSG_NONE_SUGGESTED,
    SuggestionFormatError,
    load_suggestions,
    parse_suggestion_response,
    validate_suggestions,
)


class TestParseResponse:
    """Test decoding of raw suggestion text."""

    def test_plain_json(self):
        """A bare JSON array is decoded as is."""
        assert parse_suggestion_response('[{"x": 1, "y": 2}]') == [{'x': 1, 'y': 2}]

    def test_fenced_json(self):
        """A Markdown code fence around the array is stripped."""
        text = '```json\n[{"x": 1, "y": 2}]\n```'
        assert parse_suggestion_response(text) == [{'x': 1, 'y': 2}]

        bare_fence = '```\n[]\n```'
        assert parse_suggestion_response(bare_fence) == []

    @pytest.mark.parametrize("text", ["", "   ", "not json", '{"x": 1, "y": 2}'])
    def test_malformed(self, text):
        """Empty, non-JSON and non-array responses are rejected."""
        with pytest.raises(SuggestionFormatError):
            parse_suggestion_response(text)


class TestValidateSuggestions:
    """Test filtering of suggested points."""

    def test_invalid_points_dropped(self, sample_building):
        """Non-numeric and out-of-bounds points are dropped, never clamped."""
        points = [
            {'x': 10, 'y': 5},
            {'x': 60, 'y': 5},
            {'x': 'a', 'y': 1},
            {'x': True, 'y': 1},
            {'x': float('nan'), 'y': 1},
            {'y': 3},
            [20, 25],
            "garbage",
        ]
        result = validate_suggestions(points, sample_building)

        assert result.coordinates == (MetricPoint(10, 5), MetricPoint(20, 25))
        assert result.message is None

    def test_bounds_checked_after_rounding(self, sample_building):
        """Points are rounded to 2 decimals before the bounds check."""
        result = validate_suggestions([{'x': 50.004, 'y': 30}, {'x': 50.006, 'y': 0}], sample_building)
        assert result.coordinates == (MetricPoint(50.0, 30.0),)

    def test_metric_points_accepted(self, sample_building):
        """Already typed points pass through."""
        result = validate_suggestions([MetricPoint(1.234, 2.0)], sample_building)
        assert result.coordinates == (MetricPoint(1.23, 2.0),)

    def test_nothing_suggested(self, sample_building):
        """An empty list carries its own message."""
        result = validate_suggestions([], sample_building)
        assert result.is_empty
        assert result.message == MSG_NONE_SUGGESTED

    def test_all_invalid(self, sample_building):
        """A list with no usable point is reported as such."""
        result = validate_suggestions([{'x': -1, 'y': 0}, {'x': 'b', 'y': 0}], sample_building)
        assert result.is_empty
        assert result.message == MSG_ALL_INVALID


class TestLoadSuggestions:
    """Test reading saved responses from disk."""

    def test_load(self, tmp_path, sample_building):
        """A saved fenced response is parsed and validated."""
        path = tmp_path / "suggestions.txt"
        path.write_text("```json\n" + json.dumps([{'x': 12.5, 'y': 7.5}, {'x': 99, 'y': 1}]) + "\n```")

        result = load_suggestions(str(path), sample_building)
        assert result.coordinates == (MetricPoint(12.5, 7.5),)

    def test_missing_file(self, tmp_path, sample_building):
        """Missing files raise OSError for the caller to report."""
        with pytest.raises(OSError):
            load_suggestions(str(tmp_path / "missing.json"), sample_building)
