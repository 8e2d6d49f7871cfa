"""Tests for report tables, plan images and plots."""

import sys
import os
import numpy as np
import pandas as pd
import pytest
import cv2

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ap_planner.geometry.coordinate_mapper import CoordinateMapper
from ap_planner.geometry.coordinates import BuildingDimensions, NaturalPoint, PlanImageMetadata
from ap_planner.placement.grid_tiling import calculate_ap_placement
from ap_planner.plan_image import PlanImageError, encode_png, fit_to_width, load_plan_image
from ap_planner.reporting.tables import (
    MANUAL_COLUMNS,
    PLACEMENT_COLUMNS,
    export_tables,
    manual_placement_table,
    placement_table,
    summary_lines,
)
from ap_planner.visualization.placement_visualizer import PlacementVisualizer


@pytest.fixture
def reference_result():
    return calculate_ap_placement(10, 50, 30)


@pytest.fixture
def plan_path(tmp_path):
    """80x60 plan image written to disk."""
    image = np.full((60, 80, 3), 255, dtype=np.uint8)
    image[10:50, 10:70] = (40, 40, 40)
    path = tmp_path / "plan.png"
    cv2.imwrite(str(path), image)
    return str(path)


class TestTables:
    """Test tabular reports."""

    def test_placement_table(self, reference_result):
        """One row per AP with 2-decimal coordinates."""
        table = placement_table(reference_result)

        assert list(table.columns) == PLACEMENT_COLUMNS
        assert len(table) == 8
        assert table.iloc[0].tolist() == [1, "6.25", "5.00"]
        assert table.iloc[-1]["AP #"] == 8

    def test_manual_table_with_scale(self):
        """Pixels are whole numbers, metric estimates use the plan scale."""
        mapper = CoordinateMapper(image=PlanImageMetadata(800, 600), building_length=40)
        table = manual_placement_table([NaturalPoint(200.4, 99.6)], mapper)

        assert list(table.columns) == MANUAL_COLUMNS
        assert table.iloc[0].tolist() == [1, "200", "100", "10.02", "4.98"]

    def test_manual_table_without_scale(self):
        """Metric columns read N/A when the building length is unknown."""
        mapper = CoordinateMapper(image=PlanImageMetadata(800, 600))
        table = manual_placement_table([NaturalPoint(10, 20)], mapper)

        assert table.iloc[0]["X (m) Est."] == "N/A"
        assert table.iloc[0]["Y (m) Est."] == "N/A"

    def test_export(self, tmp_path, reference_result):
        """Tables are written as CSV files named after their key."""
        paths = export_tables({'placement': placement_table(reference_result)}, str(tmp_path / "out"))

        written = pd.read_csv(paths['placement'])
        assert list(written.columns) == PLACEMENT_COLUMNS
        assert len(written) == 8

    def test_summary_lines(self, reference_result):
        """Summary lists the parameters and the AP count."""
        lines = summary_lines(reference_result, 200, 10, 50, 30)
        assert "- Number of APs: 8" in lines
        assert "- Coverage radius: 10.00 m" in lines

        no_area = summary_lines(reference_result, None, 10, 50, 30)
        assert not any("Coverage area" in line for line in no_area)


class TestPlanImage:
    """Test plan image loading."""

    def test_load(self, plan_path):
        """Image is returned as RGB with its natural size."""
        image, metadata = load_plan_image(plan_path)
        assert metadata == PlanImageMetadata(80, 60)
        assert image.shape == (60, 80, 3)

    def test_missing(self, tmp_path):
        """Missing files are reported as PlanImageError."""
        with pytest.raises(PlanImageError):
            load_plan_image(str(tmp_path / "missing.png"))

    def test_not_an_image(self, tmp_path):
        """Undecodable files are reported as PlanImageError."""
        path = tmp_path / "plan.png"
        path.write_text("not an image")
        with pytest.raises(PlanImageError):
            load_plan_image(str(path))

    def test_fit_to_width(self, plan_path):
        """Images are only ever scaled down."""
        image, _ = load_plan_image(plan_path)
        assert fit_to_width(image, 40, 100).shape == (30, 40, 3)
        assert fit_to_width(image, 200, 200) is image

    def test_encode_png(self, plan_path):
        """PNG bytes carry the PNG signature."""
        image, _ = load_plan_image(plan_path)
        assert encode_png(image).startswith(b'\x89PNG')


class TestVisualizer:
    """Test plot generation."""

    def test_building_plot(self, tmp_path, sample_building, reference_result):
        """Placement plot is written to disk."""
        output = str(tmp_path / "plots" / "placement.png")
        assert PlacementVisualizer().plot_building_placement(sample_building, reference_result, 10, output) == output
        assert os.path.exists(output)

    def test_building_plot_with_plan(self, tmp_path, plan_path, sample_building, reference_result):
        """The plan image can be drawn under the placement."""
        image, _ = load_plan_image(plan_path)
        output = str(tmp_path / "placement.png")
        PlacementVisualizer().plot_building_placement(sample_building, reference_result, 10, output,
                                                      plan_image=image)
        assert os.path.exists(output)

    def test_invalid_building_skipped(self, tmp_path, reference_result):
        """No plot for a degenerate footprint."""
        output = str(tmp_path / "placement.png")
        assert PlacementVisualizer().plot_building_placement(BuildingDimensions(0, 30), reference_result,
                                                             10, output) is None
        assert not os.path.exists(output)

    def test_manual_plot_without_scale(self, tmp_path, plan_path):
        """Manual plot is drawn even when coverage circles cannot be scaled."""
        image, metadata = load_plan_image(plan_path)
        mapper = CoordinateMapper(image=metadata)
        output = str(tmp_path / "manual.png")

        PlacementVisualizer().plot_manual_placement(image, [NaturalPoint(20, 20)], mapper, 10, output)
        assert os.path.exists(output)
