"""Tabular AP reports for automatic, suggested and manual placements."""

import logging
import os
from typing import Dict, Optional, Sequence

import pandas as pd

from ap_planner.geometry.coordinate_mapper import UNAVAILABLE, CoordinateMapper
from ap_planner.geometry.coordinates import NaturalPoint, OptimizationResult

logger = logging.getLogger(__name__)

PLACEMENT_COLUMNS = ["AP #", "X (m)", "Y (m)"]
MANUAL_COLUMNS = ["AP #", "Pixel X", "Pixel Y", "X (m) Est.", "Y (m) Est."]


def placement_table(result: OptimizationResult) -> pd.DataFrame:
    """One row per AP, numbered in placement order."""
    rows = [[i + 1, f"{p.x:.2f}", f"{p.y:.2f}"] for i, p in enumerate(result.coordinates)]
    return pd.DataFrame(rows, columns=PLACEMENT_COLUMNS)


def manual_placement_table(aps: Sequence[NaturalPoint], mapper: CoordinateMapper) -> pd.DataFrame:
    """
    Manual APs with their pixel position and estimated metric position.

    Metric columns read "N/A" when the plan scale is unknown.
    """
    rows = []
    for i, ap in enumerate(aps):
        metric = mapper.natural_to_metric(ap)
        if metric is UNAVAILABLE:
            x_m = y_m = str(UNAVAILABLE)
        else:
            x_m, y_m = f"{metric.x:.2f}", f"{metric.y:.2f}"
        rows.append([i + 1, f"{ap.x:.0f}", f"{ap.y:.0f}", x_m, y_m])
    if aps and mapper.pixels_per_meter is UNAVAILABLE:
        logger.warning("Plan scale unavailable; metric estimates reported as N/A")
    return pd.DataFrame(rows, columns=MANUAL_COLUMNS)


def export_tables(tables: Dict[str, pd.DataFrame], output_dir: str) -> Dict[str, str]:
    """Write each table to ``<output_dir>/<name>.csv`` and return the paths."""
    os.makedirs(output_dir, exist_ok=True)
    paths = {}
    for name, table in tables.items():
        path = os.path.join(output_dir, f"{name}.csv")
        table.to_csv(path, index=False)
        paths[name] = path
        logger.info(f"Saved {len(table)} rows to {path}")
    return paths


def summary_lines(result: OptimizationResult, coverage_area: Optional[float],
                  radius: float, length: float, width: float) -> Sequence[str]:
    """Plain-text parameter block used at the top of exported reports."""
    lines = [
        f"- Building length: {length} m",
        f"- Building width: {width} m",
    ]
    if coverage_area is not None:
        lines.append(f"- Coverage area per AP: {coverage_area} m²")
    lines.append(f"- Coverage radius: {radius:.2f} m")
    lines.append(f"- Number of APs: {result.count}")
    if result.message:
        lines.append(f"- Note: {result.message}")
    return lines
