"""Grid-tiling AP placement over a rectangular building footprint.

Each AP covers a circle of the given radius. The largest square that fits in
that circle has side ``sqrt(2) * radius``; the building is tiled with such
cells and one AP is put at the center of each cell, row by row.
"""

import logging
from typing import List, Optional

import numpy as np

from ap_planner.geometry.coordinates import MetricPoint, OptimizationResult, round_coordinate

logger = logging.getLogger(__name__)

MIN_CELL_SIZE = 1e-6
MAX_AP_COUNT = 100_000
DEFAULT_COVERAGE_AREA_SQM = 200.0

MSG_NON_POSITIVE = "All input values must be positive."
MSG_DEGENERATE_CELL = "The coverage radius produces an invalid or too small cell area."
MSG_GRID_TOO_LARGE = "The building is too large for the coverage radius; the AP grid cannot be computed."
MSG_SMALL_BUILDING = (
    "The building dimensions are smaller than the AP cell size in one or both directions. "
    "APs will be centered within the building to cover it as well as possible with the given configuration."
)


def radius_from_coverage_area(coverage_area: float) -> float:
    """Radius whose inscribed square cell has exactly ``coverage_area`` square meters."""
    return float(np.sqrt(coverage_area / 2.0))


def visualization_radius(coverage_area: Optional[float]) -> float:
    """Coverage radius for overlays, falling back to the default area when the input is unusable."""
    try:
        area = float(coverage_area)
    except (TypeError, ValueError):
        area = float('nan')
    if not np.isfinite(area) or area <= 0:
        area = DEFAULT_COVERAGE_AREA_SQM
    return radius_from_coverage_area(area)


def calculate_ap_placement(radius, length, width) -> OptimizationResult:
    """
    Place APs on a row-major grid of square cells.

    Never raises: degenerate input, or a grid that would exceed MAX_AP_COUNT
    APs, yields an empty result with a message; a building smaller than one
    cell yields the placement plus an advisory message.

    Args:
        radius: Coverage radius of a single AP in meters
        length: Building length in meters (x axis)
        width: Building width in meters (y axis)

    Returns:
        OptimizationResult with coordinates rounded to 2 decimals
    """
    try:
        radius, length, width = float(radius), float(length), float(width)
    except (TypeError, ValueError):
        logger.warning(f"Non-numeric placement input: radius={radius!r}, length={length!r}, width={width!r}")
        return OptimizationResult((), MSG_NON_POSITIVE)

    if not all(np.isfinite(v) for v in (radius, length, width)):
        logger.warning(f"Non-finite placement input: radius={radius}, length={length}, width={width}")
        return OptimizationResult((), MSG_NON_POSITIVE)

    if radius <= 0 or length <= 0 or width <= 0:
        return OptimizationResult((), MSG_NON_POSITIVE)

    cell = np.sqrt(2) * radius
    if cell < MIN_CELL_SIZE:
        return OptimizationResult((), MSG_DEGENERATE_CELL)

    building_area = length * width
    with np.errstate(over='ignore'):
        cell_area = cell * cell
        ratios = (building_area / cell_area, length / cell, width / cell)
    if not all(np.isfinite(r) for r in ratios) or ratios[0] > MAX_AP_COUNT:
        logger.warning(f"AP grid too large: radius={radius}, length={length}, width={width}")
        return OptimizationResult((), MSG_GRID_TOO_LARGE)
    target = max(1, int(np.ceil(ratios[0])))

    message = None
    if length < cell or width < cell:
        message = MSG_SMALL_BUILDING

    # The grid is sized from the dimensions, not from target, so it always
    # covers the whole footprint
    cols = max(1, int(np.ceil(ratios[1])))
    rows = max(1, int(np.ceil(ratios[2])))
    cell_w = length / cols
    cell_h = width / rows

    coordinates: List[MetricPoint] = []
    for row in range(rows):
        for col in range(cols):
            if len(coordinates) >= target:
                break
            x = (col + 0.5) * cell_w
            y = (row + 0.5) * cell_h
            coordinates.append(MetricPoint(round_coordinate(x), round_coordinate(y)))
        if len(coordinates) >= target:
            break

    logger.info(f"[Grid Placement] cell={cell:.3f} m, grid={cols}x{rows}, target={target}, placed={len(coordinates)}")
    return OptimizationResult(tuple(coordinates), message)


def place_for_coverage_area(coverage_area, length, width) -> OptimizationResult:
    """Placement for a per-AP coverage area in square meters."""
    try:
        area = float(coverage_area)
    except (TypeError, ValueError):
        return OptimizationResult((), MSG_NON_POSITIVE)
    if not np.isfinite(area) or area <= 0:
        return OptimizationResult((), MSG_NON_POSITIVE)
    return calculate_ap_placement(radius_from_coverage_area(area), length, width)
