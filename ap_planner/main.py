"""Command line AP placement: grid tiling, optional suggestion check, reports and plots."""

import argparse
import json
import logging
import os
import time
from datetime import datetime
from typing import Optional, Sequence

from ap_planner.config import load_and_validate_config
from ap_planner.geometry.coordinates import BuildingDimensions, OptimizationResult
from ap_planner.placement.grid_tiling import calculate_ap_placement, radius_from_coverage_area
from ap_planner.plan_image import PlanImageError, load_plan_image
from ap_planner.reporting.tables import export_tables, placement_table, summary_lines
from ap_planner.suggestions.validation import SuggestionFormatError, load_suggestions
from ap_planner.utils.error_handling import InputValidator, LogLevel, setup_logging
from ap_planner.visualization.placement_visualizer import PlacementVisualizer

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='WiFi AP placement by coverage-area grid tiling')

    # Building dimensions
    parser.add_argument('--length', type=float, default=None,
                        help='Building length in meters (x axis; default from config or 50.0)')
    parser.add_argument('--width', type=float, default=None,
                        help='Building width in meters (y axis; default from config or 30.0)')

    # AP coverage
    parser.add_argument('--coverage-area', type=float, default=None,
                        help='Coverage area per AP in square meters (default from config or 200.0)')
    parser.add_argument('--radius', type=float, default=None,
                        help='Coverage radius in meters; overrides --coverage-area')

    # Inputs
    parser.add_argument('--config', type=str, default=None,
                        help='Path to planner configuration JSON file (optional)')
    parser.add_argument('--plan-image', type=str, default=None,
                        help='Floor plan image drawn under the placement plot (optional)')
    parser.add_argument('--suggestions', type=str, default=None,
                        help='Saved AP suggestion response (JSON array of {x, y}) to validate')

    # Output
    parser.add_argument('--output-dir', type=str, default='runs',
                        help='Base directory for run outputs (default: runs)')
    parser.add_argument('--no-plots', action='store_true',
                        help='Skip plot generation')
    parser.add_argument('--log-level', type=str, choices=[lvl.value for lvl in LogLevel], default='INFO',
                        help='Logging level (default: INFO)')
    parser.add_argument('--log-file', type=str, default=None,
                        help='Also write the log to this file')

    return parser.parse_args(argv)


def setup_environment(args):
    """Sets up logging and creates the run output directories."""
    setup_logging(args.log_level, args.log_file)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_dir = os.path.join(args.output_dir, f"run_{timestamp}")
    plots_dir = os.path.join(output_dir, "plots")
    os.makedirs(plots_dir, exist_ok=True)

    logger.info(f"Run output will be saved to: {output_dir}")
    return output_dir, plots_dir


def save_run_info(run_dir, parameters, result: OptimizationResult,
                  suggestions: Optional[OptimizationResult] = None):
    """Save run parameters and placements as run_info.json."""
    run_info = {
        'timestamp': time.strftime('%Y-%m-%d %H:%M:%S'),
        'configuration': parameters,
        'placement': result.to_dict(),
    }
    if suggestions is not None:
        run_info['suggestions'] = suggestions.to_dict()

    run_info_path = os.path.join(run_dir, 'run_info.json')
    with open(run_info_path, 'w') as f:
        json.dump(run_info, f, indent=2)
    logger.info(f"Run information saved to {run_info_path}")
    return run_info_path


def run_placement(args, output_dir, plots_dir) -> int:
    try:
        config = load_and_validate_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    length = args.length if args.length is not None else config.building_length
    width = args.width if args.width is not None else config.building_width
    coverage_area = args.coverage_area if args.coverage_area is not None else config.coverage_area
    plan_image_path = args.plan_image or config.plan_image

    validator = InputValidator()
    if args.radius is not None:
        ok, message = validator.validate_placement_inputs(args.radius, length, width)
        radius = args.radius
        coverage_area = None
    else:
        ok, message = validator.validate_placement_inputs(coverage_area, length, width)
        radius = radius_from_coverage_area(coverage_area) if ok else None
    if not ok:
        logger.error(message)
        return 1

    result = calculate_ap_placement(radius, length, width)
    if result.is_empty:
        logger.error(result.message)
        return 1
    if result.message:
        logger.warning(result.message)

    for line in summary_lines(result, coverage_area, radius, length, width):
        logger.info(line)

    building = BuildingDimensions(length, width)
    tables = {'placement': placement_table(result)}

    suggestions = None
    if args.suggestions:
        try:
            suggestions = load_suggestions(args.suggestions, building)
        except (OSError, SuggestionFormatError) as e:
            logger.error(f"Could not use suggestions from {args.suggestions}: {e}")
        else:
            if suggestions.message:
                logger.warning(suggestions.message)
            if not suggestions.is_empty:
                tables['suggestions'] = placement_table(suggestions)

    export_tables(tables, output_dir)

    if not args.no_plots:
        plan_image = None
        if plan_image_path:
            try:
                plan_image, _ = load_plan_image(plan_image_path)
            except PlanImageError as e:
                logger.warning(f"{e}; plotting without plan image")
        visualizer = PlacementVisualizer()
        visualizer.plot_building_placement(building, result, radius,
                                           os.path.join(plots_dir, 'placement.png'), plan_image=plan_image)
        if suggestions is not None and not suggestions.is_empty:
            visualizer.plot_building_placement(building, suggestions, radius,
                                               os.path.join(plots_dir, 'suggestions.png'),
                                               plan_image=plan_image, title='Suggested AP Placement')

    parameters = {
        'building_length': length,
        'building_width': width,
        'coverage_area': coverage_area,
        'coverage_radius': radius,
        'plan_image': plan_image_path,
    }
    save_run_info(output_dir, parameters, result, suggestions)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    output_dir, plots_dir = setup_environment(args)
    return run_placement(args, output_dir, plots_dir)


if __name__ == "__main__":
    raise SystemExit(main())
