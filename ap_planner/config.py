"""Planner configuration loaded from a JSON file, with limits applied."""

import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

VALIDATION_LIMITS = {
    'length': 500.0,          # Max building length in meters
    'width': 500.0,           # Max building width in meters
    'coverage_area': 5000.0,  # Max coverage area per AP in square meters
}

DEFAULT_LENGTH = 50.0
DEFAULT_WIDTH = 30.0
DEFAULT_COVERAGE_AREA = 200.0


@dataclass
class PlannerConfig:
    """Building and AP parameters for one planning run."""
    building_length: float = DEFAULT_LENGTH
    building_width: float = DEFAULT_WIDTH
    coverage_area: float = DEFAULT_COVERAGE_AREA
    plan_image: Optional[str] = None


def _read_number(section: dict, key: str, default: float, limit: float) -> float:
    raw = section.get(key, default)
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Configuration value '{key}' must be numeric, got {raw!r}") from e
    if value > limit:
        logger.warning(f"Configuration value '{key}'={value} exceeds {limit}. Clamping.")
        value = limit
    return value


def load_and_validate_config(config_path: Optional[str]) -> PlannerConfig:
    """
    Load a planner configuration file.

    Expected shape::

        {"building": {"length": 50, "width": 30}, "coverage_area": 200, "plan_image": "plan.png"}

    Oversized values are clamped to VALIDATION_LIMITS. A relative plan image
    path is resolved against the configuration file's directory.
    """
    if not config_path:
        logger.warning("No configuration file provided. Using defaults.")
        return PlannerConfig()

    if not os.path.exists(config_path):
        logger.error(f"Configuration file not found: {config_path}. Aborting.")
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Configuration file {config_path} is not valid JSON: {e}") from e

    if not isinstance(config_data, dict):
        raise ValueError(f"Configuration file {config_path} must contain a JSON object")

    building_conf = config_data.get('building', {}) or {}
    config = PlannerConfig(
        building_length=_read_number(building_conf, 'length', DEFAULT_LENGTH, VALIDATION_LIMITS['length']),
        building_width=_read_number(building_conf, 'width', DEFAULT_WIDTH, VALIDATION_LIMITS['width']),
        coverage_area=_read_number(config_data, 'coverage_area', DEFAULT_COVERAGE_AREA,
                                   VALIDATION_LIMITS['coverage_area']),
    )

    plan_image = config_data.get('plan_image')
    if plan_image:
        if not os.path.isabs(plan_image):
            plan_image = os.path.join(os.path.dirname(os.path.abspath(config_path)), plan_image)
        config.plan_image = plan_image

    logger.info("Configuration loaded and validated successfully.")
    return config
