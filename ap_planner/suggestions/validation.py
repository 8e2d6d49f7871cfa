"""
Validation of externally suggested AP placements.

The suggestion service itself (request, prompt) lives outside this package.
Whatever it returns is treated as untrusted: each point must be numeric and
inside the building footprint after rounding, otherwise it is dropped. Points
are never clamped into the building.
"""

import json
import logging
import math
import re
from numbers import Real
from typing import Any, Iterable, List

from ap_planner.geometry.coordinates import BuildingDimensions, MetricPoint, OptimizationResult, round_coordinate

logger = logging.getLogger(__name__)

MSG_NONE_SUGGESTED = "No AP locations were suggested."
MSG_ALL_INVALID = ("Coordinates were suggested, but none was valid or inside the building "
                   "limits after formatting.")

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


class SuggestionFormatError(ValueError):
    """Suggestion text is not a JSON array of points."""


def parse_suggestion_response(text: str) -> List[Any]:
    """
    Decode the raw text of a suggestion response.

    An optional Markdown code fence (```json ... ```) around the payload is
    stripped first.

    Raises:
        SuggestionFormatError: if the text is empty, not JSON, or not an array
    """
    if not text or not text.strip():
        raise SuggestionFormatError("Suggestion response contains no text.")

    payload = text.strip()
    match = _FENCE_RE.match(payload)
    if match:
        payload = match.group(1).strip()

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise SuggestionFormatError(f"Suggestion response is not valid JSON: {e}. Raw: {payload[:300]}") from e

    if not isinstance(data, list):
        raise SuggestionFormatError("Suggestion response is not an array of {x, y} objects.")
    return data


def _numeric(value) -> bool:
    # bool is an int subclass but never a coordinate
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _coerce_point(item) -> Any:
    if isinstance(item, dict):
        return item.get('x'), item.get('y')
    if isinstance(item, (list, tuple)) and len(item) == 2:
        return item[0], item[1]
    if isinstance(item, MetricPoint):
        return item.x, item.y
    return None, None


def validate_suggestions(points: Iterable[Any], building: BuildingDimensions) -> OptimizationResult:
    """
    Keep only numeric, in-bounds suggested points.

    Args:
        points: Items shaped like ``{"x": .., "y": ..}``, ``(x, y)`` or MetricPoint
        building: Footprint the points must fall inside

    Returns:
        OptimizationResult of the surviving points (rounded to 2 decimals);
        empty with a message when nothing usable was suggested
    """
    items = list(points)
    if not items:
        return OptimizationResult((), MSG_NONE_SUGGESTED)

    valid: List[MetricPoint] = []
    for i, item in enumerate(items):
        x, y = _coerce_point(item)
        if not (_numeric(x) and _numeric(y)):
            logger.info(f"Dropped suggestion {i + 1}: non-numeric coordinates {item!r}")
            continue
        point = MetricPoint(round_coordinate(x), round_coordinate(y))
        if not building.contains(point):
            logger.info(f"Dropped suggestion {i + 1}: ({point.x}, {point.y}) outside "
                        f"{building.length} x {building.width} m")
            continue
        valid.append(point)

    if not valid:
        logger.warning(f"All {len(items)} suggested points were invalid")
        return OptimizationResult((), MSG_ALL_INVALID)

    logger.info(f"Accepted {len(valid)} of {len(items)} suggested AP locations")
    return OptimizationResult(tuple(valid), None)


def load_suggestions(path: str, building: BuildingDimensions) -> OptimizationResult:
    """Read a saved suggestion response from disk and validate it."""
    with open(path, 'r') as f:
        text = f.read()
    return validate_suggestions(parse_suggestion_response(text), building)
