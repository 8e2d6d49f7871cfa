"""
Conversions between natural-pixel, display-pixel and metric space.

Metric scale is derived from the plan image's natural width and the building
length only; the same pixels-per-meter factor is applied to both axes. If the
plan's aspect ratio does not match the building's, y estimates are distorted.
"""

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from ap_planner.geometry.coordinates import DisplayPoint, MetricPoint, NaturalPoint, PlanImageMetadata

logger = logging.getLogger(__name__)


class Availability(Enum):
    """Marker returned when a conversion has no usable scale."""
    UNAVAILABLE = "N/A"

    def __bool__(self):
        return False

    def __str__(self):
        return self.value


UNAVAILABLE = Availability.UNAVAILABLE


def is_available(value) -> bool:
    return value is not UNAVAILABLE


@dataclass(frozen=True)
class CoordinateMapper:
    """
    Stateless transforms parameterized by image, display and building sizes.

    Any conversion whose scale is zero or unknown returns ``UNAVAILABLE``
    instead of a number; callers must branch on it explicitly.
    """
    image: Optional[PlanImageMetadata] = None
    display_width: float = 0.0
    display_height: float = 0.0
    building_length: float = 0.0

    @property
    def has_image(self) -> bool:
        return self.image is not None and self.image.is_valid

    @property
    def has_display(self) -> bool:
        return (self.has_image and math.isfinite(self.display_width) and math.isfinite(self.display_height)
                and self.display_width > 0 and self.display_height > 0)

    def with_display_size(self, width: float, height: float) -> 'CoordinateMapper':
        return replace(self, display_width=float(width), display_height=float(height))

    def with_image(self, image: Optional[PlanImageMetadata]) -> 'CoordinateMapper':
        return replace(self, image=image)

    def with_building_length(self, length: float) -> 'CoordinateMapper':
        return replace(self, building_length=float(length))

    # --- display <-> natural ---

    def natural_to_display(self, point: NaturalPoint) -> Union[DisplayPoint, Availability]:
        """Rendering position of a stored point."""
        if not self.has_display:
            return UNAVAILABLE
        scale_x = self.display_width / self.image.width
        scale_y = self.display_height / self.image.height
        return DisplayPoint(point.x * scale_x, point.y * scale_y)

    def display_to_natural(self, point: DisplayPoint) -> Union[NaturalPoint, Availability]:
        """
        Natural-pixel position of a display position, clamped to the image.

        ``point`` is measured from the displayed image's top-left corner.
        """
        if not self.has_display:
            return UNAVAILABLE
        x = point.x * self.image.width / self.display_width
        y = point.y * self.image.height / self.display_height
        x = max(0.0, min(x, float(self.image.width)))
        y = max(0.0, min(y, float(self.image.height)))
        return NaturalPoint(x, y)

    def contains_display(self, point: DisplayPoint) -> bool:
        """True when ``point`` lies on the displayed image, edges included."""
        if not self.has_display:
            return False
        return 0 <= point.x <= self.display_width and 0 <= point.y <= self.display_height

    # --- natural <-> metric ---

    @property
    def pixels_per_meter(self) -> Union[float, Availability]:
        length = self.building_length
        if not self.has_image or not math.isfinite(length) or length <= 0:
            return UNAVAILABLE
        scale = self.image.width / length
        if not math.isfinite(scale) or scale <= 0:
            return UNAVAILABLE
        return scale

    def natural_to_metric(self, point: NaturalPoint) -> Union[MetricPoint, Availability]:
        """Estimated building position of a plan pixel."""
        scale = self.pixels_per_meter
        if scale is UNAVAILABLE:
            logger.debug("Metric scale unavailable (image or building length unknown)")
            return UNAVAILABLE
        return MetricPoint(point.x / scale, point.y / scale)

    def metric_to_natural(self, point: MetricPoint) -> Union[NaturalPoint, Availability]:
        scale = self.pixels_per_meter
        if scale is UNAVAILABLE:
            return UNAVAILABLE
        return NaturalPoint(point.x * scale, point.y * scale)

    # --- coverage radius ---

    def radius_to_natural(self, radius_m: float) -> Union[float, Availability]:
        scale = self.pixels_per_meter
        if scale is UNAVAILABLE:
            return UNAVAILABLE
        return radius_m * scale

    def radius_to_display(self, radius_m: float) -> Union[float, Availability]:
        """Coverage radius on screen, using the horizontal display scale for both axes."""
        natural_radius = self.radius_to_natural(radius_m)
        if natural_radius is UNAVAILABLE or not self.has_display:
            return UNAVAILABLE
        return natural_radius * (self.display_width / self.image.width)
