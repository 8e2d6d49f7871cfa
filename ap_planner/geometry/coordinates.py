"""Coordinate types shared by automatic and manual AP placement.

Three spaces are in play and each one has its own point type:

- MetricPoint: meters, origin at the building's top-left corner
- NaturalPoint: pixels of the plan image at its original resolution
- DisplayPoint: pixels of the plan image as currently rendered on screen

Values only move between spaces through CoordinateMapper.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional, Tuple

COORDINATE_DECIMALS = 2


def round_coordinate(value: float, decimals: int = COORDINATE_DECIMALS) -> float:
    """Fixed-point rounding, half-up on the exact binary value of ``value``."""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(float(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class MetricPoint:
    """Position in meters relative to the building's top-left corner."""
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def rounded(self, decimals: int = COORDINATE_DECIMALS) -> 'MetricPoint':
        return MetricPoint(round_coordinate(self.x, decimals), round_coordinate(self.y, decimals))

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class NaturalPoint:
    """Position in pixels of the plan image at its natural resolution."""
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def squared_distance(self, other: 'NaturalPoint') -> float:
        return (self.x - other.x) ** 2 + (self.y - other.y) ** 2


@dataclass(frozen=True)
class DisplayOffset:
    """Vector between two display-space positions."""
    dx: float
    dy: float


@dataclass(frozen=True)
class DisplayPoint:
    """Position in pixels of the plan image as rendered on screen."""
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def offset_from(self, origin: 'DisplayPoint') -> DisplayOffset:
        return DisplayOffset(self.x - origin.x, self.y - origin.y)

    def minus(self, offset: DisplayOffset) -> 'DisplayPoint':
        return DisplayPoint(self.x - offset.dx, self.y - offset.dy)


@dataclass(frozen=True)
class BuildingDimensions:
    """Rectangular building footprint in meters."""
    length: float
    width: float

    @property
    def area(self) -> float:
        return self.length * self.width

    @property
    def is_valid(self) -> bool:
        return (math.isfinite(self.length) and math.isfinite(self.width)
                and self.length > 0 and self.width > 0)

    def contains(self, point: MetricPoint) -> bool:
        return 0 <= point.x <= self.length and 0 <= point.y <= self.width


@dataclass(frozen=True)
class PlanImageMetadata:
    """Natural size of a decoded plan image."""
    width: int
    height: int

    @property
    def is_valid(self) -> bool:
        return self.width > 0 and self.height > 0


@dataclass(frozen=True)
class OptimizationResult:
    """
    Ordered AP coordinates in metric space plus an optional advisory message.

    The order is the placement order and drives the AP1..APn numbering.
    """
    coordinates: Tuple[MetricPoint, ...] = field(default_factory=tuple)
    message: Optional[str] = None

    def __post_init__(self):
        # Accept any iterable but always store an immutable tuple
        object.__setattr__(self, 'coordinates', tuple(self.coordinates))

    @property
    def count(self) -> int:
        return len(self.coordinates)

    @property
    def is_empty(self) -> bool:
        return not self.coordinates

    def to_dict(self) -> Dict[str, Any]:
        """Dictionary in the ``{nAP, coordinates, message}`` shape."""
        data: Dict[str, Any] = {
            'nAP': self.count,
            'coordinates': [p.to_dict() for p in self.coordinates],
        }
        if self.message is not None:
            data['message'] = self.message
        return data
