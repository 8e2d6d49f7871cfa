"""
Pointer interaction state machine for manual AP placement on a plan image.

States:
    IDLE      - clicks on the plan add APs, double-clicks on a marker delete it
    DRAGGING  - move events reposition the grabbed AP until the pointer is released

The controller is the only writer of its ManualAPSet. Positions arrive in
display pixels (relative to the displayed image's top-left corner) and are
stored in natural pixels; every conversion goes through CoordinateMapper.

Move/up delivery is scoped to the drag: the PointerSource is attached when a
drag starts and the returned release callable runs on every way out of
DRAGGING (pointer up, cancel, reset, new image, stale index, handler error).
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from ap_planner.geometry.coordinate_mapper import UNAVAILABLE, Availability, CoordinateMapper
from ap_planner.geometry.coordinates import (
    DisplayOffset, DisplayPoint, MetricPoint, NaturalPoint, PlanImageMetadata
)
from ap_planner.interaction import proximity
from ap_planner.interaction.manual_aps import ManualAPSet

logger = logging.getLogger(__name__)

PointerCallback = Callable[[DisplayPoint], object]
ReleaseCallback = Callable[[], None]


class InteractionState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class DragState:
    """AP being dragged and the grab offset captured at pointer-down."""
    index: int
    offset: DisplayOffset


class PointerSource(ABC):
    """Source of pointer move/up events that can be attached for the length of a drag."""

    @abstractmethod
    def attach(self, on_move: PointerCallback, on_up: PointerCallback) -> ReleaseCallback:
        """Start delivering move and up events; the returned callable stops delivery."""


class DirectPointerSource(PointerSource):
    """Used when the caller feeds every event to the controller itself."""

    def attach(self, on_move: PointerCallback, on_up: PointerCallback) -> ReleaseCallback:
        return lambda: None


class InteractionController:
    """Owns the manual AP list and the IDLE/DRAGGING state machine."""

    def __init__(self, building_length: float = 0.0,
                 pointer_source: Optional[PointerSource] = None,
                 on_change: Optional[Callable[[Tuple[NaturalPoint, ...]], None]] = None):
        self._aps = ManualAPSet()
        self._mapper = CoordinateMapper(building_length=float(building_length))
        self._pointer_source = pointer_source or DirectPointerSource()
        self._on_change = on_change
        self._drag: Optional[DragState] = None
        self._release: Optional[ReleaseCallback] = None
        self._suppress_click = False

    # --- read side ---

    @property
    def state(self) -> InteractionState:
        return InteractionState.IDLE if self._drag is None else InteractionState.DRAGGING

    @property
    def drag(self) -> Optional[DragState]:
        return self._drag

    @property
    def aps(self) -> Tuple[NaturalPoint, ...]:
        return self._aps.snapshot()

    @property
    def mapper(self) -> CoordinateMapper:
        return self._mapper

    @property
    def is_ready(self) -> bool:
        """True once an image has decoded and its displayed size is known."""
        return self._mapper.has_display

    def display_positions(self) -> List[Union[DisplayPoint, Availability]]:
        return [self._mapper.natural_to_display(p) for p in self._aps]

    def metric_positions(self) -> List[Union[MetricPoint, Availability]]:
        return [self._mapper.natural_to_metric(p) for p in self._aps]

    def coverage_radius_display(self, radius_m: float) -> Union[float, Availability]:
        return self._mapper.radius_to_display(radius_m)

    # --- session events ---

    def load_image(self, natural_width: int, natural_height: int):
        """A new plan image finished decoding; previous APs belong to the old plan."""
        self._end_drag()
        self._suppress_click = False
        image = PlanImageMetadata(int(natural_width), int(natural_height))
        if not image.is_valid:
            logger.warning(f"Plan image has no usable size ({natural_width}x{natural_height})")
            image = None
        self._mapper = self._mapper.with_image(image)
        self._aps.clear()
        self._notify()

    def unload_image(self):
        self._end_drag()
        self._mapper = self._mapper.with_image(None)
        self._aps.clear()
        self._notify()

    def set_display_size(self, width: float, height: float):
        self._mapper = self._mapper.with_display_size(width, height)

    def set_building_length(self, length: float):
        self._mapper = self._mapper.with_building_length(length)

    def clear_aps(self):
        self._end_drag()
        self._aps.clear()
        self._notify()

    def reset(self):
        self._end_drag()
        self._suppress_click = False
        self._aps.clear()
        self._notify()

    # --- pointer events ---

    def pointer_down(self, position: DisplayPoint, index: int) -> bool:
        """
        Pointer pressed on the marker of AP ``index``.

        Always consumed when it targets an existing marker, so the surface
        underneath must not treat it as a click-to-add.
        """
        self._suppress_click = False
        if self._drag is not None:
            logger.warning(f"Pointer down on AP {index} while AP {self._drag.index} is dragged; ending stale drag")
            self._end_drag()
        if not self._aps.has_index(index):
            return False

        center = self._mapper.natural_to_display(self._aps[index])
        if center is UNAVAILABLE:
            return True

        self._drag = DragState(index, position.offset_from(center))
        self._release = self._pointer_source.attach(self.pointer_move, self.pointer_up)
        logger.debug(f"Drag started on AP {index + 1} with offset {self._drag.offset}")
        return True

    def pointer_move(self, position: DisplayPoint) -> bool:
        drag = self._drag
        if drag is None:
            return False
        if not self._aps.has_index(drag.index):
            logger.warning(f"Dragged AP {drag.index} no longer exists; ending drag")
            self._end_drag()
            return False

        try:
            natural = self._mapper.display_to_natural(position.minus(drag.offset))
            if natural is UNAVAILABLE:
                return False
            self._aps.replace(drag.index, natural)
            self._notify()
        except Exception:
            self._end_drag()
            raise
        return True

    def pointer_up(self, position: Optional[DisplayPoint] = None) -> bool:
        """Ends a drag; the click that follows this release is swallowed."""
        if self._drag is None:
            return False
        logger.debug(f"Drag ended on AP {self._drag.index + 1}")
        self._end_drag()
        self._suppress_click = True
        return True

    def cancel_drag(self) -> bool:
        """Abnormal end of a drag, e.g. the surface lost the pointer while pressed."""
        if self._drag is None:
            return False
        logger.debug(f"Drag on AP {self._drag.index + 1} cancelled")
        self._end_drag()
        self._suppress_click = False
        return True

    def click(self, position: DisplayPoint, index: Optional[int] = None) -> bool:
        """Click on the plan; adds an AP when it lands on the surface itself."""
        if self._suppress_click:
            self._suppress_click = False
            return False
        if self._drag is not None or index is not None:
            return False
        if not self._mapper.contains_display(position):
            return False

        natural = self._mapper.display_to_natural(position)
        if natural is UNAVAILABLE:
            return False
        if not proximity.accept(natural, self._aps.snapshot()):
            logger.info(f"AP not added: too close to an existing AP ({natural.x:.0f}, {natural.y:.0f})")
            return False

        self._aps.append(natural)
        logger.debug(f"Added AP {len(self._aps)} at natural ({natural.x:.1f}, {natural.y:.1f})")
        self._notify()
        return True

    def double_click(self, position: DisplayPoint, index: Optional[int] = None) -> bool:
        """Double-click on a marker deletes that AP; on the surface it does nothing."""
        self._suppress_click = False
        if index is None:
            return False
        self._end_drag()
        if not self._aps.has_index(index):
            return False
        removed = self._aps.remove(index)
        logger.debug(f"Removed AP {index + 1} at natural ({removed.x:.1f}, {removed.y:.1f})")
        self._notify()
        return True

    # --- internals ---

    def _end_drag(self):
        release, self._release = self._release, None
        self._drag = None
        if release is not None:
            release()

    def _notify(self):
        if self._on_change is not None:
            self._on_change(self._aps.snapshot())
