"""Ordered set of manually placed APs in natural-pixel space."""

from typing import Iterator, List, Tuple

from ap_planner.geometry.coordinates import NaturalPoint


class ManualAPSet:
    """
    Manually placed APs in placement order.

    Only InteractionController mutates an instance; everything else reads the
    tuple returned by ``snapshot()``.
    """

    def __init__(self):
        self._points: List[NaturalPoint] = []

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[NaturalPoint]:
        return iter(tuple(self._points))

    def __getitem__(self, index: int) -> NaturalPoint:
        return self._points[index]

    def has_index(self, index: int) -> bool:
        return 0 <= index < len(self._points)

    def snapshot(self) -> Tuple[NaturalPoint, ...]:
        return tuple(self._points)

    def append(self, point: NaturalPoint):
        self._points.append(point)

    def replace(self, index: int, point: NaturalPoint):
        if not self.has_index(index):
            raise IndexError(f"No AP at index {index}")
        self._points[index] = point

    def remove(self, index: int) -> NaturalPoint:
        if not self.has_index(index):
            raise IndexError(f"No AP at index {index}")
        return self._points.pop(index)

    def clear(self):
        self._points.clear()
