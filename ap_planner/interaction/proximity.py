"""Near-duplicate rejection for manually placed APs."""

from typing import Sequence

import numpy as np

from ap_planner.geometry.coordinates import NaturalPoint

# Minimum distance in natural image pixels for a new AP to count as distinct
MIN_DISTANCE_PX = 5.0
MIN_DISTANCE_SQ = MIN_DISTANCE_PX * MIN_DISTANCE_PX


def accept(candidate: NaturalPoint, existing: Sequence[NaturalPoint]) -> bool:
    """
    True unless ``candidate`` is closer than MIN_DISTANCE_PX to an existing AP.

    Squared distances are compared, so points exactly MIN_DISTANCE_PX apart are
    accepted.
    """
    if len(existing) == 0:
        return True
    coords = np.array([p.as_tuple() for p in existing], dtype=float)
    d2 = np.sum((coords - np.array(candidate.as_tuple(), dtype=float)) ** 2, axis=1)
    return bool(np.all(d2 >= MIN_DISTANCE_SQ))
