"""Loading of floor-plan images (JPEG/PNG) for manual AP placement."""

import logging
import os
from typing import Tuple

import cv2
import numpy as np

from ap_planner.geometry.coordinates import PlanImageMetadata

logger = logging.getLogger(__name__)


class PlanImageError(ValueError):
    """Plan image missing, unreadable or without a usable size."""


def load_plan_image(image_path: str) -> Tuple[np.ndarray, PlanImageMetadata]:
    """
    Load a floor plan image.

    Args:
        image_path: Path to the floor plan image

    Returns:
        (RGB image array, natural size metadata)
    """
    if not os.path.exists(image_path):
        raise PlanImageError(f"Image file not found at {image_path}")

    image = cv2.imread(image_path)
    if image is None:
        raise PlanImageError(f"Could not load image from {image_path}")

    image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    metadata = metadata_from_array(image)
    if not metadata.is_valid:
        raise PlanImageError(f"Image {image_path} has no usable dimensions")

    logger.info(f"Loaded plan image {image_path}: {metadata.width} x {metadata.height} pixels")
    return image, metadata


def metadata_from_array(image: np.ndarray) -> PlanImageMetadata:
    height, width = image.shape[:2]
    return PlanImageMetadata(width=int(width), height=int(height))


def fit_to_width(image: np.ndarray, max_width: int, max_height: int) -> np.ndarray:
    """Downscale ``image`` uniformly to fit the given box; never upscales."""
    height, width = image.shape[:2]
    scale = min(max_width / width, max_height / height, 1.0)
    if scale >= 1.0:
        return image
    size = (max(1, int(round(width * scale))), max(1, int(round(height * scale))))
    return cv2.resize(image, size, interpolation=cv2.INTER_AREA)


def encode_png(image: np.ndarray) -> bytes:
    """PNG bytes of an RGB image array."""
    ok, buffer = cv2.imencode('.png', cv2.cvtColor(image, cv2.COLOR_RGB2BGR))
    if not ok:
        raise PlanImageError("Could not encode plan image as PNG")
    return buffer.tobytes()
