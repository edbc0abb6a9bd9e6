import math
from typing import Tuple

import numpy as np

from pose_types import NormalizedRect


def rotate_point(x: float, y: float, angle: float) -> Tuple[float, float]:
    # Positive angles rotate clockwise on screen since image y points down.
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return cos_a * x - sin_a * y, sin_a * x + cos_a * y


def crop_to_source_matrix(
    roi: NormalizedRect,
    image_width: int,
    image_height: int,
    crop_width: int,
    crop_height: int,
) -> np.ndarray:
    """Affine map from crop pixel indices to source pixel indices (2x3).

    Pixel centres sit at integer indices, so a full-frame, unrotated ROI maps
    every crop pixel onto the same source pixel.
    """
    cos_a = math.cos(roi.rotation)
    sin_a = math.sin(roi.rotation)
    # Source pixels per crop pixel along each rect axis.
    scale_x = roi.width * image_width / crop_width
    scale_y = roi.height * image_height / crop_height

    offset_x = 0.5 - crop_width / 2.0
    offset_y = 0.5 - crop_height / 2.0
    center_x = roi.center_x * image_width - 0.5
    center_y = roi.center_y * image_height - 0.5

    return np.array(
        [
            [
                cos_a * scale_x,
                -sin_a * scale_y,
                center_x + cos_a * scale_x * offset_x - sin_a * scale_y * offset_y,
            ],
            [
                sin_a * scale_x,
                cos_a * scale_y,
                center_y + sin_a * scale_x * offset_x + cos_a * scale_y * offset_y,
            ],
        ],
        dtype=np.float64,
    )


def rect_corners(roi: NormalizedRect, image_width: int, image_height: int) -> np.ndarray:
    """Rotated ROI corners in source pixel coordinates, clockwise from top-left."""
    half_w = roi.width * image_width / 2.0
    half_h = roi.height * image_height / 2.0
    cx = roi.center_x * image_width
    cy = roi.center_y * image_height
    corners = []
    for dx, dy in ((-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)):
        rx, ry = rotate_point(dx, dy, roi.rotation)
        corners.append((cx + rx, cy + ry))
    return np.array(corners, dtype=np.float32)
