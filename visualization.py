from typing import Dict, Optional, Tuple

import cv2
import numpy as np

from geometry import rect_corners
from pose_types import NormalizedLandmark, NormalizedLandmarkList, NormalizedRect
from topology import UPPER_BODY_CONNECTIONS, UPPER_BODY_LANDMARK_NAMES


def _to_pixel(lm: NormalizedLandmark, image_size: Tuple[int, int]) -> Tuple[int, int]:
    width, height = image_size
    return int(lm.x * width), int(lm.y * height)


def draw_landmarks(
    frame,
    landmarks: Optional[NormalizedLandmarkList],
    highlight: Optional[Dict[str, Tuple[int, int, int]]] = None,
    min_visibility: float = 0.0,
) -> None:
    if landmarks is None:
        return
    highlight = highlight or {}
    height, width = frame.shape[:2]

    def visible(lm: NormalizedLandmark) -> bool:
        return lm.visibility is None or lm.visibility >= min_visibility

    for a, b in UPPER_BODY_CONNECTIONS:
        if a >= len(landmarks) or b >= len(landmarks):
            continue
        lm_a = landmarks[a]
        lm_b = landmarks[b]
        if not visible(lm_a) or not visible(lm_b):
            continue
        cv2.line(frame, _to_pixel(lm_a, (width, height)), _to_pixel(lm_b, (width, height)), (0, 255, 0), 2)

    for idx, lm in enumerate(landmarks):
        if not visible(lm):
            continue
        if idx < len(UPPER_BODY_LANDMARK_NAMES):
            color = highlight.get(UPPER_BODY_LANDMARK_NAMES[idx], (0, 255, 255))
            radius = 5
        else:
            # Auxiliary points.
            color = (128, 128, 128)
            radius = 3
        cv2.circle(frame, _to_pixel(lm, (width, height)), radius, color, -1)


def draw_roi(frame, roi: NormalizedRect, color=(255, 0, 255)) -> None:
    height, width = frame.shape[:2]
    corners = np.round(rect_corners(roi, width, height)).astype(np.int32)
    cv2.polylines(frame, [corners.reshape(-1, 1, 2)], True, color, 2)
