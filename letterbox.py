import logging
from dataclasses import replace
from typing import Tuple

import cv2
import numpy as np

from errors import ConfigurationError
from pose_types import LetterboxPadding, NormalizedLandmarkList
from validators import validate_image

logger = logging.getLogger(__name__)


def fit_size(width: int, height: int, target: int) -> Tuple[int, int]:
    scale = min(target / width, target / height)
    fit_width = min(target, max(1, int(round(width * scale))))
    fit_height = min(target, max(1, int(round(height * scale))))
    return fit_width, fit_height


class LetterboxResizer:
    def __init__(self, output_size: int = 256, keep_aspect_ratio: bool = True, pad_value: float = 0.0):
        self.output_size = output_size
        self.keep_aspect_ratio = keep_aspect_ratio
        self.pad_value = pad_value

    def resize(self, image: np.ndarray) -> Tuple[np.ndarray, LetterboxPadding]:
        validate_image(image)
        if np.issubdtype(image.dtype, np.integer):
            limits = np.iinfo(image.dtype)
            if not limits.min <= self.pad_value <= limits.max:
                raise ConfigurationError(
                    f"pad_value {self.pad_value} does not fit image dtype {image.dtype}"
                )
        size = self.output_size
        height, width = image.shape[:2]

        if self.keep_aspect_ratio:
            fit_width, fit_height = fit_size(width, height, size)
        else:
            fit_width, fit_height = size, size

        resized = cv2.resize(image, (fit_width, fit_height), interpolation=cv2.INTER_LINEAR)
        if image.ndim == 3 and resized.ndim == 2:
            resized = resized[:, :, np.newaxis]

        # Extra odd pixel goes to the right/bottom edge.
        pad_left = (size - fit_width) // 2
        pad_top = (size - fit_height) // 2
        pad_right = size - fit_width - pad_left
        pad_bottom = size - fit_height - pad_top

        output = np.full((size, size) + image.shape[2:], self.pad_value, dtype=image.dtype)
        output[pad_top : pad_top + fit_height, pad_left : pad_left + fit_width] = resized

        padding = LetterboxPadding(
            left=pad_left / size,
            top=pad_top / size,
            right=pad_right / size,
            bottom=pad_bottom / size,
        )
        logger.debug(
            "Letterboxed %dx%d -> %dx%d in %dx%d, padding=%s",
            width,
            height,
            fit_width,
            fit_height,
            size,
            size,
            padding.as_tuple(),
        )
        return output, padding


class LetterboxRemover:
    """Maps landmarks from the padded square back onto the un-padded content."""

    def remove(self, landmarks: NormalizedLandmarkList, padding: LetterboxPadding) -> NormalizedLandmarkList:
        if padding.is_empty:
            return landmarks
        left, top, right, bottom = padding.as_tuple()
        content_width = 1.0 - left - right
        content_height = 1.0 - top - bottom

        return NormalizedLandmarkList(
            [
                replace(
                    lm,
                    x=(lm.x - left) / content_width,
                    y=(lm.y - top) / content_height,
                    # z follows the horizontal scale.
                    z=lm.z / content_width,
                )
                for lm in landmarks
            ]
        )
