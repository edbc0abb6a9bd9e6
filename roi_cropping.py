import logging

import cv2
import numpy as np

from geometry import crop_to_source_matrix
from pose_types import NormalizedRect
from validators import validate_image

logger = logging.getLogger(__name__)


class RoiCropper:
    """Extracts the (possibly rotated) ROI as an upright image.

    Samples falling outside the source replicate the nearest edge pixel.
    """

    def crop(self, image: np.ndarray, roi: NormalizedRect) -> np.ndarray:
        roi.validate()
        validate_image(image)

        height, width = image.shape[:2]
        crop_width, crop_height = roi.pixel_size(width, height)
        matrix = crop_to_source_matrix(roi, width, height, crop_width, crop_height)

        cropped = cv2.warpAffine(
            image,
            matrix,
            (crop_width, crop_height),
            flags=cv2.INTER_LINEAR | cv2.WARP_INVERSE_MAP,
            borderMode=cv2.BORDER_REPLICATE,
        )
        # OpenCV drops a trailing singleton channel axis.
        if image.ndim == 3 and cropped.ndim == 2:
            cropped = cropped[:, :, np.newaxis]

        logger.debug(
            "Cropped ROI center=(%.3f, %.3f) rot=%.3f to %dx%d from %dx%d",
            roi.center_x,
            roi.center_y,
            roi.rotation,
            crop_width,
            crop_height,
            width,
            height,
        )
        return cropped
