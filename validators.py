import numpy as np

from errors import InvalidImageError


def validate_image(image) -> None:
    if image is None:
        raise InvalidImageError("Image is None")
    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"Image must be numpy.ndarray, got {type(image)}")
    if image.size == 0:
        raise InvalidImageError("Image is empty")
    if image.ndim not in (2, 3):
        raise InvalidImageError(f"Image must be 2D or 3D, got shape {image.shape}")
    if image.ndim == 3 and image.shape[2] not in (1, 3, 4):
        raise InvalidImageError(f"Image channels must be 1, 3, or 4, got {image.shape[2]}")


def validate_rgb_image(image) -> None:
    validate_image(image)
    if image.ndim != 3 or image.shape[2] != 3:
        raise InvalidImageError(f"Image must have 3 channels, got shape {image.shape}")
