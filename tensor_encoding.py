import numpy as np

from errors import InvalidImageError, ShapeMismatchError


class TensorEncoder:
    def __init__(self, output_size: int = 256, zero_center: bool = False):
        self.output_size = output_size
        self.zero_center = zero_center

    def encode(self, image: np.ndarray) -> np.ndarray:
        size = self.output_size
        if image.ndim != 3 or image.shape[:2] != (size, size) or image.shape[2] != 3:
            raise ShapeMismatchError(f"Expected a {size}x{size}x3 image, got shape {image.shape}")

        if image.dtype == np.uint8:
            tensor = image.astype(np.float32) / 255.0
        elif image.dtype == np.uint16:
            tensor = image.astype(np.float32) / 65535.0
        elif np.issubdtype(image.dtype, np.floating):
            tensor = np.clip(image.astype(np.float32), 0.0, 1.0)
        else:
            raise InvalidImageError(f"Unsupported image dtype {image.dtype}")

        if self.zero_center:
            tensor = tensor * 2.0 - 1.0
        return tensor[np.newaxis, ...]
