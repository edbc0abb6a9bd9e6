class PoseLandmarkError(Exception):
    """Base class for pipeline errors."""


class InvalidRoiError(PoseLandmarkError):
    """ROI with non-positive width or height."""


class InvalidImageError(PoseLandmarkError):
    pass


class ShapeMismatchError(PoseLandmarkError):
    """Tensor shape or size does not match the configured layout."""


class InferenceFailureError(PoseLandmarkError):
    """The external network call failed."""


class ConfigurationError(PoseLandmarkError):
    pass
