import numpy as np

from errors import ShapeMismatchError
from pose_types import NormalizedLandmark, NormalizedLandmarkList
from presence import activate


class LandmarkDecoder:
    """Converts raw landmark values (model input pixels) to normalized points.

    Each point occupies ``D`` consecutive values: x, y, z and, when present,
    visibility and presence.
    """

    def __init__(
        self,
        num_landmarks: int = 31,
        input_image_width: int = 256,
        input_image_height: int = 256,
        flip_horizontally: bool = False,
        flip_vertically: bool = False,
        normalize_z: float = 1.0,
        visibility_activation: str = "none",
    ):
        self.num_landmarks = num_landmarks
        self.input_image_width = input_image_width
        self.input_image_height = input_image_height
        self.flip_horizontally = flip_horizontally
        self.flip_vertically = flip_vertically
        self.normalize_z = normalize_z
        self.visibility_activation = visibility_activation

    def decode(self, landmark_tensor: np.ndarray) -> NormalizedLandmarkList:
        raw = np.asarray(landmark_tensor, dtype=np.float64).reshape(-1)
        if raw.size == 0 or raw.size % self.num_landmarks != 0:
            raise ShapeMismatchError(
                f"Landmark tensor size {raw.size} is not a multiple of {self.num_landmarks} landmarks"
            )
        dims = raw.size // self.num_landmarks
        if dims < 3:
            raise ShapeMismatchError(f"Each landmark needs at least x, y, z values, got {dims}")
        points = raw.reshape(self.num_landmarks, dims)

        xs = points[:, 0]
        ys = points[:, 1]
        if self.flip_horizontally:
            xs = self.input_image_width - xs
        if self.flip_vertically:
            ys = self.input_image_height - ys
        xs = xs / self.input_image_width
        ys = ys / self.input_image_height
        zs = points[:, 2] / self.input_image_width / self.normalize_z

        visibility = activate(points[:, 3], self.visibility_activation) if dims > 3 else None
        presence = activate(points[:, 4], self.visibility_activation) if dims > 4 else None

        landmarks = []
        for i in range(self.num_landmarks):
            landmarks.append(
                NormalizedLandmark(
                    x=float(xs[i]),
                    y=float(ys[i]),
                    z=float(zs[i]),
                    visibility=None if visibility is None else float(visibility[i]),
                    presence=None if presence is None else float(presence[i]),
                )
            )
        return NormalizedLandmarkList(landmarks)
