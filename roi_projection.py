from dataclasses import replace
from typing import Optional, Tuple

from geometry import rotate_point
from pose_types import NormalizedLandmarkList, NormalizedRect


class RoiProjector:
    """Maps crop-local normalized landmarks into full-frame normalized space.

    Inverts the crop: centre, scale by the ROI size, rotate by the ROI angle,
    then translate to the ROI centre. With ``image_size`` the rotation runs in
    pixel units so non-square frames round-trip exactly; without it pixels
    are treated as square.
    """

    def __init__(self, ignore_rotation: bool = False):
        self.ignore_rotation = ignore_rotation

    def project(
        self,
        landmarks: NormalizedLandmarkList,
        roi: NormalizedRect,
        image_size: Optional[Tuple[int, int]] = None,
    ) -> NormalizedLandmarkList:
        roi.validate()
        image_width, image_height = image_size if image_size is not None else (1, 1)
        angle = 0.0 if self.ignore_rotation else roi.rotation
        span_x = roi.width * image_width
        span_y = roi.height * image_height

        projected = []
        for lm in landmarks:
            dx, dy = rotate_point((lm.x - 0.5) * span_x, (lm.y - 0.5) * span_y, angle)
            projected.append(
                replace(
                    lm,
                    x=roi.center_x + dx / image_width,
                    y=roi.center_y + dy / image_height,
                    z=lm.z * roi.width,
                )
            )
        return NormalizedLandmarkList(projected)
