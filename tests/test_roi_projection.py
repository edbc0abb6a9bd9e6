import math

import numpy as np
import pytest

from errors import InvalidRoiError
from geometry import crop_to_source_matrix
from pose_types import NormalizedLandmark, NormalizedLandmarkList, NormalizedRect
from roi_projection import RoiProjector


def _single(x: float, y: float, z: float = 0.0) -> NormalizedLandmarkList:
    return NormalizedLandmarkList([NormalizedLandmark(x, y, z)])


@pytest.mark.parametrize(
    "roi",
    [
        NormalizedRect(0.5, 0.5, 1.0, 1.0),
        NormalizedRect(0.3, 0.7, 0.2, 0.4),
        NormalizedRect(0.8, 0.1, 0.3, 0.15),
    ],
)
def test_crop_center_projects_to_roi_center(roi: NormalizedRect) -> None:
    lm = RoiProjector().project(_single(0.5, 0.5), roi)[0]
    assert lm.x == pytest.approx(roi.center_x)
    assert lm.y == pytest.approx(roi.center_y)


def test_unrotated_corners_map_to_roi_corners() -> None:
    roi = NormalizedRect(0.4, 0.6, 0.2, 0.4)
    lm = RoiProjector().project(_single(0.0, 1.0), roi, (640, 480))[0]
    assert lm.x == pytest.approx(0.3)
    assert lm.y == pytest.approx(0.8)


def test_rotation_quarter_turn() -> None:
    roi = NormalizedRect(0.5, 0.5, 0.5, 0.5, math.pi / 2)
    lm = RoiProjector().project(_single(1.0, 0.5), roi)[0]
    assert lm.x == pytest.approx(0.5)
    assert lm.y == pytest.approx(0.75)


def test_ignore_rotation() -> None:
    roi = NormalizedRect(0.5, 0.5, 0.5, 0.5, math.pi / 2)
    lm = RoiProjector(ignore_rotation=True).project(_single(1.0, 0.5), roi)[0]
    assert lm.x == pytest.approx(0.75)
    assert lm.y == pytest.approx(0.5)


def test_z_scales_with_roi_width() -> None:
    roi = NormalizedRect(0.5, 0.5, 0.25, 0.8)
    lm = RoiProjector().project(_single(0.5, 0.5, 0.4), roi)[0]
    assert lm.z == pytest.approx(0.1)


def test_projection_inverts_rotated_crop_on_non_square_frame() -> None:
    width, height = 320, 180
    roi = NormalizedRect(0.45, 0.55, 0.3, 0.5, 0.7)
    crop_width, crop_height = roi.pixel_size(width, height)
    matrix = crop_to_source_matrix(roi, width, height, crop_width, crop_height)

    for px, py in [(0, 0), (crop_width - 1, 0), (10, 40), (crop_width // 2, crop_height - 1)]:
        u = (px + 0.5) / crop_width
        v = (py + 0.5) / crop_height
        lm = RoiProjector().project(_single(u, v), roi, (width, height))[0]
        src_x, src_y = matrix @ np.array([px, py, 1.0])
        assert lm.x * width - 0.5 == pytest.approx(src_x, abs=1e-6)
        assert lm.y * height - 0.5 == pytest.approx(src_y, abs=1e-6)


def test_rejects_invalid_roi() -> None:
    with pytest.raises(InvalidRoiError):
        RoiProjector().project(_single(0.5, 0.5), NormalizedRect(0.5, 0.5, 0.0, 1.0))
