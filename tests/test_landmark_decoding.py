import numpy as np
import pytest

from errors import ShapeMismatchError
from landmark_decoding import LandmarkDecoder
from topology import NUM_UPPER_BODY_LANDMARKS


def _raw(dims: int, num_landmarks: int = NUM_UPPER_BODY_LANDMARKS) -> np.ndarray:
    block = np.zeros((num_landmarks, dims), dtype=np.float32)
    for i in range(num_landmarks):
        block[i, :3] = (i * 8.0, i * 4.0, float(i))
        if dims > 3:
            block[i, 3] = 0.9
        if dims > 4:
            block[i, 4] = 0.4
    return block.reshape(1, 1, 1, -1)


def test_decodes_31_points_in_index_order() -> None:
    landmarks = LandmarkDecoder().decode(_raw(5))
    assert len(landmarks) == 31
    for i, lm in enumerate(landmarks):
        assert lm.x == pytest.approx(i * 8.0 / 256)
        assert lm.y == pytest.approx(i * 4.0 / 256)
        assert lm.z == pytest.approx(i / 256)
        assert lm.visibility == pytest.approx(0.9)
        assert lm.presence == pytest.approx(0.4)


def test_three_values_per_point_have_no_visibility() -> None:
    landmarks = LandmarkDecoder().decode(_raw(3))
    assert len(landmarks) == 31
    assert landmarks[0].visibility is None
    assert landmarks[0].presence is None


def test_visibility_activation() -> None:
    raw = _raw(4)
    landmarks = LandmarkDecoder(visibility_activation="sigmoid").decode(raw)
    assert landmarks[3].visibility == pytest.approx(1.0 / (1.0 + np.exp(-0.9)))


def test_values_outside_crop_are_kept() -> None:
    raw = _raw(3)
    raw.reshape(31, 3)[30] = (300.0, -20.0, 0.0)
    landmarks = LandmarkDecoder().decode(raw)
    assert landmarks[30].x == pytest.approx(300.0 / 256)
    assert landmarks[30].y == pytest.approx(-20.0 / 256)


def test_flip_and_normalize_z() -> None:
    decoder = LandmarkDecoder(flip_horizontally=True, flip_vertically=True, normalize_z=2.0)
    landmarks = decoder.decode(_raw(3))
    assert landmarks[2].x == pytest.approx((256 - 16.0) / 256)
    assert landmarks[2].y == pytest.approx((256 - 8.0) / 256)
    assert landmarks[2].z == pytest.approx(2.0 / 256 / 2.0)


def test_named_lookup() -> None:
    landmarks = LandmarkDecoder().decode(_raw(5))
    assert landmarks.get("nose") is landmarks[0]
    assert landmarks.get("right_hip") is landmarks[24]
    assert landmarks.get("left_knee") is None


@pytest.mark.parametrize("size", [0, 30, 31 * 2, 31 * 5 + 1])
def test_rejects_malformed_tensor(size: int) -> None:
    with pytest.raises(ShapeMismatchError):
        LandmarkDecoder().decode(np.zeros(size, dtype=np.float32))
