import json
from pathlib import Path

import pytest

from config import PipelineConfig, load_config
from errors import ConfigurationError


def test_defaults() -> None:
    cfg = PipelineConfig()
    assert cfg.output_size == 256
    assert cfg.num_landmarks == 31
    assert cfg.presence_threshold == 0.5
    assert cfg.zero_center is False
    assert cfg.keep_aspect_ratio is True
    assert cfg.landmark_values == 31 * cfg.landmark_dimensions
    assert cfg.to_dict()["flag_tensor_range"] == (1, 2)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"output_size": 0},
        {"num_landmarks": 0},
        {"landmark_dimensions": 2},
        {"presence_threshold": 1.5},
        {"presence_activation": "relu"},
        {"visibility_activation": "tanh"},
        {"normalize_z": 0},
        {"flag_tensor_range": (2, 2)},
    ],
)
def test_invalid_values_rejected(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        PipelineConfig(**kwargs)


def test_load_config_from_json(tmp_path: Path) -> None:
    path = tmp_path / "pipeline.json"
    path.write_text(
        json.dumps({"presence_threshold": 0.7, "landmark_dimensions": 3, "landmark_tensor_range": [0, 1]}),
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.presence_threshold == 0.7
    assert cfg.landmark_dimensions == 3
    assert cfg.landmark_tensor_range == (0, 1)
    assert cfg.output_size == 256


def test_load_config_errors(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "missing.json")

    unknown = tmp_path / "unknown.json"
    unknown.write_text(json.dumps({"threshold": 0.5}), encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(unknown)

    malformed = tmp_path / "malformed.json"
    malformed.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(malformed)

    not_object = tmp_path / "list.json"
    not_object.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(not_object)
