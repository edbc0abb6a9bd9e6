import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from errors import ConfigurationError
from topology import NUM_UPPER_BODY_LANDMARKS

ACTIVATIONS = ("none", "sigmoid")


@dataclass(frozen=True)
class PipelineConfig:
    output_size: int = 256
    keep_aspect_ratio: bool = True
    pad_value: float = 0.0
    zero_center: bool = False
    num_landmarks: int = NUM_UPPER_BODY_LANDMARKS
    # x, y, z, visibility, presence
    landmark_dimensions: int = 5
    landmark_tensor_range: Tuple[int, int] = (0, 1)
    flag_tensor_range: Tuple[int, int] = (1, 2)
    presence_threshold: float = 0.5
    presence_activation: str = "sigmoid"
    visibility_activation: str = "none"
    flip_horizontally: bool = False
    flip_vertically: bool = False
    normalize_z: float = 1.0
    ignore_rotation: bool = False

    def __post_init__(self):
        if self.output_size < 1:
            raise ConfigurationError(f"output_size must be >= 1, got {self.output_size}")
        if self.num_landmarks < 1:
            raise ConfigurationError(f"num_landmarks must be >= 1, got {self.num_landmarks}")
        if self.landmark_dimensions < 3:
            raise ConfigurationError(
                f"landmark_dimensions must be >= 3 (x, y, z), got {self.landmark_dimensions}"
            )
        if not 0.0 <= self.presence_threshold <= 1.0:
            raise ConfigurationError(
                f"presence_threshold must be between 0 and 1, got {self.presence_threshold}"
            )
        if self.presence_activation not in ACTIVATIONS:
            raise ConfigurationError(f"Unknown presence_activation '{self.presence_activation}'")
        if self.visibility_activation not in ACTIVATIONS:
            raise ConfigurationError(f"Unknown visibility_activation '{self.visibility_activation}'")
        if self.normalize_z == 0:
            raise ConfigurationError("normalize_z must be non-zero")
        for name in ("landmark_tensor_range", "flag_tensor_range"):
            begin, end = getattr(self, name)
            if begin < 0 or end <= begin:
                raise ConfigurationError(f"{name} must be a non-empty [begin, end) range, got {(begin, end)}")
            # JSON lists come in as lists; keep the frozen value hashable.
            object.__setattr__(self, name, (int(begin), int(end)))

    @property
    def landmark_values(self) -> int:
        return self.num_landmarks * self.landmark_dimensions

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Union[str, Path]) -> PipelineConfig:
    p = Path(path).expanduser()
    if not p.exists():
        raise ConfigurationError(f"Config file not found: {p}")
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to read config {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config {p} must contain a JSON object")

    known = {f.name for f in fields(PipelineConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")
    try:
        return PipelineConfig(**raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid config {p}: {e}") from e
