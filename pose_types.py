import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from errors import InvalidRoiError
from topology import LANDMARK_INDEX


@dataclass(frozen=True)
class NormalizedRect:
    center_x: float
    center_y: float
    width: float
    height: float
    rotation: float = 0.0

    @classmethod
    def full_frame(cls) -> "NormalizedRect":
        return cls(0.5, 0.5, 1.0, 1.0, 0.0)

    def validate(self) -> None:
        if not self.width > 0 or not self.height > 0:
            raise InvalidRoiError(
                f"ROI width and height must be positive, got {self.width} x {self.height}"
            )
        values = (self.center_x, self.center_y, self.width, self.height, self.rotation)
        if not all(math.isfinite(v) for v in values):
            raise InvalidRoiError(f"ROI fields must be finite, got {values}")

    def pixel_size(self, image_width: int, image_height: int) -> Tuple[int, int]:
        width = max(1, int(round(self.width * image_width)))
        height = max(1, int(round(self.height * image_height)))
        return width, height


@dataclass(frozen=True)
class LetterboxPadding:
    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    def __post_init__(self):
        for name in ("left", "top", "right", "bottom"):
            value = getattr(self, name)
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Letterbox {name} padding must be in [0, 1), got {value}")
        if self.left + self.right >= 1.0 or self.top + self.bottom >= 1.0:
            raise ValueError("Letterbox padding leaves no content area")

    @property
    def is_empty(self) -> bool:
        return self.left == 0.0 and self.top == 0.0 and self.right == 0.0 and self.bottom == 0.0

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.left, self.top, self.right, self.bottom

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        # Un-padded normalized coordinates -> padded square coordinates.
        return (
            self.left + x * (1.0 - self.left - self.right),
            self.top + y * (1.0 - self.top - self.bottom),
        )


@dataclass(frozen=True)
class NormalizedLandmark:
    x: float
    y: float
    z: float
    visibility: Optional[float] = None
    presence: Optional[float] = None

    def to_dict(self) -> Dict[str, float]:
        out = {"x": self.x, "y": self.y, "z": self.z}
        if self.visibility is not None:
            out["visibility"] = self.visibility
        if self.presence is not None:
            out["presence"] = self.presence
        return out


class NormalizedLandmarkList:
    """Immutable, ordered landmark sequence. Index order is the model topology."""

    __slots__ = ("_landmarks",)

    def __init__(self, landmarks: Sequence[NormalizedLandmark]):
        self._landmarks: Tuple[NormalizedLandmark, ...] = tuple(landmarks)

    def __len__(self) -> int:
        return len(self._landmarks)

    def __iter__(self) -> Iterator[NormalizedLandmark]:
        return iter(self._landmarks)

    def __getitem__(self, index: Union[int, slice]):
        return self._landmarks[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, NormalizedLandmarkList):
            return NotImplemented
        return self._landmarks == other._landmarks

    def __hash__(self) -> int:
        return hash(self._landmarks)

    def __repr__(self) -> str:
        return f"NormalizedLandmarkList({len(self._landmarks)} landmarks)"

    def get(self, name: str) -> Optional[NormalizedLandmark]:
        idx = LANDMARK_INDEX.get(name)
        if idx is None or idx >= len(self._landmarks):
            return None
        return self._landmarks[idx]

    def to_dicts(self) -> List[Dict[str, float]]:
        return [lm.to_dict() for lm in self._landmarks]


@dataclass(frozen=True)
class PresenceDecision:
    score: float
    present: bool
    threshold: float


@dataclass(frozen=True)
class PoseLandmarkResult:
    roi: NormalizedRect
    presence: PresenceDecision
    letterbox_padding: LetterboxPadding
    landmarks: Optional[NormalizedLandmarkList] = None

    @property
    def valid(self) -> bool:
        return self.landmarks is not None
