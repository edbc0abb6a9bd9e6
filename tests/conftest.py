from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from config import PipelineConfig


class StubNetwork:
    """Returns a fixed landmark block and presence flag, recording its inputs."""

    def __init__(
        self,
        points: Optional[Dict[int, Tuple[float, float, float]]] = None,
        flag: float = 5.0,
        config: Optional[PipelineConfig] = None,
        combined: bool = False,
    ):
        self.config = config or PipelineConfig()
        self.points = points or {}
        self.flag = flag
        self.combined = combined
        self.calls: List[np.ndarray] = []

    def landmark_block(self) -> np.ndarray:
        cfg = self.config
        block = np.zeros((cfg.num_landmarks, cfg.landmark_dimensions), dtype=np.float32)
        for idx, (x, y, z) in self.points.items():
            block[idx, :3] = (x, y, z)
        return block.reshape(1, -1)

    def __call__(self, tensor: np.ndarray):
        self.calls.append(tensor)
        flag = np.array([[self.flag]], dtype=np.float32)
        if self.combined:
            return np.concatenate([self.landmark_block().reshape(-1), flag.reshape(-1)])
        return [self.landmark_block(), flag]


def landmark_tensor(values: Sequence[Sequence[float]]) -> np.ndarray:
    return np.asarray(values, dtype=np.float32).reshape(1, 1, 1, -1)
