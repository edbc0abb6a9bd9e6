import logging
from typing import Optional

import numpy as np

from errors import ShapeMismatchError
from pose_types import PresenceDecision

logger = logging.getLogger(__name__)


def sigmoid(values):
    # Split by sign so large magnitudes never overflow exp().
    values = np.asarray(values, dtype=np.float64)
    out = np.empty_like(values)
    positive = values >= 0
    out[positive] = 1.0 / (1.0 + np.exp(-values[positive]))
    exp_values = np.exp(values[~positive])
    out[~positive] = exp_values / (1.0 + exp_values)
    return out


def activate(values, activation: str):
    if activation == "sigmoid":
        return sigmoid(values)
    if activation == "none":
        return np.asarray(values, dtype=np.float64)
    raise ValueError(f"Unknown activation '{activation}'")


class PresenceGate:
    def __init__(self, threshold: float = 0.5, activation: str = "sigmoid"):
        self.threshold = threshold
        self.activation = activation

    def score(self, flag_tensor: np.ndarray) -> float:
        flag = np.asarray(flag_tensor)
        if flag.size != 1:
            raise ShapeMismatchError(f"Presence flag tensor must hold 1 value, got {flag.size}")
        # Raw flags from "none" activation may fall outside [0, 1].
        return float(np.clip(activate(flag.reshape(-1), self.activation)[0], 0.0, 1.0))

    def decide(self, flag_tensor: np.ndarray) -> PresenceDecision:
        return self.decide_score(self.score(flag_tensor))

    def decide_score(self, score: float) -> PresenceDecision:
        # Strict comparison: a score equal to the threshold means no pose.
        return PresenceDecision(score=score, present=score > self.threshold, threshold=self.threshold)

    def gate(self, landmark_tensor: np.ndarray, decision: PresenceDecision) -> Optional[np.ndarray]:
        if not decision.present:
            logger.debug("Pose absent: score %.4f <= threshold %.4f", decision.score, decision.threshold)
            return None
        return landmark_tensor
