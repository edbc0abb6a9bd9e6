import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from errors import InferenceFailureError, ShapeMismatchError

logger = logging.getLogger(__name__)

NetworkOutput = Union[np.ndarray, Sequence[np.ndarray]]
Network = Callable[[np.ndarray], NetworkOutput]


class InferenceAdapter:
    """Typed boundary around the external landmark network."""

    def __init__(self, network: Network, input_size: int = 256):
        self.network = network
        self.input_size = input_size

    def infer(self, tensor: np.ndarray) -> List[np.ndarray]:
        expected = (1, self.input_size, self.input_size, 3)
        if tuple(tensor.shape) != expected:
            raise ShapeMismatchError(f"Network input must have shape {list(expected)}, got {list(tensor.shape)}")

        start_time = time.perf_counter()
        try:
            raw = self.network(tensor)
        except Exception as e:
            logger.exception("Landmark network call failed")
            raise InferenceFailureError(f"Landmark network call failed: {e}") from e
        elapsed_ms = (time.perf_counter() - start_time) * 1000.0

        if raw is None:
            raise InferenceFailureError("Landmark network returned no output")
        if isinstance(raw, np.ndarray):
            raw = [raw]
        try:
            outputs = [np.asarray(t, dtype=np.float32) for t in raw]
        except (TypeError, ValueError) as e:
            raise InferenceFailureError(f"Landmark network returned non-numeric output: {e}") from e
        if not outputs:
            raise InferenceFailureError("Landmark network returned an empty output vector")

        logger.debug("Inference took %.2f ms, outputs=%s", elapsed_ms, [list(t.shape) for t in outputs])
        return outputs


class OutputSplitter:
    """Separates the landmark block from the presence flag.

    A vector of tensors is split by index ranges; a single combined tensor is
    split at the landmark value count.
    """

    def __init__(
        self,
        landmark_values: int,
        landmark_range: Tuple[int, int] = (0, 1),
        flag_range: Tuple[int, int] = (1, 2),
    ):
        self.landmark_values = landmark_values
        self.landmark_range = landmark_range
        self.flag_range = flag_range

    def split(self, outputs: Sequence[np.ndarray]) -> Tuple[np.ndarray, np.ndarray]:
        if len(outputs) == 1:
            landmarks, flag = self._split_combined(outputs[0])
        else:
            landmarks = self._select(outputs, self.landmark_range, "landmark")
            flag = self._select(outputs, self.flag_range, "presence flag")

        if landmarks.size != self.landmark_values:
            raise ShapeMismatchError(
                f"Landmark tensor must hold {self.landmark_values} values, got {landmarks.size}"
            )
        if flag.size != 1:
            raise ShapeMismatchError(f"Presence flag tensor must hold 1 value, got {flag.size}")
        return landmarks.reshape(1, 1, 1, self.landmark_values), flag.reshape(1, 1, 1, 1)

    def _split_combined(self, combined: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        flat = np.asarray(combined).reshape(-1)
        expected = self.landmark_values + 1
        if flat.size != expected:
            raise ShapeMismatchError(f"Combined output must hold {expected} values, got {flat.size}")
        return flat[: self.landmark_values].copy(), flat[self.landmark_values :].copy()

    @staticmethod
    def _select(outputs: Sequence[np.ndarray], index_range: Tuple[int, int], label: str) -> np.ndarray:
        begin, end = index_range
        if end > len(outputs):
            raise ShapeMismatchError(
                f"{label} range [{begin}, {end}) exceeds {len(outputs)} output tensors"
            )
        selected = outputs[begin:end]
        if len(selected) != 1:
            raise ShapeMismatchError(f"{label} range [{begin}, {end}) must select exactly one tensor")
        return np.asarray(selected[0]).reshape(-1).copy()


class OpenCvDnnNetwork:
    """Runs a landmark model file through OpenCV's DNN module."""

    def __init__(
        self,
        model_path: str,
        output_names: Optional[Sequence[str]] = None,
        channels_first: bool = False,
    ):
        self.model_path = model_path
        self.channels_first = channels_first
        self._net = cv2.dnn.readNet(model_path)
        self._output_names = list(output_names) if output_names else list(self._net.getUnconnectedOutLayersNames())

    def __call__(self, tensor: np.ndarray) -> List[np.ndarray]:
        blob = np.ascontiguousarray(tensor.transpose(0, 3, 1, 2) if self.channels_first else tensor)
        self._net.setInput(blob)
        outputs = self._net.forward(self._output_names)
        return [np.asarray(out) for out in outputs]
