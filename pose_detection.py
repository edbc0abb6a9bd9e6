import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from config import PipelineConfig
from inference import InferenceAdapter, Network, OutputSplitter
from landmark_decoding import LandmarkDecoder
from letterbox import LetterboxRemover, LetterboxResizer
from pose_types import NormalizedLandmarkList, NormalizedRect, PoseLandmarkResult
from presence import PresenceGate
from roi_cropping import RoiCropper
from roi_projection import RoiProjector
from tensor_encoding import TensorEncoder
from validators import validate_rgb_image

logger = logging.getLogger(__name__)


class UpperBodyPoseLandmarker:
    """Upper-body landmarks for one ROI of one frame.

    Runs crop -> letterbox -> encode -> infer -> split -> presence gate ->
    decode -> letterbox removal -> ROI projection. A closed gate ends the run
    early with no landmarks; that is a normal result, not an error.
    """

    def __init__(self, network: Network, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        cfg = self.config
        self._cropper = RoiCropper()
        self._resizer = LetterboxResizer(cfg.output_size, cfg.keep_aspect_ratio, cfg.pad_value)
        self._encoder = TensorEncoder(cfg.output_size, cfg.zero_center)
        self._adapter = InferenceAdapter(network, cfg.output_size)
        self._splitter = OutputSplitter(cfg.landmark_values, cfg.landmark_tensor_range, cfg.flag_tensor_range)
        self._gate = PresenceGate(cfg.presence_threshold, cfg.presence_activation)
        self._decoder = LandmarkDecoder(
            num_landmarks=cfg.num_landmarks,
            input_image_width=cfg.output_size,
            input_image_height=cfg.output_size,
            flip_horizontally=cfg.flip_horizontally,
            flip_vertically=cfg.flip_vertically,
            normalize_z=cfg.normalize_z,
            visibility_activation=cfg.visibility_activation,
        )
        self._remover = LetterboxRemover()
        self._projector = RoiProjector(cfg.ignore_rotation)

    def run(self, image: np.ndarray, roi: NormalizedRect) -> PoseLandmarkResult:
        roi.validate()
        validate_rgb_image(image)

        crop = self._cropper.crop(image, roi)
        square, padding = self._resizer.resize(crop)
        tensor = self._encoder.encode(square)
        outputs = self._adapter.infer(tensor)
        landmark_tensor, flag_tensor = self._splitter.split(outputs)

        decision = self._gate.decide(flag_tensor)
        gated = self._gate.gate(landmark_tensor, decision)
        if gated is None:
            return PoseLandmarkResult(roi=roi, presence=decision, letterbox_padding=padding)

        landmarks = self._decoder.decode(gated)
        landmarks = self._remover.remove(landmarks, padding)
        height, width = image.shape[:2]
        landmarks = self._projector.project(landmarks, roi, (width, height))

        logger.debug("Pose present (score %.4f), %d landmarks", decision.score, len(landmarks))
        return PoseLandmarkResult(roi=roi, presence=decision, letterbox_padding=padding, landmarks=landmarks)

    def process(self, image: np.ndarray, roi: NormalizedRect) -> Optional[NormalizedLandmarkList]:
        return self.run(image, roi).landmarks

    def process_batch(self, pairs: Iterable[Tuple[np.ndarray, NormalizedRect]]) -> List[PoseLandmarkResult]:
        return [self.run(image, roi) for image, roi in pairs]

    def get_model_info(self) -> Dict[str, Any]:
        return self.config.to_dict()
