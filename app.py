import argparse
import json
import logging
import sys
from typing import List, Optional

import cv2

from config import PipelineConfig, load_config
from errors import PoseLandmarkError
from inference import OpenCvDnnNetwork
from pose_detection import UpperBodyPoseLandmarker
from pose_types import NormalizedRect
from visualization import draw_landmarks, draw_roi

logger = logging.getLogger("app")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upper-body pose landmarks for one ROI of an image.")
    parser.add_argument("--image", required=True, help="Input image path.")
    parser.add_argument("--model", required=True, help="Landmark model file readable by OpenCV DNN.")
    parser.add_argument(
        "--roi",
        nargs=5,
        type=float,
        metavar=("CX", "CY", "W", "H", "ROT"),
        help="Normalized ROI (center x/y, width, height, rotation in radians). Defaults to the full frame.",
    )
    parser.add_argument("--config", help="JSON pipeline config.")
    parser.add_argument("--output-names", nargs="+", help="Model output names (landmarks first, then flag).")
    parser.add_argument("--channels-first", action="store_true", help="Feed the model NCHW input.")
    parser.add_argument("--output", help="Write an annotated copy of the image here.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    frame_bgr = cv2.imread(args.image, cv2.IMREAD_COLOR)
    if frame_bgr is None:
        logger.error("Could not read image: %s", args.image)
        return 1
    frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

    roi = NormalizedRect(*args.roi) if args.roi else NormalizedRect.full_frame()
    try:
        config = load_config(args.config) if args.config else PipelineConfig()
        network = OpenCvDnnNetwork(args.model, output_names=args.output_names, channels_first=args.channels_first)
        landmarker = UpperBodyPoseLandmarker(network, config)
        result = landmarker.run(frame_rgb, roi)
    except PoseLandmarkError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    except cv2.error as e:
        logger.error("Could not load model %s: %s", args.model, e)
        return 1

    logger.info("Presence score %.3f (threshold %.2f)", result.presence.score, result.presence.threshold)
    payload = None if result.landmarks is None else result.landmarks.to_dicts()
    print(json.dumps(payload, indent=2))

    if args.output:
        draw_roi(frame_bgr, roi)
        draw_landmarks(frame_bgr, result.landmarks)
        if not cv2.imwrite(args.output, frame_bgr):
            logger.error("Could not write image: %s", args.output)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
