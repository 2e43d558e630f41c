"""
landmarkbench - landmark detection validation harness
Main application entry point
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from landmarkbench.application.accuracy import summarize_results
from landmarkbench.application.cached_detector import CachedLandmarkDetector
from landmarkbench.application.calibration import adjust_crown_chin_coefficients
from landmarkbench.application.orchestrator import DetectionOrchestrator
from landmarkbench.config import get_config, read_engine_config
from landmarkbench.infrastructure.annotation_parser import import_landmarks
from landmarkbench.infrastructure.image_loader import ImageLoader
from landmarkbench.infrastructure.landmark_cache import LandmarkCache
from landmarkbench.utils.paths import resolve_path

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


def create_orchestrator(annotate: bool, engine_config_file: str = "") -> DetectionOrchestrator:
    """Wire engine, cache and orchestrator"""
    # Imported here so calibration runs without the model stack installed
    from landmarkbench.infrastructure.insightface_detector import InsightFaceLandmarkDetector

    config = get_config()
    image_loader = ImageLoader()

    logger.info("Initializing landmark engine...")
    engine = InsightFaceLandmarkDetector(image_loader)
    engine.configure(read_engine_config(engine_config_file))

    cache_dir = resolve_path(config.CACHE_DIR) or config.CACHE_DIR
    detector = CachedLandmarkDetector(
        engine=engine,
        cache=LandmarkCache(cache_dir),
        image_loader=image_loader,
    )
    return DetectionOrchestrator(
        detector,
        annotate=annotate,
        annotation_dir=config.ANNOTATION_OUTPUT_DIR or None,
        image_writer=image_loader,
    )


def _ground_truth_path(path: Optional[str]) -> str:
    rel_path = path or get_config().GROUND_TRUTH_PATH
    return resolve_path(rel_path) or rel_path


def calibrate(args: argparse.Namespace) -> int:
    landmarks_map = import_landmarks(_ground_truth_path(args.annotations))
    adjust_crown_chin_coefficients([landmarks_map[k] for k in sorted(landmarks_map)])
    return 0


def run(args: argparse.Namespace) -> int:
    config = get_config()
    orchestrator = create_orchestrator(
        annotate=args.annotate or config.ANNOTATE_RESULTS,
        engine_config_file=args.config or "",
    )
    ignored = args.ignore if args.ignore else config.IGNORED_IMAGES
    results = orchestrator.run(ignored, _ground_truth_path(args.annotations))

    summary = summarize_results(results)
    print(json.dumps(summary.to_dict(), indent=2))
    return 0 if summary.failed == 0 else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(prog="landmarkbench")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    calibrate_parser = subparsers.add_parser("calibrate", help="median crown/chin coefficients of the ground truth")
    calibrate_parser.add_argument("annotations", nargs="?", help="VIA annotation CSV")
    calibrate_parser.set_defaults(func=calibrate)

    run_parser = subparsers.add_parser("run", help="detect landmarks over the annotated corpus")
    run_parser.add_argument("annotations", nargs="?", help="VIA annotation CSV")
    run_parser.add_argument("--ignore", action="append", default=[], help="skip images whose path contains this")
    run_parser.add_argument("--annotate", action="store_true", help="draw ground truth and detections")
    run_parser.add_argument("--config", help="engine configuration JSON")
    run_parser.set_defaults(func=run)

    args = parser.parse_args(argv)
    configure_logging(args.debug or get_config().DEBUG)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
