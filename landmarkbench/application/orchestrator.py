"""
Corpus run: ground truth in, one result record per annotated image out
"""
import logging
import os
from typing import List, Optional, Sequence

from landmarkbench.domain.interfaces import LandmarkDetectorInterface
from landmarkbench.domain.models import ResultRecord
from landmarkbench.infrastructure.annotation_parser import import_landmarks
from landmarkbench.infrastructure.image_loader import ImageLoader
from landmarkbench.infrastructure.rendering import render_annotations
from landmarkbench.utils.paths import unique_file_name

logger = logging.getLogger(__name__)


class DetectionOrchestrator:
    """Runs a detector over every annotated image of a ground-truth file"""

    def __init__(
        self,
        detector: LandmarkDetectorInterface,
        annotate: bool = False,
        annotation_dir: Optional[str] = None,
        image_writer: Optional[ImageLoader] = None,
    ):
        self.detector = detector
        self.annotate = annotate
        self.annotation_dir = annotation_dir
        self.image_writer = image_writer or ImageLoader()

    @staticmethod
    def is_ignored(image_path: str, ignored_images: Sequence[str]) -> bool:
        """Substring match against the full path"""
        return any(ignored in image_path for ignored in ignored_images)

    def run(self, ignored_images: Sequence[str], landmarks_path: str) -> List[ResultRecord]:
        """Process the corpus described by landmarks_path.

        Images are visited in sorted path order and each one is attempted
        exactly once. Failed detections are recorded, not dropped.

        Args:
            ignored_images: Substrings; matching image paths are skipped.
            landmarks_path: Ground-truth annotation CSV.

        Returns:
            Result records in processing order.
        """
        landmarks_set = import_landmarks(landmarks_path)

        results: List[ResultRecord] = []
        for image_file_name in sorted(landmarks_set):
            annotations = landmarks_set[image_file_name]
            if self.is_ignored(image_file_name, ignored_images):
                logger.debug(f"Skipping ignored image {image_file_name}")
                continue

            outcome = self.detector.detect(image_file_name, annotations)
            if not outcome.success:
                logger.warning(f"Detection failed for {image_file_name}")

            if self.annotate:
                render_annotations(outcome.image, annotations, outcome.landmarks)
                if self.annotation_dir:
                    output_path = os.path.join(self.annotation_dir, unique_file_name(image_file_name))
                    self.image_writer.save(output_path, outcome.image)

            results.append(ResultRecord(
                image_path=image_file_name,
                ground_truth=annotations,
                detected=outcome.landmarks,
                success=outcome.success,
            ))

        succeeded = sum(1 for r in results if r.success)
        logger.info(f"Processed {len(results)} images, {succeeded} detections succeeded")
        return results


def process_database(
    detector: LandmarkDetectorInterface,
    ignored_images: Sequence[str],
    landmarks_path: str,
    annotate: bool = False,
) -> List[ResultRecord]:
    """Shortcut for a one-off DetectionOrchestrator run"""
    return DetectionOrchestrator(detector, annotate=annotate).run(ignored_images, landmarks_path)
