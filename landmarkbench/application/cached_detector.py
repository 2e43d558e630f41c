"""
Landmark detection memoised by the on-disk cache
"""
import logging

from landmarkbench.domain.interfaces import ImageLoaderInterface, LandmarkDetectorInterface
from landmarkbench.domain.models import DetectionOutcome, LandmarkRecord
from landmarkbench.infrastructure.landmark_cache import LandmarkCache

logger = logging.getLogger(__name__)


class CachedLandmarkDetector(LandmarkDetectorInterface):
    """Serve cached landmarks, run the engine only on a cache miss"""

    def __init__(
        self,
        engine: LandmarkDetectorInterface,
        cache: LandmarkCache,
        image_loader: ImageLoaderInterface,
    ):
        self.engine = engine
        self.cache = cache
        self.image_loader = image_loader

    def detect(self, image_path: str, ground_truth: LandmarkRecord) -> DetectionOutcome:
        cached = self.cache.load(image_path)
        if cached is not None:
            image = self.image_loader.load_from_path(image_path)
            return DetectionOutcome(success=cached.success, image=image, landmarks=cached)

        logger.info(f"Computing landmarks for {image_path}")
        outcome = self.engine.detect(image_path, ground_truth)
        self.cache.store(image_path, outcome.landmarks)
        return outcome
