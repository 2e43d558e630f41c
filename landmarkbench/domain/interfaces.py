"""
Domain interfaces (ports)
"""
from abc import ABC, abstractmethod
from typing import Optional
import numpy as np

from .models import DetectionOutcome, LandmarkRecord


class LandmarkDetectorInterface(ABC):
    """Interface for landmark detection"""

    @abstractmethod
    def detect(self, image_path: str, ground_truth: LandmarkRecord) -> DetectionOutcome:
        """Detect landmarks on the image stored at image_path.

        The returned image and landmarks are owned by the caller. Internal
        errors are reported through ``DetectionOutcome.success``.
        """
        pass


class ImageLoaderInterface(ABC):
    """Interface for image loading"""

    @abstractmethod
    def load_from_path(self, path: str) -> Optional[np.ndarray]:
        """Load image from a file"""
        pass

    @abstractmethod
    def load_from_bytes(self, data: bytes) -> Optional[np.ndarray]:
        """Load image from bytes"""
        pass
