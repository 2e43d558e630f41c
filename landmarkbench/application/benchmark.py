"""
Golden-image regression checks
"""
import logging
import os
import re
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from landmarkbench.domain.models import ComparisonResult
from landmarkbench.infrastructure.image_loader import ImageLoader

logger = logging.getLogger(__name__)

BENCHMARK_EXTENSION = ".png"


def sanitize_test_name(test_name: str) -> str:
    """Make a test id (e.g. a parametrized pytest node name) usable as a file name"""
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", test_name).strip("_")


def count_distinct_pixels(expected: np.ndarray, actual: np.ndarray) -> int:
    """Number of pixels that differ in at least one channel"""
    diff = cv2.absdiff(expected, actual)
    if diff.ndim == 3:
        return int(np.count_nonzero(diff.any(axis=2)))
    return int(np.count_nonzero(diff))


def verify_equal_images(expected: np.ndarray, actual: np.ndarray) -> ComparisonResult:
    """Same dimensions first, then identical pixels"""
    if expected.shape != actual.shape:
        return ComparisonResult(
            passed=False,
            message=f"Images have different sizes: expected {expected.shape}, actual {actual.shape}",
        )
    if expected.dtype != actual.dtype:
        return ComparisonResult(
            passed=False,
            message=f"Images have different pixel types: expected {expected.dtype}, actual {actual.dtype}",
        )

    distinct = count_distinct_pixels(expected, actual)
    if distinct:
        return ComparisonResult(
            passed=False,
            message=f"Images are not the same pixel by pixel: {distinct} pixels differ",
            distinct_pixels=distinct,
        )
    return ComparisonResult(passed=True, message="Images are identical")


class BenchmarkComparator:
    """Bit-exact comparison of rendered output against stored golden images.

    A missing golden image is written from the actual image and the check is
    reported as failed, so that every new baseline gets reviewed before it is
    committed.
    """

    def __init__(self, benchmark_dir: str, image_writer: Optional[ImageLoader] = None):
        self.benchmark_dir = Path(benchmark_dir)
        self.image_writer = image_writer or ImageLoader()

    def golden_path(self, test_name: str, suffix: str = "") -> str:
        return str(self.benchmark_dir / f"{sanitize_test_name(test_name)}{suffix}{BENCHMARK_EXTENSION}")

    def validate(self, actual_image: np.ndarray, test_name: str, suffix: str = "") -> ComparisonResult:
        expected_image_path = self.golden_path(test_name, suffix)

        if not os.path.exists(expected_image_path):
            self.image_writer.save(expected_image_path, actual_image)
            logger.warning(f"Created benchmark file {expected_image_path}")
            return ComparisonResult(
                passed=False,
                message=f"Benchmark file did not exist! Created {expected_image_path}, review it before committing",
                expected_path=expected_image_path,
            )

        expected_image = cv2.imread(expected_image_path, cv2.IMREAD_UNCHANGED)
        if expected_image is None:
            raise OSError(f"Failed to read benchmark image: {expected_image_path}")

        result = verify_equal_images(expected_image, actual_image)
        result.expected_path = expected_image_path
        if not result.passed:
            result.message = f"Actual image differs to image in file {expected_image_path}: {result.message}"
            logger.error(result.message)
        return result
