from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pytest

from landmarkbench.domain.interfaces import ImageLoaderInterface, LandmarkDetectorInterface
from landmarkbench.domain.models import DetectionOutcome, LandmarkRecord, Point, Rect

CSV_HEADER = (
    "filename,file_size,file_attributes,region_count,region_id,"
    "region_shape_attributes,region_attributes"
)


def annotation_line(image_name: str, landmark_idx: int, x: int, y: int) -> str:
    return (
        f'{image_name},123456,"{{}}",6,{landmark_idx},'
        f'"{{""name"":""point"",""cx"":{x},""cy"":{y}}}","{{}}"'
    )


def face_annotation(
    image_name: str,
    crown: Tuple[int, int] = (10, 20),
    chin: Tuple[int, int] = (10, 220),
    left_pupil: Tuple[int, int] = (5, 50),
    right_pupil: Tuple[int, int] = (15, 50),
    left_lip: Tuple[int, int] = (5, 150),
    right_lip: Tuple[int, int] = (15, 150),
) -> List[str]:
    points = [crown, chin, left_pupil, right_pupil, left_lip, right_lip]
    return [annotation_line(image_name, idx, x, y) for idx, (x, y) in enumerate(points)]


@pytest.fixture
def write_annotations(tmp_path: Path):
    """Write a VIA CSV export into tmp_path and return its path"""
    def _write(lines: Sequence[str], name: str = "via_region_data.csv") -> str:
        csv_path = tmp_path / name
        csv_path.write_text("\n".join([CSV_HEADER, *lines]) + "\n", encoding="utf-8")
        return str(csv_path)
    return _write


def make_record(
    crown=(10, 20),
    chin=(10, 220),
    left_pupil=(5, 50),
    right_pupil=(15, 50),
    left_lip=(5, 150),
    right_lip=(15, 150),
) -> LandmarkRecord:
    return LandmarkRecord(
        crown_point=Point(*crown),
        chin_point=Point(*chin),
        eye_left_pupil=Point(*left_pupil),
        eye_right_pupil=Point(*right_pupil),
        lip_left_corner=Point(*left_lip),
        lip_right_corner=Point(*right_lip),
    )


@pytest.fixture
def detected_record() -> LandmarkRecord:
    """Fully populated detection result"""
    return LandmarkRecord(
        crown_point=Point(60, 12),
        chin_point=Point(61.5, 180.25),
        eye_left_pupil=Point(40, 70),
        eye_right_pupil=Point(80, 71),
        eye_left_corner=Point(30, 70),
        eye_right_corner=Point(90, 71),
        nose_tip=Point(60, 100),
        lip_left_corner=Point(45, 130),
        lip_right_corner=Point(76, 131),
        face_rect=Rect(20, 30, 90, 140),
        left_eye_rect=Rect(32, 62, 16, 16),
        right_eye_rect=Rect(72, 63, 16, 16),
        mouth_rect=Rect(45, 122, 31, 16),
        lip_contour_upper=[Point(45, 130), Point(60, 124), Point(76, 131)],
        lip_contour_lower=[Point(45, 130), Point(60, 138), Point(76, 131)],
        all_landmarks=[Point(40, 70), Point(80, 71), Point(60, 100)],
        success=True,
    )


@pytest.fixture
def gradient_image() -> np.ndarray:
    """Deterministic BGR image where neighbouring pixels always differ"""
    h, w = 48, 64
    ys, xs = np.mgrid[0:h, 0:w]
    image = np.zeros((h, w, 3), dtype=np.uint8)
    image[..., 0] = (xs * 3) % 256
    image[..., 1] = (ys * 5) % 256
    image[..., 2] = (xs + ys) % 256
    return image


class StubImageLoader(ImageLoaderInterface):
    """Hands out blank canvases instead of reading files"""

    def __init__(self, shape=(240, 200, 3)):
        self.shape = shape
        self.loaded: List[str] = []

    def load_from_path(self, path: str) -> Optional[np.ndarray]:
        self.loaded.append(path)
        return np.zeros(self.shape, dtype=np.uint8)

    def load_from_bytes(self, data: bytes) -> Optional[np.ndarray]:
        return np.zeros(self.shape, dtype=np.uint8)


class RecordingDetector(LandmarkDetectorInterface):
    """Returns canned landmarks and remembers every call"""

    def __init__(self, landmarks: Optional[LandmarkRecord] = None, failing: Sequence[str] = (), image_shape=(240, 200, 3)):
        self.landmarks = landmarks or LandmarkRecord(success=True)
        self.failing = list(failing)
        self.image_shape = image_shape
        self.calls: List[str] = []
        self.ground_truths: Dict[str, LandmarkRecord] = {}

    def detect(self, image_path: str, ground_truth: LandmarkRecord) -> DetectionOutcome:
        self.calls.append(image_path)
        self.ground_truths[image_path] = ground_truth
        success = not any(f in image_path for f in self.failing)
        image = np.zeros(self.image_shape, dtype=np.uint8) if self.image_shape else None
        return DetectionOutcome(success=success, image=image, landmarks=self.landmarks)
