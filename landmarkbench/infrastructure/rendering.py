"""
Landmark overlays for visual review of detections
"""
from typing import List, Tuple

import cv2
import numpy as np

from landmarkbench.domain.exceptions import InvalidImageError
from landmarkbench.domain.models import LandmarkRecord, Point, Rect

# Colors (BGR)
ANNOTATION_COLOR = (0, 30, 255)
DETECTION_COLOR = (250, 30, 0)
FACE_RECT_COLOR = (0, 128, 0)
FEATURE_RECT_COLOR = (0xA0, 0x52, 0x2D)
ALL_LANDMARKS_COLOR = (40, 40, 190)

POINT_RADIUS = 5


def validate_image(image: np.ndarray) -> None:
    """Raise InvalidImageError unless image can be drawn on"""
    if image is None:
        raise InvalidImageError("Image is None")

    if not isinstance(image, np.ndarray):
        raise InvalidImageError(f"Image must be numpy.ndarray, got {type(image)}")

    if image.size == 0:
        raise InvalidImageError("Image is empty")

    if len(image.shape) not in [2, 3]:
        raise InvalidImageError(f"Image must be 2D or 3D, got shape {image.shape}")


def _pt(point: Point) -> Tuple[int, int]:
    return int(round(point.x)), int(round(point.y))


def _draw_point(image: np.ndarray, point: Point, color, thickness: int = 2) -> None:
    cv2.circle(image, _pt(point), POINT_RADIUS, color, thickness)


def _draw_rect(image: np.ndarray, rect: Rect, color, thickness: int) -> None:
    top_left = (int(round(rect.x)), int(round(rect.y)))
    bottom_right = (int(round(rect.x + rect.width)), int(round(rect.y + rect.height)))
    cv2.rectangle(image, top_left, bottom_right, color, thickness)


def _draw_contours(image: np.ndarray, contours: List[List[Point]], color) -> None:
    polygons = [
        np.array([_pt(p) for p in contour], dtype=np.int32).reshape(-1, 1, 2)
        for contour in contours
        if contour
    ]
    if polygons:
        cv2.polylines(image, polygons, True, color)


def _draw_detection_regions(image: np.ndarray, lm: LandmarkRecord) -> None:
    _draw_rect(image, lm.face_rect, FACE_RECT_COLOR, 2)
    _draw_rect(image, lm.left_eye_rect, FEATURE_RECT_COLOR, 3)
    _draw_rect(image, lm.right_eye_rect, FEATURE_RECT_COLOR, 3)

    _draw_contours(image, [lm.lip_contour_upper, lm.lip_contour_lower], DETECTION_COLOR)
    _draw_rect(image, lm.mouth_rect, FEATURE_RECT_COLOR, 3)


def render_annotations(
    image: np.ndarray,
    ground_truth: LandmarkRecord,
    detected: LandmarkRecord,
) -> np.ndarray:
    """Draw ground truth and detected landmarks onto image in place.

    Drawing order is fixed so overlays are reproducible: annotated eyes,
    lips, crown and chin, then detection rectangles, lip contours and
    finally the detected points.
    """
    validate_image(image)

    for point in (
        ground_truth.eye_left_pupil,
        ground_truth.eye_right_pupil,
        ground_truth.lip_left_corner,
        ground_truth.lip_right_corner,
        ground_truth.crown_point,
        ground_truth.chin_point,
    ):
        _draw_point(image, point, ANNOTATION_COLOR)

    _draw_detection_regions(image, detected)

    for point in (
        detected.eye_left_pupil,
        detected.eye_right_pupil,
        detected.lip_left_corner,
        detected.lip_right_corner,
        detected.crown_point,
        detected.chin_point,
    ):
        _draw_point(image, point, DETECTION_COLOR)

    return image


def render_landmarks_on_image(image: np.ndarray, lm: LandmarkRecord) -> np.ndarray:
    """Draw every detected feature, including the raw landmark cloud"""
    validate_image(image)

    _draw_detection_regions(image, lm)

    for point in (
        lm.eye_left_pupil,
        lm.eye_right_pupil,
        lm.eye_left_corner,
        lm.eye_right_corner,
        lm.nose_tip,
        lm.lip_left_corner,
        lm.lip_right_corner,
        lm.crown_point,
        lm.chin_point,
    ):
        _draw_point(image, point, DETECTION_COLOR)

    for point in lm.all_landmarks:
        _draw_point(image, point, ALL_LANDMARKS_COLOR, thickness=1)

    return image
