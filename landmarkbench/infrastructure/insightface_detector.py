"""
InsightFace implementation of the landmark detector
"""
import json
import logging
import math
from typing import List, Optional, Tuple

import cv2
import numpy as np

from insightface.app import FaceAnalysis

from landmarkbench.config import get_config
from landmarkbench.domain.exceptions import ConfigurationError
from landmarkbench.domain.interfaces import ImageLoaderInterface, LandmarkDetectorInterface
from landmarkbench.domain.models import DetectionOutcome, LandmarkRecord, Point, Rect

logger = logging.getLogger(__name__)

DEFAULT_CROWN_CHIN_COEFFICIENT = 1.7699

# Index groups of the 106 point model
CONTOUR_INDICES = range(0, 33)
MOUTH_INDICES = range(52, 72)
EYE_INDICES = (range(33, 43), range(87, 97))


class InsightFaceLandmarkDetector(LandmarkDetectorInterface):
    """Landmark engine backed by InsightFace.

    The instance is owned by the caller and must be configured once with
    ``configure`` before ``detect`` is used.
    """

    def __init__(self, image_loader: ImageLoaderInterface):
        self.config = get_config()
        self.image_loader = image_loader
        self.model: Optional[FaceAnalysis] = None
        self.is_initialized = False
        self.model_name = self.config.MODEL_NAME
        self.crown_chin_coefficient = DEFAULT_CROWN_CHIN_COEFFICIENT

    def configure(self, config_string: str) -> bool:
        """Configure from the engine's JSON configuration text"""
        try:
            engine_config = json.loads(config_string) if config_string.strip() else {}
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid engine configuration: {e}") from e

        detector_config = engine_config.get("landmarkDetector", {})
        self.model_name = detector_config.get("model", self.config.MODEL_NAME)
        det_size = int(detector_config.get("detSize", self.config.DET_SIZE))
        use_gpu = bool(detector_config.get("useGpu", self.config.USE_GPU))
        gpu_id = int(detector_config.get("gpuId", self.config.GPU_ID))
        self.crown_chin_coefficient = float(
            engine_config.get("crownChinCoefficient", DEFAULT_CROWN_CHIN_COEFFICIENT)
        )

        try:
            logger.info(f"Initializing InsightFace model: {self.model_name}")

            # Determine providers based on GPU setting
            if use_gpu:
                providers = [
                    ('CUDAExecutionProvider', {'device_id': gpu_id}),
                    'CPUExecutionProvider'
                ]
            else:
                providers = ['CPUExecutionProvider']

            self.model = FaceAnalysis(
                name=self.model_name,
                allowed_modules=['detection', 'landmark_2d_106'],
                providers=providers,
            )
            self.model.prepare(
                ctx_id=gpu_id if use_gpu else -1,
                det_size=(det_size, det_size),
            )

            self.is_initialized = True
            logger.info("InsightFace model initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize InsightFace: {e}")
            self.is_initialized = False
            raise

        return self.is_initialized

    def detect(self, image_path: str, ground_truth: LandmarkRecord) -> DetectionOutcome:
        """Detect landmarks of the most prominent face in the image"""
        if not self.is_initialized:
            raise ConfigurationError("Detector used before configure()")

        image = self.image_loader.load_from_path(image_path)
        landmarks = LandmarkRecord()
        if image is None:
            return DetectionOutcome(success=False, image=None, landmarks=landmarks)

        try:
            faces = self.model.get(image, max_num=1)
        except Exception as e:
            logger.error(f"Landmark detection failed for {image_path}: {e}")
            return DetectionOutcome(success=False, image=image, landmarks=landmarks)

        if not faces:
            logger.warning(f"No face found in {image_path}")
            return DetectionOutcome(success=False, image=image, landmarks=landmarks)

        landmarks = self._to_landmarks(faces[0])
        return DetectionOutcome(success=landmarks.success, image=image, landmarks=landmarks)

    def _to_landmarks(self, face) -> LandmarkRecord:
        x1, y1, x2, y2 = face.bbox.astype(float)
        lm = LandmarkRecord(face_rect=Rect(x1, y1, x2 - x1, y2 - y1))

        kps = np.asarray(face.kps, dtype=float)  # (5,2) eyes, nose, mouth corners
        # enforce left/right ordering
        if kps[0, 0] > kps[1, 0]:
            kps[[0, 1]] = kps[[1, 0]]
        if kps[3, 0] > kps[4, 0]:
            kps[[3, 4]] = kps[[4, 3]]

        lm.eye_left_pupil = Point(*kps[0].tolist())
        lm.eye_right_pupil = Point(*kps[1].tolist())
        lm.nose_tip = Point(*kps[2].tolist())
        lm.lip_left_corner = Point(*kps[3].tolist())
        lm.lip_right_corner = Point(*kps[4].tolist())

        eye_distance = float(np.linalg.norm(kps[1] - kps[0]))
        half_eye = eye_distance / 4
        lm.left_eye_rect = Rect(kps[0, 0] - half_eye, kps[0, 1] - half_eye, 2 * half_eye, 2 * half_eye)
        lm.right_eye_rect = Rect(kps[1, 0] - half_eye, kps[1, 1] - half_eye, 2 * half_eye, 2 * half_eye)

        mouth_width = float(kps[4, 0] - kps[3, 0])
        mouth_top = min(kps[3, 1], kps[4, 1]) - mouth_width / 4
        mouth_bottom = max(kps[3, 1], kps[4, 1]) + mouth_width / 4
        lm.mouth_rect = Rect(kps[3, 0], mouth_top, mouth_width, mouth_bottom - mouth_top)

        dense = getattr(face, "landmark_2d_106", None)
        if dense is None:
            return lm

        dense = np.asarray(dense, dtype=float)
        lm.all_landmarks = [Point(float(x), float(y)) for x, y in dense]

        contour = dense[list(CONTOUR_INDICES)]
        chin = contour[int(np.argmax(contour[:, 1]))]
        lm.chin_point = Point(float(chin[0]), float(chin[1]))
        lm.eye_left_corner, lm.eye_right_corner = self._eye_corners(dense)
        lm.lip_contour_upper, lm.lip_contour_lower = self._lip_contours(dense)
        lm.crown_point = self._estimate_crown(lm)
        lm.success = True
        return lm

    def _estimate_crown(self, lm: LandmarkRecord) -> Point:
        """Extrapolate the crown from the chin along the chin-to-eyes axis"""
        face_center = lm.eye_left_pupil.midpoint(lm.eye_right_pupil)
        mouth_center = lm.lip_left_corner.midpoint(lm.lip_right_corner)
        ref_dist = lm.eye_left_pupil.distance_to(lm.eye_right_pupil) + face_center.distance_to(mouth_center)
        dx = face_center.x - lm.chin_point.x
        dy = face_center.y - lm.chin_point.y
        norm = math.hypot(dx, dy)
        if norm == 0:
            return lm.chin_point

        scale = self.crown_chin_coefficient * ref_dist / norm
        return Point(lm.chin_point.x + dx * scale, lm.chin_point.y + dy * scale)

    @staticmethod
    def _eye_corners(dense: np.ndarray) -> Tuple[Point, Point]:
        """Outer corners of both eyes, image left first"""
        left_eye, right_eye = sorted(
            (dense[list(indices)] for indices in EYE_INDICES),
            key=lambda group: float(group[:, 0].mean()),
        )
        outer_left = left_eye[int(np.argmin(left_eye[:, 0]))]
        outer_right = right_eye[int(np.argmax(right_eye[:, 0]))]
        return Point(float(outer_left[0]), float(outer_left[1])), Point(float(outer_right[0]), float(outer_right[1]))

    @staticmethod
    def _lip_contours(dense: np.ndarray) -> Tuple[List[Point], List[Point]]:
        """Outer lip outline split at the mouth corners.

        Both contours run left to right and start and end at the corners.
        """
        hull = cv2.convexHull(dense[list(MOUTH_INDICES)].astype(np.float32)).reshape(-1, 2).astype(float)
        left = hull[int(np.argmin(hull[:, 0]))]
        right = hull[int(np.argmax(hull[:, 0]))]

        # sign of the cross product tells which side of the corner line a point is on
        side = (right[0] - left[0]) * (hull[:, 1] - left[1]) - (right[1] - left[1]) * (hull[:, 0] - left[0])
        upper = hull[side <= 0]
        lower = hull[side >= 0]

        def to_points(points: np.ndarray) -> List[Point]:
            return [Point(float(x), float(y)) for x, y in points[np.argsort(points[:, 0], kind="stable")]]

        return to_points(upper), to_points(lower)
