"""
Crown/chin calibration coefficients from ground truth
"""
import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from landmarkbench.domain.exceptions import CalibrationError
from landmarkbench.domain.models import LandmarkRecord

logger = logging.getLogger(__name__)


def face_ratios(lm: LandmarkRecord) -> Optional[Tuple[float, float]]:
    """Crown-chin and face-center-chin distances over the reference distance.

    The reference distance is the inter-pupil distance plus the distance
    from the pupils' midpoint to the mouth center. Returns None when it is
    zero or not finite.
    """
    face_center = lm.eye_left_pupil.midpoint(lm.eye_right_pupil)
    mouth_center = lm.lip_left_corner.midpoint(lm.lip_right_corner)

    ref_dist = lm.eye_left_pupil.distance_to(lm.eye_right_pupil) + face_center.distance_to(mouth_center)
    if ref_dist == 0 or not math.isfinite(ref_dist):
        return None

    chin_crown = lm.crown_point.distance_to(lm.chin_point)
    chin_face_center = face_center.distance_to(lm.chin_point)
    return chin_crown / ref_dist, chin_face_center / ref_dist


def compute_coefficients(records: Sequence[LandmarkRecord]) -> Tuple[float, float]:
    """Median crown-chin and face-center-chin ratios across records.

    Records with a degenerate reference distance are excluded instead of
    producing non-finite ratios.

    Raises:
        CalibrationError: If no record yields a valid sample.
    """
    c1: List[float] = []
    c2: List[float] = []
    skipped = 0
    for lm in records:
        ratios = face_ratios(lm)
        if ratios is None:
            skipped += 1
            continue
        c1.append(ratios[0])
        c2.append(ratios[1])

    if skipped:
        logger.warning(f"Excluded {skipped} sample(s) with zero reference distance")

    if not c1:
        raise CalibrationError("No valid samples to compute coefficients from")

    return float(np.median(c1)), float(np.median(c2))


def adjust_crown_chin_coefficients(ground_truth_annotations: Sequence[LandmarkRecord]) -> Tuple[float, float]:
    chin_crown, chin_frown = compute_coefficients(ground_truth_annotations)
    logger.info(f"Chin-crown normalization: {chin_crown}")
    logger.info(f"Chin-frown normalization: {chin_frown}")
    return chin_crown, chin_frown
