"""
Detection accuracy against ground truth
"""
from typing import Dict, List, Sequence

import numpy as np

from landmarkbench.domain.models import AccuracySummary, LandmarkErrorStats, LandmarkKind, ResultRecord


def landmark_errors(result: ResultRecord) -> Dict[str, float]:
    """Pixel distance per anchor landmark for one record"""
    return {
        kind.field_name: result.ground_truth.get(kind).distance_to(result.detected.get(kind))
        for kind in LandmarkKind
    }


def summarize_results(results: Sequence[ResultRecord]) -> AccuracySummary:
    """Failure rate plus error statistics over successful detections"""
    succeeded = [r for r in results if r.success]

    per_landmark: Dict[str, List[float]] = {kind.field_name: [] for kind in LandmarkKind}
    for result in succeeded:
        for name, error in landmark_errors(result).items():
            per_landmark[name].append(error)

    errors = {}
    for name, values in per_landmark.items():
        if not values:
            continue
        arr = np.array(values, dtype=np.float64)
        errors[name] = LandmarkErrorStats(
            mean=float(arr.mean()),
            median=float(np.median(arr)),
            max=float(arr.max()),
            samples=int(arr.size),
        )

    return AccuracySummary(total=len(results), succeeded=len(succeeded), errors=errors)
