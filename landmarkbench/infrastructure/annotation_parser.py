"""
Ground-truth annotation import (VIA region CSV export)
"""
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from landmarkbench.domain.exceptions import AnnotationParseError
from landmarkbench.domain.models import LandmarkKind, LandmarkRecord, Point

logger = logging.getLogger(__name__)

# <image>,<file size>,"{}",<region count = 6>,<region id>,"{...""cx"":<x>,""cy"":<y>}","{}"
ANNOTATION_PATTERN = re.compile(
    r'(.*\.(?:jpg|JPG|png|PNG)),\d+,"\{\}",6,(\d),".*""cx"":(\d+),""cy"":(\d+)\}","\{\}"'
)


def import_landmarks(csv_file_path: str) -> Dict[str, LandmarkRecord]:
    """Load manually annotated landmarks from a VIA CSV export.

    Args:
        csv_file_path: Path to the CSV file. Image names inside it are
            resolved against the CSV's own directory.

    Returns:
        Mapping from absolute image path to its ground-truth landmarks.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        AnnotationParseError: If an entry carries an unknown landmark index.
    """
    csv_path = Path(csv_file_path).resolve()
    content = csv_path.read_text(encoding="utf-8")
    image_dir = csv_path.parent

    landmarks_map: Dict[str, LandmarkRecord] = {}
    for match in ANNOTATION_PATTERN.finditer(content):
        image_name, landmark_idx, cx, cy = match.groups()
        full_image_path = str(image_dir / image_name)

        try:
            kind = LandmarkKind(int(landmark_idx))
        except ValueError:
            line_no = content.count("\n", 0, match.start()) + 1
            raise AnnotationParseError(
                f"Invalid landmark index {landmark_idx} for '{image_name}' "
                f"at {csv_path}:{line_no}"
            ) from None

        record = landmarks_map.setdefault(full_image_path, LandmarkRecord())
        record.set(kind, Point(int(cx), int(cy)))

    logger.info(f"Imported annotations for {len(landmarks_map)} images from {csv_path}")
    return landmarks_map


def import_scface_landmarks(txt_file_path: str) -> Optional[np.ndarray]:
    """Read an SCface landmark matrix (whitespace separated floats).

    Reading stops at the first empty line after the header row. Rows with a
    different number of values than the first one make the file invalid.

    Returns:
        float32 array of shape (rows, cols), or None for ragged input.
    """
    rows: List[List[float]] = []
    num_cols = 0
    with open(txt_file_path, "r", encoding="utf-8") as f:
        for line in f:
            values = _leading_floats(line)
            if not rows:
                num_cols = len(values)
            elif not values:
                break
            elif len(values) != num_cols:
                logger.warning(f"Ragged row in {txt_file_path}: expected {num_cols} values, got {len(values)}")
                return None
            rows.append(values)

    return np.array(rows, dtype=np.float32).reshape(len(rows), num_cols)


def _leading_floats(line: str) -> List[float]:
    values = []
    for token in line.split():
        try:
            values.append(float(token))
        except ValueError:
            break
    return values
