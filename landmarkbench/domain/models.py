"""
Domain models/entities
"""
import json
import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional

import numpy as np

from .exceptions import LandmarkFormatError


@dataclass(frozen=True)
class Point:
    """2D coordinate in image pixels"""
    x: float = 0
    y: float = 0

    def midpoint(self, other: "Point") -> "Point":
        return Point((self.x + other.x) / 2.0, (self.y + other.y) / 2.0)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> "Point":
        return cls(x=_number(data, "x"), y=_number(data, "y"))


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box, all zero when undetected"""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Rect":
        return cls(
            x=_number(data, "x"),
            y=_number(data, "y"),
            width=_number(data, "width"),
            height=_number(data, "height"),
        )


class LandmarkKind(IntEnum):
    """Landmark discriminant used by the annotation export"""
    CROWN = 0
    CHIN = 1
    LEFT_PUPIL = 2
    RIGHT_PUPIL = 3
    LEFT_LIP_CORNER = 4
    RIGHT_LIP_CORNER = 5

    @property
    def field_name(self) -> str:
        return _FIELD_BY_KIND[self]


_FIELD_BY_KIND = {
    LandmarkKind.CROWN: "crown_point",
    LandmarkKind.CHIN: "chin_point",
    LandmarkKind.LEFT_PUPIL: "eye_left_pupil",
    LandmarkKind.RIGHT_PUPIL: "eye_right_pupil",
    LandmarkKind.LEFT_LIP_CORNER: "lip_left_corner",
    LandmarkKind.RIGHT_LIP_CORNER: "lip_right_corner",
}

_POINT_FIELDS = (
    "crown_point",
    "chin_point",
    "eye_left_pupil",
    "eye_right_pupil",
    "eye_left_corner",
    "eye_right_corner",
    "nose_tip",
    "lip_left_corner",
    "lip_right_corner",
)

_RECT_FIELDS = (
    "face_rect",
    "left_eye_rect",
    "right_eye_rect",
    "mouth_rect",
)

_POINT_LIST_FIELDS = (
    "lip_contour_upper",
    "lip_contour_lower",
    "all_landmarks",
)


@dataclass
class LandmarkRecord:
    """Facial landmarks of a single image, annotated or detected"""
    crown_point: Point = field(default_factory=Point)
    chin_point: Point = field(default_factory=Point)
    eye_left_pupil: Point = field(default_factory=Point)
    eye_right_pupil: Point = field(default_factory=Point)
    eye_left_corner: Point = field(default_factory=Point)
    eye_right_corner: Point = field(default_factory=Point)
    nose_tip: Point = field(default_factory=Point)
    lip_left_corner: Point = field(default_factory=Point)
    lip_right_corner: Point = field(default_factory=Point)

    face_rect: Rect = field(default_factory=Rect)
    left_eye_rect: Rect = field(default_factory=Rect)
    right_eye_rect: Rect = field(default_factory=Rect)
    mouth_rect: Rect = field(default_factory=Rect)

    # Ordered polygons, closed by the renderer
    lip_contour_upper: List[Point] = field(default_factory=list)
    lip_contour_lower: List[Point] = field(default_factory=list)

    all_landmarks: List[Point] = field(default_factory=list)
    success: bool = False

    def get(self, kind: LandmarkKind) -> Point:
        return getattr(self, kind.field_name)

    def set(self, kind: LandmarkKind, point: Point) -> None:
        setattr(self, kind.field_name, point)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        data: Dict[str, Any] = {}
        for name in _POINT_FIELDS:
            data[name] = getattr(self, name).to_dict()
        for name in _RECT_FIELDS:
            data[name] = getattr(self, name).to_dict()
        for name in _POINT_LIST_FIELDS:
            data[name] = [p.to_dict() for p in getattr(self, name)]
        data["success"] = self.success
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "LandmarkRecord":
        """Build a record from its dictionary form.

        Raises:
            LandmarkFormatError: If a field is missing or has the wrong shape.
        """
        if not isinstance(data, dict):
            raise LandmarkFormatError(f"Expected an object, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        for name in _POINT_FIELDS:
            values[name] = Point.from_dict(_member(data, name, dict))
        for name in _RECT_FIELDS:
            values[name] = Rect.from_dict(_member(data, name, dict))
        for name in _POINT_LIST_FIELDS:
            items = _member(data, name, list)
            values[name] = [Point.from_dict(_ensure(item, dict, name)) for item in items]

        success = _member(data, "success", bool)
        return cls(success=success, **values)

    def to_json(self, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), indent=4 if pretty else None)

    @classmethod
    def from_json(cls, text: str) -> "LandmarkRecord":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise LandmarkFormatError(f"Invalid landmark JSON: {e}") from e
        return cls.from_dict(data)


@dataclass
class DetectionOutcome:
    """What a detector hands back for one image"""
    success: bool
    image: Optional[np.ndarray]
    landmarks: LandmarkRecord


@dataclass(frozen=True)
class ResultRecord:
    """Ground truth and detection for one processed image"""
    image_path: str
    ground_truth: LandmarkRecord
    detected: LandmarkRecord
    success: bool


@dataclass
class ComparisonResult:
    """Outcome of comparing an image against its golden copy"""
    passed: bool
    message: str
    expected_path: Optional[str] = None
    distinct_pixels: int = 0

    def __bool__(self) -> bool:
        return self.passed


@dataclass
class LandmarkErrorStats:
    """Pixel distance between annotated and detected positions"""
    mean: float
    median: float
    max: float
    samples: int

    def to_dict(self) -> dict:
        return {
            "mean": self.mean,
            "median": self.median,
            "max": self.max,
            "samples": self.samples,
        }


@dataclass
class AccuracySummary:
    """Aggregated statistics of a corpus run"""
    total: int
    succeeded: int
    errors: Dict[str, LandmarkErrorStats] = field(default_factory=dict)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def failure_rate(self) -> float:
        return self.failed / self.total if self.total else 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "failure_rate": self.failure_rate,
            "errors": {name: stats.to_dict() for name, stats in self.errors.items()},
        }


def _ensure(value: Any, expected: type, name: str) -> Any:
    if not isinstance(value, expected):
        raise LandmarkFormatError(
            f"Field '{name}' must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _member(data: dict, name: str, expected: type) -> Any:
    if name not in data:
        raise LandmarkFormatError(f"Missing field '{name}'")
    return _ensure(data[name], expected, name)


def _number(data: dict, name: str) -> float:
    value = data.get(name) if isinstance(data, dict) else None
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LandmarkFormatError(f"Coordinate '{name}' must be a number, got {value!r}")
    return value
