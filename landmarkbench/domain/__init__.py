"""Domain models, ports and exceptions"""
from .exceptions import (
    LandmarkBenchError,
    AnnotationParseError,
    LandmarkFormatError,
    CalibrationError,
    InvalidImageError,
    ConfigurationError,
)
from .models import (
    Point,
    Rect,
    LandmarkKind,
    LandmarkRecord,
    DetectionOutcome,
    ResultRecord,
    ComparisonResult,
    LandmarkErrorStats,
    AccuracySummary,
)
from .interfaces import LandmarkDetectorInterface, ImageLoaderInterface

__all__ = [
    'LandmarkBenchError',
    'AnnotationParseError',
    'LandmarkFormatError',
    'CalibrationError',
    'InvalidImageError',
    'ConfigurationError',
    'Point',
    'Rect',
    'LandmarkKind',
    'LandmarkRecord',
    'DetectionOutcome',
    'ResultRecord',
    'ComparisonResult',
    'LandmarkErrorStats',
    'AccuracySummary',
    'LandmarkDetectorInterface',
    'ImageLoaderInterface',
]
