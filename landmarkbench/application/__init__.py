"""Application services"""
from .accuracy import landmark_errors, summarize_results
from .benchmark import BenchmarkComparator, verify_equal_images
from .cached_detector import CachedLandmarkDetector
from .calibration import adjust_crown_chin_coefficients, compute_coefficients
from .orchestrator import DetectionOrchestrator, process_database

__all__ = [
    'landmark_errors',
    'summarize_results',
    'BenchmarkComparator',
    'verify_equal_images',
    'CachedLandmarkDetector',
    'adjust_crown_chin_coefficients',
    'compute_coefficients',
    'DetectionOrchestrator',
    'process_database',
]
