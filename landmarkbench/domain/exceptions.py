"""
Domain exceptions
"""


class LandmarkBenchError(Exception):
    """Base exception"""
    pass


class AnnotationParseError(LandmarkBenchError):
    """Ground-truth annotation could not be ingested"""
    pass


class LandmarkFormatError(LandmarkBenchError):
    """Serialized landmarks are malformed"""
    pass


class CalibrationError(LandmarkBenchError):
    """No usable samples to calibrate from"""
    pass


class InvalidImageError(LandmarkBenchError):
    """Image input is not a drawable array"""
    pass


class ConfigurationError(LandmarkBenchError):
    """Engine configuration is missing or invalid"""
    pass
