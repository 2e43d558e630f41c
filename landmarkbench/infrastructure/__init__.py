"""Adapters for files, images and the detection engine

``insightface_detector`` is imported explicitly by callers that need the
real engine.
"""
from .annotation_parser import import_landmarks, import_scface_landmarks
from .image_loader import ImageLoader
from .landmark_cache import LandmarkCache
from .rendering import render_annotations, render_landmarks_on_image

__all__ = [
    'import_landmarks',
    'import_scface_landmarks',
    'ImageLoader',
    'LandmarkCache',
    'render_annotations',
    'render_landmarks_on_image',
]
