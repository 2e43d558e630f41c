"""Utility functions"""
from .paths import (
    resolve_path,
    path_combine,
    get_image_files,
    get_file_name,
    get_directory,
    path_digest,
    unique_file_name,
)

__all__ = [
    'resolve_path',
    'path_combine',
    'get_image_files',
    'get_file_name',
    'get_directory',
    'path_digest',
    'unique_file_name',
]
