"""
Filesystem helpers for locating test data
"""
import hashlib
import os
from pathlib import Path
from typing import List, Optional, Union

SUPPORTED_IMAGE_EXTENSIONS = (".jpg", ".bmp")


def resolve_path(rel_path: str, start: Optional[Union[str, Path]] = None) -> Optional[str]:
    """Find rel_path under the start directory or any of its ancestors.

    Args:
        rel_path: Path relative to some ancestor of ``start``.
        start: Directory to begin the search from, defaults to the cwd.

    Returns:
        Absolute path of the first match, or None when nothing matches.
    """
    base_dir = Path(start) if start is not None else Path.cwd()
    base_dir = base_dir.resolve()
    for directory in (base_dir, *base_dir.parents):
        candidate = directory / rel_path
        if candidate.exists():
            return str(candidate)
    return None


def path_combine(prefix: str, suffix: str) -> str:
    return str(Path(prefix) / suffix)


def get_image_files(test_images_dir: str) -> List[str]:
    """List image files (.jpg, .bmp) directly inside a directory"""
    directory = Path(test_images_dir)
    if not directory.is_dir():
        return []

    return sorted(
        str(p) for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_IMAGE_EXTENSIONS
    )


def get_file_name(file_path: str) -> str:
    return os.path.basename(file_path.replace("\\", "/"))


def get_directory(full_path: str) -> str:
    return str(Path(full_path).parent)


def path_digest(file_path: str, length: int = 16) -> str:
    """Stable short digest of a file's absolute path"""
    return hashlib.sha1(os.path.abspath(file_path).encode("utf-8")).hexdigest()[:length]


def unique_file_name(file_path: str) -> str:
    """File name made distinct per directory, keeping the extension last"""
    name = Path(get_file_name(file_path))
    return f"{name.stem}.{path_digest(file_path)}{name.suffix}"
