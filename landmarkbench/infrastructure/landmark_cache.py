"""
On-disk cache of detected landmarks, one JSON sidecar per image
"""
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from landmarkbench.domain.models import LandmarkRecord
from landmarkbench.utils.paths import get_file_name, path_digest

logger = logging.getLogger(__name__)

CACHE_FILE_SUFFIX = ".json"


class LandmarkCache:
    """Write-through store of detection results keyed by image path.

    Entries never expire; delete them (see ``invalidate``) whenever the
    detector changes behaviour.
    """

    def __init__(self, cache_dir: str):
        self.cache_dir = Path(cache_dir)
        # cache path -> [lock, number of holders and waiters]
        self._locks: Dict[str, List] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, image_file_path: str) -> str:
        """Cache file for an image: file name plus a digest of its absolute path"""
        image_name = get_file_name(image_file_path)
        return str(self.cache_dir / f"{image_name}.{path_digest(image_file_path)}{CACHE_FILE_SUFFIX}")

    def contains(self, image_file_path: str) -> bool:
        return os.path.isfile(self.path_for(image_file_path))

    def load(self, image_file_path: str) -> Optional[LandmarkRecord]:
        """Return previously computed landmarks, or None if not cached.

        Raises:
            LandmarkFormatError: If the cache file is malformed.
        """
        cache_path = self.path_for(image_file_path)
        with self._locked(cache_path):
            if not os.path.isfile(cache_path):
                return None
            with open(cache_path, "r", encoding="utf-8") as f:
                content = f.read()

        logger.debug(f"Cache hit for {image_file_path}: {cache_path}")
        return LandmarkRecord.from_json(content)

    def store(self, image_file_path: str, landmarks: LandmarkRecord) -> str:
        """Persist landmarks for an image, replacing any previous entry"""
        cache_path = self.path_for(image_file_path)
        content = landmarks.to_json(pretty=True)
        with self._locked(cache_path):
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(cache_path, "w", encoding="utf-8") as f:
                f.write(content)

        logger.debug(f"Stored landmarks for {image_file_path} in {cache_path}")
        return cache_path

    def invalidate(self, image_file_path: str) -> bool:
        """Delete the cache entry of an image, returns whether one existed"""
        cache_path = self.path_for(image_file_path)
        with self._locked(cache_path):
            try:
                os.remove(cache_path)
            except FileNotFoundError:
                return False
        logger.info(f"Invalidated cached landmarks for {image_file_path}")
        return True

    @contextmanager
    def _locked(self, cache_path: str) -> Iterator[None]:
        """Serialise access to one cache file, dropping the lock once unused"""
        with self._locks_guard:
            entry = self._locks.setdefault(cache_path, [threading.Lock(), 0])
            entry[1] += 1

        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[cache_path]
