"""
Image loader implementation
"""
import logging
from io import BytesIO
from pathlib import Path
from typing import Optional

import numpy as np
import cv2
from PIL import Image

from landmarkbench.domain.interfaces import ImageLoaderInterface

logger = logging.getLogger(__name__)


class ImageLoader(ImageLoaderInterface):
    """Image loader for local files"""

    def load_from_path(self, path: str) -> Optional[np.ndarray]:
        """Load image from a file, raises FileNotFoundError if it is missing"""
        logger.debug(f"Loading image from file: {path}")
        data = Path(path).read_bytes()
        image = self._decode_image(data)
        if image is None:
            logger.error(f"Could not decode image file: {path}")
        return image

    def load_from_bytes(self, data: bytes) -> Optional[np.ndarray]:
        """Load image from bytes"""
        try:
            return self._decode_image(data)

        except Exception as e:
            logger.error(f"Failed to load image from bytes: {e}")
            return None

    def save(self, path: str, image: np.ndarray) -> None:
        """Write image to path, the codec follows the file extension"""
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        if not cv2.imwrite(str(path), image):
            raise OSError(f"Failed to write image: {path}")
        logger.info(f"Wrote image {path}")

    def _decode_image(self, data: bytes) -> Optional[np.ndarray]:
        """Decode image bytes to numpy array"""
        try:
            # Try PIL first (better format support)
            pil_image = Image.open(BytesIO(data))

            # Convert to RGB if needed
            if pil_image.mode != 'RGB':
                pil_image = pil_image.convert('RGB')

            # Convert to numpy array (RGB format)
            image = np.array(pil_image)

            # Convert RGB to BGR for OpenCV drawing and InsightFace
            image = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)

            return image

        except Exception as e:
            logger.warning(f"PIL failed, trying OpenCV: {e}")

            # Fallback to OpenCV
            try:
                nparr = np.frombuffer(data, np.uint8)
                image = cv2.imdecode(nparr, cv2.IMREAD_COLOR)

                if image is None:
                    logger.error("OpenCV failed to decode image")
                    return None

                return image

            except Exception as e2:
                logger.error(f"OpenCV also failed: {e2}")
                return None
