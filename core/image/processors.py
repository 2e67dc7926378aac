"""
Image processing operations.

Handles image manipulation tasks around a warp:
- Thumbnail creation for API previews
"""

import logging
from typing import Tuple

import numpy as np
from PIL import Image

from core.constants import ImageConstants
from core.image.converters import numpy_to_pil, pil_to_numpy, to_base64

logger = logging.getLogger(__name__)


def create_thumbnail(
    image: np.ndarray, width: int = ImageConstants.DEFAULT_THUMBNAIL_WIDTH
) -> Tuple[np.ndarray, str]:
    """
    Create thumbnail from image.

    Transparency is kept, so the preview is PNG encoded.

    Args:
        image: Input image as BGRA NumPy array
        width: Target width in pixels (aspect ratio is maintained)

    Returns:
        Tuple of (thumbnail as NumPy array, thumbnail as base64 string)
    """
    try:
        pil_image = numpy_to_pil(image)

        aspect_ratio = pil_image.height / pil_image.width
        height = max(1, int(width * aspect_ratio))

        # thumbnail() never upscales
        pil_image.thumbnail((width, height), Image.Resampling.LANCZOS)

        thumb_array = pil_to_numpy(pil_image)
        thumb_base64 = to_base64(thumb_array, format="png")

        return thumb_array, thumb_base64

    except Exception as e:
        logger.error(f"Failed to create thumbnail: {e}")
        raise
