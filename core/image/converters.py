"""
Image format conversion utilities.

Handles conversions between different image formats:
- NumPy arrays (OpenCV BGR/BGRA format)
- PIL Images (RGB/RGBA format)
- Base64 encoded strings
- Alpha channel handling (add, flatten)
"""

import base64
import binascii
import io
import logging
from typing import Tuple, Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from core.constants import ErrorMessages, ImageConstants
from core.exceptions import ImageIOError

logger = logging.getLogger(__name__)


class ImageConverters:
    """Utilities for converting between image formats."""

    @staticmethod
    def numpy_to_pil(image: np.ndarray) -> Image.Image:
        """
        Convert NumPy array (OpenCV format) to PIL Image.

        Args:
            image: NumPy array in BGR or BGRA format (OpenCV)

        Returns:
            PIL Image in RGB or RGBA format
        """
        if len(image.shape) == 3 and image.shape[2] == 4:
            image_rgb = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        elif len(image.shape) == 3 and image.shape[2] == 3:
            image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        else:
            image_rgb = image

        return Image.fromarray(image_rgb)

    @staticmethod
    def pil_to_numpy(image: Image.Image) -> np.ndarray:
        """
        Convert PIL Image to a BGRA NumPy array.

        Args:
            image: PIL Image in any mode

        Returns:
            NumPy array in BGRA format
        """
        array = np.array(image.convert("RGBA"))
        return cv2.cvtColor(array, cv2.COLOR_RGBA2BGRA)

    @staticmethod
    def ensure_bgra(image: np.ndarray) -> np.ndarray:
        """
        Ensure image is 8-bit BGRA (add an opaque alpha channel if needed).

        Args:
            image: Grayscale, BGR or BGRA image of any integer depth

        Returns:
            Image in BGRA uint8 format
        """
        if image.dtype == np.uint16:
            image = (image // 257).astype(np.uint8)
        elif image.dtype != np.uint8:
            image = cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

        if len(image.shape) == 2:
            return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
        if image.shape[2] == 1:
            return cv2.cvtColor(image[:, :, 0], cv2.COLOR_GRAY2BGRA)
        if image.shape[2] == 3:
            return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
        return image.copy()

    @staticmethod
    def flatten_alpha(image: np.ndarray, background: Tuple[int, int, int]) -> np.ndarray:
        """
        Blend a BGRA image onto a solid background.

        Args:
            image: BGRA image (BGR images are returned unchanged)
            background: Background color in BGR format

        Returns:
            BGR image
        """
        if len(image.shape) != 3 or image.shape[2] != 4:
            return image

        alpha = image[:, :, 3:4].astype(np.float32) / 255.0
        color = image[:, :, :3].astype(np.float32)
        backdrop = np.array(background, dtype=np.float32).reshape(1, 1, 3)
        blended = color * alpha + backdrop * (1.0 - alpha)
        return np.clip(np.rint(blended), 0, 255).astype(np.uint8)

    @staticmethod
    def parse_color(color: Union[str, Tuple[int, int, int]]) -> Tuple[int, int, int]:
        """
        Parse a color name, '#rrggbb' or 'r,g,b' string into BGR.

        Raises:
            ValueError: If the color cannot be parsed
        """
        if isinstance(color, (tuple, list)):
            if len(color) != 3:
                raise ValueError(ErrorMessages.INVALID_COLOR.format(color=color))
            return tuple(int(c) for c in color)

        text = color.strip().lower()
        if text in ImageConstants.NAMED_COLORS:
            return ImageConstants.NAMED_COLORS[text]

        try:
            if text.startswith("#") and len(text) == 7:
                r, g, b = (int(text[i : i + 2], 16) for i in (1, 3, 5))
            else:
                r, g, b = (int(part) for part in text.split(","))
        except ValueError:
            raise ValueError(ErrorMessages.INVALID_COLOR.format(color=color))

        if not all(0 <= c <= 255 for c in (r, g, b)):
            raise ValueError(ErrorMessages.INVALID_COLOR.format(color=color))
        return (b, g, r)

    @staticmethod
    def to_base64(image: np.ndarray, format: str = "png", quality: int = 85) -> str:
        """
        Convert image to base64 string.

        Args:
            image: BGR or BGRA NumPy array
            format: Image format (png, jpg, webp)
            quality: JPEG/WebP quality (1-100, ignored for PNG)

        Returns:
            Base64 encoded string
        """
        fmt = format.lower().lstrip(".")
        if fmt in ("jpg", "jpeg"):
            image = ImageConverters.flatten_alpha(image, ImageConstants.NAMED_COLORS["white"])

        pil_image = ImageConverters.numpy_to_pil(image)
        buffer = io.BytesIO()
        save_kwargs = {"format": "JPEG" if fmt in ("jpg", "jpeg") else fmt.upper()}
        if fmt in ("jpg", "jpeg", "webp"):
            save_kwargs["quality"] = quality

        pil_image.save(buffer, **save_kwargs)
        return base64.b64encode(buffer.getvalue()).decode("utf-8")

    @staticmethod
    def from_base64(base64_string: str) -> np.ndarray:
        """
        Convert base64 string to a BGRA NumPy array.

        Raises:
            ImageIOError: If the data is not a decodable image
        """
        try:
            # Allow data URLs
            if base64_string.startswith("data:"):
                base64_string = base64_string.split(",", 1)[1]
            image_bytes = base64.b64decode(base64_string, validate=True)
            image = Image.open(io.BytesIO(image_bytes))
            image.load()
        except (binascii.Error, ValueError, UnidentifiedImageError, OSError) as e:
            logger.error(f"Failed to decode base64 image: {e}")
            raise ImageIOError(ErrorMessages.IMAGE_DECODE_FAILED) from e

        return ImageConverters.pil_to_numpy(image)


# Module-level aliases
numpy_to_pil = ImageConverters.numpy_to_pil
pil_to_numpy = ImageConverters.pil_to_numpy
ensure_bgra = ImageConverters.ensure_bgra
flatten_alpha = ImageConverters.flatten_alpha
parse_color = ImageConverters.parse_color
to_base64 = ImageConverters.to_base64
from_base64 = ImageConverters.from_base64
