"""
Raster operations used by the mesh warp engine.

All images are NumPy arrays in OpenCV BGRA order (uint8). Alpha is straight
(not premultiplied).

Provides:
- Loading and saving with alpha handling
- Transparent canvas creation
- Viewport cropping
- Affine resampling with a transparent virtual pixel
- Straight-alpha "over" compositing through a mask
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from core.constants import ErrorMessages, ImageConstants
from core.enums import Interpolation
from core.exceptions import ImageIOError, ImageNotFoundError
from core.image.converters import ensure_bgra, flatten_alpha, parse_color
from core.mesh import AffineTransform, Viewport

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def load_image(path: Union[str, Path]) -> np.ndarray:
    """
    Load an image from disk as BGRA.

    Raises:
        ImageNotFoundError: If the file is missing, unreadable or empty
        ImageIOError: If the file cannot be decoded
    """
    path = Path(path)
    if not path.is_file():
        raise ImageNotFoundError(str(path))

    # imread does not handle non-ASCII paths on every platform
    try:
        data = np.fromfile(str(path), dtype=np.uint8)
    except OSError as e:
        logger.error(f"Cannot read image file {path}: {e}")
        raise ImageNotFoundError(str(path)) from e

    if not data.size:
        raise ImageNotFoundError(str(path), empty=True)

    image = cv2.imdecode(data, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageIOError(ErrorMessages.IMAGE_READ_FAILED.format(path=path), path=str(path))

    logger.debug(f"Loaded {path}: {image.shape[1]}x{image.shape[0]}, dtype={image.dtype}")
    return ensure_bgra(image)


def save_image(
    image: np.ndarray,
    path: Union[str, Path],
    background: Union[str, Tuple[int, int, int]] = "white",
) -> Path:
    """
    Write an image to disk.

    Formats without an alpha channel (e.g. JPEG) get the image flattened
    onto the background color first.

    Raises:
        ImageIOError: If encoding or writing fails
    """
    path = Path(path)
    suffix = path.suffix.lower() or f".{ImageConstants.DEFAULT_OUTPUT_FORMAT}"

    if suffix not in ImageConstants.ALPHA_FORMATS:
        image = flatten_alpha(image, parse_color(background))

    try:
        ok, buffer = cv2.imencode(suffix, image)
        if not ok:
            raise ImageIOError(
                ErrorMessages.IMAGE_WRITE_FAILED.format(path=path, error="encoding failed"),
                path=str(path),
            )
        buffer.tofile(str(path))
    except (cv2.error, OSError) as e:
        raise ImageIOError(
            ErrorMessages.IMAGE_WRITE_FAILED.format(path=path, error=e), path=str(path)
        ) from e

    logger.debug(f"Wrote {path}")
    return path


def create_canvas(width: int, height: int) -> np.ndarray:
    """Fully transparent BGRA canvas"""
    return np.zeros((height, width, ImageConstants.CHANNELS_BGRA), dtype=np.uint8)


def crop_viewport(image: np.ndarray, viewport: Viewport) -> Optional[np.ndarray]:
    """
    Return a view of the image restricted to the viewport (clipped to bounds).

    Returns:
        Array view, or None if the viewport lies completely outside the image
    """
    height, width = image.shape[:2]
    clipped = viewport.clip(width, height)
    if clipped.is_empty:
        return None
    return image[clipped.y : clipped.y2, clipped.x : clipped.x2]


def affine_resample(
    image: np.ndarray,
    transform: AffineTransform,
    width: int,
    height: int,
    interpolation: Interpolation = Interpolation.LINEAR,
) -> np.ndarray:
    """
    Warp the image through a forward affine transform.

    Output pixel (u, v) samples the source at transform^-1(u, v). Samples
    falling outside the source are transparent, never wrapped or clamped.

    Args:
        image: BGRA source image
        transform: Forward source -> output transform
        width: Output width
        height: Output height
        interpolation: Resampling filter

    Returns:
        BGRA image of shape (height, width, 4)
    """
    return cv2.warpAffine(
        image,
        transform.as_matrix(),
        (int(width), int(height)),
        flags=interpolation.cv2_flag,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=TRANSPARENT,
    )


def composite_over(base: np.ndarray, overlay: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """
    Composite overlay "over" base through a mask, in place on base.

    The overlay alpha is multiplied by mask/255. Opaque overlay pixels
    replace base pixels; transparent ones leave base unchanged.

    Args:
        base: BGRA array, modified in place
        overlay: BGRA array of the same shape
        mask: uint8 array of shape base.shape[:2]

    Returns:
        base
    """
    coverage = mask > 0
    if not np.any(coverage):
        return base

    src = overlay[coverage].astype(np.float32)
    dst = base[coverage].astype(np.float32)

    src_alpha = src[:, 3:4] / 255.0 * (mask[coverage][:, None].astype(np.float32) / 255.0)
    dst_alpha = dst[:, 3:4] / 255.0

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    safe_alpha = np.where(out_alpha > 0, out_alpha, 1.0)
    out_color = (src[:, :3] * src_alpha + dst[:, :3] * dst_alpha * (1.0 - src_alpha)) / safe_alpha

    result = np.concatenate([out_color, out_alpha * 255.0], axis=1)
    base[coverage] = np.clip(np.rint(result), 0, 255).astype(np.uint8)
    return base
