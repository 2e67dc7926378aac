"""
Image utilities - modular architecture.

This package provides focused image utilities:
- converters: Format conversions (NumPy, PIL, base64, alpha handling)
- processors: Image operations (thumbnail)
- raster: Operations consumed by the warp engine (load/save, resample, composite)
"""

from core.image.converters import ImageConverters
from core.image.processors import create_thumbnail
from core.image.raster import (
    affine_resample,
    composite_over,
    create_canvas,
    crop_viewport,
    load_image,
    save_image,
)

__all__ = [
    "ImageConverters",
    "create_thumbnail",
    "affine_resample",
    "composite_over",
    "create_canvas",
    "crop_viewport",
    "load_image",
    "save_image",
]
