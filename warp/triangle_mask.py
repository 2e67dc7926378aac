"""
Triangle rasterization for per-triangle clipping masks.

A pixel belongs to a triangle when its center (integer coordinates, the same
convention the affine resampler uses) lies inside or on the triangle. Edges
are inclusive, so triangles sharing an edge leave no gaps between them.
"""

import math
from typing import Sequence, Tuple

import numpy as np

# Tolerance on edge functions, relative to twice the triangle area
EDGE_EPSILON = 1e-9


def triangle_mask(
    vertices: Sequence,
    width: int,
    height: int,
    origin: Tuple[int, int] = (0, 0),
) -> np.ndarray:
    """
    Rasterize a filled triangle into a single channel mask.

    Args:
        vertices: Three (x, y) points in canvas coordinates
        width: Mask width
        height: Mask height
        origin: Canvas coordinate of the mask's top-left pixel, so a mask can
            cover just a viewport of the canvas

    Returns:
        uint8 array of shape (height, width): 255 inside the triangle, 0 outside.
        Zero-area triangles give an empty mask.
    """
    mask = np.zeros((max(0, int(height)), max(0, int(width))), dtype=np.uint8)
    if mask.size == 0:
        return mask

    ox, oy = origin
    (x0, y0), (x1, y1), (x2, y2) = [(float(p[0]) - ox, float(p[1]) - oy) for p in vertices]

    area = (x1 - x0) * (y2 - y0) - (x2 - x0) * (y1 - y0)
    if area == 0 or not math.isfinite(area):
        return mask

    # Only scan the triangle's bounding rows and columns
    col_min = max(0, math.floor(min(x0, x1, x2)))
    col_max = min(mask.shape[1] - 1, math.ceil(max(x0, x1, x2)))
    row_min = max(0, math.floor(min(y0, y1, y2)))
    row_max = min(mask.shape[0] - 1, math.ceil(max(y0, y1, y2)))
    if col_min > col_max or row_min > row_max:
        return mask

    px, py = np.meshgrid(
        np.arange(col_min, col_max + 1, dtype=np.float64),
        np.arange(row_min, row_max + 1, dtype=np.float64),
    )

    # Edge functions share the sign of area for points inside
    sign = 1.0 if area > 0 else -1.0
    tolerance = -EDGE_EPSILON * abs(area)
    e0 = sign * ((x1 - x0) * (py - y0) - (y1 - y0) * (px - x0))
    e1 = sign * ((x2 - x1) * (py - y1) - (y2 - y1) * (px - x1))
    e2 = sign * ((x0 - x2) * (py - y2) - (y0 - y2) * (px - x2))
    inside = (e0 >= tolerance) & (e1 >= tolerance) & (e2 >= tolerance)

    mask[row_min : row_max + 1, col_min : col_max + 1][inside] = 255
    return mask
