"""
Delaunay triangulation of mesh control points.

Used when a mesh lists control points but no triangles.
"""

import logging
from typing import List, Sequence

import cv2
import numpy as np

from core.mesh import Triangle

logger = logging.getLogger(__name__)


def _key(x: float, y: float):
    # Subdiv2D stores float32 coordinates
    return (round(float(np.float32(x)), 3), round(float(np.float32(y)), 3))


def delaunay_triangles(points: Sequence, width: int, height: int) -> List[Triangle]:
    """
    Delaunay triangulation of control points.

    Args:
        points: Control points (x, y), usually the mesh source points
        width: Width of the area holding the points
        height: Height of the area holding the points

    Returns:
        Triangles as indices into points
    """
    if len(points) < 3:
        return []

    # Subdiv2D rejects points outside its rectangle, so grow it to fit
    xs = [float(p[0]) for p in points]
    ys = [float(p[1]) for p in points]
    x0 = int(np.floor(min(0.0, min(xs)))) - 1
    y0 = int(np.floor(min(0.0, min(ys)))) - 1
    x1 = int(np.ceil(max(float(width), max(xs)))) + 1
    y1 = int(np.ceil(max(float(height), max(ys)))) + 1
    subdiv = cv2.Subdiv2D((x0, y0, x1 - x0 + 1, y1 - y0 + 1))

    point_index = {}
    for i, (x, y) in enumerate(zip(xs, ys)):
        key = _key(x, y)
        if key in point_index:
            logger.warning(f"Duplicate control point {i} at ({x}, {y}) ignored")
            continue
        point_index[key] = i
        subdiv.insert((x, y))

    triangles = []
    seen = set()
    for t in subdiv.getTriangleList():
        # Triangles touching the virtual outer vertices match no control point
        idx = [point_index.get(_key(t[2 * k], t[2 * k + 1])) for k in range(3)]
        if None in idx or len(set(idx)) != 3:
            continue

        key = tuple(sorted(idx))
        if key in seen:
            continue
        seen.add(key)
        triangles.append(Triangle(*idx))

    logger.debug(f"Delaunay triangulation: {len(points)} points -> {len(triangles)} triangles")
    return triangles
