"""
Affine solve for a single mesh triangle.

Both output coordinates share the coefficient matrix built from the source
triangle, so the two 3x3 systems are solved together with one call.
"""

import logging
import math
from typing import Sequence, Tuple

import numpy as np

from core.constants import WarpDefaults
from core.exceptions import DegenerateTriangleError
from core.mesh import AffineTransform, BoundingBox

logger = logging.getLogger(__name__)


def _as_array(points: Sequence) -> np.ndarray:
    array = np.array([[p[0], p[1]] for p in points], dtype=np.float64)
    if array.shape != (3, 2):
        raise ValueError(f"Expected three 2D points, got shape {array.shape}")
    return array


def _edge_scale(points: np.ndarray) -> float:
    """Longest edge length, at least 1 so tiny triangles keep an absolute floor."""
    edges = points - np.roll(points, 1, axis=0)
    return max(1.0, float(np.max(np.hypot(edges[:, 0], edges[:, 1]))))


def is_degenerate(points: Sequence, epsilon: float = WarpDefaults.DETERMINANT_EPSILON) -> bool:
    """
    Check whether three points are (nearly) collinear.

    The determinant of [[x1, y1, 1], [x2, y2, 1], [x3, y3, 1]] is twice the
    signed area; it is compared against epsilon scaled by the squared
    longest edge.
    """
    pts = _as_array(points)
    coefficients = np.column_stack([pts, np.ones(3)])
    det = float(np.linalg.det(coefficients))
    return not math.isfinite(det) or abs(det) <= epsilon * _edge_scale(pts) ** 2


def bounding_box(points: Sequence) -> BoundingBox:
    """
    Bounding box of a triangle with inclusive pixel counts.

    width = max(x) - min(x) + 1, height = max(y) - min(y) + 1
    """
    xs = [float(p[0]) for p in points]
    ys = [float(p[1]) for p in points]
    xmin = min(xs)
    ymin = min(ys)
    return BoundingBox(
        xmin=xmin,
        ymin=ymin,
        width=max(xs) - xmin + 1,
        height=max(ys) - ymin + 1,
    )


def solve_affine(
    src: Sequence,
    dst: Sequence,
    epsilon: float = WarpDefaults.DETERMINANT_EPSILON,
) -> Tuple[AffineTransform, BoundingBox]:
    """
    Compute the affine map taking the source triangle onto the destination.

    Args:
        src: Three source points
        dst: Three destination points
        epsilon: Relative singularity threshold

    Returns:
        Tuple of (AffineTransform, destination BoundingBox)

    Raises:
        DegenerateTriangleError: If the source points are collinear
    """
    src_pts = _as_array(src)
    dst_pts = _as_array(dst)

    coefficients = np.column_stack([src_pts, np.ones(3)])
    if is_degenerate(src_pts, epsilon):
        raise DegenerateTriangleError([tuple(p) for p in src_pts])

    try:
        # Column 0 solves (a, b, e), column 1 solves (c, d, f)
        solution = np.linalg.solve(coefficients, dst_pts)
    except np.linalg.LinAlgError as e:
        raise DegenerateTriangleError([tuple(p) for p in src_pts]) from e

    if not np.all(np.isfinite(solution)):
        raise DegenerateTriangleError([tuple(p) for p in src_pts])

    (a, c), (b, d), (e, f) = solution.tolist()
    transform = AffineTransform(a=a, b=b, c=c, d=d, e=e, f=f)

    logger.debug(
        f"Affine solve: a={a:.6g} b={b:.6g} c={c:.6g} d={d:.6g} e={e:.6g} f={f:.6g}"
    )
    return transform, bounding_box(dst_pts)
