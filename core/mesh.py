"""
Mesh data model - control points, triangles and affine transforms
"""

import math
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

import numpy as np


@dataclass(frozen=True)
class Point2D:
    """2D point in pixel coordinates"""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __getitem__(self, item: int) -> float:
        return (self.x, self.y)[item]


@dataclass(frozen=True)
class ControlPoint:
    """Indexed pair of corresponding source/destination points"""

    index: int
    source: Point2D
    destination: Point2D


@dataclass(frozen=True)
class Triangle:
    """Three control point indices"""

    i1: int
    i2: int
    i3: int

    @property
    def indices(self) -> Tuple[int, int, int]:
        return (self.i1, self.i2, self.i3)

    def source_vertices(self, mesh: "Mesh") -> Tuple[Point2D, Point2D, Point2D]:
        """Source triangle (src[i1], src[i2], src[i3])"""
        points = mesh.control_points
        return tuple(points[i].source for i in self.indices)

    def destination_vertices(self, mesh: "Mesh") -> Tuple[Point2D, Point2D, Point2D]:
        """Destination triangle (dst[i1], dst[i2], dst[i3])"""
        points = mesh.control_points
        return tuple(points[i].destination for i in self.indices)


@dataclass(frozen=True)
class AffineTransform:
    """
    2x3 affine map.

    x' = a*x + b*y + e
    y' = c*x + d*y + f
    """

    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    def apply(self, point) -> Point2D:
        x, y = point[0], point[1]
        return Point2D(self.a * x + self.b * y + self.e, self.c * x + self.d * y + self.f)

    def as_matrix(self) -> np.ndarray:
        """Matrix in OpenCV row order [[a, b, e], [c, d, f]]"""
        return np.array([[self.a, self.b, self.e], [self.c, self.d, self.f]], dtype=np.float64)

    def translated(self, dx: float, dy: float) -> "AffineTransform":
        """Same map followed by a translation of (dx, dy)"""
        return AffineTransform(self.a, self.b, self.c, self.d, self.e + dx, self.f + dy)

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.a, self.b, self.c, self.d, self.e, self.f))


@dataclass(frozen=True)
class Viewport:
    """Integer pixel rectangle"""

    x: int
    y: int
    width: int
    height: int

    @property
    def x2(self) -> int:
        return self.x + self.width

    @property
    def y2(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def clip(self, image_width: int, image_height: int) -> "Viewport":
        """Clip to the image bounds; the result may be empty"""
        x = max(0, min(self.x, image_width))
        y = max(0, min(self.y, image_height))
        x2 = max(0, min(self.x2, image_width))
        y2 = max(0, min(self.y2, image_height))
        return Viewport(x, y, x2 - x, y2 - y)


@dataclass(frozen=True)
class BoundingBox:
    """
    Destination bounding box with the inclusive pixel-count convention.

    width = max - min + 1, height likewise.
    """

    xmin: float
    ymin: float
    width: float
    height: float

    @property
    def xmax(self) -> float:
        return self.xmin + self.width - 1

    @property
    def ymax(self) -> float:
        return self.ymin + self.height - 1

    def contains(self, point, tolerance: float = 1e-9) -> bool:
        x, y = point[0], point[1]
        return (
            self.xmin - tolerance <= x <= self.xmax + tolerance
            and self.ymin - tolerance <= y <= self.ymax + tolerance
        )

    def viewport(self) -> Viewport:
        """Smallest integer pixel rectangle covering the box"""
        x0 = math.floor(self.xmin)
        y0 = math.floor(self.ymin)
        x1 = math.ceil(self.xmax)
        y1 = math.ceil(self.ymax)
        return Viewport(x0, y0, x1 - x0 + 1, y1 - y0 + 1)


@dataclass(frozen=True)
class Mesh:
    """Parsed mesh: control points and triangles in file order"""

    control_points: Tuple[ControlPoint, ...] = field(default_factory=tuple)
    triangles: Tuple[Triangle, ...] = field(default_factory=tuple)

    @property
    def num_control_points(self) -> int:
        return len(self.control_points)

    @property
    def num_triangles(self) -> int:
        return len(self.triangles)

    @property
    def source_points(self) -> List[Point2D]:
        return [cp.source for cp in self.control_points]

    @property
    def destination_points(self) -> List[Point2D]:
        return [cp.destination for cp in self.control_points]

    def with_triangles(self, triangles) -> "Mesh":
        """New mesh with the same control points and the given triangles"""
        return Mesh(control_points=self.control_points, triangles=tuple(triangles))


@dataclass(frozen=True)
class MeshInfo:
    """Counts reported by the info flag"""

    source_points: int
    destination_points: int
    triangles: int

    @classmethod
    def from_mesh(cls, mesh: Mesh) -> "MeshInfo":
        return cls(
            source_points=mesh.num_control_points,
            destination_points=mesh.num_control_points,
            triangles=mesh.num_triangles,
        )
