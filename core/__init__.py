"""
Core modules for Mesh Warp Flow
"""

from .affine import bounding_box, is_degenerate, solve_affine
from .mesh import AffineTransform, BoundingBox, ControlPoint, Mesh, MeshInfo, Point2D, Triangle
from .mesh_parser import format_mesh, parse_mesh_file, parse_mesh_text

__all__ = [
    "AffineTransform",
    "BoundingBox",
    "ControlPoint",
    "Mesh",
    "MeshInfo",
    "Point2D",
    "Triangle",
    "bounding_box",
    "is_degenerate",
    "solve_affine",
    "format_mesh",
    "parse_mesh_file",
    "parse_mesh_text",
]
