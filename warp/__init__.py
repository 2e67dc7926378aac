"""
Mesh warp algorithms: triangle masks, per-triangle affine warp, triangulation.
"""

from warp.mesh_warp import MeshWarpEngine, TrianglePatch, WarpParams, WarpResult
from warp.triangle_mask import triangle_mask
from warp.triangulation import delaunay_triangles

__all__ = [
    "MeshWarpEngine",
    "TrianglePatch",
    "WarpParams",
    "WarpResult",
    "triangle_mask",
    "delaunay_triangles",
]
