"""
Mesh API models.

This module contains request and response models for mesh operations:
- Mesh inspection (counts)
- Delaunay triangulation of control points
- Mesh overlay rendering
"""

from typing import List, Tuple

from pydantic import BaseModel, Field

from core.enums import MeshSide

from .common import Point


class MeshInspectRequest(BaseModel):
    """Request to parse and summarize a mesh"""

    mesh: str = Field(..., description="Mesh description text")


class MeshInfoResponse(BaseModel):
    """Mesh summary"""

    source_points: int
    destination_points: int
    triangles: int


class TriangulateRequest(BaseModel):
    """Request to triangulate control points"""

    source_points: List[Point] = Field(..., min_length=3)
    destination_points: List[Point] = Field(..., min_length=3)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)


class TriangulateResponse(BaseModel):
    """Triangulation result"""

    triangles: List[Tuple[int, int, int]]
    mesh: str = Field(..., description="Canonical mesh text including the triangles")


class OverlayRequest(BaseModel):
    """Request to draw a mesh over an image"""

    image_base64: str
    mesh: str
    side: MeshSide = MeshSide.SOURCE
    labels: bool = True


class OverlayResponse(BaseModel):
    """Image with the mesh drawn on it"""

    image_base64: str
