"""
Warp API models.

This module contains request and response models for warp operations:
- Warp request with inline image and mesh text
- Warp response with the composited image and run statistics
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from core.enums import OutputFormat
from warp.mesh_warp import WarpParams


class WarpRequest(BaseModel):
    """Request to warp an image through a mesh"""

    image_base64: str = Field(..., description="Source image, base64 or data URL")
    mesh: str = Field(..., description="Mesh description text")
    params: Optional[WarpParams] = Field(default=None, description="Warp parameters")
    output_format: OutputFormat = OutputFormat.PNG
    triangulate: bool = Field(
        default=False, description="Triangulate source points if the mesh has no triangles"
    )


class WarpResponse(BaseModel):
    """Response from a warp run"""

    image_base64: str
    thumbnail_base64: str
    width: int
    height: int
    triangles_total: int
    triangles_processed: int
    skipped: List[int]
    processing_time_ms: int
