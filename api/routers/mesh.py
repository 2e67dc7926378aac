"""
Mesh API Router - Mesh inspection, triangulation and overlays
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import check_image_size, get_max_image_bytes, get_warp_service
from api.exceptions import safe_endpoint
from core.exceptions import CountMismatchError
from core.image.converters import from_base64, to_base64
from core.mesh import ControlPoint, Mesh, MeshInfo, Point2D
from core.mesh_parser import format_mesh, parse_mesh_text
from schemas import (
    MeshInfoResponse,
    MeshInspectRequest,
    OverlayRequest,
    OverlayResponse,
    TriangulateRequest,
    TriangulateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/inspect")
@safe_endpoint
async def inspect_mesh(request: MeshInspectRequest) -> MeshInfoResponse:
    """Parse a mesh and report its counts"""
    mesh = parse_mesh_text(request.mesh, source="request.mesh")
    info = MeshInfo.from_mesh(mesh)
    return MeshInfoResponse(
        source_points=info.source_points,
        destination_points=info.destination_points,
        triangles=info.triangles,
    )


@router.post("/triangulate")
@safe_endpoint
async def triangulate(
    request: TriangulateRequest, warp_service=Depends(get_warp_service)
) -> TriangulateResponse:
    """
    Delaunay-triangulate control points.

    Triangles are computed on the source points; the returned mesh text
    pairs each source point with its destination.
    """
    if len(request.source_points) != len(request.destination_points):
        raise CountMismatchError(
            "request", len(request.source_points), len(request.destination_points)
        )

    mesh = Mesh(
        control_points=tuple(
            ControlPoint(index=i, source=Point2D(s.x, s.y), destination=Point2D(d.x, d.y))
            for i, (s, d) in enumerate(zip(request.source_points, request.destination_points))
        )
    )
    mesh = warp_service.triangulate(mesh, request.width, request.height)

    return TriangulateResponse(
        triangles=[t.indices for t in mesh.triangles],
        mesh=format_mesh(mesh),
    )


@router.post("/overlay")
@safe_endpoint
async def render_overlay(
    request: OverlayRequest,
    warp_service=Depends(get_warp_service),
    max_image_bytes: int = Depends(get_max_image_bytes),
) -> OverlayResponse:
    """Draw the mesh over the image (source or destination positions)"""
    mesh = parse_mesh_text(request.mesh, source="request.mesh")

    check_image_size(request.image_base64, max_image_bytes)
    image = from_base64(request.image_base64)

    overlay = warp_service.render_overlay(image, mesh, side=request.side, labels=request.labels)
    return OverlayResponse(image_base64=to_base64(overlay, format="png"))
