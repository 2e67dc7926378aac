"""
Warp API Router - Mesh warp endpoint
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import (
    check_image_size,
    get_max_image_bytes,
    get_warp_service,
    service_for_params,
)
from api.exceptions import safe_endpoint
from core.image.converters import from_base64, to_base64
from core.image.processors import create_thumbnail
from core.mesh_parser import parse_mesh_text
from schemas import WarpRequest, WarpResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
@safe_endpoint
async def warp_image(
    request: WarpRequest,
    warp_service=Depends(get_warp_service),
    max_image_bytes: int = Depends(get_max_image_bytes),
) -> WarpResponse:
    """
    Warp an image through a triangle mesh.

    The mesh is parsed before the image is decoded, so mesh errors are
    reported without any image work.

    Returns:
        WarpResponse with the composited image and run statistics
    """
    mesh = parse_mesh_text(request.mesh, source="request.mesh")

    check_image_size(request.image_base64, max_image_bytes)
    image = from_base64(request.image_base64)

    service = service_for_params(request.params, warp_service)
    result = service.warp_image(image, mesh, triangulate=request.triangulate)

    _, thumbnail = create_thumbnail(result.canvas)

    return WarpResponse(
        image_base64=to_base64(result.canvas, format=request.output_format.value),
        thumbnail_base64=thumbnail,
        width=result.width,
        height=result.height,
        triangles_total=result.triangles_total,
        triangles_processed=result.triangles_processed,
        skipped=result.skipped,
        processing_time_ms=result.processing_time_ms,
    )
