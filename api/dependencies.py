"""
Shared FastAPI dependencies for the Mesh Warp Flow system.
Centralizes common dependencies to eliminate code duplication.
"""

import logging
from typing import Optional

from fastapi import HTTPException, Request

from services.warp_service import WarpService
from warp.mesh_warp import WarpParams

logger = logging.getLogger(__name__)


def get_warp_service(request: Request) -> WarpService:
    """
    Get the default WarpService instance from app state.

    Raises:
        HTTPException: If the service is not initialized
    """
    try:
        return request.app.state.warp_service
    except AttributeError as e:
        logger.error(f"Warp service not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Warp service not initialized"
        )


def get_max_image_bytes(request: Request) -> int:
    """Upper bound on decoded request image size"""
    config = getattr(request.app.state, "config", {}) or {}
    max_mb = config.get("api", {}).get("max_image_mb", 50)
    return int(max_mb) * 1024 * 1024


def service_for_params(params: Optional[WarpParams], default_service: WarpService) -> WarpService:
    """Default service, or a per-request one when the request overrides params"""
    if params is None:
        return default_service
    return WarpService(params=params, background=default_service.background)


def check_image_size(image_base64: str, max_bytes: int) -> None:
    """
    Reject oversized base64 payloads before decoding.

    Raises:
        HTTPException: 413 if the payload is too large
    """
    # 4 base64 characters encode 3 bytes
    approx_bytes = len(image_base64) * 3 // 4
    if approx_bytes > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Image too large: {approx_bytes} bytes (max: {max_bytes})",
        )
