"""
Exception handling for the HTTP API.

Maps the core MeshWarpError hierarchy onto JSON error responses and guards
endpoints against unexpected exceptions.
"""

import functools
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from core.exceptions import (
    CountMismatchError,
    DegenerateTriangleError,
    ImageIOError,
    MalformedRecordError,
    MeshFileNotFoundError,
    MeshWarpError,
)

logger = logging.getLogger(__name__)

# Most specific first
STATUS_CODES = [
    (MalformedRecordError, 422),
    (CountMismatchError, 422),
    (DegenerateTriangleError, 422),
    (MeshFileNotFoundError, 422),
    (ImageIOError, 400),
]


def status_for(exc: MeshWarpError) -> int:
    for exc_type, status in STATUS_CODES:
        if isinstance(exc, exc_type):
            return status
    return 500


def error_body(exc: MeshWarpError) -> dict:
    body = {"error": type(exc).__name__, "detail": str(exc)}
    triangle_index = getattr(exc, "triangle_index", None)
    if triangle_index is not None:
        body["triangle_index"] = triangle_index
    return body


async def mesh_warp_exception_handler(request: Request, exc: MeshWarpError) -> JSONResponse:
    status = status_for(exc)
    logger.warning(f"{request.method} {request.url.path} failed ({status}): {exc}")
    return JSONResponse(status_code=status, content=error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for the core exception hierarchy"""
    app.add_exception_handler(MeshWarpError, mesh_warp_exception_handler)


def safe_endpoint(func):
    """
    Let HTTP and warp errors through; turn anything else into a 500.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except (HTTPException, MeshWarpError):
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return wrapper
