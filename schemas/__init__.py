"""
Schemas Package

This package contains all Pydantic schemas for data validation and serialization,
organized by domain for better maintainability.

These schemas are shared across the API (routers, dependencies) and services.
"""

# Re-export enums from centralized location for convenience
from core.enums import DegeneratePolicy, Interpolation, MeshSide, OutputFormat

# Import warp params from the warp layer for convenience
from warp.mesh_warp import WarpParams

# Common models (core data structures)
from .common import Point

# Mesh models
from .mesh import (
    MeshInfoResponse,
    MeshInspectRequest,
    OverlayRequest,
    OverlayResponse,
    TriangulateRequest,
    TriangulateResponse,
)

# System models
from .system import SystemStatus

# Warp models
from .warp import WarpRequest, WarpResponse

# Explicitly declare public API for re-export
__all__ = [
    # Common models
    "Point",
    # Mesh models
    "MeshInspectRequest",
    "MeshInfoResponse",
    "TriangulateRequest",
    "TriangulateResponse",
    "OverlayRequest",
    "OverlayResponse",
    # Warp models
    "WarpRequest",
    "WarpResponse",
    # System models
    "SystemStatus",
    # Enums
    "DegeneratePolicy",
    "Interpolation",
    "MeshSide",
    "OutputFormat",
    # Params
    "WarpParams",
]
