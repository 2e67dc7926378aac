"""
Service layer - business logic shared by the CLI and the HTTP API.
"""

from services.warp_service import WarpService

__all__ = ["WarpService"]
