"""
API routers package
"""

from . import mesh, system, warp

__all__ = ["mesh", "system", "warp"]
