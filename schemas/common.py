"""
Common API models shared by several endpoints.
"""

from pydantic import BaseModel


class Point(BaseModel):
    """2D point"""

    x: float
    y: float
