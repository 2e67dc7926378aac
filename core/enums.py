"""
Enumerations shared across the Mesh Warp Flow system.
"""

from enum import Enum

import cv2


class DegeneratePolicy(str, Enum):
    """What the engine does with a triangle whose source vertices are collinear."""

    ABORT = "abort"
    SKIP = "skip"


class Interpolation(str, Enum):
    """Resampling filter used for the per-triangle affine warp."""

    NEAREST = "nearest"
    LINEAR = "linear"
    CUBIC = "cubic"

    @property
    def cv2_flag(self) -> int:
        """Matching OpenCV interpolation flag."""
        return {
            Interpolation.NEAREST: cv2.INTER_NEAREST,
            Interpolation.LINEAR: cv2.INTER_LINEAR,
            Interpolation.CUBIC: cv2.INTER_CUBIC,
        }[self]


class MeshSide(str, Enum):
    """Which half of a control point pair to use."""

    SOURCE = "source"
    DESTINATION = "destination"


class OutputFormat(str, Enum):
    """Encodings supported for in-memory results."""

    PNG = "png"
    JPEG = "jpg"
    WEBP = "webp"
