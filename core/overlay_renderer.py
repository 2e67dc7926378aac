"""
Overlay rendering for mesh inspection.

Draws mesh triangles, control points and their indices on top of an image,
so a mesh file can be checked against the picture it is meant to warp.
"""

from typing import Optional, Tuple

import cv2
import numpy as np

from core.constants import OverlayDefaults
from core.enums import MeshSide
from core.image.converters import ensure_bgra
from core.mesh import Mesh


class MeshOverlayRenderer:
    """
    Renders a mesh as an overlay on an image.

    Provides consistent styling for triangle edges, control point markers
    and index labels.
    """

    def __init__(
        self,
        font=cv2.FONT_HERSHEY_SIMPLEX,
        font_scale: float = OverlayDefaults.FONT_SCALE,
        thickness: int = OverlayDefaults.LINE_THICKNESS,
        line_type=cv2.LINE_AA,
    ):
        """
        Initialize overlay renderer.

        Args:
            font: OpenCV font type
            font_scale: Font scale factor
            thickness: Line thickness for edges and text
            line_type: Line type for anti-aliasing
        """
        self.font = font
        self.font_scale = font_scale
        self.thickness = thickness
        self.line_type = line_type

    def draw_label(
        self,
        image: np.ndarray,
        text: str,
        x: int,
        y: int,
        color: Tuple[int, int, int] = OverlayDefaults.TEXT_COLOR,
    ) -> np.ndarray:
        """Draw text label on the image."""
        cv2.putText(
            image,
            text,
            (x, y),
            self.font,
            self.font_scale,
            color,
            self.thickness,
            self.line_type,
        )
        return image

    def draw_point(
        self,
        image: np.ndarray,
        x: float,
        y: float,
        color: Tuple[int, int, int] = OverlayDefaults.POINT_COLOR,
        radius: int = OverlayDefaults.POINT_RADIUS,
    ) -> np.ndarray:
        """Draw a filled control point marker."""
        cv2.circle(image, (int(round(x)), int(round(y))), radius, color, -1)
        return image

    def draw_mesh(
        self,
        image: np.ndarray,
        mesh: Mesh,
        side: MeshSide = MeshSide.SOURCE,
        labels: bool = True,
        edge_color: Optional[Tuple[int, int, int]] = None,
    ) -> np.ndarray:
        """
        Draw the mesh on a copy of the image.

        Args:
            image: Input image (grayscale, BGR or BGRA)
            mesh: Mesh to draw
            side: Draw source or destination positions
            labels: Whether to label control points with their index
            edge_color: Triangle edge color in BGR format

        Returns:
            BGRA image with the overlay drawn
        """
        bgra = ensure_bgra(image)
        side = MeshSide(side)
        points = mesh.source_points if side == MeshSide.SOURCE else mesh.destination_points
        edge_color = edge_color or OverlayDefaults.EDGE_COLOR

        # Anti-aliased drawing on four channels would blend alpha too, so draw
        # on the color channels and make every touched pixel opaque afterwards
        canvas = np.ascontiguousarray(bgra[:, :, :3])

        for triangle in mesh.triangles:
            corners = np.array(
                [[points[i].x, points[i].y] for i in triangle.indices], dtype=np.float64
            )
            cv2.polylines(
                canvas,
                [np.rint(corners).astype(np.int32)],
                True,
                edge_color,
                self.thickness,
                self.line_type,
            )

        for index, point in enumerate(points):
            self.draw_point(canvas, point.x, point.y)
            if labels:
                self.draw_label(canvas, str(index), int(point.x) + 4, int(point.y) - 4)

        touched = np.any(canvas != bgra[:, :, :3], axis=2)
        bgra[:, :, :3] = canvas
        bgra[:, :, 3][touched] = 255
        return bgra
