"""
Warp Service - Business logic for mesh warp operations.

This service orchestrates a warp run: mesh parsing, image loading,
optional triangulation, the per-triangle engine and writing results.
Shared by the command line tool and the HTTP API.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

from core.enums import MeshSide
from core.image.raster import load_image, save_image
from core.mesh import Mesh, MeshInfo
from core.mesh_parser import parse_mesh_file, parse_mesh_text
from core.overlay_renderer import MeshOverlayRenderer
from core.utils.decorators import timer
from warp.mesh_warp import MeshWarpEngine, ProgressCallback, WarpParams, WarpResult
from warp.triangulation import delaunay_triangles

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class WarpService:
    """
    Service for mesh warp operations.

    Runs are fail-fast: the mesh is parsed and validated before any image
    work, and any error aborts the run without writing output.
    """

    def __init__(
        self,
        params: Optional[WarpParams] = None,
        background: Union[str, Tuple[int, int, int]] = "white",
    ):
        """
        Initialize warp service.

        Args:
            params: Warp parameters (defaults if None)
            background: Color used when writing formats without alpha
        """
        self.params = params or WarpParams()
        self.background = background
        self.engine = MeshWarpEngine(self.params)
        self.overlay_renderer = MeshOverlayRenderer()

    @staticmethod
    def load_mesh(source: Union[PathLike, str], is_text: bool = False) -> Mesh:
        """Parse a mesh from a file path, or from text when is_text is set"""
        if is_text:
            return parse_mesh_text(str(source))
        return parse_mesh_file(source)

    def inspect_mesh(self, source: Union[PathLike, str], is_text: bool = False) -> MeshInfo:
        """Counts of source points, destination points and triangles"""
        mesh = self.load_mesh(source, is_text=is_text)
        info = MeshInfo.from_mesh(mesh)
        logger.info(
            f"Mesh: {info.source_points} source points, "
            f"{info.destination_points} destination points, {info.triangles} triangles"
        )
        return info

    @staticmethod
    def triangulate(mesh: Mesh, width: int, height: int) -> Mesh:
        """Replace the mesh triangles with a Delaunay triangulation of the source points"""
        triangles = delaunay_triangles(mesh.source_points, width, height)
        logger.info(f"Triangulated {mesh.num_control_points} points into {len(triangles)} triangles")
        return mesh.with_triangles(triangles)

    def warp_image(
        self,
        image: np.ndarray,
        mesh: Mesh,
        progress: Optional[ProgressCallback] = None,
        triangulate: bool = False,
    ) -> WarpResult:
        """
        Warp an in-memory BGRA image.

        Args:
            image: BGRA source image
            mesh: Parsed mesh
            progress: Optional per-triangle callback(index, total)
            triangulate: Triangulate the source points if the mesh has no triangles

        Returns:
            WarpResult
        """
        if triangulate and not mesh.num_triangles:
            height, width = image.shape[:2]
            mesh = self.triangulate(mesh, width, height)
        return self.engine.warp(image, mesh, progress=progress)

    def warp_file(
        self,
        mesh_path: PathLike,
        input_path: PathLike,
        output_path: PathLike,
        progress: Optional[ProgressCallback] = None,
        triangulate: bool = False,
        overlay_path: Optional[PathLike] = None,
        overlay_side: MeshSide = MeshSide.SOURCE,
    ) -> WarpResult:
        """
        Warp an image file through a mesh file and write the result.

        When overlay_path is given, the input image with the mesh drawn on it
        is written as well. Both images are rendered before anything is
        written, so a failed warp or overlay leaves no output behind.

        Raises:
            MeshWarpError subclasses for parse, geometry and I/O failures
        """
        with timer() as t:
            mesh = self.load_mesh(mesh_path)
            image = load_image(input_path)
            if triangulate and not mesh.num_triangles:
                height, width = image.shape[:2]
                mesh = self.triangulate(mesh, width, height)

            result = self.engine.warp(image, mesh, progress=progress)
            overlay = None
            if overlay_path is not None:
                overlay = self.render_overlay(image, mesh, side=overlay_side)

            save_image(result.canvas, output_path, background=self.background)
            if overlay is not None:
                save_image(overlay, overlay_path, background=self.background)

        logger.info(f"Wrote {output_path} ({t['ms']} ms total)")
        return result

    def render_overlay(
        self,
        image: np.ndarray,
        mesh: Mesh,
        side: MeshSide = MeshSide.SOURCE,
        labels: bool = True,
    ) -> np.ndarray:
        """Image with the mesh drawn on top"""
        return self.overlay_renderer.draw_mesh(image, mesh, side=side, labels=labels)
