"""
Piecewise-affine mesh warp.

Each mesh triangle is warped independently with the affine map taking its
source triangle onto its destination triangle, clipped to the destination
triangle and composited over a transparent canvas. Triangles are folded onto
the canvas in mesh order, so later triangles win where they overlap.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Optional

import numpy as np
from pydantic import BaseModel, Field

from core.affine import solve_affine
from core.constants import WarpDefaults
from core.enums import DegeneratePolicy, Interpolation
from core.exceptions import DegenerateTriangleError
from core.image.raster import affine_resample, composite_over, create_canvas, crop_viewport
from core.mesh import AffineTransform, BoundingBox, Mesh, Viewport
from core.utils.decorators import timer
from warp.triangle_mask import triangle_mask

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class WarpParams(BaseModel):
    """Mesh warp parameters with validation and defaults."""

    degenerate_policy: DegeneratePolicy = Field(
        default=DegeneratePolicy(WarpDefaults.DEGENERATE_POLICY),
        description="abort the run or skip triangles with collinear source vertices",
    )
    interpolation: Interpolation = Field(
        default=Interpolation(WarpDefaults.INTERPOLATION),
        description="Resampling filter (nearest, linear, cubic)",
    )
    workers: int = Field(
        default=WarpDefaults.WORKERS,
        ge=1,
        le=WarpDefaults.MAX_WORKERS,
        description="Threads used to prepare triangles (compositing stays in mesh order)",
    )
    determinant_epsilon: float = Field(
        default=WarpDefaults.DETERMINANT_EPSILON,
        gt=0,
        description="Relative threshold below which a source triangle is degenerate",
    )


@dataclass
class TrianglePatch:
    """Warped and masked contribution of one triangle, limited to its viewport"""

    index: int
    viewport: Optional[Viewport] = None
    pixels: Optional[np.ndarray] = None
    mask: Optional[np.ndarray] = None
    transform: Optional[AffineTransform] = None
    bbox: Optional[BoundingBox] = None
    error: Optional[DegenerateTriangleError] = None

    @property
    def is_empty(self) -> bool:
        return self.pixels is None


@dataclass
class WarpResult:
    """Outcome of a mesh warp run"""

    canvas: np.ndarray
    triangles_total: int
    triangles_processed: int = 0
    skipped: List[int] = field(default_factory=list)
    processing_time_ms: int = 0

    @property
    def width(self) -> int:
        return self.canvas.shape[1]

    @property
    def height(self) -> int:
        return self.canvas.shape[0]


class MeshWarpEngine:
    """Mesh warp processor."""

    def __init__(self, params: Optional[WarpParams] = None):
        """
        Initialize mesh warp engine.

        Args:
            params: Warp parameters (defaults if None)
        """
        self.params = params or WarpParams()

    def prepare_triangle(self, image: np.ndarray, mesh: Mesh, index: int) -> TrianglePatch:
        """
        Solve, resample and mask one triangle.

        Pure function of the source image and mesh; safe to run concurrently.

        Returns:
            TrianglePatch (with error set if the source triangle is degenerate)
        """
        triangle = mesh.triangles[index]
        src = triangle.source_vertices(mesh)
        dst = triangle.destination_vertices(mesh)

        try:
            transform, bbox = solve_affine(src, dst, self.params.determinant_epsilon)
        except DegenerateTriangleError as e:
            return TrianglePatch(index=index, error=e.for_triangle(index))

        height, width = image.shape[:2]
        viewport = bbox.viewport().clip(width, height)
        if viewport.is_empty:
            logger.debug(f"Triangle {index} lies outside the canvas")
            return TrianglePatch(index=index, transform=transform, bbox=bbox)

        # Resample straight into the viewport: shift output by -viewport origin
        local = transform.translated(-viewport.x, -viewport.y)
        pixels = affine_resample(
            image, local, viewport.width, viewport.height, self.params.interpolation
        )
        mask = triangle_mask(dst, viewport.width, viewport.height, origin=(viewport.x, viewport.y))

        return TrianglePatch(
            index=index,
            viewport=viewport,
            pixels=pixels,
            mask=mask,
            transform=transform,
            bbox=bbox,
        )

    def _patches(self, image: np.ndarray, mesh: Mesh) -> Iterator[TrianglePatch]:
        indices = range(mesh.num_triangles)
        workers = min(self.params.workers, max(1, mesh.num_triangles))

        if workers == 1:
            for index in indices:
                yield self.prepare_triangle(image, mesh, index)
            return

        # map() yields in submission order, which keeps compositing in mesh order
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="meshwarp") as pool:
            yield from pool.map(lambda i: self.prepare_triangle(image, mesh, i), indices)

    def _composite(self, canvas: np.ndarray, patch: TrianglePatch) -> None:
        # Viewports are already clipped, so the view matches the patch shape
        view = crop_viewport(canvas, patch.viewport)
        composite_over(view, patch.pixels, patch.mask)

    def _fold(
        self,
        canvas: np.ndarray,
        patches: Iterable[TrianglePatch],
        result: WarpResult,
        progress: Optional[ProgressCallback],
    ) -> None:
        for patch in patches:
            if patch.error is not None:
                if self.params.degenerate_policy == DegeneratePolicy.ABORT:
                    logger.error(str(patch.error))
                    raise patch.error
                logger.warning(f"Skipping triangle {patch.index}: {patch.error}")
                result.skipped.append(patch.index)
                continue

            if progress is not None:
                progress(patch.index, result.triangles_total)

            if not patch.is_empty:
                self._composite(canvas, patch)
            result.triangles_processed += 1

    def warp(
        self,
        image: np.ndarray,
        mesh: Mesh,
        progress: Optional[ProgressCallback] = None,
    ) -> WarpResult:
        """
        Warp an image through a mesh.

        Args:
            image: BGRA source image
            mesh: Parsed mesh
            progress: Optional callback(index, total) called before each
                triangle is composited

        Returns:
            WarpResult with the composited canvas (same size as image)

        Raises:
            DegenerateTriangleError: If a source triangle is collinear and the
                policy is abort
        """
        height, width = image.shape[:2]

        with timer() as t:
            canvas = create_canvas(width, height)
            result = WarpResult(canvas=canvas, triangles_total=mesh.num_triangles)
            patches = self._patches(image, mesh)
            try:
                self._fold(canvas, patches, result, progress)
            finally:
                patches.close()

        result.processing_time_ms = t["ms"]

        if not mesh.num_triangles:
            logger.warning("Mesh has no triangles; output is fully transparent")

        logger.info(
            f"Warped {width}x{height} image: {result.triangles_processed}/"
            f"{result.triangles_total} triangles, {len(result.skipped)} skipped, "
            f"{result.processing_time_ms} ms"
        )
        return result
