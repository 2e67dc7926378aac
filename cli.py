"""
Mesh Warp Flow - command line tool

    meshwarp -f mesh.txt [-i] [-p] input.png output.png

Warps input through the triangle mesh described in mesh.txt and writes the
composited result. Exit status is 0 on success, 1 on any warp failure and 2
on usage errors.
"""

import argparse
import logging
import sys
from typing import List, Optional

from config import get_settings
from core.constants import SystemConstants
from core.enums import DegeneratePolicy, Interpolation, MeshSide
from core.exceptions import MeshWarpError
from core.image.converters import parse_color
from core.mesh import MeshInfo
from services.warp_service import WarpService
from warp.mesh_warp import WarpParams

logger = logging.getLogger("meshwarp")


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="meshwarp",
        description="Piecewise-affine image warp driven by a triangle mesh file.",
    )
    parser.add_argument(
        "-f", "--mesh", required=True, metavar="MESHFILE", help="mesh description file"
    )
    parser.add_argument(
        "-i",
        "--info",
        action="store_true",
        help="print counts of source points, destination points and triangles",
    )
    parser.add_argument(
        "-p", "--progress", action="store_true", help="print each triangle as it is processed"
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in DegeneratePolicy],
        default=settings.warp.degenerate_policy.value,
        help="what to do with collinear source triangles (default: %(default)s)",
    )
    parser.add_argument(
        "--interpolation",
        choices=[i.value for i in Interpolation],
        default=settings.warp.interpolation.value,
        help="resampling filter (default: %(default)s)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=settings.warp.workers,
        help="threads used to prepare triangles (default: %(default)s)",
    )
    parser.add_argument(
        "--background",
        default=settings.warp.background,
        help="color for formats without alpha, name, #rrggbb or r,g,b (default: %(default)s)",
    )
    parser.add_argument(
        "--triangulate",
        action="store_true",
        help="Delaunay-triangulate the source points when the mesh lists no triangles",
    )
    parser.add_argument(
        "--overlay",
        metavar="PATH",
        help="also write the input image with the source mesh drawn on it",
    )
    parser.add_argument(
        "--log-level",
        default=settings.system.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="logging level (default: %(default)s)",
    )
    parser.add_argument("infile", help="input image")
    parser.add_argument("outfile", help="output image")
    return parser


def print_info(info: MeshInfo) -> None:
    print(f"numsrc={info.source_points}")
    print(f"numdst={info.destination_points}")
    print(f"numtri={info.triangles}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=SystemConstants.LOG_FORMAT)

    try:
        parse_color(args.background)
        params = WarpParams(
            degenerate_policy=args.policy,
            interpolation=args.interpolation,
            workers=args.workers,
            determinant_epsilon=get_settings().warp.determinant_epsilon,
        )
    except ValueError as e:
        parser.error(str(e))

    service = WarpService(params=params, background=args.background)

    def report_progress(index: int, total: int) -> None:
        print(f"processing triangle {index}")

    try:
        if args.info:
            print_info(service.inspect_mesh(args.mesh))

        result = service.warp_file(
            args.mesh,
            args.infile,
            args.outfile,
            progress=report_progress if args.progress else None,
            triangulate=args.triangulate,
            overlay_path=args.overlay,
            overlay_side=MeshSide.SOURCE,
        )

    except MeshWarpError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1

    if result.skipped:
        logger.warning(
            f"{len(result.skipped)} degenerate triangle(s) skipped: "
            f"{', '.join(str(i) for i in result.skipped)}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
