"""
Mesh description parser.

A mesh file is line oriented:

    <sx>,<sy> <dx>,<dy>     control point (source and destination)
    <i1>,<i2>,<i3>          triangle (control point indices)

Whitespace around commas is ignored and '#' starts a comment. Control point
and triangle lines may be interleaved; triangle indices always refer to the
order in which control points were declared.
"""

import logging
import math
import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from core.constants import MeshConstants
from core.exceptions import (
    CountMismatchError,
    MalformedRecordError,
    MeshFileNotFoundError,
    TriangleIndexError,
)
from core.mesh import ControlPoint, Mesh, Point2D, Triangle

logger = logging.getLogger(__name__)

_COMMA = re.compile(r"\s*,\s*")
_INTEGER = re.compile(r"\d+")


def _tokenize(line: str) -> List[str]:
    """Strip comments, normalize whitespace around commas and split."""
    line = line.split(MeshConstants.COMMENT_CHAR, 1)[0]
    return _COMMA.sub(",", line.strip()).split()


def _parse_point(token: str) -> Optional[Point2D]:
    parts = token.split(",")
    if len(parts) != MeshConstants.POINT_COMPONENTS:
        return None
    try:
        x, y = float(parts[0]), float(parts[1])
    except ValueError:
        return None
    # float() accepts nan and inf
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return Point2D(x, y)


def _parse_triangle(token: str) -> Optional[Tuple[int, int, int]]:
    parts = token.split(",")
    if len(parts) != MeshConstants.TRIANGLE_COMPONENTS:
        return None
    if not all(_INTEGER.fullmatch(p) for p in parts):
        return None
    return tuple(int(p) for p in parts)


def parse_mesh_text(text: str, source: str = "<string>") -> Mesh:
    """
    Parse a mesh description held in memory.

    Args:
        text: Mesh description
        source: Name used in error messages (usually the file path)

    Returns:
        Parsed Mesh

    Raises:
        MeshFileNotFoundError: If the text holds no records
        MalformedRecordError: If a line has the wrong token shape
        CountMismatchError: If source and destination point counts differ
        TriangleIndexError: If a triangle references an undeclared control point
    """
    sources: List[Point2D] = []
    destinations: List[Point2D] = []
    # (line number, raw line, indices)
    triangle_records: List[Tuple[int, str, Tuple[int, int, int]]] = []

    for line_number, raw in enumerate(text.splitlines(), start=1):
        tokens = _tokenize(raw)
        if not tokens:
            continue

        content = raw.strip()

        if len(tokens) == MeshConstants.CONTROL_POINT_TOKENS:
            src = _parse_point(tokens[0])
            dst = _parse_point(tokens[1])
            if src is None or dst is None:
                raise MalformedRecordError(source, line_number, content, kind="control point")
            sources.append(src)
            destinations.append(dst)

        elif len(tokens) == MeshConstants.SINGLE_TOKEN:
            indices = _parse_triangle(tokens[0])
            if indices is not None:
                triangle_records.append((line_number, content, indices))
                continue

            # A lone point is a control point missing its destination
            point = _parse_point(tokens[0])
            if point is None:
                raise MalformedRecordError(source, line_number, content, kind="triangle")
            logger.debug(f"{source}:{line_number}: control point without destination")
            sources.append(point)

        else:
            raise MalformedRecordError(source, line_number, content)

    if not sources and not triangle_records:
        raise MeshFileNotFoundError(source, empty=True)

    if len(sources) != len(destinations):
        raise CountMismatchError(source, len(sources), len(destinations))

    count = len(sources)
    triangles = []
    for line_number, content, indices in triangle_records:
        for index in indices:
            if index >= count:
                raise TriangleIndexError(source, line_number, content, index, count)
        triangles.append(Triangle(*indices))

    control_points = tuple(
        ControlPoint(index=i, source=src, destination=dst)
        for i, (src, dst) in enumerate(zip(sources, destinations))
    )

    logger.debug(
        f"Parsed mesh from {source}: {count} control points, {len(triangles)} triangles"
    )
    return Mesh(control_points=control_points, triangles=tuple(triangles))


def parse_mesh_file(path: Union[str, Path]) -> Mesh:
    """
    Read and parse a mesh description file.

    Raises:
        MeshFileNotFoundError: If the file is missing, unreadable or empty
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read mesh file {path}: {e}")
        raise MeshFileNotFoundError(str(path)) from e

    if not text.strip():
        raise MeshFileNotFoundError(str(path), empty=True)

    return parse_mesh_text(text, source=str(path))


def _format_number(value: float) -> str:
    text = f"{value:.{MeshConstants.COORDINATE_PRECISION}f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_mesh(mesh: Mesh) -> str:
    """
    Write a mesh in canonical text form: control points first, then triangles.
    """
    lines = []
    for cp in mesh.control_points:
        lines.append(
            f"{_format_number(cp.source.x)},{_format_number(cp.source.y)} "
            f"{_format_number(cp.destination.x)},{_format_number(cp.destination.y)}"
        )
    for tri in mesh.triangles:
        lines.append(f"{tri.i1},{tri.i2},{tri.i3}")
    return "\n".join(lines) + "\n"
