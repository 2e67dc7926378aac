"""
Exception hierarchy for mesh parsing, geometry and image I/O failures.

Every error raised by the core derives from MeshWarpError so entry points
(CLI, HTTP API) can map the whole family to a failure exit code or response.
"""

from typing import Optional, Sequence

from core.constants import ErrorMessages


class MeshWarpError(Exception):
    """Base class for all mesh warp failures."""


class MeshFileNotFoundError(MeshWarpError, FileNotFoundError):
    """Mesh file is missing, unreadable or holds no records."""

    def __init__(self, path: str, empty: bool = False):
        self.path = str(path)
        template = ErrorMessages.MESH_EMPTY if empty else ErrorMessages.MESH_NOT_FOUND
        super().__init__(template.format(path=self.path))


class MalformedRecordError(MeshWarpError):
    """A mesh line does not have the expected token shape."""

    def __init__(
        self,
        source: str,
        line_number: int,
        content: str,
        kind: str = "mesh",
        message: Optional[str] = None,
    ):
        self.source = source
        self.line_number = line_number
        self.content = content
        super().__init__(
            message
            or ErrorMessages.MALFORMED_RECORD.format(
                source=source, line_number=line_number, kind=kind, content=content
            )
        )


class TriangleIndexError(MalformedRecordError):
    """A triangle references a control point that was never declared."""

    def __init__(self, source: str, line_number: int, content: str, index: int, count: int):
        self.index = index
        self.count = count
        super().__init__(
            source,
            line_number,
            content,
            kind="triangle",
            message=ErrorMessages.TRIANGLE_INDEX.format(
                source=source, line_number=line_number, index=index, count=count
            ),
        )


class CountMismatchError(MeshWarpError):
    """Number of source points differs from number of destination points."""

    def __init__(self, source: str, sources: int, destinations: int):
        self.sources = sources
        self.destinations = destinations
        super().__init__(
            ErrorMessages.COUNT_MISMATCH.format(
                source=source, sources=sources, destinations=destinations
            )
        )


class DegenerateTriangleError(MeshWarpError):
    """The affine system for a triangle is singular."""

    def __init__(self, vertices: Sequence, triangle_index: Optional[int] = None):
        self.vertices = tuple(vertices)
        self.triangle_index = triangle_index
        pretty = [(round(p[0], 3), round(p[1], 3)) for p in self.vertices]
        if triangle_index is None:
            message = ErrorMessages.DEGENERATE_POINTS.format(vertices=pretty)
        else:
            message = ErrorMessages.DEGENERATE_TRIANGLE.format(
                index=triangle_index, vertices=pretty
            )
        super().__init__(message)

    def for_triangle(self, triangle_index: int) -> "DegenerateTriangleError":
        """Same error, tagged with the mesh index of the failing triangle."""
        return DegenerateTriangleError(self.vertices, triangle_index)


class ImageNotFoundError(MeshWarpError, FileNotFoundError):
    """Source image is missing, unreadable or empty."""

    def __init__(self, path: str, empty: bool = False):
        self.path = str(path)
        template = ErrorMessages.IMAGE_EMPTY if empty else ErrorMessages.IMAGE_NOT_FOUND
        super().__init__(template.format(path=self.path))


class ImageIOError(MeshWarpError):
    """Image could not be decoded, encoded or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = None if path is None else str(path)
        super().__init__(message)
