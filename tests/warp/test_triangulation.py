"""
Tests for Delaunay triangulation of control points
"""

import numpy as np

from core.mesh_parser import parse_mesh_text
from warp.mesh_warp import MeshWarpEngine
from warp.triangle_mask import triangle_mask
from warp.triangulation import delaunay_triangles

CORNERS = [(0, 0), (99, 0), (0, 99), (99, 99)]


class TestDelaunayTriangles:
    """Test triangulation of point sets"""

    def test_square_gives_two_triangles(self):
        triangles = delaunay_triangles(CORNERS, 100, 100)

        assert len(triangles) == 2
        for triangle in triangles:
            assert len(set(triangle.indices)) == 3
            assert all(0 <= i < 4 for i in triangle.indices)

    def test_triangles_cover_hull(self):
        """Test triangles cover the square without gaps"""
        triangles = delaunay_triangles(CORNERS, 100, 100)
        coverage = np.zeros((100, 100), dtype=np.uint8)
        for triangle in triangles:
            coverage |= triangle_mask([CORNERS[i] for i in triangle.indices], 100, 100)

        assert np.all(coverage == 255)

    def test_grid_triangle_count(self):
        """Test a 3x3 grid gives 2n - 2 - hull triangles"""
        points = [(x, y) for y in (0, 50, 99) for x in (0, 50, 99)]

        assert len(delaunay_triangles(points, 100, 100)) == 8

    def test_points_outside_area(self):
        """Test points outside the given area are still triangulated"""
        points = [(-20, -10), (150, 5), (40, 130)]

        assert len(delaunay_triangles(points, 100, 100)) == 1

    def test_too_few_points(self):
        assert delaunay_triangles([(0, 0), (1, 1)], 10, 10) == []

    def test_duplicates_ignored(self):
        """Test duplicate points are skipped rather than producing slivers"""
        points = [(0, 0), (99, 0), (0, 99), (0, 0)]
        triangles = delaunay_triangles(points, 100, 100)

        assert len(triangles) == 1
        assert 3 not in triangles[0].indices

    def test_collinear_points(self):
        """Test collinear points give no triangles"""
        assert delaunay_triangles([(0, 0), (10, 10), (20, 20), (30, 30)], 50, 50) == []


class TestTriangulatedWarp:
    """Test warping through a triangulated mesh"""

    def test_identity_points_reproduce_image(self, split_image):
        """Test triangulating identity control points reproduces the covered image"""
        mesh = parse_mesh_text("\n".join(f"{x},{y} {x},{y}" for x, y in CORNERS))
        mesh = mesh.with_triangles(delaunay_triangles(mesh.source_points, 100, 100))

        result = MeshWarpEngine().warp(split_image, mesh)

        assert result.triangles_processed == 2
        assert np.all(result.canvas[:, :, 3] == 255)
        assert tuple(result.canvas[50, 10]) == (0, 0, 255, 255)
