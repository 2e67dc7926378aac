"""
Tests for the warp service (file level orchestration)
"""

import cv2
import numpy as np
import pytest

from core.enums import DegeneratePolicy, MeshSide
from core.exceptions import (
    CountMismatchError,
    DegenerateTriangleError,
    ImageIOError,
    ImageNotFoundError,
    MalformedRecordError,
)
from services.warp_service import WarpService
from tests.conftest import SHEAR_MESH
from warp.mesh_warp import WarpParams
from warp.triangle_mask import triangle_mask


@pytest.fixture
def service():
    return WarpService()


class TestWarpFile:
    """Test warping image files"""

    def test_warp_file_writes_output(self, service, write_mesh, image_file, tmp_path):
        """Test a shear run writes a transparent PNG with the warped triangle"""
        output = tmp_path / "out.png"

        result = service.warp_file(write_mesh(SHEAR_MESH), image_file, output)

        written = cv2.imread(str(output), cv2.IMREAD_UNCHANGED)
        expected = triangle_mask([(0, 0), (99, 0), (50, 99)], 100, 100) > 0

        assert result.triangles_processed == 1
        assert written.shape == (100, 100, 4)
        assert np.all(written[expected][:, 3] > 0)
        assert np.all(written[~expected][:, 3] == 0)

    def test_jpeg_output_uses_background(self, write_mesh, image_file, tmp_path):
        """Test outside pixels take the background color in JPEG output"""
        output = tmp_path / "out.jpg"
        WarpService(background="black").warp_file(write_mesh(SHEAR_MESH), image_file, output)

        written = cv2.imread(str(output))

        assert written.shape == (100, 100, 3)
        assert written[90, 95].max() < 10  # outside the triangle

    def test_mesh_errors_before_image_work(self, service, write_mesh, tmp_path):
        """Test mesh validation fails before the image is opened"""
        mesh = write_mesh("0,0 0,0\n10,0 10,0\n0,10\n0,1,2\n")
        output = tmp_path / "out.png"

        with pytest.raises(CountMismatchError):
            service.warp_file(mesh, tmp_path / "does-not-exist.png", output)

        assert not output.exists()

    def test_malformed_mesh(self, service, write_mesh, image_file, tmp_path):
        with pytest.raises(MalformedRecordError):
            service.warp_file(write_mesh("0,0 0,0 0,0\n"), image_file, tmp_path / "out.png")

    def test_missing_image(self, service, write_mesh, tmp_path):
        with pytest.raises(ImageNotFoundError):
            service.warp_file(write_mesh(SHEAR_MESH), tmp_path / "nope.png", tmp_path / "o.png")

    def test_unwritable_output(self, service, write_mesh, image_file, tmp_path):
        with pytest.raises(ImageIOError):
            service.warp_file(write_mesh(SHEAR_MESH), image_file, tmp_path / "no" / "o.png")

    def test_degenerate_abort_writes_nothing(self, service, write_mesh, image_file, tmp_path):
        """Test an aborted run leaves no output file"""
        mesh = write_mesh("0,0 0,0\n1,1 10,0\n2,2 0,10\n0,1,2\n")
        output = tmp_path / "out.png"

        with pytest.raises(DegenerateTriangleError) as exc_info:
            service.warp_file(mesh, image_file, output)

        assert exc_info.value.triangle_index == 0
        assert not output.exists()

    def test_degenerate_skip(self, write_mesh, image_file, tmp_path):
        mesh = write_mesh(SHEAR_MESH + "0,0 0,0\n0,1,3\n")
        service = WarpService(WarpParams(degenerate_policy=DegeneratePolicy.SKIP))

        result = service.warp_file(mesh, image_file, tmp_path / "out.png")

        assert result.skipped == [1]
        assert (tmp_path / "out.png").exists()

    def test_progress_callback(self, service, write_mesh, image_file, tmp_path):
        calls = []
        service.warp_file(
            write_mesh(SHEAR_MESH),
            image_file,
            tmp_path / "out.png",
            progress=lambda i, n: calls.append(i),
        )

        assert calls == [0]


class TestMeshOperations:
    """Test mesh inspection, triangulation and overlays"""

    def test_inspect_mesh(self, service, write_mesh):
        info = service.inspect_mesh(write_mesh(SHEAR_MESH))

        assert (info.source_points, info.destination_points, info.triangles) == (3, 3, 1)

    def test_inspect_mesh_text(self, service):
        info = service.inspect_mesh("0,0 1,1\n2,2 3,3\n", is_text=True)

        assert info.triangles == 0
        assert info.source_points == 2

    def test_triangulate_when_mesh_has_no_triangles(self, service, gray_image):
        """Test triangulation fills in triangles for a points-only mesh"""
        mesh = service.load_mesh("0,0 0,0\n99,0 99,0\n0,99 0,99\n99,99 99,99\n", is_text=True)

        result = service.warp_image(gray_image, mesh, triangulate=True)

        assert result.triangles_total == 2
        assert np.all(result.canvas[:, :, 3] == 255)

    def test_triangulate_keeps_explicit_triangles(self, service, gray_image, shear_mesh):
        result = service.warp_image(gray_image, shear_mesh, triangulate=True)

        assert result.triangles_total == 1

    def test_render_overlay(self, service, gray_image, shear_mesh):
        """Test the overlay is drawn on a copy"""
        overlay = service.render_overlay(gray_image, shear_mesh, side=MeshSide.DESTINATION)

        assert overlay.shape == (100, 100, 4)
        assert not np.array_equal(overlay, gray_image)
        assert np.all(gray_image[:, :, :3] == 128)

    def test_warp_file_with_overlay(self, service, write_mesh, image_file, tmp_path):
        output = tmp_path / "out.png"
        overlay = tmp_path / "overlay.png"

        service.warp_file(write_mesh(SHEAR_MESH), image_file, output, overlay_path=overlay)

        assert output.exists()
        assert cv2.imread(str(overlay)).shape == (100, 100, 3)

    def test_overlay_failure_writes_nothing(
        self, service, write_mesh, image_file, tmp_path, monkeypatch
    ):
        """Test a failing overlay leaves neither output file behind"""
        output = tmp_path / "out.png"
        overlay = tmp_path / "overlay.png"

        def fail(*args, **kwargs):
            raise ValueError("cannot draw")

        monkeypatch.setattr(service.overlay_renderer, "draw_mesh", fail)

        with pytest.raises(ValueError):
            service.warp_file(write_mesh(SHEAR_MESH), image_file, output, overlay_path=overlay)

        assert not output.exists()
        assert not overlay.exists()
