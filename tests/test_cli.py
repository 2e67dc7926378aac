"""
Tests for the meshwarp command line tool
"""

import cv2
import pytest

from cli import main
from tests.conftest import SHEAR_MESH

GRID_TWO = SHEAR_MESH + "99,99 99,99\n1,3,2\n"


def run(argv):
    """Run the CLI, turning argparse exits into return codes"""
    try:
        return main([str(a) for a in argv])
    except SystemExit as e:
        return e.code


class TestCli:
    """Test the command line interface"""

    def test_success(self, write_mesh, image_file, tmp_path):
        output = tmp_path / "out.png"

        assert run(["-f", write_mesh(SHEAR_MESH), image_file, output]) == 0
        assert cv2.imread(str(output), cv2.IMREAD_UNCHANGED).shape == (100, 100, 4)

    def test_info(self, write_mesh, image_file, tmp_path, capsys):
        """Test -i prints the counts and still warps"""
        output = tmp_path / "out.png"

        assert run(["-i", "-f", write_mesh(SHEAR_MESH), image_file, output]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[:3] == ["numsrc=3", "numdst=3", "numtri=1"]
        assert output.exists()

    def test_progress(self, write_mesh, image_file, tmp_path, capsys):
        assert run(["-p", "-f", write_mesh(GRID_TWO), image_file, tmp_path / "o.png"]) == 0

        assert capsys.readouterr().out.splitlines() == [
            "processing triangle 0",
            "processing triangle 1",
        ]

    def test_count_mismatch_exit_code(self, write_mesh, image_file, tmp_path):
        """Test a count mismatch exits 1 without writing output"""
        output = tmp_path / "out.png"
        mesh = write_mesh("0,0 0,0\n10,0 10,0\n0,10\n0,1,2\n")

        assert run(["-f", mesh, image_file, output]) == 1
        assert not output.exists()

    def test_info_on_bad_mesh(self, write_mesh, image_file, tmp_path, capsys):
        """Test -i on an invalid mesh fails without printing counts"""
        assert run(["-i", "-f", write_mesh("what\n"), image_file, tmp_path / "o.png"]) == 1
        assert "numsrc" not in capsys.readouterr().out

    def test_missing_mesh_file(self, image_file, tmp_path):
        assert run(["-f", tmp_path / "missing.txt", image_file, tmp_path / "o.png"]) == 1

    def test_missing_image(self, write_mesh, tmp_path):
        assert run(["-f", write_mesh(SHEAR_MESH), tmp_path / "in.png", tmp_path / "o.png"]) == 1

    def test_degenerate_policies(self, write_mesh, image_file, tmp_path):
        mesh = write_mesh(SHEAR_MESH + "5,5 5,5\n0,3,3\n")

        assert run(["-f", mesh, image_file, tmp_path / "a.png"]) == 1
        assert run(["--policy", "skip", "-f", mesh, image_file, tmp_path / "b.png"]) == 0
        assert (tmp_path / "b.png").exists()

    def test_workers_and_interpolation(self, write_mesh, image_file, tmp_path):
        argv = ["--workers", 2, "--interpolation", "nearest", "-f", write_mesh(GRID_TWO)]

        assert run(argv + [image_file, tmp_path / "o.png"]) == 0

    def test_overlay(self, write_mesh, image_file, tmp_path):
        overlay = tmp_path / "overlay.png"
        argv = ["-f", write_mesh(SHEAR_MESH), "--overlay", overlay, image_file, tmp_path / "o.png"]

        assert run(argv) == 0
        assert overlay.exists()

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["in.png", "out.png"],
            ["-f", "mesh.txt", "in.png"],
            ["-f", "mesh.txt", "--policy", "ignore", "in.png", "out.png"],
            ["-f", "mesh.txt", "--workers", "0", "in.png", "out.png"],
            ["-f", "mesh.txt", "--background", "no-such-color", "in.png", "out.png"],
        ],
    )
    def test_usage_errors(self, argv):
        """Test bad usage exits 2"""
        assert run(argv) == 2

    def test_non_finite_mesh(self, write_mesh, image_file, tmp_path):
        """Test nan/inf coordinates are rejected as a warp failure"""
        mesh = write_mesh("nan,0 0,0\n99,0 99,0\n0,99 inf,99\n0,1,2\n")
        argv = ["--policy", "skip", "-f", mesh, "--overlay", tmp_path / "ov.png"]

        assert run(argv + [image_file, tmp_path / "o.png"]) == 1

    def test_empty_image_file(self, write_mesh, tmp_path):
        image = tmp_path / "empty.png"
        image.write_bytes(b"")

        assert run(["-f", write_mesh(SHEAR_MESH), image, tmp_path / "o.png"]) == 1

    def test_unexpected_error_exit_code(self, write_mesh, image_file, tmp_path, monkeypatch):
        """Test errors outside the warp hierarchy still exit 1 without output"""
        from services.warp_service import WarpService

        def fail(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(WarpService, "render_overlay", fail)
        output = tmp_path / "o.png"
        argv = ["-f", write_mesh(SHEAR_MESH), "--overlay", tmp_path / "ov.png", image_file, output]

        assert run(argv) == 1
        assert not output.exists()
