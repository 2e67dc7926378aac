"""
Tests for the warp and system endpoints
"""

import numpy as np

from core.image.converters import from_base64
from tests.conftest import SHEAR_MESH
from warp.triangle_mask import triangle_mask


class TestWarpEndpoint:
    """Test POST /api/warp"""

    def test_warp(self, client, gray_image_base64):
        response = client.post(
            "/api/warp", json={"image_base64": gray_image_base64, "mesh": SHEAR_MESH}
        )

        assert response.status_code == 200
        data = response.json()
        assert (data["width"], data["height"]) == (100, 100)
        assert data["triangles_total"] == 1
        assert data["triangles_processed"] == 1
        assert data["skipped"] == []

        image = from_base64(data["image_base64"])
        expected = triangle_mask([(0, 0), (99, 0), (50, 99)], 100, 100) > 0
        assert np.all(image[expected][:, 3] > 0)
        assert np.all(image[~expected][:, 3] == 0)
        assert data["thumbnail_base64"]

    def test_jpeg_output(self, client, gray_image_base64):
        response = client.post(
            "/api/warp",
            json={"image_base64": gray_image_base64, "mesh": SHEAR_MESH, "output_format": "jpg"},
        )

        assert response.status_code == 200
        assert np.all(from_base64(response.json()["image_base64"])[:, :, 3] == 255)

    def test_count_mismatch(self, client, gray_image_base64):
        """Test mesh errors map to 422 with the error name"""
        response = client.post(
            "/api/warp",
            json={"image_base64": gray_image_base64, "mesh": "0,0 0,0\n1,0 1,0\n0,1\n0,1,2\n"},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "CountMismatchError"

    def test_mesh_checked_before_image(self, client):
        """Test a bad mesh is reported even when the image is garbage"""
        response = client.post("/api/warp", json={"image_base64": "???", "mesh": "1,2,3,4"})

        assert response.status_code == 422
        assert response.json()["error"] == "MalformedRecordError"

    def test_degenerate_abort(self, client, gray_image_base64):
        mesh = "0,0 0,0\n1,1 10,0\n2,2 0,10\n0,1,2\n"
        response = client.post("/api/warp", json={"image_base64": gray_image_base64, "mesh": mesh})

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "DegenerateTriangleError"
        assert body["triangle_index"] == 0

    def test_degenerate_skip_param(self, client, gray_image_base64):
        mesh = SHEAR_MESH + "5,5 5,5\n0,3,3\n"
        response = client.post(
            "/api/warp",
            json={
                "image_base64": gray_image_base64,
                "mesh": mesh,
                "params": {"degenerate_policy": "skip", "workers": 2},
            },
        )

        assert response.status_code == 200
        assert response.json()["skipped"] == [1]

    def test_invalid_image(self, client):
        response = client.post("/api/warp", json={"image_base64": "bm9wZQ==", "mesh": SHEAR_MESH})

        assert response.status_code == 400
        assert response.json()["error"] == "ImageIOError"

    def test_invalid_params(self, client, gray_image_base64):
        response = client.post(
            "/api/warp",
            json={"image_base64": gray_image_base64, "mesh": SHEAR_MESH, "params": {"workers": 0}},
        )

        assert response.status_code == 422

    def test_triangulate_flag(self, client, gray_image_base64):
        mesh = "0,0 0,0\n99,0 99,0\n0,99 0,99\n99,99 99,99\n"
        response = client.post(
            "/api/warp",
            json={"image_base64": gray_image_base64, "mesh": mesh, "triangulate": True},
        )

        assert response.status_code == 200
        assert response.json()["triangles_total"] == 2


class TestSystemEndpoints:
    """Test status and health endpoints"""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["services"]["warp_service"] is True

    def test_root(self, client):
        assert client.get("/").json()["name"] == "Mesh Warp Flow"

    def test_status(self, client):
        data = client.get("/api/system/status").json()

        assert data["status"] == "healthy"
        assert "process_mb" in data["memory_usage"]
        assert data["config"]["warp"]["degenerate_policy"] in ("abort", "skip")
