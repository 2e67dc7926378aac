"""
Pytest configuration and fixtures for Mesh Warp Flow tests
"""

import cv2
import numpy as np
import pytest

from core.mesh_parser import parse_mesh_text

GRAY = (128, 128, 128, 255)
RED = (0, 0, 255, 255)
BLUE = (255, 0, 0, 255)

SHEAR_MESH = """\
0,0 0,0
99,0 99,0
0,99 50,99
0,1,2
"""


@pytest.fixture
def gray_image():
    """100x100 uniform gray BGRA image"""
    image = np.zeros((100, 100, 4), dtype=np.uint8)
    image[:, :] = GRAY
    return image


@pytest.fixture
def split_image():
    """100x100 BGRA image, left half red and right half blue"""
    image = np.zeros((100, 100, 4), dtype=np.uint8)
    image[:, :50] = RED
    image[:, 50:] = BLUE
    return image


@pytest.fixture
def test_image():
    """Create a BGR test image with some content"""
    image = np.zeros((120, 160, 3), dtype=np.uint8)
    cv2.rectangle(image, (20, 20), (80, 80), (255, 255, 255), -1)
    cv2.circle(image, (120, 90), 20, (128, 128, 128), -1)
    return image


@pytest.fixture
def shear_mesh():
    """One triangle shearing the lower-left corner to the bottom middle"""
    return parse_mesh_text(SHEAR_MESH)


@pytest.fixture
def write_mesh(tmp_path):
    """Factory writing mesh text to a temporary file"""

    def _write(text, name="mesh.txt"):
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def image_file(tmp_path, gray_image):
    """Gray test image saved as PNG"""
    path = tmp_path / "input.png"
    cv2.imwrite(str(path), gray_image)
    return path
