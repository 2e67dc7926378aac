"""
Fixtures for API tests
"""

import pytest
from fastapi.testclient import TestClient

from core.image.converters import to_base64
from main import app


@pytest.fixture
def client():
    """Test client with the application lifespan (services in app state)"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def gray_image_base64(gray_image):
    return to_base64(gray_image, format="png")
