"""
Shared fixtures for Mockfinity tests.

Provides sample images, a controllable stand-in for the remote image
service, and an orchestrator wired to it.
"""
import base64
import threading
from io import BytesIO

import pytest
from PIL import Image

from mockfinity.orchestrator import GenerationOrchestrator
from mockfinity.remote import ImageService


RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
YELLOW = (255, 255, 0, 255)


def png_data_uri(image):
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def quadrant_image(width=400, height=300):
    """Top-left red, top-right green, bottom-left blue, bottom-right yellow."""
    img = Image.new("RGBA", (width, height))
    half_w, half_h = width // 2, height // 2
    img.paste(RED, (0, 0, half_w, half_h))
    img.paste(GREEN, (half_w, 0, width, half_h))
    img.paste(BLUE, (0, half_h, half_w, height))
    img.paste(YELLOW, (half_w, half_h, width, height))
    return img


class FakeImageService(ImageService):
    """In-process image service.

    ``gate`` starts open; clear it to hold calls until the test sets it.
    """

    def __init__(self, result=None, error=None):
        self.result = result if result is not None else png_data_uri(Image.new("RGBA", (8, 8), GREEN))
        self.error = error
        self.calls = []
        self.gate = threading.Event()
        self.gate.set()

    def generate(self, image, prompt, aspect_ratio="1:1"):
        self.calls.append((image, prompt, aspect_ratio))
        if not self.gate.wait(timeout=5):
            raise TimeoutError("gate never opened")
        if self.error is not None:
            raise self.error
        return self.result


# ── Fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def quadrants():
    return quadrant_image()


@pytest.fixture
def source_uri(quadrants):
    return png_data_uri(quadrants)


@pytest.fixture
def service():
    fake = FakeImageService()
    yield fake
    fake.gate.set()


@pytest.fixture
def orchestrator(service):
    orch = GenerationOrchestrator(service)
    yield orch
    service.gate.set()
    orch.shutdown()


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "config.json")
