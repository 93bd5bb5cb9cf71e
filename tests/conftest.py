from pathlib import Path

import numpy as np
import pytest

from ppmcodec.models.image import Image
from ppmcodec.repositories.image_repository import ImageRepository
from ppmcodec.repositories.ppm_repository import PPMRepository


@pytest.fixture
def ppm_file(tmp_path):
    """Write raw bytes to a file under tmp_path and return its path."""
    def _write(content: bytes, name: str = "image.ppm") -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return _write


@pytest.fixture
def repo():
    return PPMRepository(max_line_length=1024, pixels_per_line=5)


@pytest.fixture
def sample_image() -> Image:
    """6x4 image with reproducible, non-uniform pixels."""
    rng = np.random.default_rng(0)
    pixels = rng.integers(0, 256, size=(4, 6, 3), dtype=np.uint8)
    return ImageRepository.create_image(pixels)
