from pathlib import Path
from typing import Tuple, Union
import logging

import numpy as np

from ppmcodec.models.errors import AllocationFailure
from ppmcodec.models.image import Image

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles buffer allocation, release and pixel updates for Image entities.
    No file I/O here.
    """

    @staticmethod
    def allocate(width: int, height: int, path: Union[str, Path] = None) -> Image:
        """
        Reserve a zero-initialized buffer for width x height pixels.

        Raises:
            ValueError: if a dimension is not a positive int.
            AllocationFailure: if the buffer cannot be allocated.
        """
        for name, value in (("width", width), ("height", height)):
            if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
                raise ValueError(f"Image {name} must be an int, got {value!r}")
            if value <= 0:
                raise ValueError(f"Image {name} must be positive, got {value}")

        try:
            pixels = np.zeros((int(height), int(width), 3), dtype=np.uint8)
        except (MemoryError, ValueError) as err:
            raise AllocationFailure(f"Cannot allocate a {width}x{height} image: {err}") from err

        logger.debug(f"Allocated {width}x{height} image ({pixels.nbytes} bytes)")
        return Image(pixels=pixels, path=Path(path) if path is not None else None)

    @staticmethod
    def release(image: Image) -> None:
        """Drop the whole pixel buffer at once. Call exactly once per image."""
        image.pixels = None

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        if not isinstance(pixels, np.ndarray):
            raise ValueError(f"Pixels must be a numpy array, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Pixels must have shape (H, W, 3), got {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"Pixels must be uint8, got {pixels.dtype}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError(f"Image must not be empty, got {pixels.shape[1]}x{pixels.shape[0]}")
        if path is None:
            return Image(np.ascontiguousarray(pixels))
        return Image(pixels=np.ascontiguousarray(pixels), path=Path(path))

    @staticmethod
    def get_dimensions(image: Image) -> Tuple[int, int]:
        return image.height, image.width

    @staticmethod
    def set_pixels(image: Image, new_pixels: np.ndarray) -> None:
        if image.released:
            raise ValueError("Image has been released")
        if new_pixels.shape != image.pixels.shape:
            raise ValueError(f"Shape mismatch: {new_pixels.shape} vs {image.pixels.shape}")
        image.pixels[...] = new_pixels
