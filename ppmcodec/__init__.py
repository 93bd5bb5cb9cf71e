"""
Read and write 24-bit RGB images in the PPM format (binary P6 and plain text P3).

    >>> import ppmcodec
    >>> img = ppmcodec.load("input.ppm")
    >>> img.row(0)[0] = (255, 0, 0)
    >>> ppmcodec.write("output.ppm", img, ppmcodec.Encoding.ASCII)
"""
from pathlib import Path
from typing import Union

from ppmcodec.models import (
    AllocationFailure,
    Encoding,
    FormatError,
    Image,
    ImageIOError,
    Pixel,
    PPMError,
    TruncatedDataError,
)
from ppmcodec.services.image_service import ImageService

__version__ = "1.0.0"

_service = None


def _get_service() -> ImageService:
    # Built on first use: settings errors surface on the first call.
    global _service
    if _service is None:
        _service = ImageService()
    return _service


def load(path: Union[str, Path]) -> Image:
    return _get_service().load(path)


def write(path: Union[str, Path], image: Image, encoding: Encoding = Encoding.RAW) -> None:
    _get_service().save(image, path, encoding)


def allocate(width: int, height: int) -> Image:
    return _get_service().allocate(width, height)


def release(image: Image) -> None:
    _get_service().release(image)


__all__ = [
    "AllocationFailure",
    "Encoding",
    "FormatError",
    "Image",
    "ImageIOError",
    "Pixel",
    "PPMError",
    "TruncatedDataError",
    "allocate",
    "load",
    "release",
    "write",
]
