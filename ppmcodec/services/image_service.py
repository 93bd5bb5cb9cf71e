from pathlib import Path
from typing import Union
import logging

import numpy as np
from PIL import Image as PILImage

from ppmcodec.models.header import Encoding
from ppmcodec.models.image import Image
from ppmcodec.repositories.image_repository import ImageRepository
from ppmcodec.repositories.ppm_repository import PPMRepository

logger = logging.getLogger(__name__)


class ImageService:
    """Business-level helpers on top of the buffer and PPM repositories."""

    def __init__(self, ppm_repository: PPMRepository = None):
        self.image_repository = ImageRepository()
        self.ppm_repository = ppm_repository or PPMRepository()

    def allocate(self, width: int, height: int) -> Image:
        return self.image_repository.allocate(width, height)

    def release(self, image: Image) -> None:
        self.image_repository.release(image)

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> Image:
        return self.image_repository.create_image(pixels, path)

    def load(self, path: Union[str, Path]) -> Image:
        """Load a single PPM file from disk into an Image object."""
        return self.ppm_repository.load(path)

    def save(self, image: Image, path: Union[str, Path], encoding: Encoding = Encoding.RAW) -> None:
        """
        Business-level method to save the image to a specific path.
        """
        self.ppm_repository.write(path, image, encoding)
        image.path = Path(path)

    def get_image_dimensions(self, img: Image):
        return self.image_repository.get_dimensions(img)

    def update_pixels(self, image: Image, new_pixels: np.ndarray) -> None:
        """
        Replace the current pixels in place, keeping the image's own buffer.
        """
        self.image_repository.set_pixels(image, new_pixels)

    # ─── Transforms (in place) ────────────────────────────────────────
    def scale_region(
            self,
            img: Image,
            factor: float,
            top: int = 0,
            left: int = 0,
            bottom: int = None,
            right: int = None,
    ) -> None:
        """
        Multiply every component inside rows [top, bottom) and columns [left, right) by factor.

        Args:
            img (Image): Image to modify in place.
            factor (float): Non-negative brightness factor. Results are floored and clipped to [0, 255].
            top, left, bottom, right (int): Region bounds, defaulting to the whole image.
        """
        height, width = self.get_image_dimensions(img)
        bottom = height if bottom is None else bottom
        right = width if right is None else right

        if factor < 0:
            raise ValueError(f"Brightness factor must be non-negative, got {factor}")
        if not (0 <= top <= bottom <= height and 0 <= left <= right <= width):
            raise ValueError(
                f"Invalid region: rows [{top}, {bottom}), columns [{left}, {right}) in a {width}x{height} image"
            )

        for y in range(top, bottom):
            row = img.row(y)
            scaled = np.floor(row[left:right].astype(np.float64) * factor)
            row[left:right] = np.clip(scaled, 0, 255).astype(np.uint8)

        logger.debug(f"Scaled region ({left},{top},{right},{bottom}) by {factor}")

    def darken_quadrant(self, img: Image) -> None:
        """Halve the brightness of the top-left quadrant."""
        height, width = self.get_image_dimensions(img)
        self.scale_region(img, 0.5, bottom=height // 2, right=width // 2)

    # ─── Interop ──────────────────────────────────────────────────────
    def to_pil_image(self, img: Image) -> PILImage.Image:
        """
        Convert Image.pixels → PIL Image object.
        Ensures the NumPy array is C-contiguous.
        """
        np_img = img.pixels
        if img.released:
            raise ValueError("Image has been released")
        if not np_img.flags['C_CONTIGUOUS']:
            np_img = np.ascontiguousarray(np_img)

        return PILImage.fromarray(np_img)

    def from_pil_image(self, pil_image: PILImage.Image, path: Union[str, Path] = None) -> Image:
        arr = np.asarray(pil_image.convert("RGB"), dtype=np.uint8)
        return self.create_image(arr.copy(), path)
