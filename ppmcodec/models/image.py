from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union
import numpy as np

from ppmcodec.models.pixel import Pixel


@dataclass
class Image:
    """
    Simple data object: one contiguous RGB buffer (+ optional source path for bookkeeping).
    Rows are slices of that buffer computed on demand, never stored.
    """
    pixels: np.ndarray | None  # Shape (H, W, 3), dtype uint8, RGB order. None once released.
    path: Path | None = None  # Source of the image.

    @property
    def released(self) -> bool:
        return self.pixels is None

    def _buffer(self) -> np.ndarray:
        if self.pixels is None:
            raise ValueError("Image has been released")
        return self.pixels

    @property
    def height(self) -> int:
        return self._buffer().shape[0]

    @property
    def width(self) -> int:
        return self._buffer().shape[1]

    def row(self, y: int) -> np.ndarray:
        """
        Mutable view of row ``y``, shape (width, 3). Writes go straight to the image.
        """
        buf = self._buffer()
        if not 0 <= y < buf.shape[0]:
            raise IndexError(f"Row {y} out of range for height {buf.shape[0]}")
        return buf[y]

    def pixel(self, x: int, y: int) -> Pixel:
        self._check_column(x)
        return Pixel(*self.row(y)[x])

    def set_pixel(self, x: int, y: int, value: Union[Pixel, Tuple[int, int, int]]) -> None:
        if not isinstance(value, Pixel):
            value = Pixel(*value)
        self._check_column(x)
        self.row(y)[x] = value.as_tuple()

    def _check_column(self, x: int) -> None:
        width = self._buffer().shape[1]
        if not 0 <= x < width:
            raise IndexError(f"Column {x} out of range for width {width}")
