from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from ppmcodec.models.errors import FormatError


class Encoding(Enum):
    """Pixel encoding of a PPM file, valued by its magic token."""
    RAW = "P6"
    ASCII = "P3"

    @property
    def magic(self) -> str:
        return self.value

    @staticmethod
    def from_magic(token: str, line_number: int | None = None) -> "Encoding":
        for e in Encoding:
            if e.value == token:
                return e
        raise FormatError(f"Unsupported format: {token!r}", line_number)


@dataclass
class PPMHeader:
    """
    Transient parsing result. Thrown away once the pixels are decoded.
    """
    encoding: Encoding
    width: int
    height: int
    maxval: int
    data_offset: int   # Byte offset of the first pixel.
    line_number: int   # Physical header lines consumed, diagnostics only.

    @property
    def pixel_count(self) -> int:
        return self.width * self.height
