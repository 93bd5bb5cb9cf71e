from pathlib import Path
from typing import BinaryIO, List, Union
import logging
import os

import numpy as np
from dotenv import load_dotenv

from ppmcodec.models.errors import FormatError, ImageIOError, TruncatedDataError
from ppmcodec.models.header import Encoding, PPMHeader
from ppmcodec.models.image import Image
from ppmcodec.repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

MAX_COMPONENT_VALUE = 255


def _int_setting(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got {raw!r}") from None


class _HeaderReader:
    """
    Reads the three header fields of a PPM file, one logical line each.
    Comment lines ('#' first) and blank lines before a field are skipped.
    """

    def __init__(self, f: BinaryIO, max_line_length: int):
        self.f = f
        self.max_line_length = max_line_length
        self.line_number = 0  # Physical lines consumed; only used in error messages.

    def error(self, message: str) -> FormatError:
        return FormatError(message, self.line_number)

    def next_field(self, what: str) -> str:
        while True:
            raw = self.f.readline(self.max_line_length + 1)
            if not raw:
                raise self.error(f"Unexpected end of file, expected {what}")
            self.line_number += 1

            complete = raw.endswith(b"\n")
            if raw.startswith(b"#"):
                if not complete:
                    self._drain_line()
                continue
            if not complete and len(raw) > self.max_line_length:
                raise self.error(f"Header line too long (more than {self.max_line_length} characters)")

            line = raw.rstrip(b"\r\n")
            if not line.strip():
                continue
            try:
                return line.decode("ascii").strip()
            except UnicodeDecodeError as err:
                raise self.error(f"Non-ASCII bytes in {what}") from err

    def _drain_line(self) -> None:
        # Long comments are discarded whatever their length.
        while True:
            chunk = self.f.readline(self.max_line_length + 1)
            if not chunk or chunk.endswith(b"\n"):
                return

    def parse_uints(self, line: str, count: int, what: str) -> List[int]:
        tokens = line.split()
        if len(tokens) != count or not all(t.isdigit() for t in tokens):
            raise self.error(f"Expected {what}, got {line!r}")
        return [int(t) for t in tokens]


class PPMRepository:
    """
    Reads and writes 24-bit RGB PPM files, binary (P6) and plain text (P3).
    """

    def __init__(self, max_line_length: int = None, pixels_per_line: int = None):
        """
        Args:
            max_line_length: Longest accepted header line (defaults to env var, else 1024)
            pixels_per_line: Pixels per line in plain text output (defaults to env var, else 5)
        """
        if max_line_length is None:
            max_line_length = _int_setting("PPM_MAX_HEADER_LINE_LENGTH", "1024")
        if pixels_per_line is None:
            pixels_per_line = _int_setting("PPM_ASCII_PIXELS_PER_LINE", "5")
        if max_line_length < 2:
            raise ValueError(f"max_line_length must be at least 2, got {max_line_length}")
        if pixels_per_line < 1:
            raise ValueError(f"pixels_per_line must be at least 1, got {pixels_per_line}")

        self.max_line_length = max_line_length
        self.pixels_per_line = pixels_per_line
        self.image_repository = ImageRepository()

    # ─── Loading ──────────────────────────────────────────────────────
    def load(self, path: Union[str, Path]) -> Image:
        """
        Load a P3 or P6 file into a freshly allocated Image.

        Raises:
            ImageIOError: the file cannot be opened or read.
            FormatError: the header or pixel data is malformed.
            TruncatedDataError: binary pixel data ends early.
            AllocationFailure: the image buffer cannot be allocated.
        """
        path = Path(path)
        try:
            f = open(path, "rb")
        except OSError as err:
            raise ImageIOError(f"Cannot open {path}: {err}") from err

        with f:
            try:
                header = self.read_header(f)
                image = self.image_repository.allocate(header.width, header.height, path)
                try:
                    f.seek(header.data_offset)
                    if header.encoding is Encoding.ASCII:
                        self._decode_ascii(f, header, image)
                    else:
                        self._decode_raw(f, header, image)
                except Exception:
                    self.image_repository.release(image)
                    raise
            except OSError as err:
                raise ImageIOError(f"Cannot read {path}: {err}") from err

        logger.debug(f"Loaded {path}: {header.encoding.name} {header.width}x{header.height}, maxval {header.maxval}")
        return image

    def read_header(self, f: BinaryIO) -> PPMHeader:
        reader = _HeaderReader(f, self.max_line_length)

        encoding = Encoding.from_magic(reader.next_field("magic number"), reader.line_number)

        width, height = reader.parse_uints(reader.next_field("image size"), 2, "width and height")
        if width == 0 or height == 0:
            raise reader.error(f"Invalid dimensions {width}x{height}")

        maxval, = reader.parse_uints(reader.next_field("maximum component value"), 1, "maximum component value")
        if maxval > MAX_COMPONENT_VALUE:
            raise reader.error(f"Component depth unsupported: maxval {maxval} needs more than 1 byte")
        if maxval == 0:
            raise reader.error("Maximum component value must be positive")

        return PPMHeader(encoding, width, height, maxval, f.tell(), reader.line_number)

    @staticmethod
    def _decode_raw(f: BinaryIO, header: PPMHeader, image: Image) -> None:
        expected = header.pixel_count * 3
        data = f.read(expected)
        if len(data) < expected:
            raise TruncatedDataError(
                f"Pixel data truncated: expected {expected} bytes, got {len(data)}"
            )
        image.pixels[...] = np.frombuffer(data, dtype=np.uint8).reshape(header.height, header.width, 3)

    @staticmethod
    def _decode_ascii(f: BinaryIO, header: PPMHeader, image: Image) -> None:
        expected = header.pixel_count * 3
        tokens = f.read().split()
        if len(tokens) < expected:
            raise FormatError(f"Expected {expected} pixel components, found {len(tokens)}")

        components = np.array(tokens[:expected])
        invalid = ~np.char.isdigit(components)
        if invalid.any():
            i = int(invalid.argmax())
            x, y = PPMRepository._position(i, header.width)
            raise FormatError(f"Invalid component {tokens[i]!r} at pixel ({x}, {y})")

        # More than 3 significant digits is always above 255; keeps the cast below int64 range.
        too_long = np.char.str_len(np.char.lstrip(components, b"0")) > 3
        values = np.where(too_long, b"999", components).astype(np.int64)
        out_of_range = values > header.maxval
        if out_of_range.any():
            i = int(out_of_range.argmax())
            x, y = PPMRepository._position(i, header.width)
            raise FormatError(
                f"Component out of range at pixel ({x}, {y}): {int(tokens[i])} > maxval {header.maxval}"
            )

        image.pixels[...] = values.astype(np.uint8).reshape(header.height, header.width, 3)

    @staticmethod
    def _position(component_index: int, width: int):
        pixel_index = component_index // 3
        return pixel_index % width, pixel_index // width

    # ─── Writing ──────────────────────────────────────────────────────
    def write(self, path: Union[str, Path], image: Image, encoding: Encoding = Encoding.RAW) -> None:
        """
        Write ``image`` as P6 (RAW) or P3 (ASCII), always with maxval 255.
        Returns only once everything is flushed and the file is closed.

        Raises:
            ImageIOError: the file cannot be created or written. A partial file is left behind.
        """
        if not isinstance(encoding, Encoding):
            raise TypeError(f"encoding must be an Encoding, got {encoding!r}")
        if image.released:
            raise ValueError("Cannot write a released image")
        if image.pixels.dtype != np.uint8:
            raise ValueError(f"Pixels must be uint8, got {image.pixels.dtype}")

        path = Path(path)
        header = f"{encoding.magic}\n{image.width} {image.height}\n{MAX_COMPONENT_VALUE}\n".encode("ascii")
        if encoding is Encoding.RAW:
            body = np.ascontiguousarray(image.pixels).tobytes()
        else:
            body = self._encode_ascii(image.pixels)

        try:
            f = open(path, "wb")
        except OSError as err:
            raise ImageIOError(f"Cannot open {path} for writing: {err}") from err

        try:
            with f:
                f.write(header)
                f.write(body)
        except OSError as err:
            raise ImageIOError(f"Failed writing {path}: {err}") from err

        logger.debug(f"Wrote {path}: {encoding.name} {image.width}x{image.height}")

    def _encode_ascii(self, pixels: np.ndarray) -> bytes:
        triples = [f"{r} {g} {b} " for r, g, b in pixels.reshape(-1, 3).tolist()]
        n = self.pixels_per_line
        text = "\n".join("".join(triples[i:i + n]) for i in range(0, len(triples), n))
        if len(triples) % n == 0:
            text += "\n"
        return text.encode("ascii")
