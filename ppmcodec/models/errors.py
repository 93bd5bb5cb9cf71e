from __future__ import annotations


class PPMError(Exception):
    """Base class for every failure reported by the PPM codec."""


class ImageIOError(PPMError):
    """The file could not be opened, created or written."""


class FormatError(PPMError):
    """
    The header or pixel data violates the PPM grammar.

    ``line_number`` is the count of physical header lines consumed when the
    error was raised. It is only set for header errors and is advisory.
    """

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (header line {line_number})"
        super().__init__(message)


class TruncatedDataError(FormatError):
    """Binary pixel data is shorter than the declared dimensions."""


class AllocationFailure(PPMError):
    """The pixel buffer for an image could not be allocated."""
