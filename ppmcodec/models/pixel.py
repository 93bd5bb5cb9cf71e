from __future__ import annotations
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Pixel:
    """
    Value object: one 24-bit RGB pixel.
    Copied out of an Image, never a view into it.
    """
    r: int
    g: int
    b: int

    def __post_init__(self):
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if not isinstance(value, (int, np.integer)) or isinstance(value, (bool, np.bool_)):
                raise ValueError(f"Component {name} must be an int, got {value!r}")
            if not 0 <= value <= 255:
                raise ValueError(f"Component {name} must be in [0, 255], got {value}")
            # numpy scalars (e.g. from Image.row) are stored as plain ints
            object.__setattr__(self, name, int(value))

    def __iter__(self):
        return iter(self.as_tuple())

    def as_tuple(self):
        return self.r, self.g, self.b
