from ppmcodec.models.errors import (
    AllocationFailure,
    FormatError,
    ImageIOError,
    PPMError,
    TruncatedDataError,
)
from ppmcodec.models.header import Encoding, PPMHeader
from ppmcodec.models.image import Image
from ppmcodec.models.pixel import Pixel
