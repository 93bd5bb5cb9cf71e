"""
Example client: load a PPM image, halve the brightness of its top-left
quadrant and write the result.

    ppm-darken [-ascii] input.ppm output.ppm
"""
import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from ppmcodec.models.errors import PPMError
from ppmcodec.models.header import Encoding
from ppmcodec.services.image_service import ImageService

# Load environment variables first
load_dotenv()

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def parse_args(argv=None):
    ap = argparse.ArgumentParser(
        prog="ppm-darken",
        description="Darken the first quadrant of a PPM image. Input and output are PPM files.",
    )
    ap.add_argument("-ascii", action="store_true", help="write a plain text (P3) PPM file instead of binary (P6)")
    ap.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "WARNING"),
                    choices=LOG_LEVELS, type=str.upper,
                    help="logging verbosity (default: $LOG_LEVEL or WARNING)")
    ap.add_argument("input", help="PPM file to read")
    ap.add_argument("output", help="PPM file to write")
    args = ap.parse_args(argv)
    # argparse never checks choices against a default taken from the environment
    if args.log_level not in LOG_LEVELS:
        ap.error(f"invalid LOG_LEVEL {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)

    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        image_service = ImageService()
    except ValueError as err:
        logger.error(f"Invalid configuration: {err}")
        return 1

    encoding = Encoding.ASCII if args.ascii else Encoding.RAW

    try:
        img = image_service.load(args.input)
    except PPMError as err:
        logger.error(f'Failed loading "{args.input}": {err}')
        return 1

    image_service.darken_quadrant(img)

    try:
        image_service.save(img, args.output, encoding)
    except PPMError as err:
        logger.error(f'Failed writing "{args.output}": {err}')
        return 1
    finally:
        image_service.release(img)

    logger.info(f"Wrote {args.output} ({encoding.name})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
