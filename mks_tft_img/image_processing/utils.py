"""Helpers for decoding and resizing embedded thumbnails.

AIDEV-NOTE: Pillow guesses the compressed format from the byte stream, so
the `thumbnail begin WxH size` / `thumbnail end` framing is only skipped,
never parsed.
"""

import base64
import binascii
import io
import logging
from typing import Sequence

from PIL import Image, UnidentifiedImageError

from mks_tft_img.errors import DecodeError
from mks_tft_img.models import UNKNOWN_FORMAT, PixelGrid

logger = logging.getLogger(__name__)

# Catmull-Rom style cubic; high quality without Lanczos ringing on tiny images
RESAMPLE_FILTER = Image.Resampling.BICUBIC


def join_payload(image_lines: Sequence[str]) -> str:
    """Concatenate the base64 lines between the first and last image line.

    Raises:
        DecodeError: If there is no line between the framing lines
    """
    if len(image_lines) < 3:
        raise DecodeError(
            f"Thumbnail block has no image payload ({len(image_lines)} line(s))"
        )
    return "".join(image_lines[1:-1])


def decode_base64(payload: str) -> bytes:
    """Strictly decode base64 text.

    Raises:
        DecodeError: On characters outside the alphabet or bad padding
    """
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Cannot base64 decode image from gcode: {e}") from e


def open_image(data: bytes) -> "tuple[Image.Image, str]":
    """Guess the format of data and fully decode it.

    Returns:
        Tuple of (decoded PIL image, format label)

    Raises:
        DecodeError: If the format is unknown or decoding fails
    """
    logger.debug("Guessing image format")
    try:
        image = Image.open(io.BytesIO(data))
    except UnidentifiedImageError as e:
        raise DecodeError(
            f"Cannot decode image. Guessed format: {UNKNOWN_FORMAT}. Error: {e}",
            format_label=UNKNOWN_FORMAT,
        ) from e
    except (Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        # Header was recognised but is unusable (oversized, malformed)
        raise DecodeError(
            f"Cannot open image header. Error: {e}",
            format_label=UNKNOWN_FORMAT,
        ) from e

    format_label = image.format or UNKNOWN_FORMAT
    logger.debug("Decoding image as %s", format_label)
    try:
        image.load()
    except (Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise DecodeError(
            f"Cannot decode image. Guessed format: {format_label}. Error: {e}",
            format_label=format_label,
        ) from e
    return image, format_label


def resize_square(image: Image.Image, size: int) -> PixelGrid:
    """Resample image to a size x size RGB grid.

    AIDEV-NOTE: The firmware expects exactly size x size pixels, so the
    aspect ratio is not preserved for non-square sources.
    """
    if image.mode != "RGB":
        image = image.convert("RGB")
    resized = image.resize((size, size), RESAMPLE_FILTER)
    return PixelGrid.from_image(resized)
