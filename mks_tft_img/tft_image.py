"""Convert pixel grids to MKS TFT preview G-code.

AIDEV-NOTE: This module generates the preview blocks the MKS TFT firmware
reads from the top of a G-code file. Each pixel is an RGB565 code written
low byte first as four lowercase hex digits. Format:
<tag>:<row>\\rM10086 ;<row>...\\n M10086 ;\\n
"""

import logging

import numpy as np

from mks_tft_img.models import DeviceImageBlock, PixelGrid

logger = logging.getLogger(__name__)


def rgb565(pixel: "tuple[int, int, int]") -> "tuple[int, int]":
    """Convert an RGB pixel to RGB565.

    Args:
        pixel: (r, g, b) with 8 bits per channel

    Returns:
        Tuple of (high byte, low byte) of the packed color
    """
    r, g, b = pixel[:3]
    color = ((r >> 3) << 11) | ((g >> 2) << 5) | (b >> 3)
    return color >> 8, color & 0xFF


def pack_rgb565(pixels: np.ndarray) -> np.ndarray:
    """Vectorised rgb565 over an (..., 3) uint8 array.

    Returns:
        uint16 array with the channel axis removed
    """
    channels = pixels.astype(np.uint16)
    r = channels[..., 0] >> 3
    g = channels[..., 1] >> 2
    b = channels[..., 2] >> 3
    return (r << 11) | (g << 5) | b


def unpack_rgb565(high: int, low: int) -> "tuple[int, int, int]":
    """Expand an RGB565 code back to 8-bit channels (truncated bits are zero)."""
    color = (high << 8) | low
    r = (color >> 11) & 0x1F
    g = (color >> 5) & 0x3F
    b = color & 0x1F
    return r << 3, g << 2, b << 3


def grid_to_rows(grid: PixelGrid) -> "list[str]":
    """Hex-encode every pixel row of a grid.

    AIDEV-NOTE: Little-endian uint16 bytes are exactly "low then high",
    so tobytes().hex() yields the firmware's byte order per pixel.
    """
    codes = pack_rgb565(grid.pixels).astype("<u2")
    return [row.tobytes().hex() for row in codes]


def create_tft_image(tag: str, grid: PixelGrid) -> DeviceImageBlock:
    """Build the preview block for one grid."""
    logger.debug(
        "Creating tft image gcode with prefix `%s` and size %dx%d",
        tag,
        grid.width,
        grid.height,
    )
    return DeviceImageBlock(tag=tag, rows=tuple(grid_to_rows(grid)))


def format_tft_image(tag: str, grid: PixelGrid) -> str:
    """Serialize a grid as the G-code text block the firmware expects.

    Args:
        tag: Block tag, e.g. ";simage" or ";;gimage"
        grid: Pixels to encode

    Returns:
        Block text ending with the trailing repeat-marker line
    """
    return create_tft_image(tag, grid).serialize()
