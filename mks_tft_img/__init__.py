"""MKS TFT preview post-processor for slicer G-code.

AIDEV-NOTE: Replaces the base64 thumbnail a slicer embeds between
THUMBNAIL_BLOCK_START/END with the two RGB565 hex previews (simage and
gimage) that MKS TFT firmware reads from the top of the file.
"""

__version__ = "0.1.0"
__tool_name__ = "mks_tft_img"
__repository__ = "https://github.com/mks-tft-img/mks_tft_img"

from .errors import DecodeError, FormatError, ReadError, ThumbnailError, WriteError
from .gcode_document import read_document, render_document, scan_document, write_document
from .image_processing import ThumbnailProcessor
from .tft_image import format_tft_image, pack_rgb565, rgb565, unpack_rgb565

__all__ = [
    "__version__",
    "ThumbnailError",
    "ReadError",
    "FormatError",
    "DecodeError",
    "WriteError",
    "ThumbnailProcessor",
    "scan_document",
    "read_document",
    "render_document",
    "write_document",
    "rgb565",
    "pack_rgb565",
    "unpack_rgb565",
    "format_tft_image",
]
