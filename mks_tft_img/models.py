"""Data models and constants for the MKS TFT preview post-processor."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import numpy as np
from PIL import Image

# AIDEV-NOTE: Slicer-side markers - PrusaSlicer/SuperSlicer/Orca all emit these
BLOCK_START_MARKER = "THUMBNAIL_BLOCK_START"
BLOCK_END_MARKER = "THUMBNAIL_BLOCK_END"

# AIDEV-NOTE: Firmware-side framing - MKS TFT35 reads rows split by this command
REPEAT_MARKER = "M10086 ;"
ROW_SEPARATOR = "\r" + REPEAT_MARKER

PROVENANCE_MARKER = "; MKS_TFT_PREVIEW_POSTPROCESS"
UNKNOWN_FORMAT = "UNKNOWN"

# Default preview sizes in pixels
DEFAULT_SIMAGE_SIZE = 50
DEFAULT_GIMAGE_SIZE = 200
MAX_SIMAGE_SIZE = 255
MAX_GIMAGE_SIZE = 65535

DEFAULT_LOG_LEVEL = "WARN"

# Configuration file path
CONFIG_FILE = Path.home() / ".mks_tft_img.json"


class PreviewVariant(Enum):
    """Preview images understood by the TFT firmware, keyed by block tag."""

    SMALL = ";simage"  # Shown in the file list
    LARGE = ";;gimage"  # Shown on the print status screen

    @property
    def tag(self) -> str:
        return self.value


@dataclass(frozen=True)
class SourceDocument:
    """G-code file split around its embedded thumbnail block.

    AIDEV-NOTE: header_lines keep everything but their trailing "\\n", so
    "\\n".join(header_lines) restores the header minus its final newline.
    The trailer is whatever followed the END marker line, byte for byte.
    """

    header_lines: "tuple[str, ...]" = ()
    image_lines: "tuple[str, ...]" = ()
    trailer: str = ""
    block_found: bool = False  # THUMBNAIL_BLOCK_START seen
    block_closed: bool = False  # THUMBNAIL_BLOCK_END seen

    @property
    def has_thumbnail(self) -> bool:
        return bool(self.image_lines)

    @property
    def payload_lines(self) -> "tuple[str, ...]":
        """Base64 lines between the `thumbnail begin` and `thumbnail end` lines."""
        return self.image_lines[1:-1]


@dataclass(frozen=True)
class PixelGrid:
    """Row-major 8-bit RGB pixels of a single preview.

    pixels has shape (height, width, 3) and dtype uint8.
    """

    width: int
    height: int
    pixels: np.ndarray = field(repr=False, compare=False)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid size must be positive, got {self.width}x{self.height}")
        expected = (self.height, self.width, 3)
        if self.pixels.shape != expected:
            raise ValueError(
                f"Pixel data has shape {self.pixels.shape}, expected {expected}"
            )

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelGrid":
        """Build a grid from a Pillow image, dropping alpha and palettes."""
        if image.mode != "RGB":
            image = image.convert("RGB")
        width, height = image.size
        pixels = np.asarray(image, dtype=np.uint8).reshape(height, width, 3)
        return cls(width=width, height=height, pixels=pixels)

    def __len__(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class DeviceImageBlock:
    """Serialized preview as the firmware expects it."""

    tag: str
    rows: "tuple[str, ...]"

    def serialize(self) -> str:
        return f"{self.tag}:{ROW_SEPARATOR.join(self.rows)}\n{REPEAT_MARKER}\n"


@dataclass
class DecodedThumbnail:
    """Result of the image pipeline."""

    # Format guessed from the decoded bytes, e.g. "PNG"
    format_label: str

    # Dimensions of the embedded image before resizing
    original_width: int
    original_height: int

    small: PixelGrid
    large: PixelGrid


@dataclass
class PreviewConfig:
    """Post-processing settings."""

    simage_size: int = DEFAULT_SIMAGE_SIZE  # px, 1-255
    gimage_size: int = DEFAULT_GIMAGE_SIZE  # px, 1-65535

    log_file: "str | None" = None
    log_level: str = DEFAULT_LOG_LEVEL  # OFF, ERROR, WARN, INFO, DEBUG, TRACE
