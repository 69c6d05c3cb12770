"""Shared fixtures for building synthetic G-code files."""

from __future__ import annotations

import base64
import io
import logging
import struct
import zlib
from pathlib import Path

import pytest
from PIL import Image

HEADER = (
    "; generated by PrusaSlicer 2.7.1 on 2024-01-01 at 10:00:00 UTC\n"
    "\n"
    ";\n"
)
TRAILER = (
    "; external perimeters extrusion width = 0.45mm\n"
    "M73 P0 R12\n"
    "G28 ; home all axes\n"
    "G1 X10 Y10 E0.5\n"
)


def png_bytes(width: int = 10, height: int = 10, color=(200, 40, 120), mode="RGB") -> bytes:
    image = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def oversized_png(width: int = 20000, height: int = 20000) -> bytes:
    """A valid 1x1 PNG whose IHDR claims width x height."""
    data = bytearray(png_bytes(1, 1))
    struct.pack_into(">II", data, 16, width, height)
    struct.pack_into(">I", data, 29, zlib.crc32(bytes(data[12:29])))
    return bytes(data)


def thumbnail_block(data: bytes, width: int = 10, height: int = 10, line_length: int = 78) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    chunks = [encoded[i : i + line_length] for i in range(0, len(encoded), line_length)]
    lines = ["; THUMBNAIL_BLOCK_START", f"; thumbnail begin {width}x{height} {len(encoded)}"]
    lines += [f"; {chunk}" for chunk in chunks]
    lines += ["; thumbnail end", ";", "; THUMBNAIL_BLOCK_END"]
    return "\n".join(lines) + "\n"


def make_gcode(block: str = "") -> str:
    return HEADER + block + TRAILER


@pytest.fixture
def png_10x10() -> bytes:
    return png_bytes()


@pytest.fixture
def gcode_file(tmp_path: Path, png_10x10: bytes) -> Path:
    path = tmp_path / "part.gcode"
    path.write_bytes(make_gcode(thumbnail_block(png_10x10)).encode("utf-8"))
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("mks_tft_img")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
