"""Split a G-code file around its thumbnail block and write it back.

AIDEV-NOTE: Everything outside THUMBNAIL_BLOCK_START/END must survive the
rewrite byte for byte. Files are read with surrogateescape and without
newline translation so CRLF endings, lone "\\r" and stray non-UTF-8 bytes
round-trip; only "\\n" ends a line.
"""

import logging
from pathlib import Path
from typing import TextIO

from mks_tft_img.errors import ReadError, WriteError
from mks_tft_img.models import (
    BLOCK_END_MARKER,
    BLOCK_START_MARKER,
    PROVENANCE_MARKER,
    DecodedThumbnail,
    SourceDocument,
)

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def scan_document(stream: TextIO) -> SourceDocument:
    """Split a G-code stream into header, thumbnail lines and trailer.

    Lines before THUMBNAIL_BLOCK_START go to the header unchanged (minus
    their "\\n"). Lines inside the block are stripped of leading ";" and
    whitespace; empty results are dropped. Reading by line stops at
    THUMBNAIL_BLOCK_END and the rest of the stream becomes the trailer.

    Args:
        stream: Text stream opened with newline="\\n"

    Returns:
        SourceDocument with the three regions
    """
    header_lines = []
    image_lines = []
    block_found = False
    block_closed = False

    for line in iter(stream.readline, ""):
        if BLOCK_START_MARKER in line:
            logger.debug("%s found", BLOCK_START_MARKER)
            block_found = True
            continue
        if BLOCK_END_MARKER in line:
            logger.debug("%s found", BLOCK_END_MARKER)
            block_closed = True
            break
        if block_found:
            clean_line = line.lstrip(";").strip()
            if clean_line:
                image_lines.append(clean_line)
        else:
            header_lines.append(line[:-1] if line.endswith("\n") else line)

    trailer = stream.read()

    return SourceDocument(
        header_lines=tuple(header_lines),
        image_lines=tuple(image_lines),
        trailer=trailer,
        block_found=block_found,
        block_closed=block_closed,
    )


def read_document(path: "str | Path") -> SourceDocument:
    """Open and scan a G-code file.

    Raises:
        ReadError: If the file cannot be opened or read
    """
    path = Path(path)
    logger.info("Reading gcode from `%s`", path)
    try:
        with open(path, "r", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n") as f:
            return scan_document(f)
    except OSError as e:
        raise ReadError(f"Cannot read gcode file `{path}`: {e}") from e


def provenance_comment(
    thumbnail: DecodedThumbnail,
    simage_size: int,
    gimage_size: int,
    tool_name: str,
    version: str,
    repository: str,
) -> str:
    """Comment block recording what replaced the original thumbnail."""
    return (
        f"\n{PROVENANCE_MARKER}\n"
        f"; Post processed by {tool_name} v{version} ({repository})\n"
        f";  The original {thumbnail.format_label} image was removed from here. "
        f"Its size was {thumbnail.original_width}x{thumbnail.original_height}\n"
        f";  simage = {simage_size}\n"
        f";  gimage = {gimage_size}\n"
    )


def render_document(
    document: SourceDocument,
    simage: str,
    gimage: str,
    provenance: str,
) -> "list[str]":
    """Assemble the rewritten file as an ordered list of text parts.

    AIDEV-NOTE: The header is joined without a final newline; the
    provenance block starts with one and ends with one, so the trailer
    begins on its own line exactly where THUMBNAIL_BLOCK_END used to end.

    Returns:
        Parts in write order: simage, gimage, header, provenance, trailer
    """
    return [
        simage,
        gimage,
        "\n".join(document.header_lines),
        provenance,
        document.trailer,
    ]


def write_document(path: "str | Path", parts: "list[str]") -> None:
    """Truncate path and write all parts to it.

    AIDEV-NOTE: No temp file and rename. If a write fails midway the file is
    left truncated; callers must only get here once every part is built.

    Raises:
        WriteError: If the file cannot be opened or any write fails
    """
    path = Path(path)
    logger.debug("Writing gcode with converted image back to %s", path)
    try:
        with open(path, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n") as f:
            for part in parts:
                f.write(part)
    except OSError as e:
        raise WriteError(f"Failed to write gcode file `{path}`: {e}") from e
