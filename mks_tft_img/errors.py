"""Exceptions raised while post-processing a G-code thumbnail."""


class ThumbnailError(Exception):
    """Base class for every failure that aborts a rewrite."""


class ReadError(ThumbnailError):
    """The source G-code file could not be opened or read."""


class FormatError(ThumbnailError):
    """The thumbnail block is structurally broken (e.g. never closed)."""


class DecodeError(ThumbnailError):
    """The embedded thumbnail could not be base64 or image decoded.

    Args:
        message: Human readable description
        format_label: Guessed image format at the time of failure
    """

    def __init__(self, message: str, format_label: str = "UNKNOWN"):
        super().__init__(message)
        self.format_label = format_label


class WriteError(ThumbnailError):
    """The destination file could not be opened or written."""
