"""Image pipeline for embedded slicer thumbnails.

AIDEV-NOTE: This package turns the base64 lines found between the
thumbnail markers into resized RGB pixel grids:
- processor: ThumbnailProcessor orchestrator
- utils: payload joining, base64/image decoding and resizing
"""

from .processor import ThumbnailProcessor

__all__ = ["ThumbnailProcessor"]
