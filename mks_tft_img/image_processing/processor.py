"""Main thumbnail processor orchestrating the decode pipeline."""

import logging
from typing import Sequence

from PIL import Image

from mks_tft_img.models import DecodedThumbnail, PreviewConfig

from .utils import decode_base64, join_payload, open_image, resize_square

logger = logging.getLogger(__name__)


class ThumbnailProcessor:
    """Decodes an embedded thumbnail into the two preview grids."""

    def __init__(self, config: PreviewConfig | None = None):
        self.config = config or PreviewConfig()

    def decode(self, image_lines: Sequence[str]) -> "tuple[Image.Image, str]":
        """Decode marker-stripped thumbnail lines into an image.

        Args:
            image_lines: Lines between the block markers, framing included

        Returns:
            Tuple of (decoded PIL image, format label)

        Raises:
            DecodeError: If the payload is missing, not base64 or not an image
        """
        logger.debug("Decoding base64 image from gcode")
        data = decode_base64(join_payload(image_lines))
        return open_image(data)

    def process(self, image_lines: Sequence[str]) -> DecodedThumbnail:
        """Execute the complete decode and resize pipeline.

        Args:
            image_lines: Lines between the block markers, framing included

        Returns:
            DecodedThumbnail with both preview grids and source metadata
        """
        image, format_label = self.decode(image_lines)
        orig_width, orig_height = image.size
        logger.debug(
            "%dx%d %s image has been decoded", orig_width, orig_height, format_label
        )

        small = resize_square(image, self.config.simage_size)
        large = resize_square(image, self.config.gimage_size)

        return DecodedThumbnail(
            format_label=format_label,
            original_width=orig_width,
            original_height=orig_height,
            small=small,
            large=large,
        )
