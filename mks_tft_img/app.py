"""MKS TFT preview post-processor - command line entry point.

Replace the preview image in a G-code file with one that is suitable for
the MKS TFT35 display. Meant to run as a slicer post-processing script:
failures are logged but never fail the slicer's export.
"""

import argparse
import logging
import sys
from pathlib import Path

from mks_tft_img import __repository__, __tool_name__, __version__
from mks_tft_img.config_manager import ConfigManager
from mks_tft_img.errors import FormatError, ThumbnailError
from mks_tft_img.gcode_document import (
    provenance_comment,
    read_document,
    render_document,
    write_document,
)
from mks_tft_img.image_processing import ThumbnailProcessor
from mks_tft_img.log_setup import parse_log_level, setup_logging
from mks_tft_img.models import (
    CONFIG_FILE,
    MAX_GIMAGE_SIZE,
    MAX_SIMAGE_SIZE,
    PreviewConfig,
    PreviewVariant,
)
from mks_tft_img.tft_image import format_tft_image

logger = logging.getLogger(__name__)


def process_file(path: "str | Path", config: PreviewConfig) -> bool:
    """Rewrite the thumbnail of one G-code file in place.

    Returns:
        True if the file was rewritten, False if it had no thumbnail

    Raises:
        ThumbnailError: On any read, format, decode or write failure
    """
    document = read_document(path)

    if not document.has_thumbnail:
        logger.warning("There is no image in gcode file. Leaving the original file unchanged")
        return False
    if not document.block_closed:
        raise FormatError("THUMBNAIL_BLOCK_END not found before end of file")

    thumbnail = ThumbnailProcessor(config).process(document.image_lines)

    simage = format_tft_image(PreviewVariant.SMALL.tag, thumbnail.small)
    gimage = format_tft_image(PreviewVariant.LARGE.tag, thumbnail.large)
    provenance = provenance_comment(
        thumbnail,
        config.simage_size,
        config.gimage_size,
        tool_name=__tool_name__,
        version=__version__,
        repository=__repository__,
    )

    # AIDEV-NOTE: Everything is rendered before the file is truncated, so a
    # decode failure can never leave a half-written file behind.
    write_document(path, render_document(document, simage, gimage, provenance))
    return True


def run(path: "str | Path", config: PreviewConfig) -> bool:
    """Process a file, logging instead of raising.

    Returns:
        False if processing failed, True otherwise
    """
    try:
        process_file(path, config)
    except ThumbnailError as e:
        logger.error("%s", e)
        logger.debug("Finished with errors. Do not fail, to let the slicer continue")
        return False
    logger.debug("Finished successfully")
    return True


def _size_arg(maximum: int):
    def parse(value: str) -> int:
        try:
            size = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid size: {value!r}") from None
        if not 1 <= size <= maximum:
            raise argparse.ArgumentTypeError(f"size must be between 1 and {maximum}")
        return size

    return parse


def _level_arg(value: str) -> str:
    try:
        parse_log_level(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None
    return value.upper()


def build_parser(defaults: PreviewConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mks-tft-img",
        description=(
            "Replace preview image in the G-code with a one that is suitable "
            "for MKS TFT35 display"
        ),
    )
    parser.add_argument("path", type=Path, help="Path to the G-code file.")
    parser.add_argument(
        "-s",
        "--simage-size",
        type=_size_arg(MAX_SIMAGE_SIZE),
        default=defaults.simage_size,
        help="The size of the simage (default: %(default)s)",
    )
    parser.add_argument(
        "-g",
        "--gimage-size",
        type=_size_arg(MAX_GIMAGE_SIZE),
        default=defaults.gimage_size,
        help="The size of the gimage (default: %(default)s)",
    )
    parser.add_argument("--log-file", default=defaults.log_file, help="Log file")
    parser.add_argument(
        "--log-level",
        type=_level_arg,
        default=defaults.log_level,
        help="Log level. Possible levels are OFF, DEBUG, INFO, WARN, ERROR",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_FILE,
        help="Settings file used for defaults (default: %(default)s)",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Store the effective sizes and log options in the settings file",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv=None) -> "tuple[argparse.Namespace, PreviewConfig]":
    """Parse arguments, taking defaults from the settings file."""
    # The settings file location may itself be overridden on the command line
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", type=Path, default=CONFIG_FILE)
    known, _ = pre_parser.parse_known_args(argv)

    defaults = ConfigManager(known.config).load()
    args = build_parser(defaults).parse_args(argv)
    config = PreviewConfig(
        simage_size=args.simage_size,
        gimage_size=args.gimage_size,
        log_file=args.log_file,
        log_level=args.log_level,
    )
    return args, config


def main(argv=None) -> int:
    """Run the post-processor. Always exits 0 once arguments are valid."""
    args, config = parse_args(argv)
    setup_logging(config.log_level, config.log_file)

    if args.save_config:
        ok, error = ConfigManager(args.config).save(config)
        if not ok:
            logger.warning("Could not save config file %s: %s", args.config, error)

    run(args.path, config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
