"""Logging initialisation for the command line tool."""

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s:%(funcName)s] - %(message)s"
DATE_FORMAT = "%Y%m%d %H:%M:%S"

# AIDEV-NOTE: Level names follow the Rust-style names slicer users pass in
# post-processing scripts; TRACE has no stdlib equivalent and maps to DEBUG.
LOG_LEVELS = {
    "OFF": logging.CRITICAL + 10,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "TRACE": logging.DEBUG,
}


def parse_log_level(name: str) -> int:
    """Map a level name (case-insensitive) to a logging level.

    Raises:
        ValueError: If the name is not a known level
    """
    try:
        return LOG_LEVELS[name.strip().upper()]
    except KeyError:
        raise ValueError(
            f"Unknown log level {name!r}. Possible levels are OFF, DEBUG, INFO, WARN, ERROR"
        ) from None


def setup_logging(level: str = "WARN", log_file: "str | None" = None) -> logging.Logger:
    """Configure the package logger with stderr and optional file output.

    A log file that cannot be created is reported on stderr and logging
    continues on stderr only.

    Returns:
        The configured package logger
    """
    root_logger = logging.getLogger("mks_tft_img")
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(parse_log_level(level))

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    stderr_hdlr = logging.StreamHandler(sys.stderr)
    stderr_hdlr.setFormatter(formatter)
    root_logger.addHandler(stderr_hdlr)

    if log_file:
        try:
            fh = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        except OSError as e:
            print(f"Failed to open log file {log_file} for writing: {e}", file=sys.stderr)
        else:
            fh.setFormatter(formatter)
            root_logger.addHandler(fh)

    root_logger.debug("Logging initialized")
    return root_logger
