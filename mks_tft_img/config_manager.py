"""Configuration persistence manager for the MKS TFT preview post-processor.

This module handles loading and saving of preview settings to/from JSON files.
"""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Tuple

from mks_tft_img.log_setup import parse_log_level
from mks_tft_img.models import CONFIG_FILE, MAX_GIMAGE_SIZE, MAX_SIMAGE_SIZE, PreviewConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Handles loading and saving of preview configuration."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.mks_tft_img.json)
        """
        self.config_path = Path(config_path)

    def load(self) -> PreviewConfig:
        """Load configuration from file, returning defaults if not found.

        Returns:
            PreviewConfig with loaded or default values
        """
        config = PreviewConfig()

        try:
            if self.config_path.exists():
                with open(self.config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                # Update config with loaded values (fallback to defaults)
                config.simage_size = self._size(
                    data, "simage_size", config.simage_size, MAX_SIMAGE_SIZE
                )
                config.gimage_size = self._size(
                    data, "gimage_size", config.gimage_size, MAX_GIMAGE_SIZE
                )
                config.log_file = data.get("log_file", config.log_file)
                config.log_level = self._level(data, config.log_level)
                logger.debug("Loaded configuration from %s", self.config_path)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Could not load config file %s: %s", self.config_path, e)
            config = PreviewConfig()

        return config

    def _size(self, data: dict, key: str, default: int, maximum: int) -> int:
        """Read a preview size, keeping the default when it is out of range."""
        value = data.get(key, default)
        try:
            size = int(value)
        except (TypeError, ValueError):
            size = 0
        if isinstance(value, bool) or not 1 <= size <= maximum:
            logger.warning(
                "Ignoring %s=%r from %s: must be between 1 and %d, using %d",
                key,
                value,
                self.config_path,
                maximum,
                default,
            )
            return default
        return size

    def _level(self, data: dict, default: str) -> str:
        value = str(data.get("log_level", default))
        try:
            parse_log_level(value)
        except ValueError as e:
            logger.warning("Ignoring log_level from %s: %s", self.config_path, e)
            return default
        return value.upper()

    def save(self, config: PreviewConfig) -> Tuple[bool, Optional[str]]:
        """Save configuration to file.

        Args:
            config: PreviewConfig to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(asdict(config), f, indent=2)
            return True, None
        except OSError as e:
            return False, str(e)
