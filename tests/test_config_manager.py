"""Tests for settings persistence and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mks_tft_img.config_manager import ConfigManager
from mks_tft_img.log_setup import parse_log_level, setup_logging
from mks_tft_img.models import PreviewConfig


def test_missing_config_returns_defaults(tmp_path: Path) -> None:
    assert ConfigManager(tmp_path / "none.json").load() == PreviewConfig()


def test_save_then_load(tmp_path: Path) -> None:
    manager = ConfigManager(tmp_path / "settings.json")
    config = PreviewConfig(simage_size=100, gimage_size=300, log_file="x.log", log_level="INFO")

    assert manager.save(config) == (True, None)
    assert manager.load() == config


def test_partial_config_falls_back_per_field(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"gimage_size": 180}', encoding="utf-8")
    assert ConfigManager(path).load() == PreviewConfig(gimage_size=180)


def test_corrupt_config_returns_defaults(tmp_path: Path, caplog) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING):
        assert ConfigManager(path).load() == PreviewConfig()
    assert "Could not load config file" in caplog.text


def test_save_reports_error(tmp_path: Path) -> None:
    ok, error = ConfigManager(tmp_path / "missing" / "settings.json").save(PreviewConfig())
    assert ok is False
    assert error


@pytest.mark.parametrize(
    "name, level",
    [("warn", logging.WARNING), ("DEBUG", logging.DEBUG), ("Trace", logging.DEBUG), ("ERROR", logging.ERROR)],
)
def test_parse_log_level(name, level) -> None:
    assert parse_log_level(name) == level


def test_parse_log_level_off_silences_everything() -> None:
    assert parse_log_level("OFF") > logging.CRITICAL


def test_parse_log_level_unknown() -> None:
    with pytest.raises(ValueError):
        parse_log_level("verbose")


def test_setup_logging_survives_unwritable_log_file(tmp_path: Path, capsys) -> None:
    logger = setup_logging("INFO", str(tmp_path / "missing" / "run.log"))
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert "Failed to open log file" in capsys.readouterr().err


@pytest.mark.parametrize(
    "content",
    [
        '{"simage_size": -5, "gimage_size": 0}',
        '{"simage_size": 256, "gimage_size": 70000}',
        '{"simage_size": "big", "gimage_size": null}',
        '{"simage_size": true, "gimage_size": [1]}',
    ],
)
def test_out_of_range_sizes_fall_back_per_field(tmp_path: Path, caplog, content) -> None:
    path = tmp_path / "settings.json"
    path.write_text(content[:-1] + ', "log_level": "info"}', encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        config = ConfigManager(path).load()

    assert (config.simage_size, config.gimage_size) == (50, 200)
    assert config.log_level == "INFO"
    assert "simage_size" in caplog.text and "gimage_size" in caplog.text


def test_unknown_log_level_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text('{"simage_size": 80, "log_level": "loud"}', encoding="utf-8")
    assert ConfigManager(path).load() == PreviewConfig(simage_size=80)
