"""Tests de la configuration (settings) et du logging."""

import logging

from config import Config
from logging_config import ColoredFormatter, build_log_config, LOG_FORMAT


def test_config_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("CROWDFUNDING_PUBLIC_BASE_URL", "https://api.example.com/")
    monkeypatch.setenv("CROWDFUNDING_MAX_IMAGE_SIZE_MB", "2")
    monkeypatch.setenv("CROWDFUNDING_DATABASE_URL", "sqlite:///./test.db")

    config = Config()

    assert config.public_base_url == "https://api.example.com"
    assert config.max_image_size_bytes == 2 * 1024 * 1024
    assert config.is_sqlite


def test_log_config_with_file_and_colors(tmp_path):
    log_file = tmp_path / "logs" / "api.log"

    log_config = build_log_config("debug", str(log_file), colored=True)

    assert set(log_config["handlers"]) == {"console", "file"}
    assert log_config["root"]["level"] == "DEBUG"
    assert log_config["formatters"]["console"]["()"] is ColoredFormatter
    assert log_config["loggers"]["uvicorn.access"]["propagate"] is False
    assert log_file.parent.is_dir()


def test_colored_formatter_leaves_record_untouched():
    record = logging.LogRecord("crowdfunding", logging.ERROR, __file__, 1, "boom", None, None)

    output = ColoredFormatter(LOG_FORMAT).format(record)

    assert "\033[31mERROR\033[0m" in output
    assert record.levelname == "ERROR"
