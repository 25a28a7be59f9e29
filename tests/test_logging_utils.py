"""Tests for logging configuration."""

import logging

import pytest

from bundle_bench.logging_utils import configure_logging, resolve_level


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def test_resolve_level_accepts_names_and_ints():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" WARNING ") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR
    with pytest.raises(ValueError):
        resolve_level("chatty")


def test_configure_logging_writes_log_file(tmp_path, clean_root_logger):
    log_file = tmp_path / "logs" / "bench.log"
    logger = configure_logging(log_file, level="INFO")
    logging.getLogger("bundle_bench.bench.runner").info("bench.start run_id=%s", "bench-test")
    for handler in clean_root_logger.handlers:
        handler.flush()
    assert logger.name == "bundle_bench"
    assert len(clean_root_logger.handlers) == 2
    assert "| INFO | bundle_bench.bench.runner | bench.start run_id=bench-test" in log_file.read_text(encoding="utf-8")
