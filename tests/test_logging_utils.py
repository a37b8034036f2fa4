import logging

import pytest

from empathyai.logging_utils import preview, setup_logging


@pytest.fixture
def clean_logger():
    logger = logging.getLogger("empathyai")
    saved = list(logger.handlers), logger.level
    logger.handlers = []
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers, level = saved
    logger.setLevel(level)


def test_setup_logging_writes_file_once(tmp_path, clean_logger):
    path = setup_logging(str(tmp_path / "logs"), "debug")
    again = setup_logging(str(tmp_path / "logs"), "debug")

    assert path == again
    assert clean_logger.level == logging.DEBUG
    assert len(clean_logger.handlers) == 2
    assert logging.getLogger("httpx").level == logging.WARNING

    logging.getLogger("empathyai.pipeline").info("turn done")
    for handler in clean_logger.handlers:
        handler.flush()
    assert "turn done" in (tmp_path / "logs" / "empathyai.log").read_text(encoding="utf-8")


def test_unknown_level_name_defaults_to_info(tmp_path, clean_logger):
    setup_logging(str(tmp_path), "chatty")
    assert clean_logger.level == logging.INFO


def test_preview():
    assert preview("short") == "short"
    assert preview("a\n  b") == "a b"
    assert preview("x" * 60) == "x" * 50 + "..."
