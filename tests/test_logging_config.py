from __future__ import annotations

import logging

import pytest
from flask import Flask

from src.facesync.facesync.common import logging_config
from src.facesync.facesync.common.logging_config import setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in logging_config._installed:
        root.removeHandler(handler)
        handler.close()
    logging_config._installed.clear()
    root.setLevel(level)


def test_foreign_handlers_survive_reconfiguration(root_logger):
    foreign = logging.NullHandler()
    root_logger.addHandler(foreign)
    try:
        setup_logging(Flask(__name__), "WARNING")
        setup_logging(Flask(__name__), "DEBUG")

        assert foreign in root_logger.handlers
        assert len(logging_config._installed) == 1
        assert logging_config._installed[0] in root_logger.handlers
        assert root_logger.level == logging.DEBUG
    finally:
        root_logger.removeHandler(foreign)


def test_log_dir_adds_rotating_file(root_logger, tmp_path):
    setup_logging(Flask(__name__), "INFO", str(tmp_path / "logs"))

    logging.getLogger("facesync.test").info("hello")

    assert len(logging_config._installed) == 2
    for handler in logging_config._installed:
        handler.flush()
    assert "hello" in (tmp_path / "logs" / "facesync.log").read_text(encoding="utf-8")
