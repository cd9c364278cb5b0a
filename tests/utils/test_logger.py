"""Tests for the application logger utility."""

from __future__ import annotations

import logging
import logging.handlers
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset the logger singleton and logging state between tests."""
    import pomodoro_cli.utils.logger as logger_mod

    logger_mod._logger = None
    logging.getLogger("pomodoro_cli").handlers.clear()

    yield

    for handler in logging.getLogger("pomodoro_cli").handlers:
        handler.close()
    logging.getLogger("pomodoro_cli").handlers.clear()
    logger_mod._logger = None


def test_get_logger_creates_log_file(tmp_path):
    """Logger creates the log file inside user_log_dir."""
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomodoro_cli.utils.logger import get_logger

        logger = get_logger()

    assert (tmp_path / "pomodoro.log").exists()
    assert isinstance(logger, logging.Logger)


def test_get_logger_returns_singleton(tmp_path):
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomodoro_cli.utils.logger import get_logger

        assert get_logger() is get_logger()


def test_child_loggers_share_the_file(tmp_path):
    """Named loggers are children and write to the same file."""
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomodoro_cli.utils.logger import get_logger

        child = get_logger("loop")
        child.info("session switched")

    assert child.name == "pomodoro_cli.loop"
    for handler in logging.getLogger("pomodoro_cli").handlers:
        handler.flush()

    content = (tmp_path / "pomodoro.log").read_text()
    assert "session switched" in content
    assert "[pomodoro_cli.loop]" in content


def test_logger_does_not_propagate(tmp_path):
    """Records never reach the root logger, which would print to the terminal."""
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        from pomodoro_cli.utils.logger import get_logger

        logger = get_logger()

    assert logger.propagate is False
    assert all(
        isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers
    )


def test_get_logger_creates_parent_dirs(tmp_path):
    nested = tmp_path / "a" / "b" / "c"
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(nested)):
        from pomodoro_cli.utils.logger import get_logger

        get_logger()

    assert nested.is_dir()
