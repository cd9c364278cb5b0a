"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from the real log and config
directories of the user running them.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from unittest.mock import patch

import pytest

from pomodoro_cli.config import DurationConfig, Settings


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Send logs and settings files to *tmp_path* for every test."""
    import pomodoro_cli.config as config_mod
    import pomodoro_cli.utils.logger as logger_mod

    logger_mod._logger = None
    logging.getLogger("pomodoro_cli").handlers.clear()
    config_mod._config_manager = None

    with patch(
        "pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")
    ):
        with patch(
            "pomodoro_cli.config.user_config_dir",
            return_value=str(tmp_path / "config"),
        ):
            yield tmp_path

    for handler in logging.getLogger("pomodoro_cli").handlers:
        handler.close()
    logging.getLogger("pomodoro_cli").handlers.clear()
    logger_mod._logger = None
    config_mod._config_manager = None


# ---------------------------------------------------------------------------
# Timer configuration
# ---------------------------------------------------------------------------


@pytest.fixture()
def durations() -> DurationConfig:
    """Standard 25/5/15 Pomodoro with one-second ticks."""
    return DurationConfig(
        tick_interval=timedelta(seconds=1),
        work_duration=timedelta(minutes=25),
        break_duration=timedelta(minutes=5),
        long_break_duration=timedelta(minutes=15),
    )


@pytest.fixture()
def settings(durations) -> Settings:
    return Settings(durations=durations)
