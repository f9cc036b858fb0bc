"""Helpers for locating application directories."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "LiveSalary"
APP_AUTHOR = "LiveSalary"
HOME_ENV_VAR = "LIVE_SALARY_HOME"


def get_data_dir() -> Path:
    """Return the base directory for persistent data.

    ``LIVE_SALARY_HOME`` overrides the platform default, which keeps separate
    salary setups (or test runs) from sharing one settings database.
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        path = Path(override).expanduser()
    else:
        dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
        path = Path(dirs.user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_db_path() -> Path:
    return get_data_dir() / "settings.sqlite3"


def get_log_path() -> Path:
    return get_data_dir() / "live_salary.log"
