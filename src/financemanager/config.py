"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, falling back on blank or bad values."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "FinanceManager"
    DB_FILENAME = "financemanager.db"
    ENV_PREFIX = "FINANCEMANAGER_"
    DEFAULT_WINDOW_MONTHS = 12
    DEFAULT_STORAGE_TIMEOUT = 5.0

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool(f"{self.ENV_PREFIX}DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv(f"{self.ENV_PREFIX}DATABASE_URL", self._build_sqlite_url())
        self.STORAGE_TIMEOUT = _env_float(
            f"{self.ENV_PREFIX}STORAGE_TIMEOUT", self.DEFAULT_STORAGE_TIMEOUT
        )
        self.WINDOW_MONTHS = _env_int(f"{self.ENV_PREFIX}WINDOW_MONTHS", self.DEFAULT_WINDOW_MONTHS)
        if self.STORAGE_TIMEOUT <= 0:
            raise ValueError(f"{self.ENV_PREFIX}STORAGE_TIMEOUT must be positive.")
        if self.WINDOW_MONTHS <= 0:
            raise ValueError(f"{self.ENV_PREFIX}WINDOW_MONTHS must be positive.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv(f"{self.ENV_PREFIX}DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected locations fall back to user-local storage.
            fallback_path = Path.home() / f".{self.APP_NAME.lower()}"
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            # Store calls run on worker threads; sqlite's own busy timeout tracks ours.
            engine_options["connect_args"] = {
                "check_same_thread": False,
                "timeout": self.STORAGE_TIMEOUT,
            }
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration: separate SQLite file, dev console logging."""

    DB_FILENAME = "financemanager-dev.db"

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True
