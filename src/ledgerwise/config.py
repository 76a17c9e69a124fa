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
    """Read a numeric environment variable, falling back on blanks."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be numeric, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "LedgerWise"
    DB_FILENAME = "ledgerwise.db"
    DEFAULT_EDIT_WINDOW_HOURS = 12.0
    DEFAULT_UNDO_WINDOW_SECONDS = 30.0
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("LEDGERWISE_SECRET_KEY", "replace-me")
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("LEDGERWISE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("LEDGERWISE_DATABASE_URL", self._build_sqlite_url())
        self.EDIT_WINDOW_HOURS = _env_float(
            "LEDGERWISE_EDIT_WINDOW_HOURS", self.DEFAULT_EDIT_WINDOW_HOURS
        )
        self.UNDO_WINDOW_SECONDS = _env_float(
            "LEDGERWISE_UNDO_WINDOW_SECONDS", self.DEFAULT_UNDO_WINDOW_SECONDS
        )
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("LEDGERWISE_SECRET_KEY must be set in non-dev mode.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("LEDGERWISE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            # Request threads share the engine; SQLite serializes the writers.
            return {"connect_args": {"check_same_thread": False, "timeout": 30}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite and throwaway databases."""

    TESTING = True


CONFIGS: dict[str, type[BaseConfig]] = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}
