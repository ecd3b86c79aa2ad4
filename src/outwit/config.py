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


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to ``default``."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}.") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be greater than zero.")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Outwit Budget"
    DB_FILENAME = "outwit.db"
    STRATEGIES = ("avalanche", "snowball")

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("OUTWIT_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("OUTWIT_DATABASE_URL", self._build_sqlite_url())
        self.MAX_PAYOFF_MONTHS = _env_int("OUTWIT_MAX_PAYOFF_MONTHS", 600)
        self.DEFAULT_STRATEGY = os.getenv("OUTWIT_DEFAULT_STRATEGY", "avalanche").strip().lower()
        if self.DEFAULT_STRATEGY not in self.STRATEGIES:
            raise ValueError(
                "OUTWIT_DEFAULT_STRATEGY must be one of: " + ", ".join(self.STRATEGIES)
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("OUTWIT_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}


class TestConfig(BaseConfig):
    """In-memory database for tests."""

    __test__ = False  # keep pytest from collecting this class

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        from sqlalchemy.pool import StaticPool

        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
