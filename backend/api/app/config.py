# backend/api/app/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _load_env_once() -> None:
    """
    Loads .env from:
      1) ENV_PATH if provided
      2) backend/api/.env (project default)
      3) current working directory .env (fallback)
    """
    env_path = os.getenv("ENV_PATH")
    if env_path:
        p = Path(env_path)
        if p.exists():
            load_dotenv(p, override=False)
            return

    # this file is backend/api/app/config.py
    backend_api_dir = Path(__file__).resolve().parents[1]
    p2 = backend_api_dir / ".env"
    if p2.exists():
        load_dotenv(p2, override=False)
        return

    p3 = Path.cwd() / ".env"
    if p3.exists():
        load_dotenv(p3, override=False)


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    site_url: Optional[str] = None
    db_pool_size: int = 10
    db_connect_timeout: int = 5
    db_statement_timeout_ms: int = 45000
    expose_error_details: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment (after .env loading).

        A missing DATABASE_URL is not an error here; the connection cache
        raises ConfigurationError the first time a handler needs the store.
        """
        _load_env_once()

        return cls(
            database_url=os.getenv("DATABASE_URL") or os.getenv("DB_URL") or None,
            site_url=os.getenv("SITE_URL") or None,
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            db_connect_timeout=int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
            db_statement_timeout_ms=int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "45000")),
            expose_error_details=_env_bool("EXPOSE_ERROR_DETAILS"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
