# personal_manager/core/config.py
from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _get_bool(env_name: str, default: bool = False) -> bool:
    val = os.getenv(env_name)
    if val is None:
        return default
    return str(val).strip().lower() not in {"0", "false", "no", "off", ""}


def _get_int(env_name: str, default: int) -> int:
    val = os.getenv(env_name)
    if val is None or not str(val).strip():
        return default
    return int(val)


def _split_csv(env_name: str, default: str = "") -> List[str]:
    raw = os.getenv(env_name, default)
    if not raw:
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


class Settings(BaseModel):
    # ------------------------- App -------------------------
    APP_NAME: str = os.getenv("APP_NAME", "Personal Manager")
    DEBUG: bool = _get_bool("DEBUG", True)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")
    FRONTEND_DIR: Path = Path(
        os.getenv("FRONTEND_DIR", str(Path(__file__).resolve().parent.parent.parent / "frontend"))
    )

    # ------------------------- DB -------------------------
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///personal_manager.db")
    DB_POOL_SIZE: int = _get_int("DB_POOL_SIZE", 10)
    DB_POOL_TIMEOUT: int = _get_int("DB_POOL_TIMEOUT", 30)

    # ------------------------- Session / auth -------------------------
    SESSION_SECRET: str = os.getenv("SESSION_SECRET", "dev-session-secret-change-me")
    SESSION_MAX_AGE: int = _get_int("SESSION_MAX_AGE", 24 * 60 * 60)
    SESSION_HTTPS_ONLY: bool = _get_bool("SESSION_HTTPS_ONLY", False)
    DEFAULT_OWNER_ID: int = _get_int("DEFAULT_OWNER_ID", 1)
    DEFAULT_USERNAME: str = os.getenv("DEFAULT_USERNAME", "admin")
    DEFAULT_PASSWORD: str = os.getenv("DEFAULT_PASSWORD", "admin")
    DEFAULT_EMAIL: str = os.getenv("DEFAULT_EMAIL", "")

    # ------------------------- CORS -------------------------
    # e.g. CORS_ALLOW_ORIGINS="http://localhost:5173,http://127.0.0.1:3000"
    CORS_ALLOW_ORIGINS: List[str] = _split_csv("CORS_ALLOW_ORIGINS", "")

    # ------------------------- Domain knobs -------------------------
    ACTIVITY_RETENTION_DAYS: int = _get_int("ACTIVITY_RETENTION_DAYS", 30)
    ACTIVITY_FEED_LIMIT: int = _get_int("ACTIVITY_FEED_LIMIT", 10)
    RECENT_ACTIVITY_DAYS: int = _get_int("RECENT_ACTIVITY_DAYS", 7)
    SCHOOL_FEE_LIMIT: float = float(os.getenv("SCHOOL_FEE_LIMIT", "500000"))
    CURRENCY: str = os.getenv("CURRENCY", "TZS")

    # ------------------------- Derived flags -------------------------
    @property
    def DB_IS_SQLITE(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def DB_IS_MEMORY(self) -> bool:
        return self.DB_IS_SQLITE and (":memory:" in self.DATABASE_URL or self.DATABASE_URL.rstrip("/").endswith(":"))

    @property
    def SQLALCHEMY_ECHO(self) -> bool:
        return self.DEBUG

    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        return self.CORS_ALLOW_ORIGINS or ["*"]


settings = Settings()
