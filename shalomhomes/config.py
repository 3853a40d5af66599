# shalomhomes/config.py
from enum import Enum
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

DEFAULT_SESSION_SECRET = "shalomhomes-session-secret"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    DATABASE = "database"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Database ---
    # Required to boot the server; `run()` exits when it is missing.
    database_url: Optional[str] = None
    storage_backend: StorageBackend = StorageBackend.DATABASE
    seed_sample_data: bool = True

    # --- Server ---
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"
    log_format: Literal["json", "text"] = "json"

    # --- Sessions ---
    session_secret: str = DEFAULT_SESSION_SECRET
    session_cookie_name: str = "shalomhomes.sid"
    session_max_age_seconds: int = 24 * 60 * 60  # 24 hours
    session_https_only: bool = False

    # --- Response headers ---
    # The API serves JSON only; nothing should be loaded or framed from it.
    content_security_policy: Optional[str] = "default-src 'none'; frame-ancestors 'none'"
    hsts_max_age_seconds: int = 365 * 24 * 60 * 60

    # --- Google OAuth ---
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_callback_url: Optional[str] = None

    # --- CORS ---
    cors_origins: List[str] = ["http://localhost:5000", "http://localhost:5173"]

    @property
    def google_oauth_configured(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret and self.google_callback_url)

    @property
    def sqlalchemy_database_url(self) -> Optional[str]:
        """Point bare postgres URLs at the psycopg 3 driver."""
        url = self.database_url
        if not url:
            return None
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        if url.startswith("postgresql://"):
            url = "postgresql+psycopg://" + url[len("postgresql://"):]
        return url


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- SQLAlchemy setup ---
Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False}
        if database_url.startswith("sqlite")
        else {},
        pool_pre_ping=not database_url.startswith("sqlite"),
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
