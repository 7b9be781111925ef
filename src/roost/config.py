"""Unified configuration via Pydantic Settings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_DIR = Path(__file__).resolve().parent

DEV_COOKIE_SECRET = "roost-development-secret"


class DeploymentMode(str, Enum):
    PRODUCTION = "production"
    DEVELOPMENT = "development"

    @classmethod
    def from_env(cls, value: str | None) -> DeploymentMode:
        """Anything other than ``production`` is treated as development."""
        return cls.PRODUCTION if value == "production" else cls.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self is DeploymentMode.PRODUCTION


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Server
    host: str = "0.0.0.0"
    port: int = 8001
    node_env: str = "development"
    log_level: str = "INFO"
    log_dir: str | None = None

    # Cookies
    cookie_secret: str = ""

    # Session store
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_socket_timeout: float = 5.0
    session_backend: Literal["redis", "memory"] = "redis"
    session_store_fallback_to_memory: bool = False
    session_cookie_name: str = "roost.sid"
    session_cookie_secure: bool = False
    session_ttl: int = 86_400

    # Request bodies
    body_limit: int = 102_400

    # Database
    database_url: str = "sqlite:///data/roost.db"

    # Files
    public_dir: str = str(_PACKAGE_DIR / "public")
    views_dir: str = str(_PACKAGE_DIR / "views")

    # Production stages
    trusted_proxies: str = "*"
    hpp_whitelist: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _require_secret_in_production(self) -> Settings:
        if not self.cookie_secret:
            if self.mode.is_production:
                raise ValueError("COOKIE_SECRET must be set in production")
            self.cookie_secret = DEV_COOKIE_SECRET
        return self

    @property
    def mode(self) -> DeploymentMode:
        return DeploymentMode.from_env(self.node_env)

    @property
    def redis_url(self) -> str:
        return f"redis://{self.redis_host}:{self.redis_port}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
