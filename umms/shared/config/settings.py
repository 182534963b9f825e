# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Placeholder values that must never sign production credentials.
INSECURE_SECRETS = frozenset({"", "dev", "development", "test", "secret", "fallback-secret-key"})

_TRUTHY = ("1", "true", "yes", "on")
_SECTION_CONFIG = SettingsConfigDict(env_file=".env", validate_by_name=True, extra="ignore")


def _as_flag(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


class DatabaseConfig(BaseSettings):
    """Credential store connection; SQLite file by default."""

    url: str = Field("sqlite:///umms.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _SECTION_CONFIG


class SecurityConfig(BaseSettings):
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_hsts", mode="before")
    @classmethod
    def _parse_hsts(cls, value: str | bool) -> bool:
        return _as_flag(value)


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    # Signs session credentials. No default: startup fails without it.
    jwt_secret: str = Field(alias="JWT_SECRET")
    admin_email: str | None = Field(None, alias="ADMIN_EMAIL")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    database: DatabaseConfig = Field(default_factory=lambda: DatabaseConfig())  # type: ignore[call-arg]
    security: SecurityConfig = Field(default_factory=lambda: SecurityConfig())  # type: ignore[call-arg]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        validate_by_name=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _as_flag(value)

    @field_validator("jwt_secret", mode="after")
    @classmethod
    def _reject_placeholder_secret(cls, value: str) -> str:
        if value.strip().lower() in INSECURE_SECRETS:
            raise ValueError(
                "JWT_SECRET must be set to a strong random value. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        return value

    @model_validator(mode="after")
    def _warn_on_weak_production_setup(self) -> "AppConfig":
        if not self.is_production():
            return self

        findings = []
        if "*" in self.security.allowed_origins:
            findings.append("CORS allows any origin (ALLOWED_ORIGINS=*)")
        if not self.security.enable_hsts:
            findings.append("HSTS is disabled (ENABLE_HSTS)")
        if self.database.url.startswith("sqlite"):
            findings.append("SQLite credential store in production (DATABASE_URL)")

        if findings:
            print("\nPRODUCTION CONFIGURATION WARNINGS:", file=sys.stderr)
            for finding in findings:
                print(f"   - {finding}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = ["AppConfig", "DatabaseConfig", "SecurityConfig", "load_config"]
