"""
process_registry.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., JWT secret).
- Parse the token lifetime from a compact duration string ("1d", "12h", ...).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

import re
from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 60 * 60, "d": 24 * 60 * 60}


def parse_duration(raw: str) -> timedelta:
    """
    Parse "45s", "30m", "12h", "1d" or a bare number of seconds.
    """

    match = _DURATION_RE.match(raw)
    if match is None:
        raise ValueError(f"invalid duration: {raw!r}")
    amount, unit = match.groups()
    seconds = int(amount) * _DURATION_UNITS[unit]
    if seconds <= 0:
        raise ValueError(f"duration must be positive: {raw!r}")
    return timedelta(seconds=seconds)


class Settings(BaseSettings):
    """
    Enterprise pattern:
    - Strict env-driven configuration
    - Defaults safe for local dev
    - Single settings object injected across layers
    """

    model_config = SettingsConfigDict(env_prefix="PROCREG_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "process-registry"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth. No default secret: signing/verifying without one is a ConfigError.
    jwt_alg: str = "HS256"
    jwt_issuer: str = "process-registry"
    jwt_audience: str = "process-registry-api"
    jwt_secret: str | None = Field(default=None, repr=False)
    jwt_expires_in: str = "1d"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./procreg.db"

    @field_validator("jwt_expires_in")
    @classmethod
    def _check_expires_in(cls, value: str) -> str:
        parse_duration(value)
        return value

    @property
    def token_lifetime(self) -> timedelta:
        return parse_duration(self.jwt_expires_in)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The app factory receives an explicit Settings instance and stores it on app.state;
# `get_settings` is the fallback used by the CLI entrypoint and Alembic.
