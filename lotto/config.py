"""Environment-based configuration.

Values are read once at startup (``Settings.from_env``) and normalized here,
so free-form environment text never reaches the round/ticket/draw code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

from .db.engine import ROOT_DIR
from .db.utils import resolve_sqlite_url
from .errors import ConfigError
from .rules import GameRules

_TRUE_FLAGS = {"true", "1", "yes", "on"}
_FALSE_FLAGS = {"false", "0", "no", "off"}

DEFAULT_PORT = 4080
DEFAULT_BASE_URL = f"http://localhost:{DEFAULT_PORT}"


def parse_bool_flag(value: Optional[str], default: bool) -> bool:
    """Coerce an environment flag to ``bool``; unset or blank means ``default``."""

    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_FLAGS:
        return True
    if normalized in _FALSE_FLAGS:
        return False
    raise ConfigError(f"Cannot interpret {value!r} as a boolean flag")


def _parse_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _parse_float(env: Mapping[str, str], name: str, default: Optional[float]) -> Optional[float]:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class DatabaseSettings:
    url: str
    ssl: bool = True
    echo: bool = False
    pool_size: Optional[int] = None
    pool_timeout: Optional[float] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DatabaseSettings":
        """Database settings alone, for schema tooling that needs no other config."""

        if environ is None:
            load_dotenv()
            environ = os.environ
        return _database_from_env(environ)

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def connect_args(self) -> dict[str, Any]:
        if self.is_sqlite or "sslmode=" in self.url:
            return {}
        return {"sslmode": "require" if self.ssl else "disable"}


@dataclass(frozen=True)
class AdminAuthSettings:
    """Machine-to-machine JWT settings guarding the admin actions.

    Only the surrounding HTTP layer reads these; round, ticket and draw
    operations work the same whether or not they are configured.
    """

    domain: str
    audience: str
    rounds_scope: str = "rounds:write"
    results_scope: str = "results:write"

    @property
    def issuer_base_url(self) -> str:
        return f"https://{self.domain}"


@dataclass(frozen=True)
class Settings:
    database: DatabaseSettings
    base_url: str = DEFAULT_BASE_URL
    rules: GameRules = field(default_factory=GameRules)
    admin_auth: Optional[AdminAuthSettings] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build and validate settings from ``environ`` (default: ``os.environ`` plus ``.env``)."""

        if environ is None:
            load_dotenv()
            environ = os.environ

        settings = cls(
            database=_database_from_env(environ),
            base_url=_base_url_from_env(environ),
            rules=_rules_from_env(environ),
            admin_auth=_admin_auth_from_env(environ),
            log_level=(environ.get("LOG_LEVEL") or "INFO").strip().upper(),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if not self.database.url:
            raise ConfigError("A database URL is required")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if self.database.pool_size is not None and self.database.pool_size < 1:
            raise ConfigError("DB_POOL_SIZE must be positive")
        if self.database.pool_timeout is not None and self.database.pool_timeout <= 0:
            raise ConfigError("DB_POOL_TIMEOUT must be positive")

    @property
    def admin_auth_enabled(self) -> bool:
        return self.admin_auth is not None


def _database_from_env(env: Mapping[str, str]) -> DatabaseSettings:
    url = env.get("DB_URL")
    if not url:
        host = env.get("DB_HOST")
        if host:
            url = URL.create(
                drivername="postgresql+psycopg",
                username=env.get("DB_USER"),
                password=env.get("DB_PASSWORD"),
                host=host,
                port=_parse_int(env, "DB_PORT", 5432),
                database=env.get("DB_NAME"),
            ).render_as_string(hide_password=False)
        else:
            url = "sqlite:///./dev.db"

    return DatabaseSettings(
        url=resolve_sqlite_url(url, ROOT_DIR),
        ssl=parse_bool_flag(env.get("DB_SSL"), default=True),
        echo=parse_bool_flag(env.get("DB_ECHO"), default=False),
        pool_size=_parse_int(env, "DB_POOL_SIZE", None),
        pool_timeout=_parse_float(env, "DB_POOL_TIMEOUT", None),
    )


def _base_url_from_env(env: Mapping[str, str]) -> str:
    external = env.get("RENDER_EXTERNAL_URL")
    if external:
        return external.rstrip("/")
    port = _parse_int(env, "PORT", DEFAULT_PORT)
    return f"http://localhost:{port}"


def _rules_from_env(env: Mapping[str, str]) -> GameRules:
    defaults = GameRules()
    return GameRules(
        min_picks=_parse_int(env, "LOTTO_MIN_PICKS", defaults.min_picks),
        max_picks=_parse_int(env, "LOTTO_MAX_PICKS", defaults.max_picks),
        lowest=_parse_int(env, "LOTTO_LOWEST_NUMBER", defaults.lowest),
        highest=_parse_int(env, "LOTTO_HIGHEST_NUMBER", defaults.highest),
    )


def _admin_auth_from_env(env: Mapping[str, str]) -> Optional[AdminAuthSettings]:
    domain = (env.get("AUTH0_DOMAIN") or "").strip()
    audience = (env.get("AUTH0_AUDIENCE") or "").strip()
    enabled = parse_bool_flag(
        env.get("ADMIN_AUTH_ENABLED"), default=bool(domain or audience)
    )
    if not enabled:
        return None
    if not domain or not audience:
        raise ConfigError(
            "Admin authorization is enabled but AUTH0_DOMAIN and AUTH0_AUDIENCE are not both set"
        )
    return AdminAuthSettings(domain=domain, audience=audience)


__all__ = [
    "AdminAuthSettings",
    "DatabaseSettings",
    "Settings",
    "parse_bool_flag",
]
