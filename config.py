"""Startup configuration, read once from the environment (+ optional .env)."""

import hashlib
import hmac
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from errors import ConfigError

DEFAULT_PORT = 3000
ENVIRONMENTS = ("development", "test", "production")


def _require(environ, name):
    value = environ.get(name)
    if value is None or value.strip() == "":
        raise ConfigError(f"{name} must be set")
    return value.strip()


def _origins(raw):
    if raw is None:
        return ()
    return tuple(o.strip().rstrip("/") for o in raw.replace(",", " ").split() if o.strip())


def _port(raw):
    if raw is None or raw.strip() == "":
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got {raw!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"PORT out of range: {port}")
    return port


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    database_url: str
    port: int = DEFAULT_PORT
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: tuple = ()

    @property
    def is_production(self):
        return self.environment == "production"

    @property
    def session_secret(self):
        # Flask's own cookie signing key, kept apart from the token signing key.
        return hmac.new(self.jwt_secret.encode("utf-8"), b"flask-session", hashlib.sha256).hexdigest()

    @classmethod
    def from_env(cls, environ=None):
        """Build settings from ``environ`` (defaults to ``os.environ``).

        Raises ConfigError when a required value is missing or malformed, so
        the process fails before serving anything.
        """
        if environ is None:
            load_dotenv(override=False)
            environ = os.environ

        environment = environ.get("ENVIRONMENT", "development").strip().lower()
        if environment not in ENVIRONMENTS:
            raise ConfigError(f"ENVIRONMENT must be one of {', '.join(ENVIRONMENTS)}")

        log_level = environ.get("LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"Unknown LOG_LEVEL {log_level!r}")

        return cls(
            jwt_secret=_require(environ, "JWT_SECRET"),
            database_url=_require(environ, "DATABASE_URL"),
            port=_port(environ.get("PORT")),
            environment=environment,
            log_level=log_level,
            cors_origins=_origins(environ.get("CORS_ORIGINS")),
        )
