"""Flask configuration classes selected by ``APP_ENV``.

Token settings are read here but validated by
:meth:`mercury.services.auth.dto.AuthSettings.from_mapping` when the app is
created, so a bad deployment fails at startup instead of on first login.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"  # development | testing | production

JWT_ISSUER: Final[str] = "Mercury.com"

# Local use only; ProductionConfig refuses to fall back to it
_DEV_JWT_SECRET: Final[str] = "dev-only-mercury-signing-key-change-me-" + "0" * 32

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "y", "on"})

load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Read a flag such as ``SQLALCHEMY_ECHO=yes``.

    Parameters
    ----------
    name: str
        Environment variable.
    default: bool, optional
        Returned when the variable is unset.

    Returns
    -------
    bool
        Whether the value is one of ``1/true/yes/y/on`` (any case).
    """
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Read an integer such as ``JWT_ACCESS_VALIDITY_MS=60000``.

    Blank and unset variables yield ``default``; anything else that is not an
    integer raises :class:`ValueError`.
    """
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


class BaseConfig:
    """Settings shared by every environment.

    Attributes
    ----------
    JWT_SECRET_KEY: str
        HS512 key used to sign tokens and, through ``flask-jwt-extended``,
        to verify them on protected routes. At least 64 bytes.
    JWT_ALGORITHM / JWT_DECODE_ISSUER / JWT_TOKEN_LOCATION
        ``flask-jwt-extended`` settings matching the tokens the auth service
        issues (HS512, ``iss=Mercury.com``, ``Authorization`` header).
    JWT_ISSUER: str
        ``iss`` claim written by the auth service.
    JWT_ACCESS_VALIDITY_MS: int
        Access window, milliseconds (``3 600 000`` = one hour).
    JWT_REFRESH_VALIDITY_MS: int
        Refresh window, milliseconds (``36 000 000`` = ten hours).
    DEFAULT_ROLE_ID: int
        Role given to self-registered accounts (``4`` = ``MEMBER``).
    BCRYPT_LOG_ROUNDS: int
        bcrypt cost factor.
    SQLALCHEMY_DATABASE_URI: str
        From ``DATABASE_URL``; a local SQLite file otherwise.
    LOG_LEVEL: str
        Root logger level.
    """

    API_BASE_PREFIX = "/api"
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Tokens
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", _DEV_JWT_SECRET)
    JWT_ALGORITHM = "HS512"
    JWT_ISSUER = JWT_ISSUER
    JWT_DECODE_ISSUER = JWT_ISSUER
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_VALIDITY_MS = env_int("JWT_ACCESS_VALIDITY_MS", 3_600_000)
    JWT_REFRESH_VALIDITY_MS = env_int("JWT_REFRESH_VALIDITY_MS", 36_000_000)

    # Accounts
    DEFAULT_ROLE_ID = env_int("DEFAULT_ROLE_ID", 4)
    BCRYPT_LOG_ROUNDS = env_int("BCRYPT_LOG_ROUNDS", 10)

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./mercury.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local development: debug on unless ``FLASK_DEBUG`` says otherwise."""

    DEBUG = env_bool("FLASK_DEBUG", True)


class TestingConfig(BaseConfig):
    """Automated tests.

    Notes
    -----
    - In-memory SQLite unless ``TEST_DATABASE_URL`` is set.
    - Minimum bcrypt cost so hashing does not dominate the suite.
    """

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    BCRYPT_LOG_ROUNDS = 4


class ProductionConfig(BaseConfig):
    """Deployments.

    Notes
    -----
    ``JWT_SECRET_KEY`` must come from the environment; with it unset the
    empty key fails validation and the app refuses to start.
    """

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
    SQLALCHEMY_ECHO = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the class named by ``APP_ENV`` (development when unset or unknown)."""
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
