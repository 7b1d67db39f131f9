# mercury/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from mercury.services._shared.errors import ConfigurationError

#: HS512 needs a key at least as long as its 512-bit output
MIN_SECRET_BYTES = 64

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-registration.

    :param user_name: Login handle (unique).
    :type user_name: str
    :param email: Contact email (unique).
    :type email: str
    :param phone: Contact phone (unique).
    :type phone: str
    :param password: Raw password (hashed by the service).
    :type password: str
    :param full_name: Optional profile field.
    :type full_name: str | None
    :param address: Optional profile field.
    :type address: str | None
    """

    user_name: str
    email: str
    phone: str
    password: str = field(repr=False)
    full_name: str | None = None
    address: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param user_name: User name, email or phone; matched against all three.
    :type user_name: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    user_name: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class IntrospectIn:
    """
    Input DTO for token introspection.

    :param token: Compact signed token.
    :type token: str
    """

    token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param token: Compact signed token.
    :type token: str
    """

    token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthenticationOut:
    """
    Output DTO for register and login.

    :param token: Freshly issued access token.
    :type token: str
    :param authenticated: Always ``True`` on success.
    :type authenticated: bool
    """

    token: str
    authenticated: bool = True


@dataclass(frozen=True, slots=True)
class IntrospectOut:
    """
    Output DTO for introspection.

    :param valid: Whether the token is inside its access window and correctly signed.
    :type valid: bool
    """

    valid: bool


# ------------------------------ Settings ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthSettings:
    """
    Immutable authentication configuration, injected at construction.

    :param secret: HS512 signing key (``>= 64`` bytes).
    :type secret: bytes
    :param access_validity: Access window length (whole seconds, ``>= 1s``).
    :type access_validity: timedelta
    :param refresh_validity: Refresh window length (``>= access_validity``).
    :type refresh_validity: timedelta
    :param issuer: ``iss`` claim value.
    :type issuer: str
    :param default_role_id: Role id given to self-registered accounts.
    :type default_role_id: int
    :param bcrypt_rounds: Password hash work factor.
    :type bcrypt_rounds: int
    :raises ConfigurationError: If any rule above is violated.
    """

    secret: bytes = field(repr=False)
    access_validity: timedelta
    refresh_validity: timedelta
    issuer: str = "Mercury.com"
    default_role_id: int = 4
    bcrypt_rounds: int = 10

    def __post_init__(self) -> None:
        if len(self.secret) < MIN_SECRET_BYTES:
            raise ConfigurationError(
                f"JWT secret must be at least {MIN_SECRET_BYTES} bytes for HS512."
            )
        if self.access_validity < timedelta(seconds=1):
            raise ConfigurationError("Access validity must be at least one second.")
        if self.refresh_validity < self.access_validity:
            raise ConfigurationError("Refresh validity must not be shorter than access validity.")
        if not self.issuer:
            raise ConfigurationError("JWT issuer must not be empty.")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthSettings:
        """
        Build settings from a Flask config mapping.

        :param config: Mapping with ``JWT_SECRET_KEY``, ``JWT_ACCESS_VALIDITY_MS``,
            ``JWT_REFRESH_VALIDITY_MS`` and optionally ``JWT_ISSUER``,
            ``DEFAULT_ROLE_ID``, ``BCRYPT_LOG_ROUNDS``.
        :returns: Validated settings.
        :raises ConfigurationError: On missing or invalid values.
        """
        try:
            secret = config["JWT_SECRET_KEY"]
            access_ms = int(config["JWT_ACCESS_VALIDITY_MS"])
            refresh_ms = int(config["JWT_REFRESH_VALIDITY_MS"])
            default_role_id = int(config.get("DEFAULT_ROLE_ID", 4))
            rounds = int(config.get("BCRYPT_LOG_ROUNDS", 10))
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid authentication settings: {exc}") from exc

        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        if not isinstance(secret, bytes):
            raise ConfigurationError("JWT_SECRET_KEY must be a string or bytes.")
        return cls(
            secret=secret,
            # Tokens carry NumericDate seconds; sub-second remainders are dropped
            access_validity=timedelta(seconds=access_ms // 1000),
            refresh_validity=timedelta(seconds=refresh_ms // 1000),
            issuer=str(config.get("JWT_ISSUER") or "Mercury.com"),
            default_role_id=default_role_id,
            bcrypt_rounds=rounds,
        )
