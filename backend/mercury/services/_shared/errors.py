"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories,
adapters and application services.

Two families live here:

* :class:`ServiceError` and subclasses: authentication-domain outcomes that
  callers are expected to handle (returned to the client verbatim).
* :class:`InfrastructureError` and subclasses: configuration and crypto
  faults that are fatal for the request.

The translation to HTTP responses (RFC 7807) is handled by
``mercury/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """
    Stable authentication error kinds.

    Each member carries a machine-readable ``code`` and a client-safe
    ``message``.
    """

    EMAIL_TAKEN = ("email_taken", "Email is already in use")
    PHONE_TAKEN = ("phone_taken", "Phone number is already in use")
    USER_EXISTED = ("user_existed", "User already exists")
    UNABLE_TO_LOGIN = ("unable_to_login", "No account matches the supplied identifier")
    PASSWORD_NOT_CORRECT = ("password_not_correct", "Password is not correct")
    UNAUTHENTICATED = ("unauthenticated", "Unauthenticated")

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message


# --------------------------------------------------------------------------- #
# Domain errors
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them through ``BaseService.translate_exceptions``.
    """

    pass


@dataclass(slots=True)
class AuthenticationError(ServiceError):
    """
    Raised when registration, login or token verification is rejected.

    :param code: Error kind.
    :type code: ErrorCode
    """

    code: ErrorCode

    def __str__(self) -> str:
        return self.code.message


# --------------------------------------------------------------------------- #
# Infrastructure faults
# --------------------------------------------------------------------------- #


class InfrastructureError(Exception):
    """Base class for fatal configuration and crypto faults."""

    pass


class ConfigurationError(InfrastructureError):
    """Raised when settings are invalid or required reference data is missing."""

    pass


class SigningError(InfrastructureError):
    """Raised when a token cannot be signed."""

    pass


class MalformedTokenError(InfrastructureError):
    """Raised when a token string is not a structurally valid HS512 JWS."""

    pass
