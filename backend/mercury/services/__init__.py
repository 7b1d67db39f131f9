"""Service layer public API.

Re-exports
----------
- Base primitives (from ``mercury.services._shared.base``)
    * :class:`BaseService`

- Authentication service (from ``mercury.services.auth``)
    * :class:`AuthenticationService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`IntrospectIn`,
      :class:`LogoutIn`, :class:`AuthenticationOut`, :class:`IntrospectOut`,
      :class:`AuthSettings`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .auth.dto import (
    AuthenticationOut,
    AuthSettings,
    IntrospectIn,
    IntrospectOut,
    LoginIn,
    LogoutIn,
    RegisterIn,
)
from .auth.service import AuthenticationService

__all__ = [
    # Base
    "BaseService",
    # Authentication
    "AuthenticationService",
    "AuthSettings",
    "RegisterIn",
    "LoginIn",
    "IntrospectIn",
    "LogoutIn",
    "AuthenticationOut",
    "IntrospectOut",
]
