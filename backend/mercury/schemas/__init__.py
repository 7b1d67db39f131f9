"""Marshmallow schemas for request validation and response serialization."""

from __future__ import annotations

from .auth import (
    AuthenticationResponseSchema,
    IntrospectResponseSchema,
    LoginSchema,
    RegisterSchema,
    TokenSchema,
    WhoAmISchema,
)

__all__ = [
    "AuthenticationResponseSchema",
    "IntrospectResponseSchema",
    "LoginSchema",
    "RegisterSchema",
    "TokenSchema",
    "WhoAmISchema",
]
