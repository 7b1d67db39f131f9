"""Stateless token authentication: register, login, introspect, logout."""

from __future__ import annotations

from .service import AuthenticationService

__all__ = ["AuthenticationService"]
