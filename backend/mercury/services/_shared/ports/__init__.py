"""
mercury.services._shared.ports
==============================

Collection of *ports* (hexagonal interfaces) that define the contracts
for the authentication infrastructure.

These ports decouple the service layer from concrete implementations
of time, password hashing and token signing.

Modules
-------
- :mod:`clock`:
    Defines :class:`~.Clock` plus :class:`~.SystemClock` and the test double
    :class:`~.FrozenClock`.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`: one-way salted hash with verify.

- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`, :class:`~.TokenClaims` and
    :class:`~.SignedToken`: compact signed token serialization.

Design Notes
------------
Concrete adapters (bcrypt, PyJWT) implement these interfaces under
``mercury.infra``.
"""

from __future__ import annotations

from .clock import Clock, FrozenClock, SystemClock
from .password_hasher import PasswordHasher
from .token_codec import SignedToken, TokenClaims, TokenCodec

__all__ = [
    "Clock",
    "SystemClock",
    "FrozenClock",
    "PasswordHasher",
    "TokenCodec",
    "TokenClaims",
    "SignedToken",
]
