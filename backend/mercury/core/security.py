"""Authentication component wiring (settings, hasher, token codec)."""

from __future__ import annotations

from dataclasses import dataclass

from flask import Flask, current_app

from mercury.infra.jwt.hs512_token_codec import HS512TokenCodec
from mercury.infra.security.bcrypt_password_hasher import BcryptPasswordHasher
from mercury.services._shared.ports import Clock, SystemClock
from mercury.services.auth.dto import AuthSettings

EXTENSION_KEY = "mercury.auth"


@dataclass(frozen=True, slots=True)
class AuthComponents:
    """
    Process-wide, read-only collaborators shared by every request.

    :param settings: Validated authentication settings.
    :param password_hasher: bcrypt adapter.
    :param token_codec: HS512 adapter.
    :param clock: Time source.
    """

    settings: AuthSettings
    password_hasher: BcryptPasswordHasher
    token_codec: HS512TokenCodec
    clock: Clock


def init_app(app: Flask, *, clock: Clock | None = None) -> AuthComponents:
    """Validate auth settings and register the shared components on ``app``.

    Parameters
    ----------
    app: flask.Flask
        Application whose config provides ``JWT_SECRET_KEY``,
        ``JWT_ACCESS_VALIDITY_MS``, ``JWT_REFRESH_VALIDITY_MS``,
        ``DEFAULT_ROLE_ID`` and ``BCRYPT_LOG_ROUNDS``.
    clock: Clock, optional
        Time source override; defaults to :class:`SystemClock`.

    Raises
    ------
    mercury.services._shared.errors.ConfigurationError
        If the settings are invalid. Startup fails rather than serving
        unsigned or mis-windowed tokens.
    """
    settings = AuthSettings.from_mapping(app.config)
    components = AuthComponents(
        settings=settings,
        password_hasher=BcryptPasswordHasher(rounds=settings.bcrypt_rounds),
        token_codec=HS512TokenCodec(settings.secret),
        clock=clock or SystemClock(),
    )
    app.extensions[EXTENSION_KEY] = components
    return components


def get_components() -> AuthComponents:
    """Return the components registered on the current app."""
    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError as exc:
        raise RuntimeError("Authentication is not initialized. Call init_app() first.") from exc
