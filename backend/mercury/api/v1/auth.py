"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, request
from flask_jwt_extended import get_jwt

from mercury.api.deps import get_auth_service, json_response, require_auth, timing
from mercury.schemas import (
    AuthenticationResponseSchema,
    IntrospectResponseSchema,
    LoginSchema,
    RegisterSchema,
    TokenSchema,
    WhoAmISchema,
)
from mercury.services._shared.errors import MalformedTokenError, ServiceError
from mercury.services.auth.dto import IntrospectIn, LoginIn, LogoutIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
token_schema = TokenSchema()
auth_response_schema = AuthenticationResponseSchema()
introspect_response_schema = IntrospectResponseSchema()
whoami_schema = WhoAmISchema()


@bp.post("/register")
@timing
def register():
    """Create an account and return its first access token."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    service = get_auth_service()
    try:
        result = service.register(RegisterIn(**payload))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": auth_response_schema.dump(result)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate by user name, email or phone and issue an access token."""

    payload = login_schema.load(request.get_json(silent=True) or {})
    service = get_auth_service()
    try:
        result = service.login(LoginIn(**payload))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": auth_response_schema.dump(result)})


@bp.post("/introspect")
@timing
def introspect():
    """Report whether a token is currently usable as an access token."""

    payload = token_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().introspect(IntrospectIn(token=payload["token"]))
    return json_response({"data": introspect_response_schema.dump(result)})


@bp.post("/logout")
@timing
def logout():
    """Acknowledge a logout; tokens expire naturally."""

    payload = token_schema.load(request.get_json(silent=True) or {})
    service = get_auth_service()
    try:
        service.logout(LogoutIn(token=payload["token"]))
    except (ServiceError, MalformedTokenError) as exc:
        raise service.translate_exceptions(exc) from exc
    return "", 204


@bp.get("/me")
@require_auth
@timing
def whoami():
    """Describe the bearer token presented with the request."""

    claims = get_jwt()
    body = {"user_name": claims["sub"], "scope": claims.get("scope", ""), "jti": claims["jti"]}
    return json_response({"data": whoami_schema.dump(body)})
