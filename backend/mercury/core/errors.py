"""RFC 7807 (``application/problem+json``) error responses for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from mercury.core.extensions import jwt
from mercury.core.logger import ensure_request_id

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"


def _status_code_slug(status: int) -> str:
    """``404 -> "not_found"``; unknown statuses fall back to ``"error"``."""
    try:
        return HTTPStatus(status).phrase.lower().replace(" ", "_").replace("-", "_")
    except ValueError:
        return "error"


def problem(
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> tuple[Response, int]:
    """
    Build a problem+json response tuple.

    :param status: HTTP status code.
    :param code: Stable machine-readable code (snake_case).
    :param message: Client-safe description, sent as ``detail``.
    :param details: Optional structured payload.
    :returns: ``(response, status)`` ready to return from a view or handler.
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    response = jsonify(body)
    response.mimetype = PROBLEM_MIMETYPE
    return response, status


class APIError(Exception):
    """
    Error raised by views and rendered as a problem document.

    Parameters
    ----------
    message : str
        Client-safe description.
    status_code : int, optional
        HTTP status. Defaults to ``400``.
    code : str, optional
        Machine-readable code. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Structured payload included as ``details``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}


class Conflict(APIError):
    """409 for registration collisions."""

    def __init__(self, message: str = "Conflict", code: str = "conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code=code)


class Unauthorized(APIError):
    """401 for rejected credentials or tokens."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


def _log(status: int, label: str, code: str, *, exc_info: bool = False) -> None:
    """4xx at WARNING, 5xx at ERROR."""
    level = logging.ERROR if status >= 500 else logging.WARNING
    log.log(
        level,
        "%s: code=%s status=%s",
        label,
        code,
        status,
        extra={"error_code": code},
        exc_info=exc_info,
    )


def _register_jwt_callbacks() -> None:
    """Render flask-jwt-extended rejections as 401 problems."""

    def _unauthenticated(message: str):
        _log(HTTPStatus.UNAUTHORIZED, "JWT", "unauthenticated")
        return problem(HTTPStatus.UNAUTHORIZED, "unauthenticated", message)

    jwt.unauthorized_loader(_unauthenticated)
    jwt.invalid_token_loader(_unauthenticated)
    jwt.expired_token_loader(lambda header, payload: _unauthenticated("Token has expired"))


def init_app(app: Flask) -> None:
    """
    Register problem+json handlers on ``app``.

    Notes
    -----
    - Every response carries the request's correlation id.
    - Database and unexpected errors never leak their internals.
    """

    _register_jwt_callbacks()

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        _log(err.status_code, "APIError", err.code)
        return problem(err.status_code, err.code, err.message, err.details or None)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = _status_code_slug(status)
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or HTTPStatus(status).phrase).strip()
        _log(status, "HTTPException", code)
        return problem(status, code, message)

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        _log(HTTPStatus.UNPROCESSABLE_ENTITY, "ValidationError", "validation_error")
        return problem(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            "Validation failed",
            {"errors": err.messages},
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        _log(HTTPStatus.CONFLICT, "IntegrityError", "conflict", exc_info=True)
        return problem(HTTPStatus.CONFLICT, "conflict", "Resource conflict")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        _log(
            HTTPStatus.SERVICE_UNAVAILABLE,
            "OperationalError",
            "service_unavailable",
            exc_info=True,
        )
        return problem(
            HTTPStatus.SERVICE_UNAVAILABLE,
            "service_unavailable",
            "Service temporarily unavailable",
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        status, code = HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error"
        _log(status, "Unhandled", code, exc_info=True)
        return problem(status, code, "Unexpected error")
