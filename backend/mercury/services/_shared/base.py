# mercury/services/_shared/base.py
from __future__ import annotations

from http import HTTPStatus

from mercury.core import errors as api_errors
from mercury.services._shared.errors import (
    AuthenticationError,
    ErrorCode,
    MalformedTokenError,
    ServiceError,
)
from mercury.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)

# Registration collisions are conflicts; every other auth rejection is a 401
_STATUS_BY_CODE: dict[ErrorCode, HTTPStatus] = {
    ErrorCode.EMAIL_TAKEN: HTTPStatus.CONFLICT,
    ErrorCode.PHONE_TAKEN: HTTPStatus.CONFLICT,
    ErrorCode.USER_EXISTED: HTTPStatus.CONFLICT,
}


class BaseService:
    """
    Common plumbing for application services.

    * Opens read-write and read-only units of work.
    * Translates service errors into :class:`mercury.core.errors.APIError`.

    Services never import Flask and never use the session directly.
    """

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Unit of work that commits when its block exits cleanly."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Unit of work that rejects writes and always rolls back."""
        return SQLAlchemyReadOnlyUnitOfWork()

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map a service-level error to the HTTP error a view should raise.

        :param exc: Exception caught around a service call.
        :returns: An :class:`~mercury.core.errors.APIError`, or ``exc`` itself
            when there is no HTTP meaning to give it.
        """
        if isinstance(exc, AuthenticationError):
            status = _STATUS_BY_CODE.get(exc.code, HTTPStatus.UNAUTHORIZED)
            if status == HTTPStatus.CONFLICT:
                return api_errors.Conflict(exc.code.message, code=exc.code.code)
            return api_errors.Unauthorized(exc.code.message, code=exc.code.code)

        if isinstance(exc, MalformedTokenError):
            return api_errors.APIError(
                message="Malformed token",
                status_code=HTTPStatus.BAD_REQUEST,
                code="malformed_token",
            )

        if isinstance(exc, ServiceError):
            return api_errors.APIError(message=str(exc), status_code=HTTPStatus.BAD_REQUEST)

        return exc
