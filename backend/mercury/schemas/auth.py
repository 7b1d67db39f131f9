"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate

# bcrypt only reads the first 72 bytes of a password
PASSWORD_MAX_BYTES = 72

not_blank = validate.Regexp(r"\s*\S", error="Must contain a non-whitespace character.")


def password_bytes(value: str) -> None:
    """Reject passwords whose UTF-8 encoding is empty or longer than bcrypt accepts."""
    size = len(value.encode("utf-8"))
    if not 1 <= size <= PASSWORD_MAX_BYTES:
        raise ValidationError(f"Length must be between 1 and {PASSWORD_MAX_BYTES} bytes.")


class RegisterSchema(Schema):
    """Input payload for account registration."""

    class Meta:
        unknown = EXCLUDE

    user_name = fields.String(
        required=True,
        data_key="userName",
        validate=[validate.Length(min=1, max=50), not_blank],
    )
    email = fields.Email(required=True, validate=validate.Length(max=254))
    phone = fields.String(required=True, validate=[validate.Length(min=1, max=20), not_blank])
    password = fields.String(required=True, load_only=True, validate=password_bytes)
    full_name = fields.String(
        data_key="fullName", load_default=None, validate=validate.Length(max=100)
    )
    address = fields.String(load_default=None, validate=validate.Length(max=255))


class LoginSchema(Schema):
    """Input payload for authenticating with a user name, email or phone."""

    class Meta:
        unknown = EXCLUDE

    user_name = fields.String(
        required=True,
        data_key="userName",
        validate=[validate.Length(min=1, max=254), not_blank],
    )
    password = fields.String(required=True, load_only=True, validate=password_bytes)


class TokenSchema(Schema):
    """Input payload carrying a bearer token (introspect and logout)."""

    class Meta:
        unknown = EXCLUDE

    token = fields.String(required=True, validate=validate.Length(min=1))


class AuthenticationResponseSchema(Schema):
    """Response payload for register and login."""

    token = fields.String(required=True)
    authenticated = fields.Boolean(required=True)


class IntrospectResponseSchema(Schema):
    """Response payload for introspection."""

    valid = fields.Boolean(required=True)


class WhoAmISchema(Schema):
    """Response payload describing the verified bearer token."""

    user_name = fields.String(required=True, data_key="userName")
    scope = fields.String(required=True)
    jti = fields.String(required=True)
