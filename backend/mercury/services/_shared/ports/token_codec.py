from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Claim set carried by every bearer token.

    :param subject: ``sub``; the account's user name.
    :type subject: str
    :param issuer: ``iss``.
    :type issuer: str
    :param issued_at: ``iat`` (UTC, whole seconds on the wire).
    :type issued_at: datetime
    :param expires_at: ``exp`` (UTC, whole seconds on the wire).
    :type expires_at: datetime
    :param token_id: ``jti``; unique per issuance.
    :type token_id: str
    :param scope: Role symbolic name, or ``""`` when the account has no role.
    :type scope: str
    :raises ValueError: If ``subject`` is empty or ``expires_at <= issued_at``.
    """

    subject: str
    issuer: str
    issued_at: datetime
    expires_at: datetime
    token_id: str
    scope: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.subject, str) or not self.subject:
            raise ValueError("Token subject must be a non-empty string.")
        if self.expires_at <= self.issued_at:
            raise ValueError("Token expiry must be after its issue time.")

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON payload using registered claim names."""
        return {
            "sub": self.subject,
            "iss": self.issuer,
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
            "jti": self.token_id,
            "scope": self.scope,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TokenClaims:
        """
        Build claims from a decoded payload.

        :raises KeyError: If a required claim is missing.
        :raises TypeError: If a claim has the wrong JSON type.
        :raises ValueError: If the claims violate the invariants above.
        """
        iat, exp = payload["iat"], payload["exp"]
        for name, value in (("iat", iat), ("exp", exp)):
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise TypeError(f"Claim {name!r} must be a NumericDate.")
        for name in ("sub", "iss", "jti"):
            if not isinstance(payload[name], str):
                raise TypeError(f"Claim {name!r} must be a string.")
        scope = payload.get("scope") or ""
        if not isinstance(scope, str):
            raise TypeError("Claim 'scope' must be a string.")
        return cls(
            subject=payload["sub"],
            issuer=payload["iss"],
            issued_at=datetime.fromtimestamp(iat, tz=UTC),
            expires_at=datetime.fromtimestamp(exp, tz=UTC),
            token_id=payload["jti"],
            scope=scope,
        )


@dataclass(frozen=True, slots=True)
class SignedToken:
    """
    A parsed (not yet verified) compact token.

    :param raw: Original compact serialization.
    :param header: Decoded JOSE header.
    :param claims: Decoded claim set.
    :param signing_input: ``b64(header) + "." + b64(payload)`` as bytes.
    :param signature: Decoded MAC bytes.
    """

    raw: str
    header: dict[str, Any]
    claims: TokenClaims
    signing_input: bytes = field(repr=False)
    signature: bytes = field(repr=False)


class TokenCodec(Protocol):
    """Port for issuing, parsing and verifying compact signed tokens."""

    def issue(self, claims: TokenClaims) -> str: ...

    def parse(self, token: str) -> SignedToken: ...

    def verify(self, signed: SignedToken) -> bool: ...
