# tests/unit/infra/test_hs512_token_codec.py
from __future__ import annotations

import base64
import json
import string
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from mercury.infra.jwt.hs512_token_codec import HS512TokenCodec
from mercury.services._shared.errors import MalformedTokenError
from mercury.services._shared.ports import TokenClaims

T0 = datetime(2024, 1, 1, tzinfo=UTC)


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


@pytest.fixture()
def claims() -> TokenClaims:
    return TokenClaims(
        subject="alice",
        issuer="Mercury.com",
        issued_at=T0,
        expires_at=T0 + timedelta(hours=1),
        token_id="jti-1",
        scope="MEMBER",
    )


def test_issue_then_parse_round_trips_claims(codec, claims):
    token = codec.issue(claims)

    signed = codec.parse(token)

    assert token.count(".") == 2
    assert signed.header == {"alg": "HS512", "typ": "JWT"}
    assert signed.claims == claims
    assert codec.verify(signed) is True


def test_issued_token_is_a_standard_hs512_jws(codec, claims):
    """Any HS512 JWT library can decode the token with the shared key."""
    token = codec.issue(claims)

    decoded = jwt.decode(
        token,
        b"s" * 64,
        algorithms=["HS512"],
        options={"verify_exp": False, "verify_iat": False},
    )

    assert decoded == {
        "sub": "alice",
        "iss": "Mercury.com",
        "iat": int(T0.timestamp()),
        "exp": int((T0 + timedelta(hours=1)).timestamp()),
        "jti": "jti-1",
        "scope": "MEMBER",
    }


def test_verify_rejects_token_signed_with_another_key(codec, claims):
    foreign = HS512TokenCodec(b"x" * 64).issue(claims)

    assert codec.verify(codec.parse(foreign)) is False


def test_verify_rejects_tampered_payload(codec, claims):
    header, _, signature = codec.issue(claims).split(".")
    forged = dict(claims.to_payload(), sub="mallory")

    signed = codec.parse(f"{header}.{_b64(forged)}.{signature}")

    assert signed.claims.subject == "mallory"
    assert codec.verify(signed) is False


def test_verify_rejects_tampered_signature(codec, claims):
    header, payload, signature = codec.issue(claims).split(".")
    flipped = ("A" if signature[0] != "A" else "B") + signature[1:]

    assert codec.verify(codec.parse(f"{header}.{payload}.{flipped}")) is False


def _accepted(codec: HS512TokenCodec, token: str) -> bool:
    try:
        return codec.verify(codec.parse(token))
    except MalformedTokenError:
        return False


def test_every_other_last_signature_character_is_rejected(codec, claims):
    header, payload, signature = codec.issue(claims).split(".")
    alphabet = string.ascii_letters + string.digits + "-_"

    accepted = [
        char
        for char in alphabet
        if char != signature[-1]
        and _accepted(codec, f"{header}.{payload}.{signature[:-1]}{char}")
    ]

    assert accepted == []


@pytest.mark.parametrize("junk", ["!!!!", "====", "+/", " ", "\n"])
def test_junk_inside_signature_is_rejected(codec, claims, junk):
    header, payload, signature = codec.issue(claims).split(".")
    token = f"{header}.{payload}.{signature[:10]}{junk}{signature[10:]}"

    with pytest.raises(MalformedTokenError):
        codec.parse(token)


def test_padded_signature_is_rejected(codec, claims):
    with pytest.raises(MalformedTokenError):
        codec.parse(codec.issue(claims) + "==")


def test_parse_does_not_check_expiry(codec, claims):
    """Windows are the caller's business; parse only decodes."""
    expired = TokenClaims(
        subject="alice",
        issuer="Mercury.com",
        issued_at=datetime(2000, 1, 1, tzinfo=UTC),
        expires_at=datetime(2000, 1, 1, 0, 1, tzinfo=UTC),
        token_id="old",
    )

    signed = codec.parse(codec.issue(expired))

    assert signed.claims.expires_at == datetime(2000, 1, 1, 0, 1, tzinfo=UTC)
    assert codec.verify(signed) is True


@pytest.mark.parametrize(
    "token",
    [
        "",
        "not-a-token",
        "a.b",
        "a.b.c.d",
        "!!!.???.***",
    ],
)
def test_parse_rejects_structurally_broken_tokens(codec, token):
    with pytest.raises(MalformedTokenError):
        codec.parse(token)


def test_parse_rejects_non_string(codec):
    with pytest.raises(MalformedTokenError):
        codec.parse(None)  # type: ignore[arg-type]


def test_parse_rejects_other_algorithms(codec, claims):
    token = jwt.encode(claims.to_payload(), b"s" * 64, algorithm="HS256")

    with pytest.raises(MalformedTokenError, match="alg=HS512"):
        codec.parse(token)


def test_parse_rejects_alg_none(codec, claims):
    token = f"{_b64({'alg': 'none'})}.{_b64(claims.to_payload())}."

    with pytest.raises(MalformedTokenError):
        codec.parse(token)


@pytest.mark.parametrize(
    "mutation",
    [
        {"sub": ""},
        {"sub": 42},
        {"iat": "yesterday"},
        {"exp": True},
        {"jti": None},
        {"scope": ["ADMIN"]},
    ],
)
def test_parse_rejects_invalid_claims(codec, claims, mutation):
    payload = dict(claims.to_payload(), **mutation)
    token = f"{_b64({'alg': 'HS512', 'typ': 'JWT'})}.{_b64(payload)}.c2ln"

    with pytest.raises(MalformedTokenError):
        codec.parse(token)


def test_parse_rejects_missing_claims(codec, claims):
    payload = claims.to_payload()
    del payload["exp"]
    token = f"{_b64({'alg': 'HS512'})}.{_b64(payload)}.c2ln"

    with pytest.raises(MalformedTokenError):
        codec.parse(token)


def test_parse_rejects_expiry_not_after_issue(codec, claims):
    payload = dict(claims.to_payload(), exp=claims.to_payload()["iat"])
    token = f"{_b64({'alg': 'HS512'})}.{_b64(payload)}.c2ln"

    with pytest.raises(MalformedTokenError):
        codec.parse(token)


def test_claims_reject_expiry_before_issue():
    with pytest.raises(ValueError):
        TokenClaims(
            subject="alice",
            issuer="Mercury.com",
            issued_at=T0,
            expires_at=T0,
            token_id="j",
        )
