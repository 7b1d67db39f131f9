# mercury/infra/jwt/hs512_token_codec.py
from __future__ import annotations

import json
import re
from typing import Any

import jwt
from jwt.algorithms import HMACAlgorithm
from jwt.utils import base64url_decode, base64url_encode

from mercury.services._shared.errors import MalformedTokenError, SigningError
from mercury.services._shared.ports import SignedToken, TokenClaims, TokenCodec

ALGORITHM = "HS512"

_SEGMENT = re.compile(r"[A-Za-z0-9_-]+")


class HS512TokenCodec(TokenCodec):
    """
    Compact JWS codec signing with HMAC-SHA512 (PyJWT).

    ``parse`` never checks the MAC; ``verify`` does. Callers read
    ``iat``/``exp`` from the parsed token to pick the validity window.

    :param secret: Shared symmetric key (at least 64 bytes).
    :type secret: bytes
    """

    def __init__(self, secret: bytes) -> None:
        self._secret = secret
        self._hmac = HMACAlgorithm(HMACAlgorithm.SHA512)
        self._key = self._hmac.prepare_key(secret)

    def issue(self, claims: TokenClaims) -> str:
        """
        Serialize and sign ``claims``.

        :param claims: Validated claim set.
        :returns: ``b64(header).b64(payload).b64(mac)``.
        :raises SigningError: If the library fails to produce a signature.
        """
        try:
            return jwt.encode(
                claims.to_payload(),
                self._secret,
                algorithm=ALGORITHM,
                headers={"typ": "JWT"},
            )
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            raise SigningError("Unable to sign token.") from exc

    def parse(self, token: str) -> SignedToken:
        """
        Split and decode a compact token without checking its MAC.

        :param token: Compact serialization.
        :returns: Parsed token.
        :raises MalformedTokenError: On any structural problem.
        """
        if not isinstance(token, str):
            raise MalformedTokenError("Token must be a string.")
        parts = token.split(".")
        if len(parts) != 3:
            raise MalformedTokenError("Token must have exactly three segments.")
        header_seg, payload_seg, signature_seg = parts
        if not all(_SEGMENT.fullmatch(part) for part in parts):
            raise MalformedTokenError("Token segments must be unpadded base64url.")

        try:
            header: Any = json.loads(base64url_decode(header_seg))
            payload: Any = json.loads(base64url_decode(payload_seg))
            signature = base64url_decode(signature_seg)
        except ValueError as exc:
            raise MalformedTokenError("Token segments are not valid base64url JSON.") from exc

        # The decoder ignores the spare bits of the last character
        if base64url_encode(signature).decode("ascii") != signature_seg:
            raise MalformedTokenError("Token signature is not canonically encoded.")

        if not isinstance(header, dict) or header.get("alg") != ALGORITHM:
            raise MalformedTokenError(f"Token header must declare alg={ALGORITHM}.")
        if not isinstance(payload, dict):
            raise MalformedTokenError("Token payload must be a JSON object.")

        try:
            claims = TokenClaims.from_payload(payload)
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as exc:
            raise MalformedTokenError(f"Token claims are invalid: {exc}") from exc

        return SignedToken(
            raw=token,
            header=header,
            claims=claims,
            signing_input=f"{header_seg}.{payload_seg}".encode(),
            signature=signature,
        )

    def verify(self, signed: SignedToken) -> bool:
        """
        Recompute the MAC over the first two segments and compare it.

        :param signed: Parsed token.
        :returns: ``True`` when the signature matches the shared key.
        """
        return bool(self._hmac.verify(signed.signing_input, self._key, signed.signature))
