"""Signed access tokens (JWS compact serialisation) backed by PyJWT."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import jwt

from authcore.domain.tokens.codec import TokenCodec
from authcore.domain.tokens.entities import TokenPayload
from authcore.domain.tokens.exceptions import (InvalidSignatureError,
                                               MalformedTokenError,
                                               TokenExpiredError)

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


class JwtTokenCodec(TokenCodec):
    """Encode/decode :class:`TokenPayload` as an HMAC-signed JWT.

    The algorithm is pinned: a token whose header names any other algorithm
    (``none`` included) is rejected as an invalid signature before its claims
    are looked at.
    """

    def __init__(self, algorithm: str = "HS256", *, leeway: int = 0) -> None:
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self.algorithm = algorithm
        self.leeway = leeway

    def encode(self, payload: TokenPayload, secret: str) -> str:
        claims: dict[str, Any] = {
            "sub": payload.subject,
            "iat": int(payload.issued_at.timestamp()),
        }
        if payload.expires_at is not None:
            claims["exp"] = int(payload.expires_at.timestamp())
        return jwt.encode(claims, secret, algorithm=self.algorithm)

    def decode(self, token: str, secret: str) -> TokenPayload:
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                leeway=self.leeway,
                options={"require": ["sub", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            raise InvalidSignatureError() from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError(context={"reason": type(exc).__name__}) from exc

        return self._to_payload(claims)

    @staticmethod
    def _to_payload(claims: dict[str, Any]) -> TokenPayload:
        subject = claims["sub"]
        issued_at = claims["iat"]
        expires_at = claims.get("exp")
        if not isinstance(subject, str) or not subject:
            raise MalformedTokenError(context={"reason": "sub"})
        if not isinstance(issued_at, int | float) or (
            expires_at is not None and not isinstance(expires_at, int | float)
        ):
            raise MalformedTokenError(context={"reason": "timestamps"})
        return TokenPayload(
            subject=subject,
            issued_at=datetime.fromtimestamp(int(issued_at), UTC),
            expires_at=(
                datetime.fromtimestamp(int(expires_at), UTC) if expires_at is not None else None
            ),
        )
