# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Token-gated access: pull a credential off a request, verify it, resolve the user."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from authcore.domain.tokens.codec import TokenCodec
from authcore.domain.tokens.entities import TokenPayload
from authcore.domain.tokens.exceptions import TokenError
from authcore.domain.users.entities import UserRecord
from authcore.domain.users.exceptions import UnauthenticatedError
from authcore.domain.users.repositories import UserRepository
from authcore.shared.logging import logger


class CredentialExtractor(Protocol):
    def extract(self, headers: Mapping[str, str], cookies: Mapping[str, str]) -> str | None: ...


class TokenVerifier(Protocol):
    def verify(self, token: str) -> TokenPayload: ...


class BearerHeaderExtractor(CredentialExtractor):
    def __init__(self, header: str = "Authorization", scheme: str = "Bearer") -> None:
        self._header = header
        self._scheme = scheme.lower()

    def extract(self, headers: Mapping[str, str], cookies: Mapping[str, str]) -> str | None:
        value = headers.get(self._header, "")
        scheme, _, token = value.strip().partition(" ")
        if scheme.lower() != self._scheme:
            return None
        return token.strip() or None


class CookieExtractor(CredentialExtractor):
    def __init__(self, name: str = "auth_token") -> None:
        self._name = name

    def extract(self, headers: Mapping[str, str], cookies: Mapping[str, str]) -> str | None:
        return cookies.get(self._name) or None


class JwtVerifier(TokenVerifier):
    def __init__(self, codec: TokenCodec, secret: str) -> None:
        self._codec = codec
        self._secret = secret

    def verify(self, token: str) -> TokenPayload:
        return self._codec.decode(token, self._secret)


class AccessGuard:
    def __init__(
        self,
        *,
        extractors: Sequence[CredentialExtractor],
        verifier: TokenVerifier,
        users: UserRepository,
    ) -> None:
        self._extractors = tuple(extractors)
        self._verifier = verifier
        self._users = users

    def extract(self, headers: Mapping[str, str], cookies: Mapping[str, str]) -> str | None:
        for extractor in self._extractors:
            token = extractor.extract(headers, cookies)
            if token:
                return token
        return None

    def authorize_request(
        self, headers: Mapping[str, str], cookies: Mapping[str, str] | None = None
    ) -> UserRecord:
        return self.authorize(self.extract(headers, cookies or {}))

    def authorize(self, token: str | None) -> UserRecord:
        if not token:
            raise UnauthenticatedError()

        try:
            payload = self._verifier.verify(token)
        except TokenError as exc:
            logger.info(f"access guard: token rejected ({exc.code})")
            raise UnauthenticatedError() from exc

        try:
            user_id = int(payload.subject)
        except ValueError as exc:
            logger.warning("access guard: token subject is not a user id")
            raise UnauthenticatedError() from exc

        user = self._users.find_by_id(user_id)
        if user is None:
            logger.info(f"access guard: subject user={user_id} no longer exists")
            raise UnauthenticatedError()
        return user
