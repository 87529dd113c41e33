# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets

from authcore.application.interfaces import TokenSettings
from authcore.application.use_cases.users.register_user import PASSWORD_MAX_LENGTH
from authcore.domain.tokens.codec import TokenCodec
from authcore.domain.tokens.entities import TokenPayload
from authcore.domain.users.entities import UserRecord
from authcore.domain.users.exceptions import InvalidCredentialsError
from authcore.domain.users.repositories import PasswordHasher, UserRepository
from authcore.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        codec: TokenCodec,
        settings: TokenSettings,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._codec = codec
        self._settings = settings
        # Built eagerly: an unknown-user login must cost one verify, never hash plus verify
        self._decoy_hash = password_hasher.hash(secrets.token_urlsafe(16))

    def execute(self, username: str | None, password: str | None) -> str:
        if not username or not password or len(password) > PASSWORD_MAX_LENGTH:
            raise InvalidCredentialsError()

        user = self._users.find_by_username(username)
        if user is None:
            # Burn the same hashing work as a real comparison so timing does not reveal the miss
            self._password_hasher.verify(password, self._decoy_hash)
            logger.info("login: rejected (credentials)")
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, user.password_hash):
            logger.info("login: rejected (credentials)")
            raise InvalidCredentialsError()

        if self._password_hasher.needs_rehash(user.password_hash):
            self._upgrade_hash(user, password)

        payload = TokenPayload.issue(str(user.id), self._settings.ttl)
        logger.info(f"login: ok user_id={user.id}")
        return self._codec.encode(payload, self._settings.secret)

    def _upgrade_hash(self, user: UserRecord, password: str) -> None:
        hashed = self._password_hasher.hash(password)
        self._users.update_password(
            user.id,
            password_hash=hashed,
            hash_method=self._password_hasher.method_of(hashed),
        )
        logger.info(f"login: rehashed password for user_id={user.id} from {user.hash_method}")
