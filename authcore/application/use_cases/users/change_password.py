# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authcore.domain.users.exceptions import (InvalidCredentialsError,
                                              UnauthenticatedError)
from authcore.domain.users.repositories import PasswordHasher, UserRepository
from authcore.shared.errors import InvalidInputError
from authcore.shared.logging import logger

from .register_user import validate_password


class ChangePasswordUseCase:
    """Replace a user's password after re-checking the current one.

    Tokens issued before the change stay valid until they expire; there is no
    server-side revocation list.
    """

    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, user_id: int, current_password: str | None, new_password: str | None) -> None:
        invalid = validate_password(new_password, "new_password")
        if invalid:
            raise InvalidInputError(context={"fields": invalid})
        assert new_password is not None

        user = self._users.find_by_id(user_id)
        if user is None:
            raise UnauthenticatedError()
        if not current_password or not self._password_hasher.verify(
            current_password, user.password_hash
        ):
            raise InvalidCredentialsError()

        hashed = self._password_hasher.hash(new_password)
        self._users.update_password(
            user_id,
            password_hash=hashed,
            hash_method=self._password_hasher.method_of(hashed),
        )
        logger.info(f"password: changed for user_id={user_id}")
