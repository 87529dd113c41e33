# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authcore.domain.users.entities import UserRecord
from authcore.domain.users.repositories import PasswordHasher, UserRepository
from authcore.shared.errors import InvalidInputError
from authcore.shared.logging import logger

USERNAME_MAX_LENGTH = 64
NAME_MAX_LENGTH = 128
PASSWORD_MAX_LENGTH = 1024


def validate_username(username: str | None) -> list[str]:
    if not username or not username.strip():
        return ["username"]
    if username != username.strip() or len(username) > USERNAME_MAX_LENGTH:
        return ["username"]
    return []


def validate_password(password: str | None, field: str = "password") -> list[str]:
    if not password or len(password) > PASSWORD_MAX_LENGTH:
        return [field]
    return []


def validate_name(name: str | None) -> list[str]:
    if name is not None and len(name) > NAME_MAX_LENGTH:
        return ["name"]
    return []


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, username: str | None, name: str | None, password: str | None) -> UserRecord:
        invalid = validate_username(username) + validate_password(password) + validate_name(name)
        if invalid:
            raise InvalidInputError(context={"fields": invalid})
        assert username is not None and password is not None

        hashed = self._password_hasher.hash(password)
        # Uniqueness is enforced by the store; a taken username raises DuplicateUsernameError here
        user = self._users.create(
            username=username,
            name=name,
            password_hash=hashed,
            hash_method=self._password_hasher.method_of(hashed),
        )
        logger.info(f"register: created user_id={user.id}")
        return user
