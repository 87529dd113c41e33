# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authcore.domain.users.entities import UserRecord
from authcore.domain.users.exceptions import UnauthenticatedError
from authcore.domain.users.repositories import UserRepository
from authcore.shared.errors import InvalidInputError

from .register_user import validate_name


class UpdateProfileUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int, name: str | None) -> UserRecord:
        invalid = validate_name(name)
        if invalid:
            raise InvalidInputError(context={"fields": invalid})
        user = self._users.update_name(user_id, name)
        if user is None:
            raise UnauthenticatedError()
        return user
