# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import UserRecord


class UserRepository(Protocol):
    def create(
        self,
        *,
        username: str,
        name: str | None,
        password_hash: str,
        hash_method: str,
    ) -> UserRecord: ...
    def find_by_username(self, username: str) -> UserRecord | None: ...
    def find_by_id(self, user_id: int) -> UserRecord | None: ...
    def update_name(self, user_id: int, name: str | None) -> UserRecord | None: ...
    def update_password(
        self, user_id: int, *, password_hash: str, hash_method: str
    ) -> UserRecord | None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
    def method_of(self, hashed: str) -> str: ...
    def needs_rehash(self, hashed: str) -> bool: ...
