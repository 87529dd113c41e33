# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from authcore.domain.users.entities import UserRecord
from authcore.domain.users.exceptions import DuplicateUsernameError
from authcore.domain.users.repositories import UserRepository
from authcore.infrastructure.db.models import User
from authcore.infrastructure.unit_of_work import unit_of_work_scope
from authcore.shared.errors import StorageError
from authcore.shared.logging import logger


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_domain(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        username=row.username,
        name=row.name,
        password_hash=row.password_hash,
        hash_method=row.hash_method,
        created_at=_aware(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _scope(self, operation: str) -> Iterator[Session]:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                yield session
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            logger.opt(exception=exc).error(f"users.{operation}: storage failure")
            raise StorageError() from exc

    def create(
        self,
        *,
        username: str,
        name: str | None,
        password_hash: str,
        hash_method: str,
    ) -> UserRecord:
        try:
            with self._scope("create") as session:
                row = User(
                    username=username,
                    name=name,
                    password_hash=password_hash,
                    hash_method=hash_method,
                )
                session.add(row)
                session.flush()
                record = _to_domain(row)
        except IntegrityError as exc:
            logger.info("users.create: username already taken")
            raise DuplicateUsernameError() from exc
        return record

    def find_by_username(self, username: str) -> UserRecord | None:
        with self._scope("find_by_username") as session:
            row = session.query(User).filter(User.username == username).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: int) -> UserRecord | None:
        with self._scope("find_by_id") as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def update_name(self, user_id: int, name: str | None) -> UserRecord | None:
        with self._scope("update_name") as session:
            row = session.get(User, user_id)
            if not row:
                return None
            row.name = name
            session.flush()
            return _to_domain(row)

    def update_password(
        self, user_id: int, *, password_hash: str, hash_method: str
    ) -> UserRecord | None:
        with self._scope("update_password") as session:
            row = session.get(User, user_id)
            if not row:
                return None
            row.password_hash = password_hash
            row.hash_method = hash_method
            session.flush()
            return _to_domain(row)
