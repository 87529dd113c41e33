from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path
from threading import Lock

import pytest
from flask import Flask
from flask.testing import FlaskClient

from authcore.app import create_app
from authcore.application.interfaces import TokenSettings
from authcore.application.services.password_hashing import (
    HashParams, WerkzeugPasswordHasher)
from authcore.application.services.token_codec import JwtTokenCodec
from authcore.domain.users.entities import UserRecord
from authcore.domain.users.exceptions import DuplicateUsernameError
from authcore.domain.users.repositories import UserRepository
from authcore.shared.config import (AppConfig, AuthConfig, DatabaseConfig,
                                    SecurityConfig)

TEST_SECRET = "test-signing-secret-0123456789abcdef0123456789"
# Cheap iteration count keeps the suite fast; production uses scrypt
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._by_id: dict[int, UserRecord] = {}
        self._by_username: dict[str, int] = {}
        self._seq = 1
        self._lock = Lock()

    def create(
        self,
        *,
        username: str,
        name: str | None,
        password_hash: str,
        hash_method: str,
    ) -> UserRecord:
        with self._lock:
            if username in self._by_username:
                raise DuplicateUsernameError()
            user = UserRecord(
                id=self._seq,
                username=username,
                name=name,
                password_hash=password_hash,
                hash_method=hash_method,
                created_at=datetime.now(UTC),
            )
            self._seq += 1
            self._by_id[user.id] = user
            self._by_username[username] = user.id
            return user

    def find_by_username(self, username: str) -> UserRecord | None:
        user_id = self._by_username.get(username)
        return self._by_id.get(user_id) if user_id is not None else None

    def find_by_id(self, user_id: int) -> UserRecord | None:
        return self._by_id.get(user_id)

    def update_name(self, user_id: int, name: str | None) -> UserRecord | None:
        return self._replace(user_id, name=name)

    def update_password(
        self, user_id: int, *, password_hash: str, hash_method: str
    ) -> UserRecord | None:
        return self._replace(user_id, password_hash=password_hash, hash_method=hash_method)

    def delete(self, user_id: int) -> None:
        user = self._by_id.pop(user_id)
        self._by_username.pop(user.username)

    def _replace(self, user_id: int, **changes: object) -> UserRecord | None:
        user = self._by_id.get(user_id)
        if user is None:
            return None
        fields = {
            "id": user.id,
            "username": user.username,
            "name": user.name,
            "password_hash": user.password_hash,
            "hash_method": user.hash_method,
            "created_at": user.created_at,
        }
        fields.update(changes)
        updated = UserRecord(**fields)  # type: ignore[arg-type]
        self._by_id[user_id] = updated
        return updated


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> WerkzeugPasswordHasher:
    return WerkzeugPasswordHasher(HashParams(method=FAST_HASH_METHOD))


@pytest.fixture()
def codec() -> JwtTokenCodec:
    return JwtTokenCodec()


@pytest.fixture()
def token_settings() -> TokenSettings:
    return TokenSettings.from_config(AuthConfig(jwt_secret=TEST_SECRET, token_ttl_seconds=600))


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        app_env="test",
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'auth.db'}"),
        auth=AuthConfig(
            jwt_secret=TEST_SECRET,
            token_ttl_seconds=600,
            password_hash_method=FAST_HASH_METHOD,
        ),
        security=SecurityConfig(enable_rate_limit=False),
    )


@pytest.fixture()
def app(app_config: AppConfig) -> Iterator[Flask]:
    flask_app = create_app(app_config)
    flask_app.config.update(TESTING=True)
    yield flask_app
    flask_app.extensions["authcore"].engine.dispose()


@pytest.fixture()
def client(app: Flask) -> Iterator[FlaskClient]:
    with app.test_client() as test_client:
        yield test_client
