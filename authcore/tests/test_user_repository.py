from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from threading import Barrier, Thread

import pytest
from sqlalchemy.engine import Engine

from authcore.domain.users.exceptions import DuplicateUsernameError
from authcore.infrastructure.db import (create_db_engine,
                                        create_session_factory, init_db)
from authcore.infrastructure.repositories.users.sqlalchemy_user_repository import \
    SqlAlchemyUserRepository
from authcore.shared.config import DatabaseConfig

HASH = "pbkdf2:sha256:1000$salt$digest"


@pytest.fixture()
def engine(tmp_path: Path) -> Iterator[Engine]:
    db_engine = create_db_engine(DatabaseConfig(url=f"sqlite:///{tmp_path / 'users.db'}"))
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture()
def repo(engine: Engine) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(create_session_factory(engine))


def _create(repo: SqlAlchemyUserRepository, username: str, name: str | None = None):
    return repo.create(
        username=username, name=name, password_hash=HASH, hash_method="pbkdf2:sha256:1000"
    )


def test_create_and_find(repo: SqlAlchemyUserRepository) -> None:
    created = _create(repo, "alice", "Alice")

    by_name = repo.find_by_username("alice")
    by_id = repo.find_by_id(created.id)

    assert by_name == created
    assert by_id == created
    assert created.password_hash == HASH
    assert created.created_at.tzinfo is not None


def test_find_missing_returns_none(repo: SqlAlchemyUserRepository) -> None:
    assert repo.find_by_username("nobody") is None
    assert repo.find_by_id(12345) is None


def test_duplicate_username_is_rejected(repo: SqlAlchemyUserRepository) -> None:
    _create(repo, "alice")

    with pytest.raises(DuplicateUsernameError):
        _create(repo, "alice")

    # The failed insert must not poison later writes
    assert _create(repo, "bob").username == "bob"


def test_lookup_is_case_sensitive(repo: SqlAlchemyUserRepository) -> None:
    lower = _create(repo, "alice")
    upper = _create(repo, "Alice")

    assert lower.id != upper.id
    assert repo.find_by_username("ALICE") is None


def test_update_name_and_password(repo: SqlAlchemyUserRepository) -> None:
    user = _create(repo, "alice", "Alice")

    renamed = repo.update_name(user.id, "Alice Liddell")
    rehashed = repo.update_password(user.id, password_hash="scrypt:1:2:3$s$d", hash_method="scrypt:1:2:3")

    assert renamed is not None and renamed.name == "Alice Liddell"
    assert rehashed is not None
    assert rehashed.password_hash == "scrypt:1:2:3$s$d"
    assert rehashed.hash_method == "scrypt:1:2:3"
    assert repo.update_name(999, "x") is None
    assert repo.update_password(999, password_hash=HASH, hash_method="x") is None


def test_concurrent_registrations_admit_exactly_one(repo: SqlAlchemyUserRepository) -> None:
    workers = 8
    barrier = Barrier(workers)
    outcomes: list[str] = []

    def register() -> None:
        barrier.wait()
        try:
            _create(repo, "racer")
        except DuplicateUsernameError:
            outcomes.append("duplicate")
        else:
            outcomes.append("created")

    threads = [Thread(target=register) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["created"] + ["duplicate"] * (workers - 1)
    assert repo.find_by_username("racer") is not None
