from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from authcore.application.interfaces import TokenSettings
from authcore.application.services.password_hashing import (
    HashParams, WerkzeugPasswordHasher)
from authcore.application.services.token_codec import JwtTokenCodec
from authcore.application.use_cases.users.change_password import \
    ChangePasswordUseCase
from authcore.application.use_cases.users.login_user import LoginUserUseCase
from authcore.application.use_cases.users.register_user import (
    PASSWORD_MAX_LENGTH, RegisterUserUseCase)
from authcore.application.use_cases.users.update_profile import \
    UpdateProfileUseCase
from authcore.domain.users.exceptions import (DuplicateUsernameError,
                                              InvalidCredentialsError,
                                              UnauthenticatedError)
from authcore.shared.errors import InvalidInputError

from conftest import InMemoryUserRepository


@pytest.fixture()
def register(users: InMemoryUserRepository, hasher: WerkzeugPasswordHasher) -> RegisterUserUseCase:
    return RegisterUserUseCase(users=users, password_hasher=hasher)


@pytest.fixture()
def login(
    users: InMemoryUserRepository,
    hasher: WerkzeugPasswordHasher,
    codec: JwtTokenCodec,
    token_settings: TokenSettings,
) -> LoginUserUseCase:
    return LoginUserUseCase(
        users=users, password_hasher=hasher, codec=codec, settings=token_settings
    )


def test_register_stores_hash_not_password(
    register: RegisterUserUseCase, users: InMemoryUserRepository
) -> None:
    user = register.execute("alice", "Alice", "s3cret")

    stored = users.find_by_username("alice")
    assert stored is not None
    assert stored.id == user.id
    assert stored.name == "Alice"
    assert stored.password_hash != "s3cret"
    assert stored.hash_method == "pbkdf2:sha256:1000"


def test_register_duplicate_username(register: RegisterUserUseCase) -> None:
    register.execute("alice", None, "s3cret")

    with pytest.raises(DuplicateUsernameError) as exc_info:
        register.execute("alice", "Other", "different")

    assert exc_info.value.status == 409


def test_usernames_are_case_sensitive(register: RegisterUserUseCase) -> None:
    first = register.execute("alice", None, "s3cret")
    second = register.execute("Alice", None, "s3cret")

    assert first.id != second.id


@pytest.mark.parametrize(
    ("username", "name", "password", "fields"),
    [
        ("", None, "s3cret", ["username"]),
        (None, None, "s3cret", ["username"]),
        ("  ", None, "s3cret", ["username"]),
        (" alice", None, "s3cret", ["username"]),
        ("a" * 65, None, "s3cret", ["username"]),
        ("alice", None, "", ["password"]),
        ("alice", "n" * 129, "s3cret", ["name"]),
        ("", None, None, ["username", "password"]),
    ],
)
def test_register_rejects_invalid_input(
    register: RegisterUserUseCase,
    users: InMemoryUserRepository,
    username: str | None,
    name: str | None,
    password: str | None,
    fields: list[str],
) -> None:
    with pytest.raises(InvalidInputError) as exc_info:
        register.execute(username, name, password)

    assert exc_info.value.context == {"fields": fields}
    assert users.find_by_username("alice") is None


def test_login_returns_token_for_user(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    codec: JwtTokenCodec,
    token_settings: TokenSettings,
) -> None:
    user = register.execute("alice", "Alice", "s3cret")

    token = login.execute("alice", "s3cret")
    payload = codec.decode(token, token_settings.secret)

    assert payload.subject == str(user.id)
    assert payload.expires_at is not None
    assert payload.expires_at - payload.issued_at == timedelta(seconds=600)


def test_unknown_user_and_wrong_password_fail_identically(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    register.execute("alice", None, "s3cret")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.execute("alice", "wrong")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        login.execute("bob", "s3cret")

    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
    assert wrong_password.value.to_dict() == {"error": "invalid_credentials"}


@pytest.mark.parametrize(("username", "password"), [(None, "x"), ("alice", None), ("", "")])
def test_login_missing_fields_is_invalid_credentials(
    login: LoginUserUseCase, username: str | None, password: str | None
) -> None:
    with pytest.raises(InvalidCredentialsError):
        login.execute(username, password)


def test_login_oversized_password_skips_hashing(
    users: InMemoryUserRepository,
    hasher: WerkzeugPasswordHasher,
    codec: JwtTokenCodec,
    token_settings: TokenSettings,
) -> None:
    spy = MagicMock(wraps=hasher)
    use_case = LoginUserUseCase(
        users=users, password_hasher=spy, codec=codec, settings=token_settings
    )

    with pytest.raises(InvalidCredentialsError):
        use_case.execute("ghost", "x" * (PASSWORD_MAX_LENGTH + 1))

    spy.verify.assert_not_called()


def test_login_unknown_user_still_verifies_a_hash(
    users: InMemoryUserRepository,
    hasher: WerkzeugPasswordHasher,
    codec: JwtTokenCodec,
    token_settings: TokenSettings,
) -> None:
    spy = MagicMock(wraps=hasher)
    use_case = LoginUserUseCase(
        users=users, password_hasher=spy, codec=codec, settings=token_settings
    )
    spy.hash.reset_mock()

    with pytest.raises(InvalidCredentialsError):
        use_case.execute("ghost", "s3cret")

    spy.verify.assert_called_once()
    spy.hash.assert_not_called()
    password, decoy = spy.verify.call_args.args
    assert password == "s3cret"
    assert decoy.startswith("pbkdf2:sha256:1000$")


def test_login_upgrades_outdated_hash(
    users: InMemoryUserRepository,
    hasher: WerkzeugPasswordHasher,
    login: LoginUserUseCase,
) -> None:
    legacy = WerkzeugPasswordHasher(HashParams(method="pbkdf2:sha256:2000"))
    old_hash = legacy.hash("s3cret")
    user = users.create(
        username="alice", name=None, password_hash=old_hash, hash_method="pbkdf2:sha256:2000"
    )

    login.execute("alice", "s3cret")

    upgraded = users.find_by_id(user.id)
    assert upgraded is not None
    assert upgraded.hash_method == "pbkdf2:sha256:1000"
    assert upgraded.password_hash != old_hash
    assert hasher.verify("s3cret", upgraded.password_hash)


def test_change_password(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    users: InMemoryUserRepository,
    hasher: WerkzeugPasswordHasher,
) -> None:
    user = register.execute("alice", None, "s3cret")
    use_case = ChangePasswordUseCase(users=users, password_hasher=hasher)

    use_case.execute(user.id, "s3cret", "n3w-pass")

    with pytest.raises(InvalidCredentialsError):
        login.execute("alice", "s3cret")
    assert login.execute("alice", "n3w-pass")


def test_change_password_requires_current_password(
    register: RegisterUserUseCase,
    users: InMemoryUserRepository,
    hasher: WerkzeugPasswordHasher,
) -> None:
    user = register.execute("alice", None, "s3cret")
    use_case = ChangePasswordUseCase(users=users, password_hasher=hasher)

    with pytest.raises(InvalidCredentialsError):
        use_case.execute(user.id, "wrong", "n3w-pass")
    with pytest.raises(InvalidInputError) as exc_info:
        use_case.execute(user.id, "s3cret", "")
    with pytest.raises(UnauthenticatedError):
        use_case.execute(999, "s3cret", "n3w-pass")

    assert exc_info.value.context == {"fields": ["new_password"]}


def test_update_profile(
    register: RegisterUserUseCase, users: InMemoryUserRepository
) -> None:
    user = register.execute("alice", "Alice", "s3cret")
    use_case = UpdateProfileUseCase(users=users)

    updated = use_case.execute(user.id, "Alice Liddell")

    assert updated.name == "Alice Liddell"
    assert updated.username == "alice"
    with pytest.raises(InvalidInputError):
        use_case.execute(user.id, "n" * 129)
    with pytest.raises(UnauthenticatedError):
        use_case.execute(999, "Nobody")
