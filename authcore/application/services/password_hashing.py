"""Password hashing strategies."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

from werkzeug.security import check_password_hash, generate_password_hash

from authcore.domain.users.repositories import PasswordHasher
from authcore.shared.errors import PasswordHashingError
from authcore.shared.logging import logger


@dataclass(slots=True, frozen=True)
class HashParams:
    method: str = "scrypt"
    salt_length: int = 16


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted scrypt/pbkdf2 hashes in werkzeug's ``method$salt$digest`` format.

    ``check_password_hash`` compares digests with ``hmac.compare_digest``, so
    verification time does not depend on where a mismatch occurs.
    """

    def __init__(self, params: HashParams | None = None) -> None:
        self._params = params or HashParams()

    def hash(self, password: str) -> str:
        try:
            return str(
                generate_password_hash(
                    password,
                    method=self._params.method,
                    salt_length=self._params.salt_length,
                )
            )
        except ValueError as exc:
            logger.error(f"password hashing failed for method={self._params.method}: {exc}")
            raise PasswordHashingError() from exc

    def verify(self, password: str, hashed: str) -> bool:
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError):
            logger.warning("password verify: stored hash is malformed or uses an unknown method")
            return False

    def method_of(self, hashed: str) -> str:
        return hashed.split("$", 1)[0]

    def needs_rehash(self, hashed: str) -> bool:
        return self.method_of(hashed) != self._configured_method

    @cached_property
    def _configured_method(self) -> str:
        # werkzeug expands defaults (e.g. "scrypt" -> "scrypt:32768:8:1"), so read them back
        return self.method_of(self.hash(""))
