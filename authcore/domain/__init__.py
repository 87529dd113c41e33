# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .tokens.codec import TokenCodec
from .tokens.entities import TokenPayload
from .tokens.exceptions import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenError,
    TokenExpiredError,
)
from .users.entities import PublicUser, UserRecord
from .users.exceptions import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    UnauthenticatedError,
)
from .users.repositories import PasswordHasher, UserRepository

__all__ = [
    "DuplicateUsernameError",
    "InvalidCredentialsError",
    "InvalidSignatureError",
    "MalformedTokenError",
    "PasswordHasher",
    "PublicUser",
    "TokenCodec",
    "TokenError",
    "TokenExpiredError",
    "TokenPayload",
    "UnauthenticatedError",
    "UserRecord",
    "UserRepository",
]
