# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authcore.shared.errors.base import DomainError


class TokenError(DomainError):
    default_code = "invalid_token"
    default_status = HTTPStatus.UNAUTHORIZED


class InvalidSignatureError(TokenError):
    default_code = "invalid_signature"


class TokenExpiredError(TokenError):
    default_code = "token_expired"


class MalformedTokenError(TokenError):
    default_code = "malformed_token"
