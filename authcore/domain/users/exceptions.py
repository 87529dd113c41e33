# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authcore.shared.errors.base import DomainError


class DuplicateUsernameError(DomainError):
    default_code = "username_taken"
    default_status = HTTPStatus.CONFLICT


class InvalidCredentialsError(DomainError):
    """Login failed; deliberately silent about which credential was wrong."""

    default_code = "invalid_credentials"
    default_status = HTTPStatus.UNAUTHORIZED


class UnauthenticatedError(DomainError):
    default_code = "unauthorized"
    default_status = HTTPStatus.UNAUTHORIZED
