# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, ClassVar


@dataclass(slots=True)
class AppError(Exception):
    """Error with a stable machine-readable ``code`` and the HTTP status it maps to.

    ``context`` is echoed to clients by :meth:`to_dict`, so it must never hold
    credentials or submitted values.
    """

    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class _ClassifiedError(AppError):
    # Subclasses pick their code/status by overriding these
    default_code: ClassVar[str] = "error"
    default_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code or self.default_code,
            status=status or self.default_status,
            context=context,
        )


class DomainError(_ClassifiedError):
    default_code = "domain_error"


class InvalidInputError(_ClassifiedError):
    default_code = "invalid_input"


class InfrastructureError(_ClassifiedError):
    default_code = "internal_error"
    default_status = HTTPStatus.INTERNAL_SERVER_ERROR


class StorageError(InfrastructureError):
    """The credential store failed for a reason other than a uniqueness conflict."""


class PasswordHashingError(InfrastructureError):
    pass


class ConfigurationError(RuntimeError):
    """Raised at startup when the application cannot be configured safely."""
