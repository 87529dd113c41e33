# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Security audit trail.

Events are written as single ``AUDIT:`` log lines rather than stored, so the
trail follows whatever sinks :func:`authcore.shared.logging.setup_logging`
configured. Failures are emitted at WARNING so they survive an INFO filter.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from authcore.shared.logging import logger

REDACTED = "***REDACTED***"

# Substrings; "new_password" and "api_key" are caught by "password" and "key"
_SENSITIVE_KEY_PARTS = ("password", "hash", "token", "secret", "key", "authorization")


class AuditAction(str, Enum):
    REGISTER = "register"
    REGISTER_FAILED = "register_failed"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    ACCESS_DENIED = "access_denied"
    PROFILE_UPDATED = "profile_updated"
    PASSWORD_CHANGED = "password_changed"
    PASSWORD_CHANGE_FAILED = "password_change_failed"


@dataclass(slots=True, frozen=True)
class AuditEvent:
    action: AuditAction
    success: bool = True
    user_id: int | None = None
    ip_address: str | None = None
    details: Mapping[str, Any] = field(default_factory=dict)

    def render(self) -> str:
        parts = [
            f"AUDIT: {self.action.value}",
            f"user_id={self.user_id}",
            f"ip={self.ip_address}",
            f"success={self.success}",
        ]
        if self.details:
            parts.append(f"details={_sanitize_details(self.details)}")
        return " | ".join(parts)


def _sanitize_details(details: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: REDACTED if any(part in key.lower() for part in _SENSITIVE_KEY_PARTS) else value
        for key, value in details.items()
    }


class AuditLogger:
    def record(self, event: AuditEvent) -> None:
        emit = logger.info if event.success else logger.warning
        emit(event.render())

    def log(
        self,
        action: AuditAction,
        user_id: int | None = None,
        ip_address: str | None = None,
        details: Mapping[str, Any] | None = None,
        success: bool = True,
    ) -> None:
        self.record(
            AuditEvent(
                action=action,
                success=success,
                user_id=user_id,
                ip_address=ip_address,
                details=details or {},
            )
        )


audit = AuditLogger()


def audit_log(
    action: AuditAction,
    user_id: int | None = None,
    ip_address: str | None = None,
    details: Mapping[str, Any] | None = None,
    success: bool = True,
) -> None:
    audit.log(action, user_id, ip_address, details, success)


__all__ = [
    "AuditAction",
    "AuditEvent",
    "AuditLogger",
    "audit",
    "audit_log",
]
