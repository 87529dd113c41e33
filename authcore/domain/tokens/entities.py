# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


@dataclass(slots=True, frozen=True)
class TokenPayload:
    """Claims asserted by an access token. Timestamps are whole UTC seconds."""

    subject: str
    issued_at: datetime
    expires_at: datetime | None = None

    @classmethod
    def issue(cls, subject: str, ttl: timedelta | None, *, now: datetime | None = None) -> TokenPayload:
        issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
        expires_at = issued_at + ttl if ttl is not None else None
        return cls(subject=subject, issued_at=issued_at, expires_at=expires_at)
