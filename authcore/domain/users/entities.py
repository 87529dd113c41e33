# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(slots=True, frozen=True)
class PublicUser:
    """Client-facing view of a user; carries no credential material."""

    id: int
    username: str
    name: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username, "name": self.name}


@dataclass(slots=True, frozen=True)
class UserRecord:

    id: int
    username: str
    name: str | None
    password_hash: str = field(repr=False)
    hash_method: str
    created_at: datetime

    def to_public(self) -> PublicUser:
        return PublicUser(id=self.id, username=self.username, name=self.name)
