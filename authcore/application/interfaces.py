# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from authcore.shared.config import AuthConfig


@dataclass(slots=True, frozen=True)
class TokenSettings:
    secret: str = field(repr=False)
    ttl: timedelta | None

    @classmethod
    def from_config(cls, config: AuthConfig) -> TokenSettings:
        return cls(secret=config.secret(), ttl=timedelta(seconds=config.token_ttl_seconds))
