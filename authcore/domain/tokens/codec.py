# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import TokenPayload


class TokenCodec(Protocol):
    def encode(self, payload: TokenPayload, secret: str) -> str: ...
    def decode(self, token: str, secret: str) -> TokenPayload: ...
