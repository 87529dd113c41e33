# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import re
import secrets
import time
from collections.abc import Mapping

from flask import Flask, Response, g, request

from authcore.shared.config import AppConfig
from authcore.shared.logging import (clear_correlation_id, get_correlation_id,
                                     logger, set_correlation_id)
from authcore.shared.middleware.proxy import client_ip

REQUEST_ID_HEADER = "X-Request-ID"
# Caller-supplied ids are echoed into logs and the response; anything else is replaced
_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Credential-bearing headers are fingerprinted, never logged verbatim
_CREDENTIAL_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "x-auth-token"})


def _fingerprint(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _safe_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        name: _fingerprint(value) if name.lower() in _CREDENTIAL_HEADERS else value
        for name, value in headers.items()
    }


def request_id_from(value: str | None) -> str:
    if value and _REQUEST_ID_PATTERN.fullmatch(value):
        return value
    return secrets.token_urlsafe(8)


class RequestLogger:
    """Before/after hooks that log each request with its correlation id and duration.

    In verbose mode the start line also lists headers (credentials
    fingerprinted) and the end line names the authenticated user.
    """

    def __init__(self, *, verbose: bool = False) -> None:
        self.verbose = verbose

    def start(self) -> None:
        set_correlation_id(request_id_from(request.headers.get(REQUEST_ID_HEADER)))
        g.request_started = time.perf_counter()
        line = f"--> {request.method} {request.path} from {client_ip()}"
        if self.verbose:
            line += f" headers={_safe_headers(request.headers)} body={request.content_length or 0}B"
        logger.info(line)

    def finish(self, response: Response) -> Response:
        elapsed = time.perf_counter() - g.get("request_started", time.perf_counter())
        line = f"<-- {request.method} {request.path} {response.status_code} in {elapsed * 1000:.1f}ms"
        if self.verbose:
            line += f" user={g.get('user_id')}"
        logger.info(line)
        response.headers.setdefault(REQUEST_ID_HEADER, get_correlation_id())
        return response

    def teardown(self, exc: BaseException | None) -> None:
        if exc is not None:
            log = logger.opt(exception=exc) if self.verbose else logger
            log.error(f"request failed: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()

    def install(self, app: Flask) -> None:
        app.before_request(self.start)
        app.after_request(self.finish)
        app.teardown_request(self.teardown)


def configure_request_logging(app: Flask, config: AppConfig) -> None:
    RequestLogger(verbose=config.debug_logging).install(app)


__all__ = ["RequestLogger", "configure_request_logging", "request_id_from"]
