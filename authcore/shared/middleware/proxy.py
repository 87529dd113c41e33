# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask, request
from werkzeug.middleware.proxy_fix import ProxyFix

from authcore.shared.config import AppConfig
from authcore.shared.logging import logger


def client_ip() -> str:
    """Peer address of the current request.

    ``X-Forwarded-For`` is only honoured through :func:`configure_proxy`, which
    rewrites ``remote_addr`` for the configured number of trusted hops.
    """
    return request.remote_addr or "unknown"


def configure_proxy(app: Flask, config: AppConfig) -> None:
    hops = config.security.trusted_proxy_hops
    if hops:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops)  # type: ignore[method-assign]
        logger.info(f"proxy: trusting {hops} X-Forwarded-* hop(s)")


__all__ = ["client_ip", "configure_proxy"]
