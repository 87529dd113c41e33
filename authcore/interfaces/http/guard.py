# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import g, jsonify, request

from authcore.application.services.access_guard import AccessGuard
from authcore.domain.users.entities import PublicUser
from authcore.domain.users.exceptions import UnauthenticatedError
from authcore.infrastructure.audit import AuditAction, audit_log
from authcore.shared.logging import bind_user_id, logger
from authcore.shared.middleware.proxy import client_ip

F = TypeVar("F", bound=Callable[..., Any])


def current_user() -> PublicUser:
    """Return the user resolved by :func:`auth_required` for this request."""
    return cast(PublicUser, g.current_user)


def auth_required(guard: AccessGuard) -> Callable[[F], F]:
    def decorator(f: F) -> F:
        @wraps(f)
        def inner(*args, **kwargs):
            try:
                user = guard.authorize_request(request.headers, request.cookies)
            except UnauthenticatedError:
                logger.warning(
                    f"Auth failed on {request.method} {request.path} from {client_ip()}"
                )
                audit_log(
                    AuditAction.ACCESS_DENIED,
                    ip_address=client_ip(),
                    details={"path": request.path},
                    success=False,
                )
                response = jsonify({"error": "unauthorized"})
                response.headers["WWW-Authenticate"] = 'Bearer realm="api"'
                return response, 401

            g.user_id = user.id
            bind_user_id(user.id)
            g.current_user = user.to_public()
            logger.debug(f"Auth OK: user={user.id} {request.method} {request.path}")
            return f(*args, **kwargs)

        return cast(F, inner)

    return decorator


__all__ = ["auth_required", "client_ip", "current_user"]
