# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from authcore.application.use_cases.users.login_user import LoginUserUseCase
from authcore.application.use_cases.users.register_user import \
    RegisterUserUseCase
from authcore.domain.users.exceptions import (DuplicateUsernameError,
                                              InvalidCredentialsError)
from authcore.infrastructure.audit import AuditAction, audit_log
from authcore.interfaces.http.dto.auth import (LoginRequestDTO,
                                               SignupRequestDTO, SuccessDTO,
                                               TokenDTO)
from authcore.interfaces.http.guard import client_ip
from authcore.shared.config import AppConfig
from authcore.shared.errors.validation import raise_invalid_input
from authcore.shared.logging import logger
from authcore.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        config: AppConfig,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._config = config

    def signup(self) -> tuple[Response, int]:
        try:
            dto = SignupRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_invalid_input(exc)

        try:
            user = self._register_use_case.execute(dto.username, dto.name, dto.password)
        except DuplicateUsernameError:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=client_ip(),
                details={"username": dto.username, "reason": "username_taken"},
                success=False,
            )
            raise

        audit_log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=client_ip(),
            details={"username": dto.username},
            success=True,
        )
        logger.info(f"auth.signup: ok user_id={user.id}")
        return jsonify(SuccessDTO().model_dump()), 200

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise InvalidCredentialsError() from exc

        ip_address = client_ip()

        try:
            token = self._login_use_case.execute(dto.username, dto.password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"username": dto.username},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            ip_address=ip_address,
            details={"username": dto.username},
            success=True,
        )

        response = jsonify(TokenDTO(token=token).model_dump())
        auth = self._config.auth
        if auth.cookie_enabled:
            response.set_cookie(
                auth.cookie_name,
                token,
                httponly=True,
                samesite=self._config.security.cookie_samesite,
                secure=self._config.security.cookie_secure,
                max_age=auth.token_ttl_seconds,
            )
        logger.info("auth.login: ok")
        return response, 200

    def as_blueprint(self) -> Blueprint:
        security = self._config.security
        bp = Blueprint("auth", __name__)
        bp.add_url_rule(
            "/signup",
            view_func=rate_limit(security, limit=5)(self.signup),
            methods=["POST"],
        )
        bp.add_url_rule(
            "/login",
            view_func=rate_limit(security)(self.login),
            methods=["POST"],
        )
        return bp
