# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from authcore.application.services.access_guard import AccessGuard
from authcore.application.use_cases.users.change_password import \
    ChangePasswordUseCase
from authcore.application.use_cases.users.update_profile import \
    UpdateProfileUseCase
from authcore.domain.users.exceptions import InvalidCredentialsError
from authcore.infrastructure.audit import AuditAction, audit_log
from authcore.interfaces.http.dto.auth import (ChangePasswordRequestDTO,
                                               SuccessDTO,
                                               UpdateProfileRequestDTO)
from authcore.interfaces.http.guard import (auth_required, client_ip,
                                            current_user)
from authcore.shared.errors.validation import raise_invalid_input
from authcore.shared.logging import logger


class ProfileController:
    def __init__(
        self,
        *,
        guard: AccessGuard,
        update_profile_use_case: UpdateProfileUseCase,
        change_password_use_case: ChangePasswordUseCase,
    ) -> None:
        self._guard = guard
        self._update_profile_use_case = update_profile_use_case
        self._change_password_use_case = change_password_use_case

    def show(self) -> tuple[Response, int]:
        return jsonify(current_user().to_dict()), 200

    def update(self) -> tuple[Response, int]:
        try:
            dto = UpdateProfileRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_invalid_input(exc)

        user = self._update_profile_use_case.execute(current_user().id, dto.name)
        audit_log(
            AuditAction.PROFILE_UPDATED,
            user_id=user.id,
            ip_address=client_ip(),
            success=True,
        )
        return jsonify(user.to_public().to_dict()), 200

    def change_password(self) -> tuple[Response, int]:
        try:
            dto = ChangePasswordRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_invalid_input(exc)

        user_id = current_user().id
        try:
            self._change_password_use_case.execute(
                user_id, dto.current_password, dto.new_password
            )
        except InvalidCredentialsError:
            audit_log(
                AuditAction.PASSWORD_CHANGE_FAILED,
                user_id=user_id,
                ip_address=client_ip(),
                success=False,
            )
            raise

        audit_log(
            AuditAction.PASSWORD_CHANGED,
            user_id=user_id,
            ip_address=client_ip(),
            success=True,
        )
        logger.info(f"profile.password: ok user_id={user_id}")
        return jsonify(SuccessDTO().model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        protect = auth_required(self._guard)
        bp = Blueprint("profile", __name__, url_prefix="/profile")
        bp.add_url_rule("", view_func=protect(self.show), methods=["GET"])
        bp.add_url_rule("", endpoint="update", view_func=protect(self.update), methods=["PATCH"])
        bp.add_url_rule(
            "/password", view_func=protect(self.change_password), methods=["POST"]
        )
        return bp
