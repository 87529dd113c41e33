# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .interfaces import TokenSettings
from .use_cases.users.change_password import ChangePasswordUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase
from .use_cases.users.update_profile import UpdateProfileUseCase

__all__ = [
    "ChangePasswordUseCase",
    "LoginUserUseCase",
    "RegisterUserUseCase",
    "TokenSettings",
    "UpdateProfileUseCase",
]
