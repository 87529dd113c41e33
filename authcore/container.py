# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from authcore.application.interfaces import TokenSettings
from authcore.application.services.access_guard import (AccessGuard,
                                                        BearerHeaderExtractor,
                                                        CookieExtractor,
                                                        CredentialExtractor,
                                                        JwtVerifier)
from authcore.application.services.password_hashing import (
    HashParams, WerkzeugPasswordHasher)
from authcore.application.services.token_codec import JwtTokenCodec
from authcore.application.use_cases.users.change_password import \
    ChangePasswordUseCase
from authcore.application.use_cases.users.login_user import LoginUserUseCase
from authcore.application.use_cases.users.register_user import \
    RegisterUserUseCase
from authcore.application.use_cases.users.update_profile import \
    UpdateProfileUseCase
from authcore.infrastructure.db import create_db_engine, create_session_factory
from authcore.infrastructure.repositories.users.sqlalchemy_user_repository import \
    SqlAlchemyUserRepository
from authcore.interfaces.http.controllers.auth_controller import AuthController
from authcore.interfaces.http.controllers.misc_controller import MiscController
from authcore.interfaces.http.controllers.profile_controller import \
    ProfileController
from authcore.shared.config import AppConfig
from authcore.shared.errors import ConfigurationError


class Container:
    def __init__(self, config: AppConfig) -> None:
        if not config.auth.secret():
            raise ConfigurationError(
                "JWT_SECRET is not set; refusing to issue tokens without a signing secret"
            )
        self.config = config

    @cached_property
    def engine(self) -> Engine:
        return create_db_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return create_session_factory(self.engine)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        auth = self.config.auth
        return WerkzeugPasswordHasher(
            HashParams(method=auth.password_hash_method, salt_length=auth.password_salt_length)
        )

    @cached_property
    def token_codec(self) -> JwtTokenCodec:
        auth = self.config.auth
        return JwtTokenCodec(auth.jwt_algorithm, leeway=auth.token_leeway_seconds)

    @cached_property
    def token_settings(self) -> TokenSettings:
        return TokenSettings.from_config(self.config.auth)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            codec=self.token_codec,
            settings=self.token_settings,
        )

    @cached_property
    def update_profile_use_case(self) -> UpdateProfileUseCase:
        return UpdateProfileUseCase(users=self.user_repository)

    @cached_property
    def change_password_use_case(self) -> ChangePasswordUseCase:
        return ChangePasswordUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def access_guard(self) -> AccessGuard:
        extractors: list[CredentialExtractor] = [BearerHeaderExtractor()]
        if self.config.auth.cookie_enabled:
            extractors.append(CookieExtractor(self.config.auth.cookie_name))
        return AccessGuard(
            extractors=extractors,
            verifier=JwtVerifier(self.token_codec, self.token_settings.secret),
            users=self.user_repository,
        )

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            config=self.config,
        )

    @cached_property
    def profile_controller(self) -> ProfileController:
        return ProfileController(
            guard=self.access_guard,
            update_profile_use_case=self.update_profile_use_case,
            change_password_use_case=self.change_password_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)
