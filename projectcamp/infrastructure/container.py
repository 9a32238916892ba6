# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from projectcamp.application.services.password_hashing import WerkzeugPasswordHasher
from projectcamp.application.services.token_issuer import Clock, JwtTokenIssuer
from projectcamp.application.use_cases.users.change_password import ChangePasswordUseCase
from projectcamp.application.use_cases.users.forgot_password import ForgotPasswordUseCase
from projectcamp.application.use_cases.users.login_user import LoginUserUseCase
from projectcamp.application.use_cases.users.logout_user import LogoutUserUseCase
from projectcamp.application.use_cases.users.refresh_access_token import (
    RefreshAccessTokenUseCase,
)
from projectcamp.application.use_cases.users.register_user import RegisterUserUseCase
from projectcamp.application.use_cases.users.resend_email_verification import (
    ResendEmailVerificationUseCase,
)
from projectcamp.application.use_cases.users.reset_password import ResetPasswordUseCase
from projectcamp.application.use_cases.users.verify_email import VerifyEmailUseCase
from projectcamp.domain.users.repositories import VerificationMailer
from projectcamp.infrastructure.db import build_engine, build_session_factory, init_db
from projectcamp.infrastructure.db.session import SessionFactory
from projectcamp.infrastructure.mailer import LoggingMailer
from projectcamp.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyTemporaryTokenRepository,
    SqlAlchemyUserRepository,
)
from projectcamp.interfaces.http.auth import BearerAuthenticator
from projectcamp.interfaces.http.controllers.auth_controller import AuthController
from projectcamp.shared.config import AppConfig
from projectcamp.shared.middleware.lifecycle import RequestLifecycle
from projectcamp.utils.dates import utcnow


class Container:
    def __init__(
        self,
        config: AppConfig,
        *,
        session_factory: SessionFactory | None = None,
        mailer: VerificationMailer | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._config = config
        self._session_factory_override = session_factory
        self._mailer_override = mailer
        self._clock = clock

    @cached_property
    def session_factory(self) -> SessionFactory:
        if self._session_factory_override is not None:
            return self._session_factory_override
        engine = build_engine(self._config.database)
        init_db(engine)
        return build_session_factory(engine)

    @cached_property
    def token_issuer(self) -> JwtTokenIssuer:
        return JwtTokenIssuer(self._config.tokens, clock=self._clock)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(rounds=self._config.security.password_hash_rounds)

    @cached_property
    def mailer(self) -> VerificationMailer:
        return self._mailer_override or LoggingMailer(self._config.server_url)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def temporary_token_repository(self) -> SqlAlchemyTemporaryTokenRepository:
        return SqlAlchemyTemporaryTokenRepository(self.session_factory)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            temporary_tokens=self.temporary_token_repository,
            token_issuer=self.token_issuer,
            password_hasher=self.password_hasher,
            mailer=self.mailer,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            credentials=self.user_repository,
            refresh_tokens=self.user_repository,
            token_issuer=self.token_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(refresh_tokens=self.user_repository)

    @cached_property
    def refresh_access_token_use_case(self) -> RefreshAccessTokenUseCase:
        return RefreshAccessTokenUseCase(
            users=self.user_repository,
            refresh_tokens=self.user_repository,
            token_issuer=self.token_issuer,
        )

    @cached_property
    def verify_email_use_case(self) -> VerifyEmailUseCase:
        return VerifyEmailUseCase(
            users=self.user_repository,
            temporary_tokens=self.temporary_token_repository,
            token_issuer=self.token_issuer,
        )

    @cached_property
    def resend_email_verification_use_case(self) -> ResendEmailVerificationUseCase:
        return ResendEmailVerificationUseCase(
            users=self.user_repository,
            temporary_tokens=self.temporary_token_repository,
            token_issuer=self.token_issuer,
            mailer=self.mailer,
        )

    @cached_property
    def forgot_password_use_case(self) -> ForgotPasswordUseCase:
        return ForgotPasswordUseCase(
            users=self.user_repository,
            temporary_tokens=self.temporary_token_repository,
            token_issuer=self.token_issuer,
            mailer=self.mailer,
        )

    @cached_property
    def reset_password_use_case(self) -> ResetPasswordUseCase:
        return ResetPasswordUseCase(
            credentials=self.user_repository,
            refresh_tokens=self.user_repository,
            temporary_tokens=self.temporary_token_repository,
            token_issuer=self.token_issuer,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def change_password_use_case(self) -> ChangePasswordUseCase:
        return ChangePasswordUseCase(
            credentials=self.user_repository, password_hasher=self.password_hasher
        )

    @cached_property
    def lifecycle(self) -> RequestLifecycle:
        return RequestLifecycle(debug=self._config.debug_logging)

    @cached_property
    def authenticator(self) -> BearerAuthenticator:
        return BearerAuthenticator(token_issuer=self.token_issuer, users=self.user_repository)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            lifecycle=self.lifecycle,
            authenticator=self.authenticator,
            cookie_secure=self._config.security.cookie_secure,
            cookie_samesite=self._config.security.cookie_samesite,
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            refresh_use_case=self.refresh_access_token_use_case,
            verify_email_use_case=self.verify_email_use_case,
            resend_verification_use_case=self.resend_email_verification_use_case,
            forgot_password_use_case=self.forgot_password_use_case,
            reset_password_use_case=self.reset_password_use_case,
            change_password_use_case=self.change_password_use_case,
        )
