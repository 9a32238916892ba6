# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""HTTP controller for the ``/api/v1/auth`` endpoints."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from flask import Blueprint, Response, jsonify, request

from projectcamp.application.services.validation import ensure_valid
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
from projectcamp.domain.tokens import TokenPair
from projectcamp.interfaces.http.auth import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    BearerAuthenticator,
)
from projectcamp.interfaces.http.dto.auth import ApiResponseDTO, TokenPairDTO, UserDTO
from projectcamp.interfaces.http.validators.auth import (
    CHANGE_PASSWORD_RULES,
    FORGOT_PASSWORD_RULES,
    LOGIN_RULES,
    REGISTER_RULES,
    RESET_PASSWORD_RULES,
)
from projectcamp.shared.errors import AppError
from projectcamp.shared.logging import logger
from projectcamp.shared.middleware.lifecycle import RequestLifecycle
from projectcamp.utils.asyncio_utils import run_async


def _payload() -> dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _respond(status: HTTPStatus, data: Any, message: str) -> tuple[Response, int]:
    body = ApiResponseDTO.of(int(status), data, message).to_json()
    return jsonify(body), int(status)


class AuthController:
    def __init__(
        self,
        *,
        lifecycle: RequestLifecycle,
        authenticator: BearerAuthenticator,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        refresh_use_case: RefreshAccessTokenUseCase,
        verify_email_use_case: VerifyEmailUseCase,
        resend_verification_use_case: ResendEmailVerificationUseCase,
        forgot_password_use_case: ForgotPasswordUseCase,
        reset_password_use_case: ResetPasswordUseCase,
        change_password_use_case: ChangePasswordUseCase,
        cookie_secure: bool = False,
        cookie_samesite: str = "Lax",
    ) -> None:
        self._lifecycle = lifecycle
        self._authenticator = authenticator
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._refresh_use_case = refresh_use_case
        self._verify_email_use_case = verify_email_use_case
        self._resend_verification_use_case = resend_verification_use_case
        self._forgot_password_use_case = forgot_password_use_case
        self._reset_password_use_case = reset_password_use_case
        self._change_password_use_case = change_password_use_case
        self._cookie_secure = cookie_secure
        self._cookie_samesite = cookie_samesite

    def _set_token_cookies(self, response: Response, pair: TokenPair) -> None:
        for name, value in (
            (ACCESS_TOKEN_COOKIE, pair.access_token),
            (REFRESH_TOKEN_COOKIE, pair.refresh_token),
        ):
            response.set_cookie(
                name,
                value,
                httponly=True,
                samesite=self._cookie_samesite,
                secure=self._cookie_secure,
            )

    def register(self) -> tuple[Response, int]:
        payload = ensure_valid(REGISTER_RULES, _payload())
        user = run_async(
            self._register_use_case.execute(
                payload["email"],
                payload["username"],
                payload["password"],
                payload.get("fullName"),
            )
        )
        logger.info(f"auth.register: ok user_id={user.id}")
        return _respond(
            HTTPStatus.CREATED,
            {"user": UserDTO.from_entity(user).to_json()},
            "User registered successfully and verification email has been sent on your email",
        )

    def login(self) -> tuple[Response, int]:
        payload = ensure_valid(LOGIN_RULES, _payload())
        user, pair = run_async(
            self._login_use_case.execute(payload["email"], payload["password"])
        )
        data = {
            "user": UserDTO.from_entity(user).to_json(),
            **TokenPairDTO.from_pair(pair).to_json(),
        }
        response, status = _respond(HTTPStatus.OK, data, "User logged in successfully")
        self._set_token_cookies(response, pair)
        logger.info(f"auth.login: ok user_id={user.id}")
        return response, status

    def logout(self) -> tuple[Response, int]:
        user = self._authenticator.authenticate()
        self._logout_use_case.execute(user.id)
        response, status = _respond(HTTPStatus.OK, {}, "User logged out")
        response.delete_cookie(ACCESS_TOKEN_COOKIE)
        response.delete_cookie(REFRESH_TOKEN_COOKIE)
        logger.info(f"auth.logout: ok user_id={user.id}")
        return response, status

    def current_user(self) -> tuple[Response, int]:
        user = self._authenticator.authenticate()
        return _respond(
            HTTPStatus.OK, UserDTO.from_entity(user).to_json(), "Current user fetched successfully"
        )

    def refresh_token(self) -> tuple[Response, int]:
        presented = request.cookies.get(REFRESH_TOKEN_COOKIE) or _payload().get("refreshToken")
        if not isinstance(presented, str) or not presented:
            raise AppError.unauthenticated("refresh_token_missing")
        _, pair = self._refresh_use_case.execute(presented)
        response, status = _respond(
            HTTPStatus.OK, TokenPairDTO.from_pair(pair).to_json(), "Access token refreshed"
        )
        self._set_token_cookies(response, pair)
        return response, status

    def verify_email(self, token: str) -> tuple[Response, int]:
        user = self._verify_email_use_case.execute(token)
        return _respond(
            HTTPStatus.OK, {"isEmailVerified": user.is_email_verified}, "Email is verified"
        )

    def resend_email_verification(self) -> tuple[Response, int]:
        user = self._authenticator.authenticate()
        self._resend_verification_use_case.execute(user.id)
        return _respond(HTTPStatus.OK, {}, "Mail has been sent to your email ID")

    def forgot_password(self) -> tuple[Response, int]:
        payload = ensure_valid(FORGOT_PASSWORD_RULES, _payload())
        self._forgot_password_use_case.execute(payload["email"])
        return _respond(
            HTTPStatus.OK, {}, "Password reset mail has been sent on your mail id"
        )

    def reset_password(self, token: str) -> tuple[Response, int]:
        payload = ensure_valid(RESET_PASSWORD_RULES, _payload())
        run_async(self._reset_password_use_case.execute(token, payload["newPassword"]))
        return _respond(HTTPStatus.OK, {}, "Password reset successfully")

    def change_password(self) -> tuple[Response, int]:
        payload = ensure_valid(CHANGE_PASSWORD_RULES, _payload())
        user = self._authenticator.authenticate()
        run_async(
            self._change_password_use_case.execute(
                user.id, payload["oldPassword"], payload["newPassword"]
            )
        )
        logger.info(f"auth.change_password: ok user_id={user.id}")
        return _respond(HTTPStatus.OK, {}, "Password changed successfully")

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")
        wrap = self._lifecycle.wrap

        bp.add_url_rule("/register", view_func=wrap(self.register), methods=["POST"])
        bp.add_url_rule("/login", view_func=wrap(self.login), methods=["POST"])
        bp.add_url_rule("/logout", view_func=wrap(self.logout), methods=["POST"])
        bp.add_url_rule(
            "/current-user", view_func=wrap(self.current_user), methods=["GET"]
        )
        bp.add_url_rule(
            "/refresh-token", view_func=wrap(self.refresh_token), methods=["POST"]
        )
        bp.add_url_rule(
            "/verify-email/<token>", view_func=wrap(self.verify_email), methods=["GET"]
        )
        bp.add_url_rule(
            "/resend-email-verification",
            view_func=wrap(self.resend_email_verification),
            methods=["POST"],
        )
        bp.add_url_rule(
            "/forgot-password", view_func=wrap(self.forgot_password), methods=["POST"]
        )
        bp.add_url_rule(
            "/reset-password/<token>", view_func=wrap(self.reset_password), methods=["POST"]
        )
        bp.add_url_rule(
            "/change-password", view_func=wrap(self.change_password), methods=["POST"]
        )
        return bp
