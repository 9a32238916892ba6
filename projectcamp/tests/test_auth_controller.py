from __future__ import annotations

from datetime import timedelta

import pytest
from flask import Flask
from flask.testing import FlaskClient

from projectcamp.app import create_app
from projectcamp.domain.users.entities import TemporaryTokenPurpose
from projectcamp.infrastructure.container import Container
from projectcamp.shared.config import AppConfig, ConfigurationError, load_config
from projectcamp.shared.config.settings import DatabaseConfig, SecurityConfig
from projectcamp.shared.middleware.error_handler import configure_error_handling
from projectcamp.shared.middleware.lifecycle import RequestLifecycle

from .fakes import FixedClock, RecordingMailer, make_token_config

UNAUTHORIZED_BODY = {
    "statusCode": 401,
    "data": None,
    "message": "Unauthorized request",
    "errors": [],
    "success": False,
}


def _config(**token_overrides: object) -> AppConfig:
    return AppConfig(
        database=DatabaseConfig(url="sqlite://"),
        tokens=make_token_config(**token_overrides),
        security=SecurityConfig(password_hash_rounds=1),
    )


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def client(mailer: RecordingMailer, clock: FixedClock) -> FlaskClient:
    config = _config()
    app = create_app(config, container=Container(config, mailer=mailer, clock=clock))
    return app.test_client()


def _register(client: FlaskClient, email: str = "alice@mail.com") -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "username": "alice", "password": "longenough1"},
    )
    assert response.status_code == 201


def _login(client: FlaskClient, password: str = "longenough1"):
    return client.post(
        "/api/v1/auth/login", json={"email": "alice@mail.com", "password": password}
    )


def test_register_validation_envelope(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/auth/register", json={"username": "ABcd", "password": "short"}
    )

    assert response.status_code == 422
    assert response.get_json() == {
        "statusCode": 422,
        "data": None,
        "message": "Received data is not valid",
        "errors": [
            {"email": "Email is required"},
            {"email": "Email is invalid"},
            {"username": "Username must be in lower case"},
            {"password": "Password must be at least 8 characters long"},
        ],
        "success": False,
    }


def test_register_returns_user_without_secrets(
    client: FlaskClient, mailer: RecordingMailer
) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "alice@mail.com", "username": "alice", "password": "longenough1"},
    )

    body = response.get_json()
    assert response.status_code == 201
    assert body["success"] is True
    assert body["statusCode"] == 201
    user = body["data"]["user"]
    assert user["email"] == "alice@mail.com"
    assert user["isEmailVerified"] is False
    assert "password" not in str(user).lower()
    assert mailer.sent[0][1] is TemporaryTokenPurpose.EMAIL_VERIFICATION


def test_register_duplicate_is_conflict(client: FlaskClient) -> None:
    _register(client)
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "alice@mail.com", "username": "bob", "password": "longenough1"},
    )

    assert response.status_code == 409
    assert response.get_json()["message"] == "User with email or username already exists"


def test_login_failures_are_indistinguishable(client: FlaskClient) -> None:
    _register(client)

    wrong_password = _login(client, password="not-the-password")
    unknown_email = client.post(
        "/api/v1/auth/login", json={"email": "nobody@mail.com", "password": "longenough1"}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json() == UNAUTHORIZED_BODY


def test_login_sets_cookies_and_authenticates(client: FlaskClient) -> None:
    _register(client)

    response = _login(client)

    assert response.status_code == 200
    data = response.get_json()["data"]
    cookies = response.headers.getlist("Set-Cookie")
    assert any(c.startswith("accessToken=") and "HttpOnly" in c for c in cookies)
    assert any(c.startswith("refreshToken=") and "HttpOnly" in c for c in cookies)

    me = client.get(
        "/api/v1/auth/current-user",
        headers={"Authorization": f"Bearer {data['accessToken']}"},
    )
    assert me.status_code == 200
    assert me.get_json()["data"]["username"] == "alice"


def test_current_user_requires_token(client: FlaskClient) -> None:
    response = client.get("/api/v1/auth/current-user")

    assert response.status_code == 401
    assert response.get_json() == UNAUTHORIZED_BODY


def test_expired_access_token_is_rejected(client: FlaskClient, clock: FixedClock) -> None:
    _register(client)
    access = _login(client).get_json()["data"]["accessToken"]
    clock.advance(timedelta(minutes=15))

    response = client.get(
        "/api/v1/auth/current-user", headers={"Authorization": f"Bearer {access}"}
    )

    assert response.get_json() == UNAUTHORIZED_BODY


def test_refresh_token_rotation(client: FlaskClient, clock: FixedClock) -> None:
    _register(client)
    first = _login(client).get_json()["data"]["refreshToken"]
    clock.advance(timedelta(seconds=1))

    response = client.post("/api/v1/auth/refresh-token", json={"refreshToken": first})

    assert response.status_code == 200
    assert response.get_json()["data"]["refreshToken"] != first
    cookieless = client.application.test_client(use_cookies=False)
    replay = cookieless.post("/api/v1/auth/refresh-token", json={"refreshToken": first})
    assert replay.get_json() == UNAUTHORIZED_BODY


def test_verify_email_link_is_single_use(client: FlaskClient, mailer: RecordingMailer) -> None:
    _register(client)
    plain = mailer.last_value(TemporaryTokenPurpose.EMAIL_VERIFICATION)

    first = client.get(f"/api/v1/auth/verify-email/{plain}")
    second = client.get(f"/api/v1/auth/verify-email/{plain}")

    assert first.status_code == 200
    assert first.get_json()["data"] == {"isEmailVerified": True}
    assert second.get_json() == UNAUTHORIZED_BODY


def test_password_reset_flow(client: FlaskClient, mailer: RecordingMailer) -> None:
    _register(client)

    forgot = client.post("/api/v1/auth/forgot-password", json={"email": "alice@mail.com"})
    ghost = client.post("/api/v1/auth/forgot-password", json={"email": "ghost@mail.com"})
    assert forgot.get_json() == ghost.get_json()

    plain = mailer.last_value(TemporaryTokenPurpose.PASSWORD_RESET)
    short = client.post(f"/api/v1/auth/reset-password/{plain}", json={"newPassword": "short"})
    assert short.status_code == 422

    reset = client.post(
        f"/api/v1/auth/reset-password/{plain}", json={"newPassword": "brand-new-pass"}
    )
    assert reset.status_code == 200
    assert _login(client).status_code == 401
    assert _login(client, password="brand-new-pass").status_code == 200


def test_change_password_and_logout(client: FlaskClient) -> None:
    _register(client)
    access = _login(client).get_json()["data"]["accessToken"]
    headers = {"Authorization": f"Bearer {access}"}

    changed = client.post(
        "/api/v1/auth/change-password",
        json={"oldPassword": "longenough1", "newPassword": "brand-new-pass"},
        headers=headers,
    )
    assert changed.status_code == 200

    logout = client.post("/api/v1/auth/logout", headers=headers)
    assert logout.status_code == 200
    assert logout.get_json()["message"] == "User logged out"


def test_unexpected_error_hides_internals() -> None:
    app = Flask(__name__)
    configure_error_handling(app)

    def explode():
        raise RuntimeError("database password is hunter2")

    app.add_url_rule("/boom", view_func=RequestLifecycle().wrap(explode))

    response = app.test_client().get("/boom")

    assert response.status_code == 500
    body = response.get_json()
    assert body["success"] is False
    assert body["statusCode"] == 500
    assert "hunter2" not in response.get_data(as_text=True)


def test_incomplete_token_settings_fail_at_startup() -> None:
    config = _config(refresh_token_secret=None)

    with pytest.raises(ConfigurationError):
        create_app(config, container=Container(config))


def test_error_responder_uses_injected_config(
    monkeypatch: pytest.MonkeyPatch, mailer: RecordingMailer, clock: FixedClock
) -> None:
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRY", "bogus")
    load_config.cache_clear()
    config = _config()
    container = Container(config, mailer=mailer, clock=clock)
    app = create_app(config, container=container)

    def explode():
        raise RuntimeError("late failure")

    app.add_url_rule("/boom", view_func=container.lifecycle.wrap(explode))

    response = app.test_client().get("/boom")

    assert response.status_code == 500
    assert response.get_json() == {
        "statusCode": 500,
        "data": None,
        "message": "Internal server error",
        "errors": [],
        "success": False,
    }


def test_register_rejects_non_string_fields(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "alice@mail.com", "username": 12345, "password": ["x", "y", "z"]},
    )

    assert response.status_code == 422
    fields = [next(iter(error)) for error in response.get_json()["errors"]]
    assert set(fields) == {"username", "password"}
    assert _login(client, password="['x', 'y', 'z']").status_code == 401


def test_change_password_validates_before_authenticating(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/auth/change-password",
        json={"oldPassword": "", "newPassword": "short"},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == 422
    assert response.get_json()["errors"] == [
        {"oldPassword": "Old password is required"},
        {"newPassword": "Password must be at least 8 characters long"},
    ]
