import pytest

from conftest import FakeResponse, respond
from shiftmate_client.auth import AuthManager
from shiftmate_client.models import Credentials


@pytest.fixture
def auth(client) -> AuthManager:
    return AuthManager(client)


def test_login_stores_tokens_and_display_name(auth, session, tokens) -> None:
    session.route(
        "POST",
        "/auth/login",
        respond(
            FakeResponse(
                200,
                {"data": {"accessToken": "A1", "refreshToken": "R1", "user": {"firstName": "Minji", "lastName": "Kim"}}},
            )
        ),
    )

    result = auth.login(" minji@example.com ", "secret")

    assert result.success
    assert session.calls[0].json == {"email": "minji@example.com", "password": "secret"}
    assert "Authorization" not in session.calls[0].headers
    assert tokens.current_access_token() == "A1"
    assert tokens.refresh_token() == "R1"
    assert auth.get_auth_state().user_name == "KimMinji"


def test_failed_login_leaves_store_untouched(auth, session, tokens) -> None:
    session.route("POST", "/auth/login", respond(FakeResponse(401, {"error": {"code": "INVALID_CREDENTIALS", "message": "Wrong email or password"}})))

    result = auth.login("minji@example.com", "nope")

    assert not result.success
    assert result.error.message == "Wrong email or password"
    assert tokens.current_access_token() is None
    assert not auth.get_auth_state().is_signed_in


def test_login_requires_email_and_password(auth) -> None:
    with pytest.raises(ValueError):
        auth.login("  ", "secret")


def test_signup_accepts_legacy_token_field(auth, session, tokens) -> None:
    session.route("POST", "/auth/signup", respond(FakeResponse(201, {"token": "T1", "name": "Owner"})))

    result = auth.signup("owner@example.com", "pw", "Jae", "Park", role="manager")

    assert result.success
    assert session.calls[0].json["role"] == "manager"
    assert tokens.current_access_token() == "T1"
    assert tokens.refresh_token() is None
    assert auth.get_auth_state().user_name == "Owner"


def test_signup_rejects_unknown_role(auth) -> None:
    with pytest.raises(ValueError):
        auth.signup("a@b.c", "pw", "A", "B", role="owner")


def test_logout_clears_locally_before_calling_server(auth, session, tokens) -> None:
    tokens.set_credentials(Credentials(access_token="A1", refresh_token="R1"))
    tokens.set_user_name("Kim")
    session.route("POST", "/auth/logout", respond(FakeResponse(500)))

    result = auth.logout()

    assert not result.success
    assert session.calls[0].bearer is None
    assert tokens.current_access_token() is None
    assert tokens.refresh_token() is None
    assert auth.get_auth_state().is_signed_in is False


def test_current_user_is_unwrapped(auth, session, tokens) -> None:
    tokens.set_access_token("A1")
    session.route("GET", "/auth/me", respond(FakeResponse(200, {"success": True, "data": {"id": "u1", "role": "employee"}})))

    result = auth.get_current_user()

    assert result.data == {"id": "u1", "role": "employee"}


def test_refresh_token_alone_counts_as_signed_in(auth, tokens) -> None:
    tokens.set_refresh_token("R1")

    assert auth.get_auth_state().is_signed_in
