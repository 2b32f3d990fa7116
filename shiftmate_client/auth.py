from __future__ import annotations

import logging
from typing import Any

from shiftmate_client.envelope import (
    extract_access_token,
    extract_display_name,
    extract_refresh_token,
    unwrap,
)
from shiftmate_client.http import HttpClient
from shiftmate_client.models import ApiResult, AuthState, Credentials

logger = logging.getLogger(__name__)

VALID_ROLES = ("employee", "manager", "admin")


class AuthManager:
    def __init__(self, http_client: HttpClient):
        self._http_client = http_client
        self._tokens = http_client.tokens

    def login(self, email: str, password: str) -> ApiResult[Any]:
        email = email.strip()
        if not email or not password:
            raise ValueError("Email and password are required")

        result = self._http_client.post("/auth/login", {"email": email, "password": password})
        if result.success:
            self._store_session(result.data)
        return result

    def signup(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: str = "employee",
    ) -> ApiResult[Any]:
        if role not in VALID_ROLES:
            raise ValueError("role must be one of: " + ", ".join(VALID_ROLES))

        result = self._http_client.post(
            "/auth/signup",
            {
                "email": email.strip(),
                "password": password,
                "firstName": first_name.strip(),
                "lastName": last_name.strip(),
                "role": role,
            },
        )
        if result.success:
            self._store_session(result.data)
        return result

    def logout(self) -> ApiResult[Any]:
        self._tokens.clear()
        return self._http_client.post("/auth/logout")

    def get_current_user(self) -> ApiResult[Any]:
        result = self._http_client.get("/auth/me")
        if not result.success:
            return result
        return ApiResult.ok(unwrap(result.data))

    def get_auth_state(self) -> AuthState:
        if not self._tokens.current_access_token() and not self._tokens.refresh_token():
            return AuthState(is_signed_in=False)
        return AuthState(is_signed_in=True, user_name=self._tokens.user_name())

    def _store_session(self, body: Any) -> None:
        payload = unwrap(body)
        access_token = extract_access_token(payload)
        if not access_token:
            logger.warning("Authentication response carried no access token")
            return

        self._tokens.set_credentials(
            Credentials(
                access_token=access_token,
                refresh_token=extract_refresh_token(payload),
            )
        )
        display_name = extract_display_name(payload)
        if display_name:
            self._tokens.set_user_name(display_name)
