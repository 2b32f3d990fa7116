from __future__ import annotations

import logging
from typing import Any, Callable

import requests

from shiftmate_client.config import AppSettings
from shiftmate_client.envelope import extract_error_code, extract_error_message
from shiftmate_client.models import ApiResult
from shiftmate_client.refresh import REISSUE_PATH, RefreshCoordinator
from shiftmate_client.tokens import TokenStore

logger = logging.getLogger(__name__)

AUTH_ENDPOINTS = frozenset(
    {
        "/auth/login",
        "/auth/signup",
        REISSUE_PATH,
        "/auth/refresh",
        "/auth/logout",
    }
)
EXPIRED_TOKEN_CODES = frozenset({"EXPIRED_TOKEN"})

NETWORK_ERROR = "NETWORK_ERROR"
UNAUTHORIZED = "UNAUTHORIZED"


class HttpClient:
    def __init__(
        self,
        settings: AppSettings,
        tokens: TokenStore,
        session: requests.Session | None = None,
        on_auth_expired: Callable[[], None] | None = None,
    ):
        self._settings = settings
        self._tokens = tokens
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})
        self._refresh = RefreshCoordinator(settings, self._session, tokens)
        self._on_auth_expired = on_auth_expired

    @property
    def tokens(self) -> TokenStore:
        return self._tokens

    @property
    def refresh_coordinator(self) -> RefreshCoordinator:
        return self._refresh

    def set_auth_expired_handler(self, handler: Callable[[], None] | None) -> None:
        self._on_auth_expired = handler

    def get(self, path: str, params: dict[str, Any] | None = None) -> ApiResult[Any]:
        return self.request("GET", path, params=params)

    def post(
        self,
        path: str,
        payload: Any = None,
        files: dict[str, Any] | None = None,
    ) -> ApiResult[Any]:
        return self.request("POST", path, json=payload, files=files)

    def put(self, path: str, payload: Any = None) -> ApiResult[Any]:
        return self.request("PUT", path, json=payload)

    def patch(self, path: str, payload: Any = None) -> ApiResult[Any]:
        return self.request("PATCH", path, json=payload)

    def delete(self, path: str) -> ApiResult[Any]:
        return self.request("DELETE", path)

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        files: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> ApiResult[Any]:
        is_auth_endpoint = self.is_auth_endpoint(path)

        if not is_auth_endpoint and not self._tokens.current_access_token():
            outcome = self._refresh.refresh()
            if not outcome.refreshed:
                if not outcome.shared:
                    self._expire_session()
                return ApiResult.fail(UNAUTHORIZED, "Sign in required")

        url = f"{self._settings.base_url}{path}"
        retried = False
        while True:
            sent_token = self._tokens.current_access_token()
            headers = {"Authorization": f"Bearer {sent_token}"} if sent_token else {}

            try:
                response = self._session.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=json if files is None else None,
                    files=files,
                    data=data,
                    timeout=self._settings.timeout_seconds,
                )
            except requests.RequestException as error:
                logger.warning("%s %s failed: %s", method, path, error)
                return ApiResult.fail(NETWORK_ERROR, str(error) or "Network error")

            body = self._decode(response)
            if response.ok:
                return ApiResult.ok(body)

            code = extract_error_code(body, response.status_code)
            message = extract_error_message(body)
            details = body if isinstance(body, dict) else None
            failure = ApiResult.fail(code, message, details)

            auth_expired = response.status_code == 401 or code in EXPIRED_TOKEN_CODES
            if not auth_expired or is_auth_endpoint:
                logger.debug("%s %s returned HTTP %s (%s)", method, path, response.status_code, code)
                return failure

            if retried:
                logger.info("%s %s: rejected again after renewal; signing out", method, path)
                self._expire_session()
                return failure

            retried = True
            current_token = self._tokens.current_access_token()
            if sent_token and not current_token:
                # Another caller already ended the session.
                return failure
            if current_token and current_token != sent_token:
                logger.debug("%s %s: token was renewed meanwhile; retrying", method, path)
                continue

            outcome = self._refresh.refresh()
            if not outcome.refreshed:
                logger.info("%s %s: session expired and could not be renewed", method, path)
                if not outcome.shared:
                    self._expire_session()
                return failure

    @staticmethod
    def is_auth_endpoint(path: str) -> bool:
        return path.split("?", 1)[0].rstrip("/") in AUTH_ENDPOINTS

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _expire_session(self) -> None:
        self._tokens.clear()
        if self._on_auth_expired is not None:
            self._on_auth_expired()
