from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
import logging
import threading

import requests

from shiftmate_client.config import AppSettings
from shiftmate_client.envelope import extract_access_token, extract_refresh_token, unwrap
from shiftmate_client.tokens import TokenStore

logger = logging.getLogger(__name__)

REISSUE_PATH = "/auth/reissue"


@dataclass(frozen=True)
class RefreshOutcome:
    refreshed: bool
    # True when another caller ran the exchange and this one waited for it.
    shared: bool = False


class RefreshCoordinator:
    """Runs at most one refresh-token exchange at a time.

    The server rotates refresh tokens, so two concurrent exchanges with the
    same token would invalidate each other. Callers arriving while an exchange
    is running wait for it and receive its outcome.
    """

    def __init__(self, settings: AppSettings, session: requests.Session, tokens: TokenStore):
        self._settings = settings
        self._session = session
        self._tokens = tokens
        self._lock = threading.Lock()
        self._in_flight: Future[bool] | None = None

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._in_flight is not None

    def ensure_refreshed(self) -> bool:
        return self.refresh().refreshed

    def refresh(self) -> RefreshOutcome:
        if not self._tokens.refresh_token():
            return RefreshOutcome(refreshed=False)

        with self._lock:
            pending = self._in_flight
            is_owner = pending is None
            if is_owner:
                pending = Future()
                self._in_flight = pending
                # A previous owner may have rotated the token since the check above.
                refresh_token = self._tokens.refresh_token()

        if not is_owner:
            return RefreshOutcome(refreshed=pending.result(), shared=True)

        outcome = False
        try:
            if refresh_token:
                outcome = self._exchange(refresh_token)
        finally:
            with self._lock:
                self._in_flight = None
            pending.set_result(outcome)
        return RefreshOutcome(refreshed=outcome)

    def _exchange(self, refresh_token: str) -> bool:
        url = f"{self._settings.base_url}{REISSUE_PATH}"
        try:
            response = self._session.post(
                url,
                json={"refreshToken": refresh_token},
                timeout=self._settings.timeout_seconds,
            )
        except requests.RequestException as error:
            logger.warning("Token refresh failed: %s", error)
            self._tokens.clear()
            return False

        if not response.ok:
            logger.info("Token refresh rejected with HTTP %s; signing out", response.status_code)
            self._tokens.clear()
            return False

        try:
            payload = unwrap(response.json())
        except ValueError:
            payload = None

        access_token = extract_access_token(payload)
        if not access_token:
            logger.warning("Token refresh response carried no access token; signing out")
            self._tokens.clear()
            return False

        self._tokens.set_access_token(access_token)
        rotated = extract_refresh_token(payload)
        if rotated:
            self._tokens.set_refresh_token(rotated)
        logger.debug("Access token refreshed")
        return True
