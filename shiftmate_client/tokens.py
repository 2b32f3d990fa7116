from __future__ import annotations

import logging
import threading

from shiftmate_client.models import Credentials
from shiftmate_client.storage import KeyValueStorage

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "auth_token"
REFRESH_TOKEN_KEY = "refresh_token"
USER_NAME_KEY = "auth_user_name"


class TokenStore:
    """Access/refresh token pair shared by every request of a session.

    Storage failures are logged and read as "no token"; nothing here raises.
    """

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage
        self._lock = threading.Lock()
        self._access_token = self._read(ACCESS_TOKEN_KEY)

    def current_access_token(self) -> str | None:
        stored = self._read(ACCESS_TOKEN_KEY)
        with self._lock:
            if stored != self._access_token:
                # Changed by another running client.
                self._access_token = stored
            return self._access_token

    def refresh_token(self) -> str | None:
        return self._read(REFRESH_TOKEN_KEY)

    def user_name(self) -> str | None:
        return self._read(USER_NAME_KEY)

    def set_access_token(self, token: str) -> None:
        with self._lock:
            self._access_token = token
        self._write(ACCESS_TOKEN_KEY, token)

    def set_refresh_token(self, token: str) -> None:
        self._write(REFRESH_TOKEN_KEY, token)

    def set_user_name(self, name: str) -> None:
        self._write(USER_NAME_KEY, name)

    def set_credentials(self, credentials: Credentials) -> None:
        self.set_access_token(credentials.access_token)
        if credentials.refresh_token:
            self.set_refresh_token(credentials.refresh_token)

    def clear(self) -> None:
        with self._lock:
            self._access_token = None
        for key in (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, USER_NAME_KEY):
            self._delete(key)

    def _read(self, key: str) -> str | None:
        try:
            value = self._storage.get(key)
        except (OSError, ValueError) as error:
            logger.warning("Could not read %s from token storage: %s", key, error)
            return None
        return value or None

    def _write(self, key: str, value: str) -> None:
        try:
            self._storage.set(key, value)
        except (OSError, ValueError) as error:
            logger.warning("Could not persist %s to token storage: %s", key, error)

    def _delete(self, key: str) -> None:
        try:
            self._storage.remove(key)
        except (OSError, ValueError) as error:
            logger.warning("Could not remove %s from token storage: %s", key, error)
