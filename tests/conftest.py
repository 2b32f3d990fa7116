from __future__ import annotations

from dataclasses import dataclass, field
import json
import threading
from typing import Any, Callable

import pytest

from shiftmate_client.config import AppSettings
from shiftmate_client.http import HttpClient
from shiftmate_client.storage import MemoryStorage
from shiftmate_client.tokens import TokenStore

BASE_URL = "http://api.test/api"


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: str | None = None):
        self.status_code = status_code
        if text is not None:
            self.content = text.encode("utf-8")
        elif body is None:
            self.content = b""
        else:
            self.content = json.dumps(body).encode("utf-8")

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.content)


@dataclass
class FakeCall:
    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] | None = None
    json: Any = None
    files: Any = None

    @property
    def bearer(self) -> str | None:
        value = self.headers.get("Authorization")
        return value[len("Bearer "):] if value else None


def respond(*responses: FakeResponse) -> Callable[[FakeCall], FakeResponse]:
    queue = list(responses)
    lock = threading.Lock()

    def handler(_call: FakeCall) -> FakeResponse:
        with lock:
            if len(queue) > 1:
                return queue.pop(0)
            return queue[0]

    return handler


class FakeSession:
    """Stands in for requests.Session; routes calls to scripted handlers."""

    def __init__(self):
        self.headers: dict[str, str] = {}
        self.calls: list[FakeCall] = []
        self._routes: dict[tuple[str, str], Callable[[FakeCall], FakeResponse]] = {}
        self._lock = threading.Lock()

    def route(self, method: str, path: str, handler: Callable[[FakeCall], FakeResponse]) -> None:
        self._routes[(method, path)] = handler

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        assert url.startswith(BASE_URL), url
        call = FakeCall(
            method=method,
            path=url[len(BASE_URL):],
            headers=dict(kwargs.get("headers") or {}),
            params=kwargs.get("params"),
            json=kwargs.get("json"),
            files=kwargs.get("files"),
        )
        with self._lock:
            self.calls.append(call)
        handler = self._routes.get((method, call.path))
        if handler is None:
            raise AssertionError(f"Unexpected request {method} {call.path}")
        return handler(call)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("POST", url, **kwargs)

    def count(self, method: str, path: str) -> int:
        with self._lock:
            return sum(1 for call in self.calls if call.method == method and call.path == path)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        base_url=BASE_URL,
        timeout_seconds=5,
        token_store_path="unused.json",
        default_store_id="",
        log_level="INFO",
    )


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def tokens(storage: MemoryStorage) -> TokenStore:
    return TokenStore(storage)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def expired_events() -> list[str]:
    return []


@pytest.fixture
def client(settings, tokens, session, expired_events) -> HttpClient:
    return HttpClient(
        settings,
        tokens,
        session=session,
        on_auth_expired=lambda: expired_events.append("expired"),
    )
