import threading
import time

import requests

from conftest import FakeResponse, respond
from shiftmate_client.models import Credentials
from shiftmate_client.refresh import RefreshCoordinator, RefreshOutcome
from shiftmate_client.storage import MemoryStorage
from shiftmate_client.tokens import REFRESH_TOKEN_KEY, TokenStore


def test_no_refresh_token_fails_without_network(client, session) -> None:
    assert client.refresh_coordinator.ensure_refreshed() is False
    assert session.calls == []


def test_successful_refresh_stores_new_tokens(client, session, tokens) -> None:
    tokens.set_refresh_token("R1")
    session.route("POST", "/auth/reissue", respond(FakeResponse(200, {"data": {"accessToken": "A2", "refreshToken": "R2"}})))

    assert client.refresh_coordinator.ensure_refreshed() is True

    assert tokens.current_access_token() == "A2"
    assert tokens.refresh_token() == "R2"
    assert session.calls[0].json == {"refreshToken": "R1"}


def test_refresh_keeps_refresh_token_when_not_rotated(client, session, tokens) -> None:
    tokens.set_refresh_token("R1")
    session.route("POST", "/auth/reissue", respond(FakeResponse(200, {"data": {"accessToken": "A2"}})))

    assert client.refresh_coordinator.ensure_refreshed() is True
    assert tokens.refresh_token() == "R1"


def test_rejected_refresh_clears_credentials(client, session, tokens) -> None:
    tokens.set_credentials(Credentials(access_token="A1", refresh_token="R1"))
    session.route("POST", "/auth/reissue", respond(FakeResponse(400, {"error": {"code": "INVALID_TOKEN"}})))

    assert client.refresh_coordinator.ensure_refreshed() is False

    assert tokens.current_access_token() is None
    assert tokens.refresh_token() is None


def test_refresh_without_access_token_in_body_clears_credentials(client, session, tokens) -> None:
    tokens.set_refresh_token("R1")
    session.route("POST", "/auth/reissue", respond(FakeResponse(200, {"data": {}})))

    assert client.refresh_coordinator.ensure_refreshed() is False
    assert tokens.refresh_token() is None


def test_refresh_transport_error_clears_credentials(client, session, tokens) -> None:
    tokens.set_refresh_token("R1")

    def unreachable(_call):
        raise requests.ConnectionError("connection refused")

    session.route("POST", "/auth/reissue", unreachable)

    assert client.refresh_coordinator.ensure_refreshed() is False
    assert tokens.refresh_token() is None
    assert not client.refresh_coordinator.in_flight


def test_concurrent_callers_share_one_exchange(client, session, tokens) -> None:
    tokens.set_refresh_token("R1")
    started = threading.Event()
    release = threading.Event()

    def slow_reissue(_call):
        started.set()
        release.wait(timeout=5)
        return FakeResponse(200, {"data": {"accessToken": "A2", "refreshToken": "R2"}})

    session.route("POST", "/auth/reissue", slow_reissue)

    outcomes: list[bool] = []
    lock = threading.Lock()

    def call() -> None:
        outcome = client.refresh_coordinator.ensure_refreshed()
        with lock:
            outcomes.append(outcome)

    owner = threading.Thread(target=call)
    owner.start()
    assert started.wait(timeout=5)
    assert client.refresh_coordinator.in_flight

    waiters = [threading.Thread(target=call) for _ in range(4)]
    for thread in waiters:
        thread.start()
    time.sleep(0.2)
    release.set()

    for thread in [owner, *waiters]:
        thread.join(timeout=5)

    assert outcomes == [True] * 5
    assert session.count("POST", "/auth/reissue") == 1
    assert tokens.current_access_token() == "A2"
    assert not client.refresh_coordinator.in_flight


def test_concurrent_callers_share_a_failed_exchange(client, session, tokens) -> None:
    tokens.set_refresh_token("R1")
    started = threading.Event()
    release = threading.Event()

    def failing_reissue(_call):
        started.set()
        release.wait(timeout=5)
        return FakeResponse(401, {"error": {"code": "EXPIRED_REFRESH_TOKEN"}})

    session.route("POST", "/auth/reissue", failing_reissue)

    outcomes: list[bool] = []

    def call() -> None:
        outcomes.append(client.refresh_coordinator.ensure_refreshed())

    owner = threading.Thread(target=call)
    owner.start()
    assert started.wait(timeout=5)
    waiters = [threading.Thread(target=call) for _ in range(3)]
    for thread in waiters:
        thread.start()
    time.sleep(0.2)
    release.set()
    for thread in [owner, *waiters]:
        thread.join(timeout=5)

    assert outcomes == [False] * 4
    assert session.count("POST", "/auth/reissue") == 1


def test_new_exchange_allowed_after_previous_one_finished(client, session, tokens) -> None:
    tokens.set_refresh_token("R1")
    session.route(
        "POST",
        "/auth/reissue",
        respond(
            FakeResponse(200, {"data": {"accessToken": "A2", "refreshToken": "R2"}}),
            FakeResponse(200, {"data": {"accessToken": "A3", "refreshToken": "R3"}}),
        ),
    )

    assert client.refresh_coordinator.ensure_refreshed() is True
    assert client.refresh_coordinator.ensure_refreshed() is True

    assert [call.json for call in session.calls] == [{"refreshToken": "R1"}, {"refreshToken": "R2"}]
    assert tokens.current_access_token() == "A3"


def test_owner_sends_refresh_token_rotated_after_its_first_read(settings, session) -> None:
    class RotatedMeanwhileStorage(MemoryStorage):
        def __init__(self):
            super().__init__({REFRESH_TOKEN_KEY: "R1"})
            self.rotate_after_read = True

        def get(self, key):
            value = super().get(key)
            if key == REFRESH_TOKEN_KEY and self.rotate_after_read:
                self.rotate_after_read = False
                self.set(key, "R2")
            return value

    tokens = TokenStore(RotatedMeanwhileStorage())
    coordinator = RefreshCoordinator(settings, session, tokens)
    session.route("POST", "/auth/reissue", respond(FakeResponse(200, {"data": {"accessToken": "A3", "refreshToken": "R3"}})))

    assert coordinator.ensure_refreshed() is True
    assert [call.json for call in session.calls] == [{"refreshToken": "R2"}]
    assert tokens.refresh_token() == "R3"


def test_waiters_report_a_shared_outcome(client, session, tokens) -> None:
    tokens.set_refresh_token("R1")
    started = threading.Event()
    release = threading.Event()

    def slow_reissue(_call):
        started.set()
        release.wait(timeout=5)
        return FakeResponse(400, {"error": {"code": "INVALID_TOKEN"}})

    session.route("POST", "/auth/reissue", slow_reissue)

    outcomes = {}

    def call(name: str) -> None:
        outcomes[name] = client.refresh_coordinator.refresh()

    owner = threading.Thread(target=call, args=("owner",))
    owner.start()
    assert started.wait(timeout=5)
    waiter = threading.Thread(target=call, args=("waiter",))
    waiter.start()
    time.sleep(0.2)
    release.set()
    owner.join(timeout=5)
    waiter.join(timeout=5)

    assert outcomes["owner"] == RefreshOutcome(refreshed=False, shared=False)
    assert outcomes["waiter"] == RefreshOutcome(refreshed=False, shared=True)
