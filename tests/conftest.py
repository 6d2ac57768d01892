"""Shared test doubles: an in-memory SDK, a manual scheduler and an HTTP recorder."""

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from pi_demo.app import DemoApp
from pi_demo.transport.http import HttpClient

API_KEY = "Key test-key"


class FakeSDK:
    def __init__(
        self,
        username: str = "alice",
        pending: Optional[list[Any]] = None,
        auth_error: Optional[Exception] = None,
        create_error: Optional[Exception] = None,
    ):
        self.username = username
        self.pending = pending or []
        self.auth_error = auth_error
        self.create_error = create_error
        self.init_calls: list[tuple[str, bool]] = []
        self.scopes: Optional[list[str]] = None
        self.auth_calls = 0
        self.created: list[tuple[Any, Any]] = []
        self.shared: list[tuple[str, str]] = []

    def init(self, version: str, sandbox: bool) -> None:
        self.init_calls.append((version, sandbox))

    async def authenticate(self, scopes, on_incomplete_payment_found):
        self.scopes = scopes
        self.auth_calls += 1
        if self.auth_error:
            raise self.auth_error
        for payment in self.pending:
            on_incomplete_payment_found(payment)
        return {"accessToken": "access-token", "user": {"uid": "uid-1", "username": self.username}}

    def create_payment(self, payment_data, callbacks) -> None:
        if self.create_error:
            raise self.create_error
        self.created.append((payment_data, callbacks))

    def open_share_dialog(self, title: str, message: str) -> None:
        self.shared.append((title, message))


class TimerHandle:
    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Holds delayed callbacks until run_all() is called."""

    def __init__(self) -> None:
        self.pending: list[TimerHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(delay, callback)
        self.pending.append(handle)
        return handle

    def run_all(self) -> None:
        due, self.pending = self.pending, []
        for handle in due:
            if not handle.cancelled:
                handle.callback()


class Recorder:
    """httpx.MockTransport handler that records requests and echoes a payment record."""

    def __init__(self, status_code: int = 200, error: Optional[Exception] = None):
        self.status_code = status_code
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error:
            raise self.error
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"error": "bad_request"})
        # /v2/payments/{id}/{action}
        parts = request.url.path.split("/")
        body = json.loads(request.content) if request.content else {}
        transaction = {"txid": body["txid"], "verified": True, "_link": "https://example"} if "txid" in body else None
        return httpx.Response(200, json={
            "identifier": parts[3],
            "amount": 1,
            "memo": "Demo app test",
            "status": {"developer_approved": True, "developer_completed": "txid" in body},
            "transaction": transaction,
        })

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def sdk() -> FakeSDK:
    return FakeSDK()


@pytest.fixture
def make_http(recorder):
    def _make(handler: Optional[Recorder] = None) -> HttpClient:
        return HttpClient(api_key=API_KEY, transport=httpx.MockTransport(handler or recorder))
    return _make


@pytest.fixture
def make_app(sdk, scheduler, make_http):
    def _make(sdk_override: Optional[FakeSDK] = None, handler: Optional[Recorder] = None, **kwargs: Any) -> DemoApp:
        kwargs.setdefault("scheduler", scheduler)
        return DemoApp(sdk_override or sdk, api_key=API_KEY, http=make_http(handler), **kwargs)
    return _make
