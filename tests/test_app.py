"""DemoApp: SDK bootstrap, authentication, rendering and share."""

import logging

import pytest

from pi_demo.app import SHARE_MESSAGE, SHARE_TITLE
from pi_demo.auth import Auth
from pi_demo.errors import AuthError
from pi_demo.models.payment import PaymentDTO
from pi_demo.models.session import Session
from pi_demo.state import AppState

from conftest import FakeSDK


def _pending_with_txid(identifier: str, txid: str) -> PaymentDTO:
    return PaymentDTO.model_validate({
        "identifier": identifier,
        "transaction": {"txid": txid, "verified": True, "_link": "https://example"},
    })


class TestAuth:
    @pytest.mark.asyncio
    async def test_returns_session(self):
        sdk = FakeSDK(username="alice")
        session = await Auth(sdk).authenticate(["username", "payments"], lambda p: None)
        assert session.username == "alice"
        assert session.auth.access_token == "access-token"
        assert session.auth.user.uid == "uid-1"

    @pytest.mark.asyncio
    async def test_sdk_failure_becomes_auth_error(self):
        sdk = FakeSDK(auth_error=PermissionError("user denied payments scope"))
        with pytest.raises(AuthError) as exc:
            await Auth(sdk).authenticate(["username", "payments"], lambda p: None)
        assert exc.value.code == "auth_error"
        assert "user denied" in str(exc.value)

    @pytest.mark.asyncio
    async def test_malformed_result_becomes_auth_error(self):
        class NoUserSDK(FakeSDK):
            async def authenticate(self, scopes, on_incomplete_payment_found):
                return {"accessToken": "x"}

        with pytest.raises(AuthError):
            await Auth(NoUserSDK()).authenticate(["username"], lambda p: None)


class TestDemoApp:
    @pytest.mark.asyncio
    async def test_initializes_sdk_in_sandbox(self, make_app, sdk):
        make_app()
        assert sdk.init_calls == [("2.0", True)]

    @pytest.mark.asyncio
    async def test_load_user_renders_welcome(self, make_app, sdk):
        app = make_app()
        assert app.render() == "Loading ..."

        session = await app.load_user()
        assert session.username == "alice"
        assert sdk.scopes == ["username", "payments"]
        assert app.state.current_user == "alice"
        assert app.render() == "Welcome, @alice!"

    @pytest.mark.asyncio
    async def test_load_user_twice_keeps_first_session(self, make_app, recorder):
        sdk = FakeSDK(pending=[_pending_with_txid("pay_a", "tx_a")])
        app = make_app(sdk)
        first = await app.load_user()
        second = await app.load_user()
        await app.coordinator.drain()

        assert second is first
        assert sdk.auth_calls == 1
        assert recorder.paths() == ["/v2/payments/pay_a/complete"]
        assert app.render() == "Welcome, @alice!"

    @pytest.mark.asyncio
    async def test_failed_login_stays_loading(self, make_app, caplog):
        caplog.set_level(logging.ERROR, logger="pi_demo")
        app = make_app(FakeSDK(auth_error=ConnectionResetError("offline")))

        assert await app.load_user() is None
        assert app.state.session is None
        assert app.state.error is None
        assert app.render() == "Loading ..."
        assert "Unable to fetch user" in caplog.text

    @pytest.mark.asyncio
    async def test_render_shows_submission_error(self, make_app):
        sdk = FakeSDK(create_error=RuntimeError("boom"))
        app = make_app(sdk)
        await app.load_user()
        app.request_transfer()
        assert app.render() == "Welcome, @alice!\nUnable to request a transfer"

    @pytest.mark.asyncio
    async def test_share(self, make_app, sdk):
        app = make_app()
        app.share()
        assert sdk.shared == [(SHARE_TITLE, SHARE_MESSAGE)]
        assert SHARE_TITLE == "Check out the demo app!"


class TestAppState:
    def test_error_lifecycle(self):
        state = AppState()
        assert state.error is None
        state.set_error("Unable to request a transfer")
        assert state.error == "Unable to request a transfer"
        state.clear_error()
        assert state.error is None

    def test_session_set_once(self):
        state = AppState()
        assert state.current_user is None
        state.set_user(Session(username="bob"))
        assert state.current_user == "bob"
        with pytest.raises(RuntimeError):
            state.set_user(Session(username="mallory"))
