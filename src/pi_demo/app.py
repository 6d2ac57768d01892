"""
DemoApp — wires the SDK, the backend gateway and the payment coordinator together.
"""

import logging
from typing import Optional

from pi_demo.auth import Auth
from pi_demo.errors import AuthError
from pi_demo.lifecycle import (
    DEFAULT_APPROVAL_DELAY_S,
    DEFAULT_COMPLETION_DELAY_S,
    PaymentCoordinator,
    Scheduler,
)
from pi_demo.models.session import Session
from pi_demo.payments import PaymentsAPI
from pi_demo.sdk import DEFAULT_SCOPES, SDK_VERSION, PaymentSDK
from pi_demo.state import AppState
from pi_demo.transport.http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S, HttpClient

logger = logging.getLogger(__name__)

SHARE_TITLE = "Check out the demo app!"
SHARE_MESSAGE = "Join the Pi Network developer program and create your own app on Pi Network."


class DemoApp:
    """Async demo client. One instance per UI session."""

    def __init__(
        self,
        sdk: PaymentSDK,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        sandbox: bool = True,
        timeout: float = DEFAULT_TIMEOUT_S,
        scheduler: Optional[Scheduler] = None,
        approval_delay: float = DEFAULT_APPROVAL_DELAY_S,
        completion_delay: float = DEFAULT_COMPLETION_DELAY_S,
        http: Optional[HttpClient] = None,
    ):
        self._sdk = sdk
        self._sdk.init(SDK_VERSION, sandbox)

        self.http = http or HttpClient(api_key=api_key, base_url=base_url, timeout=timeout)
        self.auth = Auth(sdk)
        self.payments = PaymentsAPI(self.http)
        self.state = AppState()
        self.coordinator = PaymentCoordinator(
            sdk,
            self.payments,
            self.state,
            scheduler=scheduler,
            approval_delay=approval_delay,
            completion_delay=completion_delay,
        )

    async def load_user(self) -> Optional[Session]:
        """Authenticate once; on failure log and stay signed out."""
        if self.state.session is not None:
            return self.state.session
        try:
            session = await self.auth.authenticate(DEFAULT_SCOPES, self.coordinator.on_incomplete_payment_found)
        except AuthError as e:
            logger.error(f"Unable to fetch user: {e}")
            return None
        self.state.set_user(session)
        return session

    def request_transfer(self, amount: float = 1) -> bool:
        return self.coordinator.request_transfer(amount)

    def share(self) -> None:
        self._sdk.open_share_dialog(SHARE_TITLE, SHARE_MESSAGE)

    def render(self) -> str:
        if not self.state.current_user:
            return "Loading ..."
        lines = [f"Welcome, @{self.state.current_user}!"]
        if self.state.error:
            lines.append(self.state.error)
        return "\n".join(lines)

    async def close(self) -> None:
        self.coordinator.close()
        await self.coordinator.drain()
        await self.http.close()
