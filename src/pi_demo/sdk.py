"""
Boundary of the external payment SDK.

The SDK owns the authoritative payment state and raises lifecycle events by
calling the callbacks passed to create_payment(). Callbacks are plain callables
invoked on the event loop; each runs to completion before the next one.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, Union

from pi_demo.models.payment import PaymentDTO, PaymentRequest

SDK_VERSION = "2.0"
DEFAULT_SCOPES = ["username", "payments"]

IncompletePaymentCallback = Callable[[PaymentDTO], None]


@dataclass(frozen=True)
class PaymentCallbacks:
    on_ready_for_server_approval: Callable[[str], None]
    on_ready_for_server_completion: Callable[[str, Optional[str]], None]
    on_error: Callable[[BaseException, Optional[Union[PaymentDTO, dict[str, Any]]]], None]
    on_cancel: Callable[[str], None]


class PaymentSDK(Protocol):
    def init(self, version: str, sandbox: bool) -> None: ...

    def authenticate(
        self, scopes: list[str], on_incomplete_payment_found: IncompletePaymentCallback,
    ) -> Awaitable[dict[str, Any]]: ...

    def create_payment(self, payment_data: PaymentRequest, callbacks: PaymentCallbacks) -> None: ...

    def open_share_dialog(self, title: str, message: str) -> None: ...
