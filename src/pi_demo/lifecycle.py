"""
Payment lifecycle coordinator.

Reacts to the SDK's lifecycle callbacks and forwards each one to the backend:

- ready_for_server_approval: approve after a fixed delay
- ready_for_server_completion: complete after a fixed delay (txid required)
- incomplete_payment_found: complete right away if the payment has a txid

State is tracked per payment id and every event is checked against
TRANSITIONS, so duplicate or out-of-order callbacks are dropped instead of
producing a second backend call.
"""

import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, Optional, Protocol, Union

from pi_demo.errors import PreconditionError, SubmissionError
from pi_demo.models.payment import PaymentDTO, PaymentRequest
from pi_demo.payments import PaymentsAPI
from pi_demo.sdk import PaymentCallbacks, PaymentSDK
from pi_demo.state import AppState

logger = logging.getLogger(__name__)

DEFAULT_APPROVAL_DELAY_S = 3.0
DEFAULT_COMPLETION_DELAY_S = 3.0

DEMO_MEMO = "Demo app test"
DEMO_METADATA = {"paymentType": "test", "itemId": 1234}
TRANSFER_ERROR = "Unable to request a transfer"


class PaymentState(str, enum.Enum):
    CREATED = "created"
    AWAITING_APPROVAL = "awaiting_approval"
    AWAITING_COMPLETION = "awaiting_completion"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ERRORED = "errored"


TRANSITIONS: dict[PaymentState, frozenset[PaymentState]] = {
    PaymentState.CREATED: frozenset({
        PaymentState.AWAITING_APPROVAL, PaymentState.AWAITING_COMPLETION,
        PaymentState.CANCELLED, PaymentState.ERRORED,
    }),
    PaymentState.AWAITING_APPROVAL: frozenset({
        PaymentState.AWAITING_COMPLETION, PaymentState.CANCELLED, PaymentState.ERRORED,
    }),
    PaymentState.AWAITING_COMPLETION: frozenset({
        PaymentState.COMPLETED, PaymentState.CANCELLED, PaymentState.ERRORED,
    }),
    PaymentState.COMPLETED: frozenset(),
    PaymentState.CANCELLED: frozenset(),
    PaymentState.ERRORED: frozenset(),
}

TERMINAL_STATES = {state for state, targets in TRANSITIONS.items() if not targets}


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class LoopScheduler:
    """Runs delayed callbacks on the running asyncio loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class PaymentCoordinator:
    def __init__(
        self,
        sdk: PaymentSDK,
        payments: PaymentsAPI,
        state: AppState,
        scheduler: Optional[Scheduler] = None,
        approval_delay: float = DEFAULT_APPROVAL_DELAY_S,
        completion_delay: float = DEFAULT_COMPLETION_DELAY_S,
    ):
        self._sdk = sdk
        self._payments = payments
        self._state = state
        self._scheduler = scheduler or LoopScheduler()
        self._approval_delay = approval_delay
        self._completion_delay = completion_delay
        self._states: dict[str, PaymentState] = {}
        # Recovered without a txid; the SDK may still raise ready_for_server_approval for these
        self._recovered: set[str] = set()
        self._timers: set[Cancellable] = set()
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def callbacks(self) -> PaymentCallbacks:
        return PaymentCallbacks(
            on_ready_for_server_approval=self.on_ready_for_server_approval,
            on_ready_for_server_completion=self.on_ready_for_server_completion,
            on_error=self.on_payment_error,
            on_cancel=self.on_payment_cancelled,
        )

    def state_of(self, payment_id: str) -> PaymentState:
        return self._states.get(payment_id, PaymentState.CREATED)

    def payments(self) -> dict[str, PaymentState]:
        return dict(self._states)

    # -- user actions --

    def request_transfer(self, amount: float = 1) -> bool:
        """Submit a test payment. Returns False (and sets the UI error) if the SDK rejects it."""
        self._state.clear_error()
        try:
            request = PaymentRequest(amount=amount, memo=DEMO_MEMO, metadata=dict(DEMO_METADATA))
            self.submit(request)
        except (SubmissionError, ValueError) as e:
            logger.error(f"Payment submission failed: {e}")
            self._state.set_error(TRANSFER_ERROR)
            return False
        return True

    def submit(self, request: PaymentRequest) -> None:
        try:
            self._sdk.create_payment(request, self.callbacks)
        except Exception as e:
            raise SubmissionError(f"SDK rejected payment request: {e}")
        logger.info(f"Payment submitted: amount={request.amount} memo={request.memo!r}")

    # -- SDK callbacks --

    def on_incomplete_payment_found(self, payment: Union[PaymentDTO, dict[str, Any]]) -> None:
        if not isinstance(payment, PaymentDTO):
            payment = PaymentDTO.model_validate(payment)
        payment_id = payment.identifier
        txid = payment.txid
        logger.info(f"Incomplete payment found: {payment_id} (txid={txid})")

        if not txid:
            if self._transition(payment_id, PaymentState.AWAITING_APPROVAL):
                self._recovered.add(payment_id)
            return
        if self._transition(payment_id, PaymentState.AWAITING_COMPLETION):
            self._spawn(
                payment_id, "complete",
                lambda: self._payments.complete(payment_id, txid),
                on_success=lambda: self._transition(payment_id, PaymentState.COMPLETED),
            )

    def on_ready_for_server_approval(self, payment_id: str) -> None:
        if payment_id in self._recovered and self.state_of(payment_id) == PaymentState.AWAITING_APPROVAL:
            self._recovered.discard(payment_id)
        elif not self._transition(payment_id, PaymentState.AWAITING_APPROVAL):
            return
        logger.info(f"Ready for server approval: {payment_id}, approving in {self._approval_delay}s")
        self._after(
            self._approval_delay, payment_id, "approve",
            lambda: self._payments.approve(payment_id),
        )

    def on_ready_for_server_completion(self, payment_id: str, txid: Optional[str]) -> None:
        if not txid:
            raise PreconditionError(f"ready_for_server_completion for {payment_id} carried no txid")
        if not self._transition(payment_id, PaymentState.AWAITING_COMPLETION):
            return
        logger.info(f"Ready for server completion: {payment_id} txid={txid}, completing in {self._completion_delay}s")
        self._recovered.discard(payment_id)
        self._after(
            self._completion_delay, payment_id, "complete",
            lambda: self._payments.complete(payment_id, txid),
            on_success=lambda: self._transition(payment_id, PaymentState.COMPLETED),
        )

    def on_payment_error(
        self, error: BaseException, payment: Optional[Union[PaymentDTO, dict[str, Any]]] = None,
    ) -> None:
        logger.error(f"Payment error: {error}")
        if payment is None:
            return
        if not isinstance(payment, PaymentDTO):
            payment = PaymentDTO.model_validate(payment)
        logger.error(f"Payment with error: {payment}")
        self._transition(payment.identifier, PaymentState.ERRORED)

    def on_payment_cancelled(self, payment_id: str) -> None:
        logger.info(f"Payment cancelled: {payment_id}")
        self._transition(payment_id, PaymentState.CANCELLED)

    # -- plumbing --

    def _transition(self, payment_id: str, target: PaymentState) -> bool:
        current = self.state_of(payment_id)
        if target not in TRANSITIONS[current]:
            logger.warning(f"Dropping {target.value} for payment {payment_id}: already {current.value}")
            return False
        self._states[payment_id] = target
        return True

    def _after(
        self,
        delay: float,
        payment_id: str,
        action: str,
        call: Callable[[], Awaitable[Any]],
        on_success: Optional[Callable[[], Any]] = None,
    ) -> None:
        timer: Optional[Cancellable] = None

        def fire() -> None:
            self._timers.discard(timer)  # type: ignore[arg-type]
            current = self.state_of(payment_id)
            if current in TERMINAL_STATES:
                logger.info(f"Skipping {action} for payment {payment_id}: {current.value}")
                return
            self._spawn(payment_id, action, call, on_success)

        timer = self._scheduler.call_later(delay, fire)
        self._timers.add(timer)

    def _spawn(
        self,
        payment_id: str,
        action: str,
        call: Callable[[], Awaitable[Any]],
        on_success: Optional[Callable[[], Any]] = None,
    ) -> "asyncio.Task[Any]":
        task = asyncio.get_running_loop().create_task(self._call(payment_id, action, call, on_success))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _call(
        self,
        payment_id: str,
        action: str,
        call: Callable[[], Awaitable[Any]],
        on_success: Optional[Callable[[], Any]],
    ) -> None:
        try:
            await call()
        except Exception as e:
            logger.error(f"{action} failed for payment {payment_id}: {e}")
            return
        if on_success is not None:
            on_success()

    async def drain(self) -> None:
        """Wait for every backend call already started."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel delayed calls that have not fired yet. In-flight calls are left alone."""
        for timer in list(self._timers):
            timer.cancel()
        self._timers.clear()
