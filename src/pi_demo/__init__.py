"""
pi-demo — reference client for Pi Network payments.

Authenticates a user through the Pi SDK, submits a test payment and drives it
through server-side approval and completion.
"""

from pi_demo.app import DemoApp
from pi_demo.auth import Auth
from pi_demo.payments import PaymentsAPI
from pi_demo.lifecycle import PaymentCoordinator, PaymentState
from pi_demo.sdk import PaymentCallbacks, PaymentSDK
from pi_demo.errors import PiDemoError, AuthError, SubmissionError, PreconditionError, GatewayError

__version__ = "0.1.0"
__all__ = [
    "DemoApp",
    "Auth",
    "PaymentsAPI",
    "PaymentCoordinator",
    "PaymentState",
    "PaymentCallbacks",
    "PaymentSDK",
    "PiDemoError",
    "AuthError",
    "SubmissionError",
    "PreconditionError",
    "GatewayError",
]
