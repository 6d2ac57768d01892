"""
Auth module — user authentication through the payment SDK.
"""

import logging

from pi_demo.errors import AuthError
from pi_demo.models.session import AuthResult, Session
from pi_demo.sdk import IncompletePaymentCallback, PaymentSDK

logger = logging.getLogger(__name__)


class Auth:
    def __init__(self, sdk: PaymentSDK):
        self._sdk = sdk

    async def authenticate(
        self,
        scopes: list[str],
        on_incomplete_payment_found: IncompletePaymentCallback,
    ) -> Session:
        """Run the SDK authentication flow.

        Pending payments from earlier sessions are handed to
        on_incomplete_payment_found by the SDK, possibly before or after
        this coroutine returns.
        """
        try:
            raw = await self._sdk.authenticate(list(scopes), on_incomplete_payment_found)
            result = AuthResult.model_validate(raw)
        except Exception as e:
            raise AuthError(f"Failed to authenticate: {e}")
        logger.info(f"Authenticated as {result.user.username}")
        return Session(username=result.user.username, auth=result)
