"""
Payments REST API — the developer-side approve/complete calls.

Each call is a single POST with no retries. A real backend would add
idempotency keys and retry; this is the stand-in used by the demo.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pi_demo.errors import PreconditionError
from pi_demo.transport.http import HttpClient

logger = logging.getLogger(__name__)


class PaymentsAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def approve(self, payment_id: str) -> Any:
        """Server-side approval. Empty body."""
        result = await self._http.post(f"/payments/{payment_id}/approve", {})
        logger.info(f"approve response for {payment_id}: {result}")
        return result

    async def complete(self, payment_id: str, txid: Optional[str]) -> Any:
        """Server-side completion. Requires the blockchain transaction id."""
        if not txid:
            raise PreconditionError(f"can't complete payment {payment_id} without a txid")
        result = await self._http.post(f"/payments/{payment_id}/complete", {"txid": txid})
        logger.info(f"complete response for {payment_id}: {result}")
        return result

    async def get(self, payment_id: str) -> Any:
        return await self._http.get(f"/payments/{payment_id}")

    async def cancel(self, payment_id: str) -> Any:
        return await self._http.post(f"/payments/{payment_id}/cancel", {})
