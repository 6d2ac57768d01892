"""
Payment models — what the app submits to the SDK and what the platform reports back.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class PaymentRequest(BaseModel):
    """Payment data handed to the SDK's create_payment"""
    amount: float = Field(gt=0)
    memo: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class PaymentStatus(BaseModel):
    developer_approved: bool = False
    transaction_verified: bool = False
    developer_completed: bool = False
    cancelled: bool = False
    user_cancelled: bool = False


class TransactionInfo(BaseModel):
    txid: str
    verified: bool = False
    link: Optional[str] = Field(default=None, alias="_link")

    model_config = ConfigDict(populate_by_name=True)


class PaymentDTO(BaseModel):
    """Platform payment record (SDK incomplete-payment callback, backend API responses)"""
    identifier: str
    user_uid: Optional[str] = None
    amount: Optional[float] = None
    memo: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)
    from_address: Optional[str] = None
    to_address: Optional[str] = None
    direction: Optional[str] = None
    network: Optional[str] = None
    created_at: Optional[str] = None
    status: PaymentStatus = Field(default_factory=PaymentStatus)
    transaction: Optional[TransactionInfo] = None

    @property
    def txid(self) -> Optional[str]:
        return self.transaction.txid if self.transaction else None
