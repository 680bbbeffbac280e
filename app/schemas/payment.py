"""Mock payment schemas"""

from typing import Optional
from pydantic import BaseModel


class ChargeRequest(BaseModel):
    """Charge request; fields are checked by the handler so a missing one is a 400"""
    order_id: Optional[int] = None
    amount_cents: Optional[int] = None
    card_number: Optional[str] = None


class Payment(BaseModel):
    order_id: int
    amount_cents: int
    currency: str
    card_brand: str
    card_last4: str
    status: str
    transaction_ref: str
    created_at: str


class ChargeResponse(BaseModel):
    payment: Payment
    message: str
