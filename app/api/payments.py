"""Mock card payments; nothing is charged"""

import random
import re
import time
from datetime import datetime, timezone

from fastapi import APIRouter
import structlog

from app.config import settings
from app.errors import ValidationError
from app.schemas.payment import ChargeRequest, ChargeResponse, Payment

router = APIRouter()
logger = structlog.get_logger()

BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _base36(value: int) -> str:
    digits = ""
    while True:
        value, rem = divmod(value, 36)
        digits = BASE36[rem] + digits
        if not value:
            return digits


def make_ref() -> str:
    """MOCK_<millis in base36>_<6 random digits>"""
    return f"MOCK_{_base36(int(time.time() * 1000))}_{random.randint(0, 999999):06d}"


def detect_brand(card_number: str) -> str:
    n = re.sub(r"\s+", "", card_number)
    if re.fullmatch(r"4\d{12}(\d{3})?", n):
        return "VISA"
    if re.fullmatch(r"5[1-5]\d{14}", n):
        return "MASTERCARD"
    if re.fullmatch(r"3[47]\d{13}", n):
        return "AMEX"
    return "UNKNOWN"


def luhn_valid(card_number: str) -> bool:
    digits = re.sub(r"\s+", "", card_number)
    if not re.fullmatch(r"\d{12,19}", digits):
        return False
    total = 0
    for i, ch in enumerate(reversed(digits)):
        n = int(ch)
        if i % 2 == 1:
            n *= 2
            if n > 9:
                n -= 9
        total += n
    return total % 10 == 0


@router.post("/charge", response_model=ChargeResponse)
async def charge(request: ChargeRequest):
    """Simulated charge: any card succeeds for a positive amount"""
    if not request.order_id or not request.amount_cents or not request.card_number:
        raise ValidationError("Missing order_id / amount_cents / card_number")

    normalized = re.sub(r"\s+", "", request.card_number)
    ok = request.amount_cents > 0

    payment = Payment(
        order_id=request.order_id,
        amount_cents=request.amount_cents,
        currency=settings.currency,
        card_brand=detect_brand(request.card_number),
        card_last4=normalized[-4:],
        status="success" if ok else "failed",
        transaction_ref=make_ref(),
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    logger.info(
        "Mock payment",
        order_id=payment.order_id,
        status=payment.status,
        card_brand=payment.card_brand,
        luhn_ok=luhn_valid(request.card_number),
    )

    return ChargeResponse(
        payment=payment,
        message="Payment successful (mock)" if ok else "Payment failed (mock)",
    )
