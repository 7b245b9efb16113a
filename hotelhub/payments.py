# Payments: second step of the booking saga.
# There is no real gateway; a payment is recorded as 'pending' with a persisted settlement
# deadline and the settlement sweeper (sweepers.py) later marks it 'completed'.
from __future__ import annotations

import logging
import os
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .db import get_db
from . import models, schemas
from .permissions import RequestContext, require_roles
from .rate_limit import rate_limit
from .routes._helpers import get_or_404
from .timeutils import local_now

router = APIRouter()
logger = logging.getLogger("hotelhub.payments")

# Delay before the stub gateway settles a pending payment
PAYMENT_SETTLE_SECONDS = float(os.getenv("PAYMENT_SETTLE_SECONDS", "2"))


@router.post(
    "/payments",
    response_model=schemas.PaymentRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("write"))],
)
def create_payment(
    payload: schemas.PaymentCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles()),
) -> models.Payment:
    """
    Record a pending payment for one of the caller's bookings.

    Settlement is asynchronous and does not change the booking's status.
    """
    booking = get_or_404(db, models.Booking, payload.booking_id, "Booking")
    if booking.user_id != ctx.user_id and ctx.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to pay for this booking")
    if booking.status == "cancelled":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Booking is cancelled")

    payment = models.Payment(
        booking_id=booking.id,
        amount=payload.amount,
        payment_method=payload.payment_method,
        status="pending",
        settle_after=local_now() + timedelta(seconds=PAYMENT_SETTLE_SECONDS),
    )
    db.add(payment)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(payment)
    logger.info(
        "payment.created",
        extra={"payment_id": str(payment.id), "booking_id": str(booking.id), "settle_after": payment.settle_after.isoformat()},
    )
    return payment
