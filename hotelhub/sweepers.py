# Background sweepers for periodic maintenance tasks.
# Invoked from the worker thread started in main.py, or directly in tests.
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .db import SessionLocal
from . import models
from .timeutils import local_now

logger = logging.getLogger("hotelhub.payments")


def settle_due_payments(db: Optional[Session] = None, now: Optional[datetime] = None) -> int:
    """
    Mark pending payments whose settlement deadline has passed as 'completed'.

    Semantics:
    - Only rows with status == 'pending' and settle_after <= now are touched.
    - paid_at is stamped with `now` and a stub transaction id is assigned.
    - Booking status is left alone.
    - Idempotent across repeated runs; deadlines are persisted, so work
      missed while the process was down is picked up on the next run.

    Accepts an optional Session; otherwise creates and cleans up its own.
    Returns the number of payments settled.
    """
    created_session = False
    if db is None:
        db = SessionLocal()
        created_session = True

    now = now or local_now()
    try:
        due = (
            db.query(models.Payment)
            .filter(
                models.Payment.status == "pending",
                models.Payment.settle_after.is_not(None),
                models.Payment.settle_after <= now,
            )
            .all()
        )
        for payment in due:
            payment.status = "completed"
            payment.paid_at = now
            payment.transaction_id = payment.transaction_id or f"stub_{uuid.uuid4().hex}"
        if due:
            db.commit()
            logger.info("payments.settled", extra={"count": len(due)})
        return len(due)
    except Exception:
        db.rollback()
        raise
    finally:
        if created_session:
            db.close()
