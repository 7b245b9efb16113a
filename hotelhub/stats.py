# Dashboard aggregates: simple predicate counts and sums, no pagination.
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from . import models
from .timeutils import day_window


def _count(db: Session, model, *criteria) -> int:
    return db.query(func.count(model.id)).filter(*criteria).scalar() or 0


def _sum_confirmed(db: Session, *criteria) -> float:
    total = (
        db.query(func.coalesce(func.sum(models.Booking.total_amount), 0))
        .filter(models.Booking.status == "confirmed", *criteria)
        .scalar()
    )
    return float(total or 0)


def hotel_stats(db: Session, hotel_id: UUID, now: Optional[datetime] = None) -> dict:
    """
    Per-hotel dashboard figures.

    - total_rooms: active rooms
    - occupied_rooms: rooms whose operational status is 'occupied'
    - today_check_ins: bookings (any status) checking in today
    - today_revenue: confirmed bookings created today

    "Today" is the server-local [midnight, next midnight) window.
    """
    start, end = day_window(now)
    return {
        "total_rooms": _count(
            db, models.Room, models.Room.hotel_id == hotel_id, models.Room.is_active.is_(True)
        ),
        "occupied_rooms": _count(
            db, models.Room, models.Room.hotel_id == hotel_id, models.Room.status == "occupied"
        ),
        "today_check_ins": _count(
            db,
            models.Booking,
            models.Booking.hotel_id == hotel_id,
            models.Booking.check_in_date >= start,
            models.Booking.check_in_date < end,
        ),
        "today_revenue": _sum_confirmed(
            db,
            models.Booking.hotel_id == hotel_id,
            models.Booking.created_at >= start,
            models.Booking.created_at < end,
        ),
    }


def platform_stats(db: Session) -> dict:
    return {
        "total_merchants": _count(db, models.User, models.User.role == "merchant"),
        "total_users": _count(db, models.User, models.User.role == "customer"),
        "total_bookings": _count(db, models.Booking),
        "total_revenue": _sum_confirmed(db),
    }
