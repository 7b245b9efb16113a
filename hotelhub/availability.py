# Room availability: date-range overlap against confirmed bookings.
# Read-only helpers shared by the public availability endpoint and the booking write paths.
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from . import models


class InvalidDateRange(ValueError):
    """Raised for a window whose check-in is not strictly before its check-out."""


def validate_window(check_in: Optional[datetime], check_out: Optional[datetime]) -> None:
    if check_in is None or check_out is None:
        raise InvalidDateRange("Check-in and check-out dates are required")
    if check_in >= check_out:
        raise InvalidDateRange("Check-in date must be before check-out date")


def overlaps_window(check_in: datetime, check_out: datetime):
    """
    SQL predicate: a booking overlaps the closed window [check_in, check_out].

    Three clauses, all boundary-inclusive:
    - the booking starts inside the window, or
    - the booking ends inside the window, or
    - the booking spans the whole window.

    A booking ending exactly at check_in conflicts; half-open intervals are not used.
    """
    b = models.Booking
    return or_(
        and_(b.check_in_date >= check_in, b.check_in_date <= check_out),
        and_(b.check_out_date >= check_in, b.check_out_date <= check_out),
        and_(b.check_in_date <= check_in, b.check_out_date >= check_out),
    )


def find_conflicting_bookings(
    db: Session,
    room_id: UUID,
    check_in: datetime,
    check_out: datetime,
    exclude_booking_id: Optional[UUID] = None,
) -> List[models.Booking]:
    """Confirmed bookings on `room_id` that overlap the window, optionally ignoring one booking."""
    validate_window(check_in, check_out)
    q = db.query(models.Booking).filter(
        models.Booking.room_id == room_id,
        models.Booking.status == "confirmed",
        overlaps_window(check_in, check_out),
    )
    if exclude_booking_id is not None:
        q = q.filter(models.Booking.id != exclude_booking_id)
    return q.all()


def find_available_rooms(db: Session, hotel_id: UUID, check_in: datetime, check_out: datetime) -> List[models.Room]:
    """
    Rooms of `hotel_id` bookable for the window.

    A room qualifies when its status is 'available', it is active, and no
    confirmed booking on it overlaps the window. An unknown hotel yields an
    empty list; an invalid window raises InvalidDateRange.
    """
    validate_window(check_in, check_out)
    booked_rooms = select(models.Booking.room_id).where(
        models.Booking.hotel_id == hotel_id,
        models.Booking.status == "confirmed",
        overlaps_window(check_in, check_out),
    )
    return (
        db.query(models.Room)
        .filter(
            models.Room.hotel_id == hotel_id,
            models.Room.status == "available",
            models.Room.is_active.is_(True),
            models.Room.id.not_in(booked_rooms),
        )
        .order_by(models.Room.room_number.asc())
        .all()
    )
