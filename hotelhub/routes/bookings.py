# Booking endpoints: create, list (role-scoped), read, update and per-booking payments.
# Confirmation is the only transition that can double-book a room, so it runs under
# a per-room lock, a row lock on the room and, on PostgreSQL, an exclusion constraint.
from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..availability import find_conflicting_bookings
from ..db import get_db, is_sqlite
from .. import models, schemas
from ..locks import room_lock
from ..permissions import RequestContext, ensure_booking_access, require_roles
from ..rate_limit import rate_limit
from ._helpers import apply_updates, get_or_404

router = APIRouter()
logger = logging.getLogger("hotelhub.bookings")


def _conflict(detail: str = "Room is already booked for these dates") -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def _busy() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"error": "Room is being booked by another request, retry shortly", "retry_after": 1},
    )


def _lock_room_row(db: Session, room_id: UUID) -> None:
    # SELECT ... FOR UPDATE serializes confirmations per room; SQLite serializes writers itself
    if not is_sqlite():
        db.query(models.Room).filter(models.Room.id == room_id).with_for_update().first()


@router.post(
    "/bookings",
    response_model=schemas.BookingRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("write"))],
)
def create_booking(
    payload: schemas.BookingCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles()),
) -> models.Booking:
    """
    First step of the booking saga: record a 'pending' booking for the caller.

    The total amount is taken from the client as-is. The client follows up
    with POST /payments; if that step fails the booking stays pending with no
    payment and shows up under GET /bookings?unpaid=true.
    """
    hotel = get_or_404(db, models.Hotel, payload.hotel_id, "Hotel")
    room = get_or_404(db, models.Room, payload.room_id, "Room")
    if room.hotel_id != hotel.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Room does not belong to this hotel")

    if find_conflicting_bookings(db, room.id, payload.check_in_date, payload.check_out_date):
        raise _conflict()

    booking = models.Booking(
        user_id=ctx.user_id,
        hotel_id=hotel.id,
        room_id=room.id,
        check_in_date=payload.check_in_date,
        check_out_date=payload.check_out_date,
        guests=payload.guests,
        total_amount=payload.total_amount,
        special_requests=payload.special_requests,
        status="pending",
    )
    db.add(booking)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(booking)
    logger.info(
        "booking.created",
        extra={"booking_id": str(booking.id), "room_id": str(room.id), "user_id": str(ctx.user_id)},
    )
    return booking


@router.get("/bookings", response_model=List[schemas.BookingRead])
def list_bookings(
    hotel_id: Optional[UUID] = Query(None, alias="hotelId"),
    status_filter: Optional[schemas.BookingStatus] = Query(None, alias="status"),
    unpaid: bool = Query(False),
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles()),
) -> List[models.Booking]:
    """
    Bookings visible to the caller, newest first.

    Scope: customers see their own, merchants those of hotels they own,
    admins everything. `unpaid=true` keeps only bookings without any payment
    row, which is how half-finished booking sagas are found and reconciled.
    Every matching booking is returned unless the caller passes `limit`.
    """
    q = db.query(models.Booking)
    if ctx.role == "customer":
        q = q.filter(models.Booking.user_id == ctx.user_id)
    elif ctx.role == "merchant":
        q = q.join(models.Hotel, models.Hotel.id == models.Booking.hotel_id).filter(
            models.Hotel.merchant_id == ctx.user_id
        )

    if hotel_id is not None:
        q = q.filter(models.Booking.hotel_id == hotel_id)
    if status_filter is not None:
        q = q.filter(models.Booking.status == status_filter)
    if unpaid:
        q = q.filter(~exists().where(models.Payment.booking_id == models.Booking.id))

    q = q.order_by(models.Booking.created_at.desc(), models.Booking.id.desc())
    if offset:
        q = q.offset(offset)
    if limit is not None:
        q = q.limit(limit)
    return q.all()


@router.get("/bookings/{booking_id}", response_model=schemas.BookingRead)
def get_booking(
    booking_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles()),
) -> models.Booking:
    booking = get_or_404(db, models.Booking, booking_id, "Booking")
    ensure_booking_access(db, ctx, booking)
    return booking


@router.get("/bookings/{booking_id}/payments", response_model=List[schemas.PaymentRead])
def list_booking_payments(
    booking_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles()),
) -> List[models.Payment]:
    booking = get_or_404(db, models.Booking, booking_id, "Booking")
    ensure_booking_access(db, ctx, booking)
    return (
        db.query(models.Payment)
        .filter(models.Payment.booking_id == booking.id)
        .order_by(models.Payment.created_at.asc())
        .all()
    )


@router.put(
    "/bookings/{booking_id}",
    response_model=schemas.BookingRead,
    dependencies=[Depends(rate_limit("write"))],
)
def update_booking(
    booking_id: UUID,
    payload: schemas.BookingUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles()),
) -> models.Booking:
    """
    Partially update a booking the caller can access (guest, hotel owner or admin).

    Any update that leaves the booking 'confirmed' re-checks the room for
    overlapping confirmed bookings inside the critical section.
    """
    booking = get_or_404(db, models.Booking, booking_id, "Booking")
    ensure_booking_access(db, ctx, booking)

    check_in = payload.check_in_date or booking.check_in_date
    check_out = payload.check_out_date or booking.check_out_date
    if check_in >= check_out:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="checkInDate must be before checkOutDate")

    target_status = payload.status or booking.status
    previous_status = booking.status
    if target_status != "confirmed":
        apply_updates(booking, payload)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(booking)
        return booking

    with room_lock(booking.room_id) as locked:
        if not locked:
            raise _busy()
        try:
            _lock_room_row(db, booking.room_id)
            if find_conflicting_bookings(db, booking.room_id, check_in, check_out, exclude_booking_id=booking.id):
                raise _conflict()
            apply_updates(booking, payload)
            db.commit()
        except IntegrityError as exc:
            # raised by the PostgreSQL exclusion constraint when a concurrent confirmation won
            db.rollback()
            logger.warning("booking.confirm_conflict", extra={"booking_id": str(booking_id), "error": str(exc.orig)})
            raise _conflict()
        except Exception:
            db.rollback()
            raise

    db.refresh(booking)
    if previous_status != "confirmed":
        logger.info("booking.confirmed", extra={"booking_id": str(booking.id), "room_id": str(booking.room_id)})
    return booking
