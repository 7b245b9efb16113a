# Room and room-type endpoints, plus the public availability search.
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..availability import InvalidDateRange, find_available_rooms
from ..db import get_db
from .. import models, schemas
from ..permissions import MERCHANT_OR_ADMIN, RequestContext, ensure_hotel_manager, require_roles
from ..rate_limit import rate_limit
from ..timeutils import as_local_naive
from ._helpers import apply_updates, get_or_404

router = APIRouter()
logger = logging.getLogger("hotelhub.rooms")


def _room_type_of_hotel(db: Session, room_type_id: UUID, hotel_id: UUID) -> models.RoomType:
    room_type = get_or_404(db, models.RoomType, room_type_id, "Room type")
    if room_type.hotel_id != hotel_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Room type belongs to another hotel")
    return room_type


# Rooms

@router.get("/hotels/{hotel_id}/rooms", response_model=List[schemas.RoomRead])
def list_rooms(hotel_id: UUID, db: Session = Depends(get_db)) -> List[models.Room]:
    return (
        db.query(models.Room)
        .filter(models.Room.hotel_id == hotel_id)
        .order_by(models.Room.room_number.asc())
        .all()
    )


@router.get("/hotels/{hotel_id}/available-rooms", response_model=List[schemas.RoomRead])
def list_available_rooms(
    hotel_id: UUID,
    check_in: Optional[datetime] = Query(None, alias="checkIn"),
    check_out: Optional[datetime] = Query(None, alias="checkOut"),
    db: Session = Depends(get_db),
) -> List[models.Room]:
    """
    Rooms free for the [checkIn, checkOut] window.

    Missing or inverted dates are a 400; an unknown hotel simply has no rooms.
    """
    if check_in is not None:
        check_in = as_local_naive(check_in)
    if check_out is not None:
        check_out = as_local_naive(check_out)
    try:
        return find_available_rooms(db, hotel_id, check_in, check_out)
    except InvalidDateRange as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post(
    "/hotels/{hotel_id}/rooms",
    response_model=schemas.RoomRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("write"))],
)
def create_room(
    hotel_id: UUID,
    payload: schemas.RoomCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(*MERCHANT_OR_ADMIN)),
) -> models.Room:
    """Add a room and bump the hotel's denormalized room count in the same transaction."""
    hotel = get_or_404(db, models.Hotel, hotel_id, "Hotel")
    ensure_hotel_manager(ctx, hotel)
    _room_type_of_hotel(db, payload.room_type_id, hotel.id)

    room = models.Room(hotel_id=hotel.id, **payload.model_dump())
    db.add(room)
    hotel.total_rooms = (hotel.total_rooms or 0) + 1
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(room)
    logger.info("room.created", extra={"hotel_id": str(hotel.id), "room_id": str(room.id)})
    return room


@router.put(
    "/rooms/{room_id}",
    response_model=schemas.RoomRead,
    dependencies=[Depends(rate_limit("write"))],
)
def update_room(
    room_id: UUID,
    payload: schemas.RoomUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(*MERCHANT_OR_ADMIN)),
) -> models.Room:
    room = get_or_404(db, models.Room, room_id, "Room")
    hotel = get_or_404(db, models.Hotel, room.hotel_id, "Hotel")
    ensure_hotel_manager(ctx, hotel)
    if payload.room_type_id is not None:
        _room_type_of_hotel(db, payload.room_type_id, hotel.id)
    apply_updates(room, payload)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(room)
    return room


# Room types

@router.get("/hotels/{hotel_id}/room-types", response_model=List[schemas.RoomTypeRead])
def list_room_types(hotel_id: UUID, db: Session = Depends(get_db)) -> List[models.RoomType]:
    return db.query(models.RoomType).filter(models.RoomType.hotel_id == hotel_id).order_by(models.RoomType.name).all()


@router.post(
    "/hotels/{hotel_id}/room-types",
    response_model=schemas.RoomTypeRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("write"))],
)
def create_room_type(
    hotel_id: UUID,
    payload: schemas.RoomTypeCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(*MERCHANT_OR_ADMIN)),
) -> models.RoomType:
    hotel = get_or_404(db, models.Hotel, hotel_id, "Hotel")
    ensure_hotel_manager(ctx, hotel)
    room_type = models.RoomType(hotel_id=hotel.id, **payload.model_dump())
    db.add(room_type)
    db.commit()
    db.refresh(room_type)
    return room_type


@router.put(
    "/room-types/{room_type_id}",
    response_model=schemas.RoomTypeRead,
    dependencies=[Depends(rate_limit("write"))],
)
def update_room_type(
    room_type_id: UUID,
    payload: schemas.RoomTypeUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(*MERCHANT_OR_ADMIN)),
) -> models.RoomType:
    room_type = get_or_404(db, models.RoomType, room_type_id, "Room type")
    ensure_hotel_manager(ctx, get_or_404(db, models.Hotel, room_type.hotel_id, "Hotel"))
    apply_updates(room_type, payload)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(room_type)
    return room_type
