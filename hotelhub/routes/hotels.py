# Hotel endpoints: public listing/detail, merchant management and admin status moderation.
import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..db import get_db
from .. import models, schemas
from ..permissions import ADMIN_ONLY, MERCHANT_OR_ADMIN, RequestContext, ensure_hotel_manager, require_roles
from ..rate_limit import rate_limit
from ._helpers import apply_updates, get_or_404

router = APIRouter()
logger = logging.getLogger("hotelhub.hotels")

# Moderation state machine; rejected and suspended are terminal
HOTEL_STATUS_TRANSITIONS = {
    "pending": {"approved", "rejected"},
    "approved": {"suspended"},
    "rejected": set(),
    "suspended": set(),
}


def can_transition(current: str, target: str) -> bool:
    return target in HOTEL_STATUS_TRANSITIONS.get(current, set())


@router.get("/hotels", response_model=List[schemas.HotelRead])
def list_hotels(
    city: Optional[str] = Query(None),
    status_filter: Optional[schemas.HotelStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
) -> List[models.Hotel]:
    """Public listing, newest first, optionally filtered by city and status."""
    q = db.query(models.Hotel)
    if city:
        q = q.filter(models.Hotel.city == city)
    if status_filter:
        q = q.filter(models.Hotel.status == status_filter)
    return q.order_by(models.Hotel.created_at.desc()).all()


@router.get("/hotels/{hotel_id}", response_model=schemas.HotelRead)
def get_hotel(hotel_id: UUID, db: Session = Depends(get_db)) -> models.Hotel:
    return get_or_404(db, models.Hotel, hotel_id, "Hotel")


@router.post(
    "/hotels",
    response_model=schemas.HotelRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("write"))],
)
def create_hotel(
    payload: schemas.HotelCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(*MERCHANT_OR_ADMIN)),
) -> models.Hotel:
    """Register a hotel owned by the caller. It starts in 'pending' until an admin reviews it."""
    hotel = models.Hotel(**payload.model_dump(), merchant_id=ctx.user_id, status="pending", total_rooms=0)
    db.add(hotel)
    db.commit()
    db.refresh(hotel)
    logger.info("hotel.created", extra={"hotel_id": str(hotel.id), "merchant_id": str(ctx.user_id)})
    return hotel


@router.put(
    "/hotels/{hotel_id}",
    response_model=schemas.HotelRead,
    dependencies=[Depends(rate_limit("write"))],
)
def update_hotel(
    hotel_id: UUID,
    payload: schemas.HotelUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(*MERCHANT_OR_ADMIN)),
) -> models.Hotel:
    hotel = get_or_404(db, models.Hotel, hotel_id, "Hotel")
    ensure_hotel_manager(ctx, hotel)
    apply_updates(hotel, payload)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(hotel)
    return hotel


@router.get("/merchant/hotels", response_model=List[schemas.HotelRead])
def list_my_hotels(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles()),
) -> List[models.Hotel]:
    return (
        db.query(models.Hotel)
        .filter(models.Hotel.merchant_id == ctx.user_id)
        .order_by(models.Hotel.created_at.desc())
        .all()
    )


@router.put(
    "/admin/hotels/{hotel_id}/status",
    response_model=schemas.HotelRead,
    dependencies=[Depends(rate_limit("write"))],
)
def update_hotel_status(
    hotel_id: UUID,
    payload: schemas.HotelStatusUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(*ADMIN_ONLY)),
) -> models.Hotel:
    """
    Moderate a hotel.

    Allowed: pending -> approved | rejected, approved -> suspended.
    Any other move, including leaving rejected or suspended, is a 400.
    """
    hotel = get_or_404(db, models.Hotel, hotel_id, "Hotel")
    if not can_transition(hotel.status, payload.status):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot change hotel status from {hotel.status} to {payload.status}",
        )
    previous = hotel.status
    hotel.status = payload.status
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(hotel)
    logger.info(
        "hotel.status_changed",
        extra={"hotel_id": str(hotel.id), "from_status": previous, "to_status": hotel.status, "admin_id": str(ctx.user_id)},
    )
    return hotel
