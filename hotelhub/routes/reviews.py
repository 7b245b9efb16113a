# Guest reviews. Posting a review refreshes the hotel's aggregate rating.
import logging
from decimal import Decimal
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..db import get_db
from .. import models, schemas
from ..permissions import RequestContext, require_roles
from ..rate_limit import rate_limit
from ._helpers import get_or_404

router = APIRouter()
logger = logging.getLogger("hotelhub.reviews")


def _refresh_hotel_rating(db: Session, hotel: models.Hotel) -> None:
    avg = db.query(func.avg(models.Review.rating)).filter(models.Review.hotel_id == hotel.id).scalar()
    hotel.rating = Decimal(str(round(float(avg or 0), 2)))


@router.post(
    "/reviews",
    response_model=schemas.ReviewRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("write"))],
)
def create_review(
    payload: schemas.ReviewCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles()),
) -> models.Review:
    """Review a hotel through one of the caller's own bookings."""
    booking = get_or_404(db, models.Booking, payload.booking_id, "Booking")
    if booking.user_id != ctx.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to review this booking")
    if payload.hotel_id is not None and payload.hotel_id != booking.hotel_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Booking is for a different hotel")
    hotel = get_or_404(db, models.Hotel, booking.hotel_id, "Hotel")

    review = models.Review(
        user_id=ctx.user_id,
        hotel_id=hotel.id,
        booking_id=booking.id,
        rating=payload.rating,
        comment=payload.comment,
    )
    db.add(review)
    db.flush()
    _refresh_hotel_rating(db, hotel)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(review)
    logger.info("review.created", extra={"review_id": str(review.id), "hotel_id": str(hotel.id)})
    return review


@router.get("/hotels/{hotel_id}/reviews", response_model=List[schemas.ReviewRead])
def list_reviews(hotel_id: UUID, db: Session = Depends(get_db)) -> List[models.Review]:
    return (
        db.query(models.Review)
        .filter(models.Review.hotel_id == hotel_id)
        .order_by(models.Review.created_at.desc())
        .all()
    )
