# Dashboard statistics for merchants (own hotels) and admins (platform).
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from .. import models, schemas
from ..permissions import ADMIN_ONLY, MERCHANT_OR_ADMIN, RequestContext, ensure_hotel_manager, require_roles
from ..stats import hotel_stats, platform_stats
from ._helpers import get_or_404

router = APIRouter()


@router.get("/hotels/{hotel_id}/stats", response_model=schemas.HotelStats)
def get_hotel_stats(
    hotel_id: UUID,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(*MERCHANT_OR_ADMIN)),
) -> schemas.HotelStats:
    hotel = get_or_404(db, models.Hotel, hotel_id, "Hotel")
    ensure_hotel_manager(ctx, hotel)
    return schemas.HotelStats(**hotel_stats(db, hotel.id))


@router.get("/platform/stats", response_model=schemas.PlatformStats)
def get_platform_stats(
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(require_roles(*ADMIN_ONLY)),
) -> schemas.PlatformStats:
    return schemas.PlatformStats(**platform_stats(db))
