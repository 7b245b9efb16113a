# Request-scoped identity and the single authorization gate used by every route.
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional
from uuid import UUID

import jwt
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from . import models
from .db import get_db
from .security import decode_token

logger = logging.getLogger("hotelhub.auth")

MERCHANT_OR_ADMIN = ("merchant", "admin")
ADMIN_ONLY = ("admin",)


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller for one request; `user` is None for anonymous callers."""
    user: Optional[models.User] = None
    auth_error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> Optional[str]:
        return self.user.role if self.user else None

    @property
    def user_id(self) -> Optional[UUID]:
        return self.user.id if self.user else None


def get_request_context(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> RequestContext:
    """
    Build the RequestContext from an optional `Authorization: Bearer <token>` header.

    Never raises: a missing, malformed or expired token yields an anonymous
    context with `auth_error` set, and the gate decides whether that matters.
    """
    if not authorization:
        return RequestContext()
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return RequestContext(auth_error="Invalid Authorization header")
    try:
        payload = decode_token(parts[1])
    except jwt.ExpiredSignatureError:
        return RequestContext(auth_error="Token expired")
    except jwt.InvalidTokenError:
        return RequestContext(auth_error="Invalid token")

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        return RequestContext(auth_error="Invalid token payload")
    user = db.get(models.User, user_id)
    if not user:
        return RequestContext(auth_error="User not found")
    return RequestContext(user=user)


def is_allowed(ctx: RequestContext, required_roles: Optional[Iterable[str]] = None) -> bool:
    """True when the caller is authenticated and, if roles are given, holds one of them."""
    if not ctx.is_authenticated:
        return False
    if required_roles is None:
        return True
    return ctx.role in tuple(required_roles)


def require_roles(*roles: str) -> Callable[..., RequestContext]:
    """
    Dependency factory applying the authorization gate.

    require_roles()                     -> any authenticated caller
    require_roles("merchant", "admin")  -> only those roles

    Denials are 403, including anonymous callers.
    """
    required = roles or None

    def _dependency(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if not is_allowed(ctx, required):
            if not ctx.is_authenticated:
                detail = ctx.auth_error or "Authentication required"
            else:
                detail = "Insufficient permissions"
            logger.info(
                "auth.denied",
                extra={"user_id": str(ctx.user_id) if ctx.user_id else None, "role": ctx.role, "required": roles},
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
        return ctx

    return _dependency


def ensure_hotel_manager(ctx: RequestContext, hotel: models.Hotel) -> None:
    """Admins manage every hotel; merchants only the hotels they own."""
    if ctx.role == "admin":
        return
    if ctx.role == "merchant" and hotel.merchant_id == ctx.user_id:
        return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to manage this hotel")


def ensure_booking_access(db: Session, ctx: RequestContext, booking: models.Booking) -> None:
    """Guests reach their own bookings, merchants the bookings of hotels they own, admins all."""
    if ctx.role == "admin" or booking.user_id == ctx.user_id:
        return
    if ctx.role == "merchant":
        hotel = db.get(models.Hotel, booking.hotel_id)
        if hotel and hotel.merchant_id == ctx.user_id:
            return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to access this booking")
