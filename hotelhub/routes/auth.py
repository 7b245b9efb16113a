# Identity endpoints: signup, login and the current user's profile.
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..db import get_db
from .. import models, schemas
from ..permissions import RequestContext, require_roles
from ..rate_limit import rate_limit
from ..security import admin_emails, create_access_token, hash_password, verify_password

router = APIRouter()
logger = logging.getLogger("hotelhub.auth")


@router.post(
    "/auth/signup",
    response_model=schemas.TokenResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("signup"))],
)
def signup(payload: schemas.UserCreate, db: Session = Depends(get_db)) -> schemas.TokenResponse:
    email = payload.email
    existing = db.query(models.User).filter(models.User.email == email).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    role = "admin" if email in admin_emails() else payload.role
    user = models.User(
        email=email,
        password_hash=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone=payload.phone,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("auth.signup", extra={"user_id": str(user.id), "role": user.role})

    return schemas.TokenResponse(
        access_token=create_access_token(user=user),
        user=schemas.UserRead.model_validate(user),
    )


@router.post(
    "/auth/login",
    response_model=schemas.TokenResponse,
    dependencies=[Depends(rate_limit("login"))],
)
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)) -> schemas.TokenResponse:
    user = db.query(models.User).filter(models.User.email == payload.email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid credentials")

    return schemas.TokenResponse(
        access_token=create_access_token(user=user),
        user=schemas.UserRead.model_validate(user),
    )


@router.get("/auth/user", response_model=schemas.UserRead)
def current_user(ctx: RequestContext = Depends(require_roles())) -> models.User:
    return ctx.user
