"""Lookup helpers shared by route modules."""
from typing import Type, TypeVar
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from .. import models

M = TypeVar("M", bound=models.Base)


def get_or_404(db: Session, model: Type[M], obj_id: UUID, label: str) -> M:
    obj = db.get(model, obj_id)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj


def apply_updates(obj: models.Base, payload) -> None:
    """Copy the fields explicitly present in a partial-update payload onto an ORM object."""
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(obj, field, value)
