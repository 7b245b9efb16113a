# Pydantic models (request/response DTOs) used by the API layer.
# Field names are snake_case in Python and camelCase on the wire; both spellings are accepted on input.
from datetime import datetime
from decimal import Decimal
from typing import ClassVar, List, Literal, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .timeutils import as_local_naive


Role = Literal["customer", "merchant", "admin"]
HotelStatus = Literal["pending", "approved", "rejected", "suspended"]
RoomStatus = Literal["available", "occupied", "cleaning", "maintenance", "out_of_order"]
BookingStatus = Literal["pending", "confirmed", "checked_in", "checked_out", "cancelled"]
PaymentStatus = Literal["pending", "completed", "failed", "refunded"]


class APIModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _strip(v):
    if isinstance(v, str):
        v = v.strip()
    return v


class PartialUpdate(APIModel):
    """Base for PUT payloads: omitted fields stay untouched, listed fields may not be cleared."""

    not_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null(self):
        cleared = [f for f in self.not_nullable if f in self.model_fields_set and getattr(self, f) is None]
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")
        return self


# Users and authentication

class UserCreate(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    # admins are provisioned through HOTELHUB_ADMIN_EMAILS, never self-selected
    role: Literal["customer", "merchant"] = "customer"

    # Normalize email input to lowercase without surrounding whitespace
    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        if isinstance(v, str):
            v = v.strip().lower()
        return v


class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        if isinstance(v, str):
            v = v.strip().lower()
        return v


class UserRead(APIModel):
    id: UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: Role
    phone: Optional[str] = None
    created_at: datetime


class TokenResponse(APIModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead


# Hotels

class HotelCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    image_url: Optional[str] = Field(None, max_length=500)

    strip_text = field_validator("name", "address", "city", mode="before")(_strip)


class HotelUpdate(PartialUpdate):
    not_nullable = ("name", "address", "city")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    address: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    image_url: Optional[str] = Field(None, max_length=500)

    strip_text = field_validator("name", "address", "city", mode="before")(_strip)


class HotelRead(APIModel):
    id: UUID
    merchant_id: UUID
    name: str
    description: Optional[str] = None
    address: str
    city: str
    phone: Optional[str] = None
    email: Optional[str] = None
    rating: Decimal
    total_rooms: int
    image_url: Optional[str] = None
    status: HotelStatus
    created_at: datetime
    updated_at: datetime


class HotelStatusUpdate(APIModel):
    status: HotelStatus


# Room types and rooms

class RoomTypeCreate(APIModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    base_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    max_occupancy: int = Field(2, ge=1)
    amenities: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, max_length=500)

    strip_text = field_validator("name", mode="before")(_strip)


class RoomTypeUpdate(PartialUpdate):
    not_nullable = ("name", "base_price", "max_occupancy", "amenities")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    base_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_occupancy: Optional[int] = Field(None, ge=1)
    amenities: Optional[List[str]] = None
    image_url: Optional[str] = Field(None, max_length=500)


class RoomTypeRead(APIModel):
    id: UUID
    hotel_id: UUID
    name: str
    description: Optional[str] = None
    base_price: Decimal
    max_occupancy: int
    amenities: List[str]
    image_url: Optional[str] = None


class RoomCreate(APIModel):
    room_type_id: UUID
    room_number: str = Field(..., min_length=1, max_length=20)
    floor: Optional[int] = None
    status: RoomStatus = "available"
    is_active: bool = True

    strip_text = field_validator("room_number", mode="before")(_strip)


class RoomUpdate(PartialUpdate):
    not_nullable = ("room_type_id", "room_number", "status", "is_active")

    room_type_id: Optional[UUID] = None
    room_number: Optional[str] = Field(None, min_length=1, max_length=20)
    floor: Optional[int] = None
    status: Optional[RoomStatus] = None
    is_active: Optional[bool] = None


class RoomRead(APIModel):
    id: UUID
    hotel_id: UUID
    room_type_id: UUID
    room_number: str
    floor: Optional[int] = None
    status: RoomStatus
    is_active: bool


# Bookings

class BookingCreate(APIModel):
    hotel_id: UUID
    room_id: UUID
    check_in_date: datetime
    check_out_date: datetime
    guests: int = Field(..., ge=1)
    # supplied by the client; not recomputed from the room type price
    total_amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    special_requests: Optional[str] = None

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def to_local(cls, v: datetime) -> datetime:
        return as_local_naive(v)

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreate":
        if self.check_in_date >= self.check_out_date:
            raise ValueError("checkInDate must be before checkOutDate")
        return self


class BookingUpdate(PartialUpdate):
    not_nullable = ("status", "check_in_date", "check_out_date", "guests")

    status: Optional[BookingStatus] = None
    check_in_date: Optional[datetime] = None
    check_out_date: Optional[datetime] = None
    guests: Optional[int] = Field(None, ge=1)
    special_requests: Optional[str] = None

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def to_local(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_local_naive(v) if v is not None else v


class BookingRead(APIModel):
    id: UUID
    user_id: UUID
    hotel_id: UUID
    room_id: UUID
    check_in_date: datetime
    check_out_date: datetime
    guests: int
    total_amount: Decimal
    status: BookingStatus
    special_requests: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# Payments

class PaymentCreate(APIModel):
    booking_id: UUID
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    payment_method: str = Field(..., min_length=1, max_length=50)


class PaymentRead(APIModel):
    id: UUID
    booking_id: UUID
    amount: Decimal
    payment_method: str
    status: PaymentStatus
    transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime


# Reviews

class ReviewCreate(APIModel):
    booking_id: UUID
    hotel_id: Optional[UUID] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewRead(APIModel):
    id: UUID
    user_id: UUID
    hotel_id: UUID
    booking_id: UUID
    rating: int
    comment: Optional[str] = None
    created_at: datetime


# Statistics

class HotelStats(APIModel):
    total_rooms: int
    occupied_rooms: int
    today_check_ins: int
    today_revenue: float


class PlatformStats(APIModel):
    total_merchants: int
    total_users: int
    total_bookings: int
    total_revenue: float
