# SQLAlchemy ORM models for the hotel booking domain.
# Enumerated fields are plain strings; the allowed values live in schemas.py as Literal types.
import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import declarative_mixin

from .db import Base


@declarative_mixin
class TimestampMixin:
    """Creation and modification timestamps.

    Stored as naive server-local times: "today" in the statistics is the
    server's local midnight-to-midnight window, so these must not be UTC.
    """
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)


class User(Base, TimestampMixin):
    """Account for any of the three roles: customer, merchant or admin."""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    profile_image_url = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default="customer", index=True)
    phone = Column(String(50), nullable=True)


class Hotel(Base, TimestampMixin):
    """Hotel listed by a merchant. New hotels wait for admin approval."""
    __tablename__ = "hotels"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    merchant_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    address = Column(Text, nullable=False)
    city = Column(String(100), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    # denormalized; maintained by the room creation endpoint
    total_rooms = Column(Integer, nullable=False, default=0)
    image_url = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)


class RoomType(Base, TimestampMixin):
    __tablename__ = "room_types"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    hotel_id = Column(Uuid, ForeignKey("hotels.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    base_price = Column(Numeric(10, 2), nullable=False)
    max_occupancy = Column(Integer, nullable=False, default=2)
    amenities = Column(JSON, nullable=False, default=list)
    image_url = Column(String(500), nullable=True)


class Room(Base, TimestampMixin):
    """Physical room. Availability for a date range is derived from bookings, never stored."""
    __tablename__ = "rooms"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    hotel_id = Column(Uuid, ForeignKey("hotels.id"), nullable=False, index=True)
    room_type_id = Column(Uuid, ForeignKey("room_types.id"), nullable=False, index=True)
    room_number = Column(String(20), nullable=False)
    floor = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default="available")
    is_active = Column(Boolean, nullable=False, default=True)


class Booking(Base, TimestampMixin):
    """Reservation of one room.

    Status values: pending, confirmed, checked_in, checked_out, cancelled.
    Only confirmed bookings block a room's availability.
    """
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    hotel_id = Column(Uuid, ForeignKey("hotels.id"), nullable=False, index=True)
    room_id = Column(Uuid, ForeignKey("rooms.id"), nullable=False, index=True)
    check_in_date = Column(DateTime, nullable=False)
    check_out_date = Column(DateTime, nullable=False)
    guests = Column(Integer, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    special_requests = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_bookings_room_status", "room_id", "status"),
        Index("ix_bookings_hotel_check_in", "hotel_id", "check_in_date"),
        Index("ix_bookings_status", "status"),
    )


class Payment(Base, TimestampMixin):
    """Payment attempt for a booking.

    settle_after is the durable settlement deadline: the sweeper completes
    pending payments once it has passed, so a restart does not lose them.
    """
    __tablename__ = "payments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, ForeignKey("bookings.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    transaction_id = Column(String(255), nullable=True)
    paid_at = Column(DateTime, nullable=True)
    settle_after = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("ix_payments_status_settle_after", "status", "settle_after"),
    )


class Review(Base, TimestampMixin):
    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    hotel_id = Column(Uuid, ForeignKey("hotels.id"), nullable=False, index=True)
    booking_id = Column(Uuid, ForeignKey("bookings.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
