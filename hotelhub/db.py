# Database wiring for HotelHub: engine, request-scoped sessions and the declarative base.
import os
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

# Local runs use ./data.db; deployments set postgresql+psycopg://... so the
# confirmed-booking exclusion constraint from the migrations applies.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./data.db")


def _build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # request handlers and the payment settlement thread share the file
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=280,
        pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "20")),
    )


engine = _build_engine(DATABASE_URL)

# Routes commit explicitly; the confirmation path relies on nothing being flushed early
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def is_sqlite() -> bool:
    """SQLite has no row locks or exclusion constraints; booking confirmation checks this."""
    return engine.dialect.name == "sqlite"


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
