# Application entrypoint: configures logging, middleware, error handlers, startup routines and API routers.
import logging
import os
import threading
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import Base, engine, is_sqlite
from .errors import register_exception_handlers
from .payments import router as payments_router
from .routes.auth import router as auth_router
from .routes.bookings import router as bookings_router
from .routes.hotels import router as hotels_router
from .routes.reviews import router as reviews_router
from .routes.rooms import router as rooms_router
from .routes.stats import router as stats_router
from .sweepers import settle_due_payments

logger = logging.getLogger("hotelhub")


def _configure_logging() -> None:
    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s in %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def _start_payment_worker(interval_seconds: float) -> None:
    """
    Launch a daemon thread that settles due payments every `interval_seconds`.

    Settlement deadlines live in the payments table, so a restart only delays
    pending payments; it never drops them. Errors are logged and the loop
    carries on at the next interval.
    """
    def _loop() -> None:
        while True:
            try:
                settle_due_payments()
            except Exception:
                logger.exception("Payment settlement sweep failed")
            time.sleep(interval_seconds)

    t = threading.Thread(target=_loop, name="payment-settlement", daemon=True)
    t.start()


# '*' cannot be combined with allow_credentials=True; fall back to explicit localhost origins
def _parse_cors_origins(env_value: str | None) -> list[str]:
    default_dev_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]
    if not env_value:
        return default_dev_origins
    origins = [o.strip() for o in env_value.split(",") if o.strip()]
    if "*" in origins:
        return default_dev_origins
    return origins


_configure_logging()

app = FastAPI(title="HotelHub API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_parse_cors_origins(os.getenv("CORS_ORIGINS")),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)


@app.on_event("startup")
def on_startup() -> None:
    # Local SQLite gets its tables created here; other databases rely on Alembic migrations.
    if is_sqlite():
        Base.metadata.create_all(bind=engine)
    if os.getenv("PAYMENT_WORKER_ENABLED", "true").strip().lower() in {"1", "true", "yes", "on"}:
        _start_payment_worker(float(os.getenv("PAYMENT_WORKER_INTERVAL_SECONDS", "1")))
    logger.info("HotelHub API started")


@app.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


app.include_router(auth_router, prefix="/api", tags=["auth"])
app.include_router(hotels_router, prefix="/api", tags=["hotels"])
app.include_router(rooms_router, prefix="/api", tags=["rooms"])
app.include_router(bookings_router, prefix="/api", tags=["bookings"])
app.include_router(payments_router, prefix="/api", tags=["payments"])
app.include_router(reviews_router, prefix="/api", tags=["reviews"])
app.include_router(stats_router, prefix="/api", tags=["stats"])
