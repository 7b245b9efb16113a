# HotelHub test setup: throwaway SQLite schema per test, no Redis, no background settlement.
import os
import sys
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

TEST_ENV = {
    "DATABASE_URL": "sqlite:///./test.db",
    "REDIS_ENABLED": "false",
    "HOTELHUB_JWT_SECRET": "test-secret",
    # signing up with this address yields an admin account
    "HOTELHUB_ADMIN_EMAILS": "admin@example.com",
    # tests call settle_due_payments() themselves
    "PAYMENT_WORKER_ENABLED": "false",
}
for key, value in TEST_ENV.items():
    os.environ.setdefault(key, value)

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hotelhub.db import Base, engine  # noqa: E402
from hotelhub.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_schema() -> Iterator[None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client() -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c
