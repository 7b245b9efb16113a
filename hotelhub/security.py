from __future__ import annotations

import os
import time

import jwt
from passlib.context import CryptContext

from . import models

JWT_SECRET: str = os.getenv("HOTELHUB_JWT_SECRET", "dev-secret-change-me")
JWT_ALG: str = "HS256"
JWT_TTL_SECONDS: int = int(os.getenv("HOTELHUB_JWT_TTL_SECONDS", str(60 * 60 * 24 * 7)))
# bcrypt_sha256 avoids bcrypt's 72-byte password limit
pwd_context = CryptContext(schemes=["bcrypt_sha256"], deprecated="auto")


def admin_emails() -> set[str]:
    """Emails that are provisioned with the admin role on signup (HOTELHUB_ADMIN_EMAILS, comma-separated)."""
    raw = os.getenv("HOTELHUB_ADMIN_EMAILS", "")
    return {e.strip().lower() for e in raw.split(",") if e.strip()}


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(*, user: models.User) -> str:
    now = int(time.time())
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + JWT_TTL_SECONDS,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def decode_token(token: str) -> dict:
    """Decode and verify a token. Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError."""
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
