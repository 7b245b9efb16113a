# Redis-backed fixed-window rate limiter for auth and write endpoints.
# Counters are per client IP; the limiter fails open when Redis is disabled or unreachable.
import logging
import os
from typing import Callable, Literal

from fastapi import HTTPException, Request, status

from .redis_client import get_redis

logger = logging.getLogger("hotelhub.rate_limit")

Scope = Literal["login", "signup", "write"]

# scope -> (env var, default requests per window)
_LIMITS = {
    "login": ("RATE_LIMIT_LOGIN_PER_WINDOW", 10),
    "signup": ("RATE_LIMIT_SIGNUP_PER_WINDOW", 5),
    "write": ("RATE_LIMIT_WRITE_PER_WINDOW", 60),
}


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        logger.warning("Ignoring non-integer %s; using %s", name, default)
        return default


def _client_ip(request: Request) -> str:
    # X-Forwarded-For is not trusted here
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit(scope: Scope) -> Callable[[Request], None]:
    """
    Dependency factory limiting `scope` requests per client IP.

    Window length comes from RATE_LIMIT_WINDOW_SECONDS (default 60); the
    per-scope caps from RATE_LIMIT_{LOGIN,SIGNUP,WRITE}_PER_WINDOW.
    Exceeding the cap yields 429 with a retry_after hint.
    """
    window = _env_int("RATE_LIMIT_WINDOW_SECONDS", 60)
    env_name, default_limit = _LIMITS[scope]
    limit = _env_int(env_name, default_limit)

    def _dependency(request: Request) -> None:
        r = get_redis()
        if r is None:
            return

        ip = _client_ip(request)
        key = f"rl:hotelhub:{scope}:{ip}"
        try:
            current = r.incr(key)
            if current == 1:
                r.expire(key, window)
            if current <= limit:
                return
            ttl = r.ttl(key)
        except Exception as exc:
            logger.warning("Rate limit fail-open (scope=%s, ip=%s): %s", scope, ip, exc)
            return

        retry_after = ttl if isinstance(ttl, int) and ttl > 0 else window
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"error": "Too many requests", "scope": scope, "limit": limit, "retry_after": retry_after},
            headers={"Retry-After": str(retry_after)},
        )

    return _dependency
