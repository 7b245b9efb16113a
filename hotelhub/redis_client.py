# Shared Redis connection for booking locks and rate limiting.
# Opt-in via REDIS_ENABLED; every caller treats a None client as "feature off".
import logging
import os
import threading
from typing import Optional

import redis

logger = logging.getLogger("hotelhub.redis")

_TRUTHY = {"1", "true", "t", "yes", "y", "on"}

_client: Optional[redis.Redis] = None
_attempted = False
_lock = threading.Lock()


def is_redis_enabled() -> bool:
    return os.getenv("REDIS_ENABLED", "false").strip().lower() in _TRUTHY


def get_redis() -> Optional[redis.Redis]:
    """
    Return the shared client, or None when Redis is disabled or was unreachable.

    Connection is attempted once per process; after a failure the process
    keeps running without Redis.
    """
    global _client, _attempted
    if not is_redis_enabled():
        return None
    with _lock:
        if _attempted:
            return _client
        _attempted = True
        url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
        try:
            client = redis.Redis.from_url(url, socket_timeout=0.25, socket_connect_timeout=0.25)
            client.ping()
        except redis.RedisError as exc:
            logger.warning("Redis unavailable at %s, continuing without it: %s", url, exc)
            return None
        logger.info("Connected to Redis at %s", url)
        _client = client
        return _client
