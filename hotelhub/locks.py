# Per-room critical sections across processes, backed by Redis SET NX PX.
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator
from uuid import UUID, uuid4

import redis

from .redis_client import get_redis

logger = logging.getLogger("hotelhub.locks")

# Delete the key only if it still holds our token
_RELEASE_SCRIPT = """
if redis.call('get', KEYS[1]) == ARGV[1] then
    return redis.call('del', KEYS[1])
end
return 0
"""


def room_lock_key(room_id: UUID) -> str:
    return f"lock:hotelhub:room:{room_id}"


@contextmanager
def room_lock(room_id: UUID, ttl_ms: int = 5000) -> Iterator[bool]:
    """
    Best-effort lock around booking writes for one room.

    Yields True when held (or when Redis is off), False when another process
    holds it. The database row lock and exclusion constraint remain the
    authoritative guard; this only narrows the race window across processes.
    """
    r = get_redis()
    if r is None:
        yield True
        return

    key = room_lock_key(room_id)
    token = uuid4().hex
    try:
        acquired = bool(r.set(key, token, nx=True, px=ttl_ms))
    except redis.RedisError as exc:
        logger.warning("room_lock unavailable (key=%s): %s", key, exc)
        yield True
        return

    try:
        yield acquired
    finally:
        if acquired:
            try:
                r.eval(_RELEASE_SCRIPT, 1, key, token)
            except redis.RedisError as exc:
                # expires by TTL
                logger.debug("room_lock release failed (key=%s): %s", key, exc)
