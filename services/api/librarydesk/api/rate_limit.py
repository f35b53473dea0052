from __future__ import annotations

import time
from typing import Callable, cast

from fastapi import HTTPException, Request
from librarydesk.core.redis_client import get_redis
from redis import Redis, RedisError


def rate_limiter(
    scope: str,
    *,
    limit: int,
    window_seconds: int,
) -> Callable[[Request], None]:
    """Fixed-window rate limiter using Redis INCR + EXPIRE, keyed by client address.

    If Redis is unavailable, the limiter becomes a no-op (fail open).
    """

    def _dep(request: Request) -> None:
        r = get_redis()
        if r is None:
            return

        client = request.client.host if request.client else "unknown"
        now = int(time.time())
        bucket = now // window_seconds
        key = f"rl:{scope}:{client}:{bucket}"

        try:
            count = cast(int, cast(Redis, r).incr(key))
            if count == 1:
                cast(Redis, r).expire(key, window_seconds)
        except RedisError:
            return

        if count > limit:
            retry_after = max(1, window_seconds - (now % window_seconds))
            raise HTTPException(
                status_code=429,
                detail="Rate limit exceeded",
                headers={"Retry-After": str(retry_after)},
            )

    return _dep
