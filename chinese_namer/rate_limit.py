from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Dict, Optional, Tuple
import logging
import math
import threading
import time

import redis
from fastapi import Depends, Request, Response

from .config import get_settings

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later"


class RateLimitExceeded(Exception):
    def __init__(self, status: "RateLimitStatus"):
        super().__init__(RATE_LIMIT_MESSAGE)
        self.status = status


@dataclass(frozen=True)
class RateLimitStatus:
    limit: int
    count: int
    reset_in_ms: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.count, 0)

    @property
    def exceeded(self) -> bool:
        return self.count > self.limit

    def headers(self) -> Dict[str, str]:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(math.ceil(self.reset_in_ms / 1000)),
        }


class RateLimiter:
    """Fixed-window request counter per client. Uses Redis, falls back to an in-memory dict."""

    def __init__(
        self,
        max_requests: int,
        window_ms: int,
        redis_url: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_ms = window_ms
        self.clock = clock
        self.cli = None
        # client key -> (count, window end in ms)
        self._memory: Dict[str, Tuple[int, float]] = {}
        self._memory_lock = threading.Lock()
        if redis_url:
            try:
                # Short timeout to avoid blocking, force connection with ping
                self.cli = redis.Redis.from_url(
                    redis_url, decode_responses=True, socket_connect_timeout=1, socket_timeout=1
                )
                self.cli.ping()
                logger.info("[RateLimit] Redis counter store is connected.")
            except redis.RedisError:
                self.cli = None
                logger.warning("[RateLimit] Redis connection failed. Falling back to in-memory counters.")

    @staticmethod
    def _key(client_id: str) -> str:
        return f"chinese_namer:ratelimit:{client_id}"

    def _prune_memory(self, now_ms: float) -> None:
        """Drop counters whose window has already closed."""
        expired = [k for k, (_, window_end) in self._memory.items() if window_end <= now_ms]
        for k in expired:
            del self._memory[k]

    def _hit_memory(self, key: str) -> RateLimitStatus:
        now_ms = self.clock() * 1000
        with self._memory_lock:
            self._prune_memory(now_ms)
            count, window_end = self._memory.get(key, (0, 0.0))
            if now_ms >= window_end:
                count, window_end = 0, now_ms + self.window_ms
            count += 1
            self._memory[key] = (count, window_end)
        return RateLimitStatus(self.max_requests, count, int(window_end - now_ms))

    def _hit_redis(self, key: str) -> RateLimitStatus:
        pipe = self.cli.pipeline()
        pipe.incr(key)
        pipe.pttl(key)
        count, ttl = pipe.execute()
        if count == 1 or ttl < 0:
            self.cli.pexpire(key, self.window_ms)
            ttl = self.window_ms
        return RateLimitStatus(self.max_requests, int(count), int(ttl))

    def hit(self, client_id: str) -> RateLimitStatus:
        """Count one request for `client_id` and report where it stands in its window."""
        key = self._key(client_id)
        if self.cli:
            try:
                return self._hit_redis(key)
            except redis.RedisError:
                logger.error("[RateLimit] Redis INCR failed. Disabling Redis for this session.")
                self.cli = None
        return self._hit_memory(key)


@lru_cache()
def get_rate_limiter() -> RateLimiter:
    settings = get_settings()
    return RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_ms=settings.rate_limit_window_ms,
        redis_url=settings.redis_url,
    )


def client_identity(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> RateLimitStatus:
    """FastAPI dependency: raise RateLimitExceeded once a client passes its window quota.

    Plain def so FastAPI runs the blocking Redis call in its threadpool.
    """
    client_id = client_identity(request)
    status = limiter.hit(client_id)
    if status.exceeded:
        logger.warning(f"[RateLimit] Client {client_id} exceeded {status.limit} requests per window")
        raise RateLimitExceeded(status)
    response.headers.update(status.headers())
    return status
