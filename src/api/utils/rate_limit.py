"""Per-IP per-path rate limiter for the unauthenticated auth endpoints."""

import logging
import time
from collections import defaultdict, deque

from fastapi import Request, status

from config import ApplicationConfig
from src.api.error import ClientError
from src.libs.result import Error

logger = logging.getLogger(__name__)

# In-memory sliding window buckets: key -> deque[timestamps]
_buckets = defaultdict(deque)


def reset_rate_limits() -> None:
    _buckets.clear()


async def rate_limit(request: Request):
    if not ApplicationConfig.RATE_LIMIT_ENABLED:
        return True

    now = time.time()
    window = ApplicationConfig.RATE_LIMIT_PERIOD_SECONDS
    limit = ApplicationConfig.RATE_LIMIT_REQUESTS

    client_ip = request.client.host if request.client is not None else "unknown"
    key = f"{client_ip}:{request.url.path}"

    bucket = _buckets[key]
    window_start = now - window

    # Drop old entries outside the window
    while bucket and bucket[0] <= window_start:
        bucket.popleft()

    if len(bucket) >= limit:
        logger.warning(f"Rate limit hit for {key}")
        raise ClientError(
            Error("RATE_LIMITED", "Too many requests. Please slow down."),
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        )

    bucket.append(now)
    return True
