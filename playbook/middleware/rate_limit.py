"""
Rate limiting middleware.

The public onboarding endpoints (team preview, join, claim links) accept
guessable secrets, so they get a strict per-IP budget. Everything else gets
a general per-IP budget. Counters live in process memory.
"""

import os
import time
from typing import Dict, List, Optional, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

PREVIEW_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PREVIEW_PER_MINUTE", "10"))
API_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_API_PER_MINUTE", "100"))
WINDOW_SECONDS = 60

PUBLIC_PREFIXES = ("/team/preview", "/team/join", "/claim/")
EXEMPT_PATHS = ("/health",)


class RateLimiter:
    """Sliding-window request counter keyed by client."""

    def __init__(self, clock=time.time):
        # Storage: {key: [timestamps]}
        self.requests: Dict[str, List[float]] = {}
        self.clock = clock
        self.cleanup_interval = 300
        self.last_cleanup = clock()

    def _cleanup(self, now: float):
        """Drop keys with no requests in the last hour."""
        if now - self.last_cleanup <= self.cleanup_interval:
            return
        cutoff = now - 3600
        for key in list(self.requests.keys()):
            self.requests[key] = [ts for ts in self.requests[key] if ts > cutoff]
            if not self.requests[key]:
                del self.requests[key]
        self.last_cleanup = now

    def is_allowed(self, key: str, limit: int, window: int) -> Tuple[bool, Dict[str, str]]:
        """
        Check and count one request.

        Args:
            key: Unique identifier for the bucket (scope and client IP)
            limit: Maximum number of requests allowed in the window
            window: Window length in seconds

        Returns:
            Tuple of (allowed, headers) where headers carry the
            X-RateLimit-* values for the response
        """
        now = self.clock()
        self._cleanup(now)

        recent = [ts for ts in self.requests.get(key, []) if ts > now - window]
        allowed = len(recent) < limit
        if allowed:
            recent.append(now)
        self.requests[key] = recent

        reset_at = int(min(recent) + window) if recent else int(now + window)
        headers = {
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Remaining": str(max(0, limit - len(recent))),
            "X-RateLimit-Reset": str(reset_at)
        }
        return allowed, headers


def classify(path: str) -> Optional[Tuple[str, int, str]]:
    """Return (scope, limit, message) for a path, or None when it is not limited."""
    if path in EXEMPT_PATHS:
        return None
    if path.startswith(PUBLIC_PREFIXES):
        return "public", PREVIEW_LIMIT_PER_MINUTE, "Too many attempts. Please try again later."
    return "api", API_LIMIT_PER_MINUTE, "Too many requests. Please slow down."


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Apply rate limits per client IP.

    Public onboarding endpoints: RATE_LIMIT_PREVIEW_PER_MINUTE (default 10)
    Other endpoints: RATE_LIMIT_API_PER_MINUTE (default 100)
    """

    def __init__(self, app, limiter: Optional[RateLimiter] = None):
        super().__init__(app)
        self.limiter = limiter or RateLimiter()

    async def dispatch(self, request: Request, call_next):
        rule = classify(request.url.path)
        if rule is None:
            return await call_next(request)

        scope, limit, message = rule
        client_ip = request.client.host if request.client else "unknown"
        allowed, headers = self.limiter.is_allowed(f"{scope}:{client_ip}", limit, WINDOW_SECONDS)

        if not allowed:
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": message},
                headers=headers
            )

        response = await call_next(request)
        for header_name, header_value in headers.items():
            response.headers[header_name] = header_value
        return response
