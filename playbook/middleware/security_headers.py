"""
Security headers middleware.

The service only returns JSON, so responses forbid framing, sniffing and
any resource loading.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request

API_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add API security headers to every response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        for name, value in API_HEADERS.items():
            response.headers.setdefault(name, value)

        # HSTS only makes sense over TLS
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        if "server" in response.headers:
            del response.headers["server"]

        return response
