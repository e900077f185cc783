"""
Middleware modules for the Playbook workflow service.
"""

from .rate_limit import RateLimiter, RateLimitMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "RateLimiter",
    "RateLimitMiddleware",
    "SecurityHeadersMiddleware"
]
