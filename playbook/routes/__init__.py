"""
API route modules.
"""

from .lessons import router as lessons_router
from .programs import router as programs_router
from .team import router as team_router
from .claims import router as claims_router
from .content import router as content_router

__all__ = [
    "lessons_router",
    "programs_router",
    "team_router",
    "claims_router",
    "content_router"
]
