"""
Pydantic models for shared media lifecycle (soft delete, view tracking).
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class ContentStateResponse(BaseModel):
    """Deletion state of a video or comment after delete/restore."""
    ok: bool = True
    id: str
    deleted_at: Optional[datetime]
    deleted_by_user_id: Optional[str]


class SeenResponse(BaseModel):
    ok: bool = True
    last_seen_at: datetime
