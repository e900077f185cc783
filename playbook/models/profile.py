"""
Pydantic model for the resolved caller profile.
"""

from typing import Optional
from pydantic import BaseModel, Field


class Profile(BaseModel):
    """A team member as stored by the profile store."""
    user_id: str
    team_id: str
    role: str = Field(..., pattern="^(coach|player)$")
    display_name: str
    is_active: bool = True
    player_mode: Optional[str] = None

    class Config:
        from_attributes = True


class ProfileResponse(BaseModel):
    """Profile returned after a successful onboarding step."""
    ok: bool = True
    user_id: str
    team_id: str
    role: str
    display_name: str
