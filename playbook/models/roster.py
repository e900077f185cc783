"""
Pydantic models for roster onboarding: access codes, claim links and
player management.
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, StrictBool, field_validator

from .common import UUIDStr


class AccessCodeResponse(BaseModel):
    access_code: str
    rotated_at: datetime


class TeamPreviewRequest(BaseModel):
    access_code: str = Field(..., min_length=4, max_length=32)

    @field_validator("access_code", mode="before")
    @classmethod
    def strip_code(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class TeamPreviewResponse(BaseModel):
    """Public team preview. Only display names are ever returned."""
    ok: bool
    team_name: Optional[str] = None
    coach_name: Optional[str] = None


class JoinTeamRequest(BaseModel):
    """Self-onboarding with the team's shared access code."""
    access_code: str = Field(..., min_length=4, max_length=32)
    display_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("access_code", "display_name", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class ClaimPreview(BaseModel):
    """Public preview of a claim link (for the claim page)."""
    first_name: Optional[str]
    last_name: Optional[str]
    team_name: str
    coach_name: str
    is_expired: bool
    is_claimed: bool
    is_valid: bool


class PendingPlayerCreate(BaseModel):
    """Coach adds a player who will claim the profile later."""
    first_name: str = Field(..., min_length=1, max_length=60)
    last_name: Optional[str] = Field(None, max_length=60)
    expires_in_days: int = Field(default=30, ge=1, le=365, description="Days until the claim link expires")

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value


class PendingPlayerCreated(BaseModel):
    """Claim link details for a pending player. Also returned on regeneration."""
    ok: bool = True
    invite_id: str
    token: str
    expires_at: datetime


class ClaimTokenRegenerate(BaseModel):
    expires_in_days: int = Field(default=30, ge=1, le=365)


class PlayerActiveUpdate(BaseModel):
    user_id: UUIDStr
    active: StrictBool


class PlayerActiveResponse(BaseModel):
    ok: bool = True
    user_id: str
    is_active: bool


class PlayerModeUpdate(BaseModel):
    mode: str = Field(..., pattern="^(in_person|hybrid|remote)$")


class PlayerModeResponse(BaseModel):
    ok: bool = True
    user_id: str
    mode: str
