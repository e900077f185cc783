"""
Pydantic models for lesson requests, invites and attendance.
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, StrictBool

from .common import UUIDStr, NOTE_MAX_LENGTH


class LessonRequestCreate(BaseModel):
    """Player asks a coach for a lesson."""
    coach_user_id: UUIDStr = Field(..., description="Coach on the caller's team")
    start_at: datetime
    minutes: int = Field(..., ge=15, le=180, description="Lesson duration")
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)


class LessonInviteCreate(BaseModel):
    """Coach invites a player to a lesson."""
    player_user_id: UUIDStr = Field(..., description="Player on the caller's team")
    start_at: datetime
    minutes: int = Field(..., ge=15, le=180, description="Lesson duration")
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)


class LessonCancel(BaseModel):
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)


class InviteReply(BaseModel):
    accept: StrictBool


class RequestReply(BaseModel):
    approve: StrictBool
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)


class LessonReschedule(BaseModel):
    start_at: datetime
    minutes: int = Field(..., ge=15, le=180)
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)


class ParticipantUpdate(BaseModel):
    """Attendance mark for one player in a lesson."""
    player_user_id: UUIDStr
    present: StrictBool


class LessonCreated(BaseModel):
    ok: bool = True
    id: str
    status: str = "pending"


class LessonStatusResponse(BaseModel):
    """Lesson state after a transition."""
    ok: bool = True
    lesson_id: str
    status: str


class ParticipantResponse(BaseModel):
    ok: bool = True
    lesson_id: str
    player_user_id: str
    present: bool
