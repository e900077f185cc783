"""
Pydantic models for program enrollment, assignment progress and reviews.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from .common import UUIDStr, NOTE_MAX_LENGTH


class EnrollmentCreate(BaseModel):
    """Request model for enrolling a player into a program template."""
    template_id: UUIDStr
    player_user_id: UUIDStr
    start_at: Optional[datetime] = Field(None, description="Defaults to now when omitted")


class EnrollmentStatusUpdate(BaseModel):
    status: str = Field(..., pattern="^(active|paused|completed)$")


class AssignmentComplete(BaseModel):
    assignment_id: UUIDStr


class SubmissionCreate(BaseModel):
    """Player uploads a video against one of their enrollments."""
    enrollment_id: UUIDStr
    media_ref: str = Field(..., min_length=1, max_length=500, description="Storage key of the uploaded video")
    note: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)


class SubmissionReview(BaseModel):
    submission_id: UUIDStr
    note: Optional[str] = Field(None, max_length=4000)


class FocusCreate(BaseModel):
    """
    Request model for a program focus.

    Name and description are trimmed before length checks. Cues are trimmed
    and blank entries dropped; their order is kept.
    """
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = Field(None, max_length=NOTE_MAX_LENGTH)
    cues: List[str] = Field(default_factory=list)

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("cues", mode="before")
    @classmethod
    def default_cues(cls, value):
        return [] if value is None else value

    @field_validator("cues")
    @classmethod
    def clean_cues(cls, value: List[str]) -> List[str]:
        return [cue.strip() for cue in value if cue.strip()]


class EnrollmentCreated(BaseModel):
    ok: bool = True
    id: str
    status: str = "active"


class EnrollmentStatusResponse(BaseModel):
    ok: bool = True
    enrollment_id: str
    status: str


class AssignmentCompletionResponse(BaseModel):
    """Completion fact for the caller; repeated calls return the original."""
    ok: bool = True
    assignment_id: str
    completed_at: datetime
    already_completed: bool


class SubmissionCreated(BaseModel):
    ok: bool = True
    id: str


class SubmissionReviewResponse(BaseModel):
    """
    Review state after marking a submission reviewed.

    ``already_reviewed`` is true when an earlier review was kept as-is.
    """
    ok: bool = True
    submission_id: str
    reviewed_at: datetime
    review_note: Optional[str]
    already_reviewed: bool


class FocusCreated(BaseModel):
    ok: bool = True
    id: str
