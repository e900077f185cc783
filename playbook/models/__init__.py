"""
Pydantic models for request/response validation.
"""

from .common import DeleteResponse, UUIDStr

from .profile import Profile, ProfileResponse

from .lesson import (
    LessonRequestCreate,
    LessonInviteCreate,
    LessonCancel,
    InviteReply,
    RequestReply,
    LessonReschedule,
    ParticipantUpdate,
    LessonCreated,
    LessonStatusResponse,
    ParticipantResponse
)

from .program import (
    EnrollmentCreate,
    EnrollmentStatusUpdate,
    AssignmentComplete,
    SubmissionCreate,
    SubmissionReview,
    FocusCreate,
    EnrollmentCreated,
    EnrollmentStatusResponse,
    AssignmentCompletionResponse,
    SubmissionCreated,
    SubmissionReviewResponse,
    FocusCreated
)

from .roster import (
    AccessCodeResponse,
    TeamPreviewRequest,
    TeamPreviewResponse,
    JoinTeamRequest,
    ClaimPreview,
    PendingPlayerCreate,
    PendingPlayerCreated,
    ClaimTokenRegenerate,
    PlayerActiveUpdate,
    PlayerActiveResponse,
    PlayerModeUpdate,
    PlayerModeResponse
)

from .content import ContentStateResponse, SeenResponse

__all__ = [
    # Common
    "DeleteResponse",
    "UUIDStr",

    # Profile models
    "Profile",
    "ProfileResponse",

    # Lesson models
    "LessonRequestCreate",
    "LessonInviteCreate",
    "LessonCancel",
    "InviteReply",
    "RequestReply",
    "LessonReschedule",
    "ParticipantUpdate",
    "LessonCreated",
    "LessonStatusResponse",
    "ParticipantResponse",

    # Program models
    "EnrollmentCreate",
    "EnrollmentStatusUpdate",
    "AssignmentComplete",
    "SubmissionCreate",
    "SubmissionReview",
    "FocusCreate",
    "EnrollmentCreated",
    "EnrollmentStatusResponse",
    "AssignmentCompletionResponse",
    "SubmissionCreated",
    "SubmissionReviewResponse",
    "FocusCreated",

    # Roster models
    "AccessCodeResponse",
    "TeamPreviewRequest",
    "TeamPreviewResponse",
    "JoinTeamRequest",
    "ClaimPreview",
    "PendingPlayerCreate",
    "PendingPlayerCreated",
    "ClaimTokenRegenerate",
    "PlayerActiveUpdate",
    "PlayerActiveResponse",
    "PlayerModeUpdate",
    "PlayerModeResponse",

    # Content models
    "ContentStateResponse",
    "SeenResponse"
]
