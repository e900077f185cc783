"""
Program routes.

Provides endpoints for enrollments, assignment completion, video
submissions, reviews and coach-owned program content.
"""

from fastapi import APIRouter, status

from playbook.dependencies import Caller, JsonBody, Programs
from playbook.models.common import DeleteResponse
from playbook.models.program import (
    EnrollmentCreated,
    EnrollmentStatusResponse,
    AssignmentCompletionResponse,
    SubmissionCreated,
    SubmissionReviewResponse,
    FocusCreated
)

router = APIRouter(prefix="/programs", tags=["Programs"])


@router.post("/enrollments", response_model=EnrollmentCreated, status_code=status.HTTP_201_CREATED)
async def enroll_player(caller: Caller, programs: Programs, payload: JsonBody):
    """
    Enroll a player in a program template.

    Only accessible by coaches of the template's team.
    """
    return await programs.enroll(caller, payload)


@router.patch("/enrollments/{enrollment_id}/status", response_model=EnrollmentStatusResponse)
async def set_enrollment_status(enrollment_id: str, caller: Caller, programs: Programs, payload: JsonBody):
    return await programs.set_enrollment_status(caller, enrollment_id, payload)


@router.post("/assignments/complete", response_model=AssignmentCompletionResponse)
async def complete_assignment(caller: Caller, programs: Programs, payload: JsonBody):
    """
    Mark an assignment complete for the current player.

    Safe to repeat; the first completion time is kept.
    """
    return await programs.complete_assignment(caller, payload)


@router.post("/submissions", response_model=SubmissionCreated, status_code=status.HTTP_201_CREATED)
async def submit_video(caller: Caller, programs: Programs, payload: JsonBody):
    return await programs.submit_video(caller, payload)


@router.post("/reviews", response_model=SubmissionReviewResponse)
async def review_submission(caller: Caller, programs: Programs, payload: JsonBody):
    """
    Mark a submission reviewed.

    Only the first review is stored; later calls report ``already_reviewed``.
    """
    return await programs.mark_submission_reviewed(caller, payload)


@router.post("/focuses", response_model=FocusCreated, status_code=status.HTTP_201_CREATED)
async def create_focus(caller: Caller, programs: Programs, payload: JsonBody):
    return await programs.create_focus(caller, payload)


@router.delete("/templates/{template_id}/assignments/{assignment_id}", response_model=DeleteResponse)
async def delete_template_assignment(template_id: str, assignment_id: str, caller: Caller, programs: Programs):
    """
    Delete a day assignment from a template.

    Ownership is checked through the assignment itself; the template id in
    the path is not trusted.
    """
    return await programs.delete_template_assignment(caller, template_id, assignment_id)


@router.delete("/drills/media/{media_id}", response_model=DeleteResponse)
async def delete_drill_media(media_id: str, caller: Caller, programs: Programs):
    return await programs.delete_drill_media(caller, media_id)
