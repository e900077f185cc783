"""
Program workflow: enrollments, assignment progress, submissions and
program content owned by the coach.
"""

from typing import Optional

from playbook.auth.gate import require_member
from playbook.models.common import DeleteResponse
from playbook.models.profile import Profile
from playbook.models.program import (
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
from .base import Workflow, as_utc, check_id, parse_payload


class ProgramWorkflow(Workflow):
    """Program enrollment and progress tracking."""

    subject_type = "program_enrollment"

    async def enroll(self, caller: Optional[Profile], payload) -> EnrollmentCreated:
        """
        Enroll a teammate in one of the team's program templates.

        Whether a player may hold several enrollments in the same template is
        decided by the store.
        """
        caller = require_member(caller, "coach", action="enroll_player_in_program")
        payload = parse_payload(EnrollmentCreate, payload)

        enrollment_id = await self._invoke(
            "enroll_player_in_program",
            {
                "p_template_id": payload.template_id,
                "p_player_user_id": payload.player_user_id,
                "p_start_at": as_utc(payload.start_at),
            },
            caller_id=caller.user_id,
            failure="Unable to enroll player.",
            not_found="Program or player not found."
        )

        await self._emit("program_enrollment_created", str(enrollment_id), caller,
                         {"template_id": payload.template_id, "player_user_id": payload.player_user_id})
        return EnrollmentCreated(id=str(enrollment_id))

    async def set_enrollment_status(self, caller: Optional[Profile], enrollment_id: str, payload) -> EnrollmentStatusResponse:
        """Move an enrollment to active, paused or completed. Any transition is allowed."""
        caller = require_member(caller, "coach", action="set_enrollment_status")
        enrollment_id = check_id(enrollment_id)
        payload = parse_payload(EnrollmentStatusUpdate, payload)

        result = await self._invoke(
            "set_enrollment_status",
            {"p_enrollment_id": enrollment_id, "p_status": payload.status},
            caller_id=caller.user_id,
            failure="Enrollment belongs to another team.",
            not_found="Enrollment not found."
        )

        await self._emit("program_enrollment_status_updated", enrollment_id, caller,
                         {"status": result["status"]})
        return EnrollmentStatusResponse(enrollment_id=enrollment_id, status=result["status"])

    async def complete_assignment(self, caller: Optional[Profile], payload) -> AssignmentCompletionResponse:
        """
        Record that the calling player finished an assignment.

        The player is always the caller. Completing twice keeps the first
        completion and reports ``already_completed``. Paused enrollments do
        not block completion.
        """
        caller = require_member(caller, "player", action="complete_program_assignment")
        payload = parse_payload(AssignmentComplete, payload)

        result = await self._invoke(
            "complete_program_assignment",
            {"p_assignment_id": payload.assignment_id},
            caller_id=caller.user_id,
            failure="Unable to complete assignment.",
            not_found="Assignment not found."
        )

        response = AssignmentCompletionResponse(
            assignment_id=str(result["assignment_id"]),
            completed_at=result["completed_at"],
            already_completed=result["already_completed"]
        )
        if not response.already_completed:
            await self._emit("program_assignment_completed", response.assignment_id, caller,
                             subject_type="program_assignment")
        return response

    async def submit_video(self, caller: Optional[Profile], payload) -> SubmissionCreated:
        caller = require_member(caller, "player", action="submit_program_video")
        payload = parse_payload(SubmissionCreate, payload)

        submission_id = await self._invoke(
            "submit_program_video",
            {
                "p_enrollment_id": payload.enrollment_id,
                "p_media_ref": payload.media_ref,
                "p_note": payload.note,
            },
            caller_id=caller.user_id,
            failure="Unable to submit video.",
            not_found="Enrollment not found."
        )

        await self._emit("program_submission_created", str(submission_id), caller,
                         {"enrollment_id": payload.enrollment_id},
                         subject_type="program_submission")
        return SubmissionCreated(id=str(submission_id))

    async def mark_submission_reviewed(self, caller: Optional[Profile], payload) -> SubmissionReviewResponse:
        """
        Mark a submission reviewed.

        The first review wins: a repeated call succeeds, leaves ``reviewed_at``
        and the note untouched, and reports ``already_reviewed``.
        """
        caller = require_member(caller, "coach", action="mark_program_submission_reviewed")
        payload = parse_payload(SubmissionReview, payload)

        note = payload.note.strip() if payload.note else None
        result = await self._invoke(
            "mark_program_submission_reviewed",
            {"p_submission_id": payload.submission_id, "p_note": note or None},
            caller_id=caller.user_id,
            failure="Unable to review submission.",
            not_found="Submission not found."
        )

        response = SubmissionReviewResponse(
            submission_id=str(result["submission_id"]),
            reviewed_at=result["reviewed_at"],
            review_note=result["review_note"],
            already_reviewed=result["already_reviewed"]
        )
        if not response.already_reviewed:
            await self._emit("program_submission_reviewed", response.submission_id, caller,
                             subject_type="program_submission")
        return response

    async def create_focus(self, caller: Optional[Profile], payload) -> FocusCreated:
        caller = require_member(caller, "coach", action="create_program_focus")
        payload = parse_payload(FocusCreate, payload)

        focus_id = await self._invoke(
            "create_program_focus",
            {
                "p_name": payload.name,
                "p_description": payload.description or None,
                "p_cues_json": payload.cues,
            },
            caller_id=caller.user_id,
            failure="Unable to create focus."
        )

        await self._emit("program_focus_created", str(focus_id), caller,
                         subject_type="program_focus")
        return FocusCreated(id=str(focus_id))

    async def delete_template_assignment(
        self,
        caller: Optional[Profile],
        template_id: str,
        assignment_id: str
    ) -> DeleteResponse:
        """
        Delete a day assignment from a template.

        ``template_id`` only mirrors the URL shape. The store checks ownership
        through the assignment's own template, so it is not forwarded.
        """
        caller = require_member(caller, "coach", action="delete_program_template_day_assignment")
        check_id(template_id)
        assignment_id = check_id(assignment_id)

        deleted = await self._invoke(
            "delete_program_template_day_assignment",
            {"p_assignment_id": assignment_id},
            caller_id=caller.user_id,
            failure="Unable to delete assignment.",
            not_found="Assignment not found."
        )

        await self._emit("program_template_assignment_deleted", assignment_id, caller,
                         subject_type="program_assignment")
        return DeleteResponse(deleted=bool(deleted))

    async def delete_drill_media(self, caller: Optional[Profile], media_id: str) -> DeleteResponse:
        caller = require_member(caller, "coach", action="delete_program_drill_media")
        media_id = check_id(media_id)

        deleted = await self._invoke(
            "delete_program_drill_media",
            {"p_media_id": media_id},
            caller_id=caller.user_id,
            failure="Unable to delete media.",
            not_found="Media not found."
        )

        await self._emit("program_drill_media_deleted", media_id, caller,
                         subject_type="program_drill_media")
        return DeleteResponse(deleted=bool(deleted))
