"""
Lesson workflow.

State machine for lesson requests and invites:

    pending  -> accepted | declined      (respond to invite / request)
    pending | accepted | declined -> cancelled   (cancel, either party)

``cancelled`` is terminal. ``declined`` accepts no further responses.
An accepted lesson stays open to cancellation and rescheduling.
Attendance marks are stored per player and never change the lesson status.
"""

from typing import Optional

from playbook.auth.gate import require_member
from playbook.models.lesson import (
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
from playbook.models.profile import Profile
from .base import Workflow, as_utc, check_id, parse_payload

LESSON_NOT_FOUND = "Lesson not found."


class LessonWorkflow(Workflow):
    """Lesson requests, invites, cancellation and attendance."""

    subject_type = "lesson"

    async def request_lesson(self, caller: Optional[Profile], payload) -> LessonCreated:
        """Player asks a coach on their team for a lesson."""
        caller = require_member(caller, "player", action="request_lesson")
        payload = parse_payload(LessonRequestCreate, payload)

        lesson_id = await self._invoke(
            "request_lesson",
            {
                "p_coach_user_id": payload.coach_user_id,
                "p_start_at": as_utc(payload.start_at),
                "p_minutes": payload.minutes,
                "p_note": payload.note,
            },
            caller_id=caller.user_id,
            failure="Unable to request lesson.",
            not_found="Choose a coach on your team."
        )

        await self._emit("lesson_requested", str(lesson_id), caller,
                         {"coach_user_id": payload.coach_user_id})
        return LessonCreated(id=str(lesson_id))

    async def invite_to_lesson(self, caller: Optional[Profile], payload) -> LessonCreated:
        """Coach invites a player; the player answers with respond_to_invite."""
        caller = require_member(caller, "coach", action="create_lesson_as_coach")
        payload = parse_payload(LessonInviteCreate, payload)

        lesson_id = await self._invoke(
            "create_lesson_as_coach",
            {
                "p_player_user_id": payload.player_user_id,
                "p_start_at": as_utc(payload.start_at),
                "p_minutes": payload.minutes,
                "p_note": payload.note,
            },
            caller_id=caller.user_id,
            failure="You already have a lesson at that time.",
            not_found="Choose a valid player on your team."
        )

        await self._emit("lesson_invite_created", str(lesson_id), caller,
                         {"player_user_id": payload.player_user_id})
        return LessonCreated(id=str(lesson_id))

    async def cancel(self, caller: Optional[Profile], lesson_id: str, payload=None) -> LessonStatusResponse:
        """
        Cancel a lesson as its coach or player.

        Fails NotFound when the lesson is missing or belongs to another team,
        InvalidState when it is already cancelled.
        """
        caller = require_member(caller, action="cancel_lesson")
        lesson_id = check_id(lesson_id)
        payload = parse_payload(LessonCancel, payload)

        result = await self._invoke(
            "cancel_lesson",
            {"p_lesson_id": lesson_id, "p_note": payload.note},
            caller_id=caller.user_id,
            failure="Lesson is already cancelled.",
            not_found=LESSON_NOT_FOUND
        )

        await self._emit("lesson_cancelled", lesson_id, caller)
        return LessonStatusResponse(lesson_id=lesson_id, status=result["status"])

    async def respond_to_invite(self, caller: Optional[Profile], lesson_id: str, payload) -> LessonStatusResponse:
        """Invited player accepts or declines a pending invite."""
        caller = require_member(caller, "player", action="respond_to_lesson_invite")
        lesson_id = check_id(lesson_id)
        payload = parse_payload(InviteReply, payload)

        result = await self._invoke(
            "respond_to_lesson_invite",
            {"p_lesson_id": lesson_id, "p_accept": payload.accept},
            caller_id=caller.user_id,
            failure="Invite is no longer pending.",
            not_found=LESSON_NOT_FOUND
        )

        event = "lesson_invite_accepted" if payload.accept else "lesson_invite_declined"
        await self._emit(event, lesson_id, caller)
        return LessonStatusResponse(lesson_id=lesson_id, status=result["status"])

    async def respond_to_request(self, caller: Optional[Profile], lesson_id: str, payload) -> LessonStatusResponse:
        """Requested coach approves or declines a pending lesson request."""
        caller = require_member(caller, "coach", action="respond_to_lesson_request")
        lesson_id = check_id(lesson_id)
        payload = parse_payload(RequestReply, payload)

        note = payload.note.strip() if payload.note else None
        result = await self._invoke(
            "respond_to_lesson_request",
            {"p_lesson_id": lesson_id, "p_approve": payload.approve, "p_note": note or None},
            caller_id=caller.user_id,
            failure="Unable to update lesson request.",
            not_found=LESSON_NOT_FOUND
        )

        event = "lesson_approved" if payload.approve else "lesson_declined"
        await self._emit(event, lesson_id, caller)
        return LessonStatusResponse(lesson_id=lesson_id, status=result["status"])

    async def reschedule(self, caller: Optional[Profile], lesson_id: str, payload) -> LessonStatusResponse:
        """Move an open lesson to a new slot; its status is kept."""
        caller = require_member(caller, action="reschedule_lesson")
        lesson_id = check_id(lesson_id)
        payload = parse_payload(LessonReschedule, payload)

        result = await self._invoke(
            "reschedule_lesson",
            {
                "p_lesson_id": lesson_id,
                "p_start_at": as_utc(payload.start_at),
                "p_minutes": payload.minutes,
                "p_note": payload.note,
            },
            caller_id=caller.user_id,
            failure="Unable to reschedule lesson.",
            not_found=LESSON_NOT_FOUND
        )

        await self._emit("lesson_rescheduled", lesson_id, caller)
        return LessonStatusResponse(lesson_id=lesson_id, status=result["status"])

    async def set_participant_presence(self, caller: Optional[Profile], lesson_id: str, payload) -> ParticipantResponse:
        """Owning coach records whether a player attended. Idempotent."""
        caller = require_member(caller, "coach", action="coach_set_lesson_participant")
        lesson_id = check_id(lesson_id)
        payload = parse_payload(ParticipantUpdate, payload)

        result = await self._invoke(
            "coach_set_lesson_participant",
            {
                "p_lesson_id": lesson_id,
                "p_player_user_id": payload.player_user_id,
                "p_present": payload.present,
            },
            caller_id=caller.user_id,
            failure="Unable to update participants.",
            not_found=LESSON_NOT_FOUND
        )

        return ParticipantResponse(
            lesson_id=lesson_id,
            player_user_id=payload.player_user_id,
            present=result["present"]
        )
