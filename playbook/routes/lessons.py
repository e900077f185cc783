"""
Lesson routes.

Provides endpoints for lesson requests, coach invites, responses,
cancellation, rescheduling and attendance.
"""

from fastapi import APIRouter, status

from playbook.dependencies import Caller, JsonBody, Lessons
from playbook.models.lesson import LessonCreated, LessonStatusResponse, ParticipantResponse

router = APIRouter(prefix="/lessons", tags=["Lessons"])


@router.post("/request", response_model=LessonCreated, status_code=status.HTTP_201_CREATED)
async def request_lesson(caller: Caller, lessons: Lessons, payload: JsonBody):
    """
    Request a lesson with a coach on your team.

    Only accessible by players.
    """
    return await lessons.request_lesson(caller, payload)


@router.post("/create", response_model=LessonCreated, status_code=status.HTTP_201_CREATED)
async def create_lesson(caller: Caller, lessons: Lessons, payload: JsonBody):
    """
    Invite a player to a lesson.

    Only accessible by coaches. Fails with 409 when the slot overlaps one of
    your accepted lessons.
    """
    return await lessons.invite_to_lesson(caller, payload)


@router.post("/{lesson_id}/cancel", response_model=LessonStatusResponse)
async def cancel_lesson(lesson_id: str, caller: Caller, lessons: Lessons, payload: JsonBody):
    """Cancel a lesson you are part of, with an optional note."""
    return await lessons.cancel(caller, lesson_id, payload)


@router.post("/{lesson_id}/invite", response_model=LessonStatusResponse)
async def respond_to_invite(lesson_id: str, caller: Caller, lessons: Lessons, payload: JsonBody):
    """Accept or decline a coach's invite (invited player only)."""
    return await lessons.respond_to_invite(caller, lesson_id, payload)


@router.post("/{lesson_id}/respond", response_model=LessonStatusResponse)
async def respond_to_request(lesson_id: str, caller: Caller, lessons: Lessons, payload: JsonBody):
    """Approve or decline a player's request (requested coach only)."""
    return await lessons.respond_to_request(caller, lesson_id, payload)


@router.post("/{lesson_id}/reschedule", response_model=LessonStatusResponse)
async def reschedule_lesson(lesson_id: str, caller: Caller, lessons: Lessons, payload: JsonBody):
    return await lessons.reschedule(caller, lesson_id, payload)


@router.post("/{lesson_id}/participants", response_model=ParticipantResponse)
async def set_participant(lesson_id: str, caller: Caller, lessons: Lessons, payload: JsonBody):
    """
    Mark a player present or absent.

    Only the lesson's coach can record attendance. Repeating the same call
    is harmless.
    """
    return await lessons.set_participant_presence(caller, lesson_id, payload)
