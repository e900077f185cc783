"""
FastAPI dependency injection for workflows.

The store and event sink are created once in the application lifespan and
kept on ``app.state``. Workflows are cheap and built per request from those
shared collaborators, so tests can swap the store by setting
``app.state.store`` before the app starts.
"""

import json
from typing import Annotated, Any, Optional

from fastapi import Depends, Request

from playbook.auth.dependencies import get_current_caller, get_current_identity
from playbook.models.profile import Profile
from playbook.workflows import (
    ContentLifecycle,
    LessonWorkflow,
    ProgramWorkflow,
    RosterOnboardingWorkflow,
)


def get_lesson_workflow(request: Request) -> LessonWorkflow:
    return LessonWorkflow(request.app.state.store, request.app.state.events)


def get_program_workflow(request: Request) -> ProgramWorkflow:
    return ProgramWorkflow(request.app.state.store, request.app.state.events)


def get_roster_workflow(request: Request) -> RosterOnboardingWorkflow:
    return RosterOnboardingWorkflow(request.app.state.store, request.app.state.events)


def get_content_lifecycle(request: Request) -> ContentLifecycle:
    return ContentLifecycle(request.app.state.store, request.app.state.events)


# Shorthand annotations for route signatures
Caller = Annotated[Optional[Profile], Depends(get_current_caller)]
Identity = Annotated[Optional[str], Depends(get_current_identity)]
Lessons = Annotated[LessonWorkflow, Depends(get_lesson_workflow)]
Programs = Annotated[ProgramWorkflow, Depends(get_program_workflow)]
Roster = Annotated[RosterOnboardingWorkflow, Depends(get_roster_workflow)]
Content = Annotated[ContentLifecycle, Depends(get_content_lifecycle)]


async def read_json_body(request: Request) -> Any:
    """
    Decode the request body without validating it.

    Bodies are handed to the workflows as-is so that the caller is checked
    before the payload. Undecodable bodies come through as text, which
    ``parse_payload`` rejects like any other non-object.
    """
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return body.decode("utf-8", errors="replace")


JsonBody = Annotated[Any, Depends(read_json_body)]
