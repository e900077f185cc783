"""
Transactional store contract.

The store executes named atomic operations. Each workflow operation maps to
exactly one ``invoke`` call; the store either applies the whole transition
(including its consistency checks) or rejects it with a ``StoreError``.

Operations and their parameters form a closed registry (``OPERATIONS``).
Return payloads per operation:

    cancel_lesson, respond_to_lesson_invite,
    respond_to_lesson_request, reschedule_lesson   {lesson_id, status}
    request_lesson, create_lesson_as_coach         lesson id
    coach_set_lesson_participant                   {lesson_id, player_user_id, present}
    enroll_player_in_program                       enrollment id
    set_enrollment_status                          {enrollment_id, status}
    complete_program_assignment                    {assignment_id, completed_at, already_completed}
    submit_program_video                           submission id
    mark_program_submission_reviewed               {submission_id, reviewed_at, review_note, already_reviewed}
    create_program_focus                           focus id
    delete_program_template_day_assignment,
    delete_program_drill_media                     bool
    rotate_team_access_code                        {access_code, rotated_at}
    preview_team_from_access_code                  {team_name, coach_name} or None
    join_team_with_access_code,
    claim_player_invite                            profile dict
    get_claim_info                                 {first_name, last_name, team_name, coach_name,
                                                    expires_at, claimed_at} or None
    create_pending_player,
    regenerate_claim_token                         {invite_id, token, expires_at}
    revoke_pending_player, purge_video             bool
    set_player_active                              {user_id, is_active}
    set_player_mode                                {user_id, mode}
    soft_delete_*, restore_*                       {id, deleted_at, deleted_by_user_id}
    touch_video_seen, touch_last_seen_feed         last seen timestamp
    log_event                                      None
"""

import abc
from typing import Any, Dict, Mapping, Optional, Tuple

# Error kinds a store may report. Anything else is an infrastructure failure.
FORBIDDEN = "forbidden"
NOT_FOUND = "not_found"
INVALID_STATE = "invalid_state"
INVALID_INPUT = "invalid_input"

ERROR_KINDS = frozenset({FORBIDDEN, NOT_FOUND, INVALID_STATE, INVALID_INPUT})


OPERATIONS: Dict[str, Tuple[str, ...]] = {
    # Lessons
    "request_lesson": ("p_coach_user_id", "p_start_at", "p_minutes", "p_note"),
    "create_lesson_as_coach": ("p_player_user_id", "p_start_at", "p_minutes", "p_note"),
    "cancel_lesson": ("p_lesson_id", "p_note"),
    "respond_to_lesson_invite": ("p_lesson_id", "p_accept"),
    "respond_to_lesson_request": ("p_lesson_id", "p_approve", "p_note"),
    "reschedule_lesson": ("p_lesson_id", "p_start_at", "p_minutes", "p_note"),
    "coach_set_lesson_participant": ("p_lesson_id", "p_player_user_id", "p_present"),

    # Programs
    "enroll_player_in_program": ("p_template_id", "p_player_user_id", "p_start_at"),
    "set_enrollment_status": ("p_enrollment_id", "p_status"),
    "complete_program_assignment": ("p_assignment_id",),
    "submit_program_video": ("p_enrollment_id", "p_media_ref", "p_note"),
    "mark_program_submission_reviewed": ("p_submission_id", "p_note"),
    "create_program_focus": ("p_name", "p_description", "p_cues_json"),
    "delete_program_template_day_assignment": ("p_assignment_id",),
    "delete_program_drill_media": ("p_media_id",),

    # Roster onboarding
    "rotate_team_access_code": (),
    "preview_team_from_access_code": ("p_access_code",),
    "join_team_with_access_code": ("p_access_code", "p_display_name"),
    "get_claim_info": ("p_token",),
    "claim_player_invite": ("p_token",),
    "create_pending_player": ("p_first_name", "p_last_name", "p_expires_in_days"),
    "regenerate_claim_token": ("p_invite_id", "p_expires_in_days"),
    "revoke_pending_player": ("p_invite_id",),
    "set_player_active": ("p_user_id", "p_active"),
    "set_player_mode": ("p_user_id", "p_mode"),

    # Content lifecycle
    "soft_delete_video": ("p_video_id",),
    "restore_video": ("p_video_id",),
    "purge_video": ("p_video_id",),
    "soft_delete_comment": ("p_comment_id",),
    "restore_comment": ("p_comment_id",),
    "touch_video_seen": ("p_video_id",),
    "touch_last_seen_feed": (),

    # Audit
    "log_event": ("p_action", "p_entity_type", "p_entity_id", "p_metadata"),
}


class StoreError(Exception):
    """A business-rule rejection reported by the store."""

    def __init__(self, kind: str, message: str = ""):
        if kind not in ERROR_KINDS:
            raise ValueError(f"Unknown store error kind: {kind}")
        self.kind = kind
        self.message = message or kind
        super().__init__(f"{kind}: {self.message}")


class UnknownOperation(Exception):
    """Raised before any I/O when an operation is not in the registry."""


def bind_params(operation: str, params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Check an invocation against the registry.

    Returns a dict with every declared parameter present (missing ones are
    None). Unknown operations or unexpected parameter names raise
    ``UnknownOperation``.
    """
    if operation not in OPERATIONS:
        raise UnknownOperation(operation)

    declared = OPERATIONS[operation]
    params = dict(params or {})
    unexpected = set(params) - set(declared)
    if unexpected:
        raise UnknownOperation(f"{operation}: unexpected parameters {sorted(unexpected)}")

    return {name: params.get(name) for name in declared}


class TransactionalStore(abc.ABC):
    """
    Executor of named atomic operations.

    ``caller_id`` is the resolved user id of the caller (or None for public
    operations). Stores derive team scope and ownership from it and never
    from client-supplied parameters.
    """

    async def invoke(
        self,
        operation: str,
        params: Optional[Mapping[str, Any]] = None,
        caller_id: Optional[str] = None
    ) -> Any:
        bound = bind_params(operation, params)
        return await self._execute(operation, bound, caller_id)

    @abc.abstractmethod
    async def _execute(self, operation: str, params: Dict[str, Any], caller_id: Optional[str]) -> Any:
        """Run one operation atomically."""

    @abc.abstractmethod
    async def fetch_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Read-only profile lookup used for caller resolution."""

    async def close(self) -> None:
        """Release resources held by the store."""
