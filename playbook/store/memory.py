"""
In-process store.

Implements every registered operation against plain dicts guarded by a
single ``asyncio.Lock``, so each invocation is applied all-or-nothing and
invocations are serialized. Used by the test suite and for local
development with ``STORE_BACKEND=memory``.

Handlers validate everything before mutating anything; a handler that
raises leaves the state untouched.
"""

import asyncio
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from .base import (
    FORBIDDEN,
    INVALID_INPUT,
    INVALID_STATE,
    NOT_FOUND,
    StoreError,
    TransactionalStore,
)

ACCESS_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ACCESS_CODE_LENGTH = 8

ENROLLMENT_STATUSES = ("active", "paused", "completed")
PLAYER_MODES = ("in_person", "hybrid", "remote")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_access_code() -> str:
    return "".join(secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(ACCESS_CODE_LENGTH))


def generate_claim_token() -> str:
    return secrets.token_urlsafe(24)


def _new_id() -> str:
    return str(uuid.uuid4())


class MemoryStore(TransactionalStore):
    """Lock-guarded dictionary store."""

    def __init__(
        self,
        clock: Callable[[], datetime] = utcnow,
        code_factory: Callable[[], str] = generate_access_code,
        token_factory: Callable[[], str] = generate_claim_token
    ):
        self.clock = clock
        self.code_factory = code_factory
        self.token_factory = token_factory
        self._lock = asyncio.Lock()

        self.teams: Dict[str, dict] = {}
        self.profiles: Dict[str, dict] = {}
        self.lessons: Dict[str, dict] = {}
        self.participants: Dict[tuple, dict] = {}
        self.templates: Dict[str, dict] = {}
        self.template_assignments: Dict[str, dict] = {}
        self.enrollments: Dict[str, dict] = {}
        self.completions: Dict[tuple, dict] = {}
        self.submissions: Dict[str, dict] = {}
        self.focuses: Dict[str, dict] = {}
        self.drills: Dict[str, dict] = {}
        self.drill_media: Dict[str, dict] = {}
        self.pending_players: Dict[str, dict] = {}
        self.videos: Dict[str, dict] = {}
        self.comments: Dict[str, dict] = {}
        self.video_views: Dict[tuple, datetime] = {}
        self.feed_seen: Dict[str, datetime] = {}
        self.events: List[dict] = []

    async def _execute(self, operation: str, params: Dict[str, Any], caller_id: Optional[str]) -> Any:
        handler = getattr(self, f"_op_{operation}")
        async with self._lock:
            return handler(caller_id, **params)

    async def fetch_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        profile = self.profiles.get(user_id)
        return dict(profile) if profile else None

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def add_team(self, name: str, team_id: Optional[str] = None) -> str:
        team_id = team_id or _new_id()
        self.teams[team_id] = {
            "id": team_id,
            "name": name,
            "access_code": self.code_factory(),
            "access_code_rotated_at": self.clock(),
        }
        return team_id

    def add_profile(
        self,
        team_id: str,
        role: str,
        display_name: str,
        user_id: Optional[str] = None,
        is_active: bool = True,
        player_mode: Optional[str] = None
    ) -> str:
        user_id = user_id or _new_id()
        self.profiles[user_id] = {
            "user_id": user_id,
            "team_id": team_id,
            "role": role,
            "display_name": display_name,
            "is_active": is_active,
            "player_mode": player_mode,
        }
        return user_id

    def add_template(self, team_id: str, title: str, created_by: Optional[str] = None) -> str:
        template_id = _new_id()
        self.templates[template_id] = {
            "id": template_id,
            "team_id": team_id,
            "title": title,
            "created_by": created_by,
        }
        return template_id

    def add_template_assignment(self, template_id: str, week_index: int = 1, day_index: int = 1) -> str:
        assignment_id = _new_id()
        self.template_assignments[assignment_id] = {
            "id": assignment_id,
            "template_id": template_id,
            "week_index": week_index,
            "day_index": day_index,
        }
        return assignment_id

    def add_drill(self, team_id: str, title: str) -> str:
        drill_id = _new_id()
        self.drills[drill_id] = {"id": drill_id, "team_id": team_id, "title": title}
        return drill_id

    def add_drill_media(self, drill_id: str, storage_path: str = "drills/instruction.mp4") -> str:
        media_id = _new_id()
        self.drill_media[media_id] = {"id": media_id, "drill_id": drill_id, "storage_path": storage_path}
        return media_id

    def add_video(self, team_id: str, owner_user_id: str) -> str:
        video_id = _new_id()
        self.videos[video_id] = {
            "id": video_id,
            "team_id": team_id,
            "owner_user_id": owner_user_id,
            "deleted_at": None,
            "deleted_by_user_id": None,
        }
        return video_id

    def add_comment(self, video_id: str, author_user_id: str, body: str = "") -> str:
        comment_id = _new_id()
        self.comments[comment_id] = {
            "id": comment_id,
            "video_id": video_id,
            "author_user_id": author_user_id,
            "body": body,
            "deleted_at": None,
            "deleted_by_user_id": None,
        }
        return comment_id

    # ------------------------------------------------------------------
    # Shared checks
    # ------------------------------------------------------------------

    def _caller(self, caller_id: Optional[str]) -> dict:
        profile = self.profiles.get(caller_id) if caller_id else None
        if profile is None:
            raise StoreError(FORBIDDEN, "missing_profile")
        if not profile["is_active"]:
            raise StoreError(FORBIDDEN, "inactive")
        return profile

    def _coach(self, caller_id: Optional[str]) -> dict:
        profile = self._caller(caller_id)
        if profile["role"] != "coach":
            raise StoreError(FORBIDDEN, "forbidden")
        return profile

    def _player(self, caller_id: Optional[str]) -> dict:
        profile = self._caller(caller_id)
        if profile["role"] != "player":
            raise StoreError(FORBIDDEN, "forbidden")
        return profile

    def _new_member(self, caller_id: Optional[str]) -> str:
        if not caller_id:
            raise StoreError(FORBIDDEN, "missing_identity")
        if caller_id in self.profiles:
            raise StoreError(INVALID_STATE, "already_has_profile")
        return caller_id

    def _teammate(self, team_id: str, user_id: str, role: str) -> dict:
        profile = self.profiles.get(user_id)
        if not profile or profile["team_id"] != team_id or profile["role"] != role:
            raise StoreError(NOT_FOUND, f"invalid_{role}")
        return profile

    def _visible_lesson(self, caller: dict, lesson_id: str) -> dict:
        lesson = self.lessons.get(lesson_id)
        if not lesson or lesson["team_id"] != caller["team_id"]:
            raise StoreError(NOT_FOUND, "not_found")
        return lesson

    def _has_conflict(self, coach_user_id: str, start_at: datetime, minutes: int, exclude_id: Optional[str] = None) -> bool:
        end_at = start_at + timedelta(minutes=minutes)
        for lesson in self.lessons.values():
            if lesson["id"] == exclude_id or lesson["coach_user_id"] != coach_user_id:
                continue
            if lesson["status"] != "accepted":
                continue
            other_end = lesson["start_at"] + timedelta(minutes=lesson["minutes"])
            if lesson["start_at"] < end_at and other_end > start_at:
                return True
        return False

    def _coach_name(self, team_id: str, preferred_user_id: Optional[str] = None) -> str:
        preferred = self.profiles.get(preferred_user_id) if preferred_user_id else None
        if preferred:
            return preferred["display_name"]
        for profile in self.profiles.values():
            if profile["team_id"] == team_id and profile["role"] == "coach":
                return profile["display_name"]
        return "Your Coach"

    @staticmethod
    def _content_state(row: dict) -> dict:
        return {
            "id": row["id"],
            "deleted_at": row["deleted_at"],
            "deleted_by_user_id": row["deleted_by_user_id"],
        }

    # ------------------------------------------------------------------
    # Lessons
    # ------------------------------------------------------------------

    def _insert_lesson(self, caller: dict, coach_user_id: str, player_user_id: str, origin: str,
                       start_at: datetime, minutes: int, note: Optional[str]) -> str:
        lesson_id = _new_id()
        self.lessons[lesson_id] = {
            "id": lesson_id,
            "team_id": caller["team_id"],
            "coach_user_id": coach_user_id,
            "player_user_id": player_user_id,
            "origin": origin,
            "status": "pending",
            "start_at": start_at,
            "minutes": minutes,
            "note": note,
            "response_note": None,
            "cancel_note": None,
            "cancelled_by_user_id": None,
            "created_by_user_id": caller["user_id"],
            "created_at": self.clock(),
        }
        return lesson_id

    def _op_request_lesson(self, caller_id, p_coach_user_id, p_start_at, p_minutes, p_note):
        caller = self._player(caller_id)
        self._teammate(caller["team_id"], p_coach_user_id, "coach")
        return self._insert_lesson(caller, p_coach_user_id, caller["user_id"], "request",
                                   p_start_at, p_minutes, p_note)

    def _op_create_lesson_as_coach(self, caller_id, p_player_user_id, p_start_at, p_minutes, p_note):
        caller = self._coach(caller_id)
        self._teammate(caller["team_id"], p_player_user_id, "player")
        if self._has_conflict(caller["user_id"], p_start_at, p_minutes):
            raise StoreError(INVALID_STATE, "conflict")
        return self._insert_lesson(caller, caller["user_id"], p_player_user_id, "invite",
                                   p_start_at, p_minutes, p_note)

    def _op_cancel_lesson(self, caller_id, p_lesson_id, p_note):
        caller = self._caller(caller_id)
        lesson = self._visible_lesson(caller, p_lesson_id)
        if caller["user_id"] not in (lesson["coach_user_id"], lesson["player_user_id"]):
            raise StoreError(FORBIDDEN, "forbidden")
        if lesson["status"] == "cancelled":
            raise StoreError(INVALID_STATE, "already_cancelled")

        lesson["status"] = "cancelled"
        lesson["cancel_note"] = p_note
        lesson["cancelled_by_user_id"] = caller["user_id"]
        return {"lesson_id": lesson["id"], "status": lesson["status"]}

    def _op_respond_to_lesson_invite(self, caller_id, p_lesson_id, p_accept):
        caller = self._caller(caller_id)
        lesson = self._visible_lesson(caller, p_lesson_id)
        if caller["user_id"] != lesson["player_user_id"]:
            raise StoreError(FORBIDDEN, "forbidden")
        if lesson["origin"] != "invite":
            raise StoreError(INVALID_STATE, "not_an_invite")
        if lesson["status"] != "pending":
            raise StoreError(INVALID_STATE, "not_pending")

        lesson["status"] = "accepted" if p_accept else "declined"
        return {"lesson_id": lesson["id"], "status": lesson["status"]}

    def _op_respond_to_lesson_request(self, caller_id, p_lesson_id, p_approve, p_note):
        caller = self._caller(caller_id)
        lesson = self._visible_lesson(caller, p_lesson_id)
        if caller["user_id"] != lesson["coach_user_id"]:
            raise StoreError(FORBIDDEN, "forbidden")
        if lesson["origin"] != "request":
            raise StoreError(INVALID_STATE, "not_a_request")
        if lesson["status"] != "pending":
            raise StoreError(INVALID_STATE, "not_pending")
        if p_approve and self._has_conflict(lesson["coach_user_id"], lesson["start_at"],
                                            lesson["minutes"], exclude_id=lesson["id"]):
            raise StoreError(INVALID_STATE, "conflict")

        lesson["status"] = "accepted" if p_approve else "declined"
        lesson["response_note"] = p_note
        return {"lesson_id": lesson["id"], "status": lesson["status"]}

    def _op_reschedule_lesson(self, caller_id, p_lesson_id, p_start_at, p_minutes, p_note):
        caller = self._caller(caller_id)
        lesson = self._visible_lesson(caller, p_lesson_id)
        if caller["user_id"] not in (lesson["coach_user_id"], lesson["player_user_id"]):
            raise StoreError(FORBIDDEN, "forbidden")
        if lesson["status"] in ("cancelled", "declined"):
            raise StoreError(INVALID_STATE, "closed")
        if self._has_conflict(lesson["coach_user_id"], p_start_at, p_minutes, exclude_id=lesson["id"]):
            raise StoreError(INVALID_STATE, "conflict")

        lesson["start_at"] = p_start_at
        lesson["minutes"] = p_minutes
        if p_note is not None:
            lesson["note"] = p_note
        return {"lesson_id": lesson["id"], "status": lesson["status"]}

    def _op_coach_set_lesson_participant(self, caller_id, p_lesson_id, p_player_user_id, p_present):
        caller = self._caller(caller_id)
        lesson = self._visible_lesson(caller, p_lesson_id)
        if caller["user_id"] != lesson["coach_user_id"]:
            raise StoreError(FORBIDDEN, "forbidden")
        self._teammate(caller["team_id"], p_player_user_id, "player")

        key = (lesson["id"], p_player_user_id)
        self.participants[key] = {
            "lesson_id": lesson["id"],
            "player_user_id": p_player_user_id,
            "present": bool(p_present),
            "updated_at": self.clock(),
        }
        return {"lesson_id": lesson["id"], "player_user_id": p_player_user_id, "present": bool(p_present)}

    # ------------------------------------------------------------------
    # Programs
    # ------------------------------------------------------------------

    def _op_enroll_player_in_program(self, caller_id, p_template_id, p_player_user_id, p_start_at):
        caller = self._coach(caller_id)
        template = self.templates.get(p_template_id)
        if not template or template["team_id"] != caller["team_id"]:
            raise StoreError(NOT_FOUND, "not_found")
        self._teammate(caller["team_id"], p_player_user_id, "player")

        # Duplicate enrollments are permitted; each call creates a new one.
        enrollment_id = _new_id()
        self.enrollments[enrollment_id] = {
            "id": enrollment_id,
            "template_id": p_template_id,
            "team_id": caller["team_id"],
            "player_user_id": p_player_user_id,
            "status": "active",
            "start_at": p_start_at or self.clock(),
            "created_by_user_id": caller["user_id"],
        }
        return enrollment_id

    def _op_set_enrollment_status(self, caller_id, p_enrollment_id, p_status):
        caller = self._coach(caller_id)
        if p_status not in ENROLLMENT_STATUSES:
            raise StoreError(INVALID_INPUT, "invalid_status")
        enrollment = self.enrollments.get(p_enrollment_id)
        if not enrollment:
            raise StoreError(NOT_FOUND, "not_found")
        if enrollment["team_id"] != caller["team_id"]:
            raise StoreError(INVALID_STATE, "wrong_team")

        enrollment["status"] = p_status
        return {"enrollment_id": enrollment["id"], "status": enrollment["status"]}

    def _op_complete_program_assignment(self, caller_id, p_assignment_id):
        caller = self._player(caller_id)
        assignment = self.template_assignments.get(p_assignment_id)
        if not assignment:
            raise StoreError(NOT_FOUND, "not_found")
        enrolled = any(
            e["template_id"] == assignment["template_id"] and e["player_user_id"] == caller["user_id"]
            for e in self.enrollments.values()
        )
        if not enrolled:
            raise StoreError(NOT_FOUND, "not_found")

        key = (assignment["id"], caller["user_id"])
        existing = self.completions.get(key)
        if existing:
            return {
                "assignment_id": assignment["id"],
                "completed_at": existing["completed_at"],
                "already_completed": True,
            }

        completed_at = self.clock()
        self.completions[key] = {
            "assignment_id": assignment["id"],
            "player_user_id": caller["user_id"],
            "completed_at": completed_at,
        }
        return {"assignment_id": assignment["id"], "completed_at": completed_at, "already_completed": False}

    def _op_submit_program_video(self, caller_id, p_enrollment_id, p_media_ref, p_note):
        caller = self._player(caller_id)
        enrollment = self.enrollments.get(p_enrollment_id)
        if not enrollment or enrollment["player_user_id"] != caller["user_id"]:
            raise StoreError(NOT_FOUND, "not_found")

        submission_id = _new_id()
        self.submissions[submission_id] = {
            "id": submission_id,
            "enrollment_id": enrollment["id"],
            "player_user_id": caller["user_id"],
            "media_ref": p_media_ref,
            "note": p_note,
            "created_at": self.clock(),
            "reviewed_at": None,
            "review_note": None,
            "reviewed_by_user_id": None,
        }
        return submission_id

    def _op_mark_program_submission_reviewed(self, caller_id, p_submission_id, p_note):
        caller = self._coach(caller_id)
        submission = self.submissions.get(p_submission_id)
        enrollment = self.enrollments.get(submission["enrollment_id"]) if submission else None
        if not enrollment or enrollment["team_id"] != caller["team_id"]:
            raise StoreError(NOT_FOUND, "not_found")

        already_reviewed = submission["reviewed_at"] is not None
        if not already_reviewed:
            submission["reviewed_at"] = self.clock()
            submission["review_note"] = p_note
            submission["reviewed_by_user_id"] = caller["user_id"]

        return {
            "submission_id": submission["id"],
            "reviewed_at": submission["reviewed_at"],
            "review_note": submission["review_note"],
            "already_reviewed": already_reviewed,
        }

    def _op_create_program_focus(self, caller_id, p_name, p_description, p_cues_json):
        caller = self._coach(caller_id)
        focus_id = _new_id()
        self.focuses[focus_id] = {
            "id": focus_id,
            "team_id": caller["team_id"],
            "name": p_name,
            "description": p_description,
            "cues": list(p_cues_json or []),
            "created_by_user_id": caller["user_id"],
        }
        return focus_id

    def _op_delete_program_template_day_assignment(self, caller_id, p_assignment_id):
        caller = self._coach(caller_id)
        assignment = self.template_assignments.get(p_assignment_id)
        template = self.templates.get(assignment["template_id"]) if assignment else None
        if not template or template["team_id"] != caller["team_id"]:
            raise StoreError(NOT_FOUND, "not_found")

        del self.template_assignments[p_assignment_id]
        return True

    def _op_delete_program_drill_media(self, caller_id, p_media_id):
        caller = self._coach(caller_id)
        media = self.drill_media.get(p_media_id)
        drill = self.drills.get(media["drill_id"]) if media else None
        if not drill or drill["team_id"] != caller["team_id"]:
            raise StoreError(NOT_FOUND, "not_found")

        del self.drill_media[p_media_id]
        return True

    # ------------------------------------------------------------------
    # Roster onboarding
    # ------------------------------------------------------------------

    def _op_rotate_team_access_code(self, caller_id):
        caller = self._coach(caller_id)
        team = self.teams.get(caller["team_id"])
        if not team:
            raise StoreError(FORBIDDEN, "forbidden")

        taken = {t["access_code"] for t in self.teams.values()}
        code = self.code_factory()
        while code in taken:
            code = self.code_factory()

        team["access_code"] = code
        team["access_code_rotated_at"] = self.clock()
        return {"access_code": code, "rotated_at": team["access_code_rotated_at"]}

    def _team_by_code(self, code: Optional[str]) -> Optional[dict]:
        wanted = (code or "").strip().upper()
        if not wanted:
            return None
        for team in self.teams.values():
            if team["access_code"] == wanted:
                return team
        return None

    def _op_preview_team_from_access_code(self, caller_id, p_access_code):
        team = self._team_by_code(p_access_code)
        if not team:
            return None
        return {"team_name": team["name"], "coach_name": self._coach_name(team["id"])}

    def _op_join_team_with_access_code(self, caller_id, p_access_code, p_display_name):
        user_id = self._new_member(caller_id)
        team = self._team_by_code(p_access_code)
        if not team:
            raise StoreError(NOT_FOUND, "not_found")

        self.add_profile(team["id"], "player", p_display_name, user_id=user_id)
        return dict(self.profiles[user_id])

    def _op_get_claim_info(self, caller_id, p_token):
        pending = self.pending_players.get(p_token)
        if not pending:
            return None
        team = self.teams.get(pending["team_id"])
        return {
            "first_name": pending["first_name"],
            "last_name": pending["last_name"],
            "team_name": team["name"] if team else "Unknown Team",
            "coach_name": self._coach_name(pending["team_id"], pending["created_by_user_id"]),
            "expires_at": pending["expires_at"],
            "claimed_at": pending["claimed_at"],
        }

    def _op_claim_player_invite(self, caller_id, p_token):
        user_id = self._new_member(caller_id)
        pending = self.pending_players.get(p_token)
        if not pending:
            raise StoreError(NOT_FOUND, "not_found")
        if pending["claimed_at"] is not None:
            raise StoreError(INVALID_STATE, "already_claimed")
        now = self.clock()
        if now >= pending["expires_at"]:
            raise StoreError(INVALID_STATE, "expired")

        self.add_profile(pending["team_id"], "player", pending["display_name"], user_id=user_id)
        pending["claimed_at"] = now
        pending["claimed_by_user_id"] = user_id
        return dict(self.profiles[user_id])

    def _op_create_pending_player(self, caller_id, p_first_name, p_last_name, p_expires_in_days):
        caller = self._coach(caller_id)
        days = p_expires_in_days or 30
        if not 1 <= days <= 365:
            raise StoreError(INVALID_INPUT, "invalid_expiry")

        token = self.token_factory()
        while token in self.pending_players:
            token = self.token_factory()

        invite_id = _new_id()
        expires_at = self.clock() + timedelta(days=days)
        self.pending_players[token] = {
            "id": invite_id,
            "token": token,
            "team_id": caller["team_id"],
            "first_name": p_first_name,
            "last_name": p_last_name,
            "display_name": " ".join(part for part in (p_first_name, p_last_name) if part),
            "created_by_user_id": caller["user_id"],
            "expires_at": expires_at,
            "claimed_at": None,
            "claimed_by_user_id": None,
        }
        return {"invite_id": invite_id, "token": token, "expires_at": expires_at}

    def _team_invite(self, caller: dict, invite_id: str) -> dict:
        for pending in self.pending_players.values():
            if pending["id"] == invite_id and pending["team_id"] == caller["team_id"]:
                return pending
        raise StoreError(NOT_FOUND, "not_found")

    def _op_regenerate_claim_token(self, caller_id, p_invite_id, p_expires_in_days):
        caller = self._coach(caller_id)
        days = p_expires_in_days or 30
        if not 1 <= days <= 365:
            raise StoreError(INVALID_INPUT, "invalid_expiry")
        pending = self._team_invite(caller, p_invite_id)
        if pending["claimed_at"] is not None:
            raise StoreError(INVALID_STATE, "already_claimed")

        token = self.token_factory()
        while token in self.pending_players:
            token = self.token_factory()

        del self.pending_players[pending["token"]]
        pending["token"] = token
        pending["expires_at"] = self.clock() + timedelta(days=days)
        self.pending_players[token] = pending
        return {"invite_id": pending["id"], "token": token, "expires_at": pending["expires_at"]}

    def _op_revoke_pending_player(self, caller_id, p_invite_id):
        caller = self._coach(caller_id)
        pending = self._team_invite(caller, p_invite_id)
        if pending["claimed_at"] is not None:
            raise StoreError(INVALID_STATE, "already_claimed")

        del self.pending_players[pending["token"]]
        return True

    def _op_set_player_active(self, caller_id, p_user_id, p_active):
        caller = self._coach(caller_id)
        player = self._teammate(caller["team_id"], p_user_id, "player")
        player["is_active"] = bool(p_active)
        return {"user_id": player["user_id"], "is_active": player["is_active"]}

    def _op_set_player_mode(self, caller_id, p_user_id, p_mode):
        caller = self._coach(caller_id)
        if p_mode not in PLAYER_MODES:
            raise StoreError(INVALID_INPUT, "invalid_mode")
        player = self._teammate(caller["team_id"], p_user_id, "player")
        player["player_mode"] = p_mode
        return {"user_id": player["user_id"], "mode": p_mode}

    # ------------------------------------------------------------------
    # Content lifecycle
    # ------------------------------------------------------------------

    def _visible_video(self, caller: dict, video_id: str) -> dict:
        video = self.videos.get(video_id)
        if not video or video["team_id"] != caller["team_id"]:
            raise StoreError(NOT_FOUND, "not_found")
        return video

    def _editable_video(self, caller_id: Optional[str], video_id: str):
        caller = self._caller(caller_id)
        video = self._visible_video(caller, video_id)
        if caller["role"] != "coach" and video["owner_user_id"] != caller["user_id"]:
            raise StoreError(FORBIDDEN, "forbidden")
        return caller, video

    def _editable_comment(self, caller_id: Optional[str], comment_id: str):
        caller = self._caller(caller_id)
        comment = self.comments.get(comment_id)
        video = self.videos.get(comment["video_id"]) if comment else None
        if not video or video["team_id"] != caller["team_id"]:
            raise StoreError(NOT_FOUND, "not_found")
        if caller["role"] != "coach" and comment["author_user_id"] != caller["user_id"]:
            raise StoreError(FORBIDDEN, "forbidden")
        return caller, comment

    def _soft_delete(self, caller: dict, row: dict) -> dict:
        if row["deleted_at"] is None:
            row["deleted_at"] = self.clock()
            row["deleted_by_user_id"] = caller["user_id"]
        return self._content_state(row)

    def _restore(self, row: dict) -> dict:
        row["deleted_at"] = None
        row["deleted_by_user_id"] = None
        return self._content_state(row)

    def _op_soft_delete_video(self, caller_id, p_video_id):
        caller, video = self._editable_video(caller_id, p_video_id)
        return self._soft_delete(caller, video)

    def _op_restore_video(self, caller_id, p_video_id):
        _, video = self._editable_video(caller_id, p_video_id)
        return self._restore(video)

    def _op_purge_video(self, caller_id, p_video_id):
        _, video = self._editable_video(caller_id, p_video_id)
        if video["deleted_at"] is None:
            raise StoreError(INVALID_STATE, "not_in_trash")

        del self.videos[video["id"]]
        for comment_id in [cid for cid, c in self.comments.items() if c["video_id"] == video["id"]]:
            del self.comments[comment_id]
        for key in [key for key in self.video_views if key[0] == video["id"]]:
            del self.video_views[key]
        return True

    def _op_soft_delete_comment(self, caller_id, p_comment_id):
        caller, comment = self._editable_comment(caller_id, p_comment_id)
        return self._soft_delete(caller, comment)

    def _op_restore_comment(self, caller_id, p_comment_id):
        _, comment = self._editable_comment(caller_id, p_comment_id)
        return self._restore(comment)

    def _op_touch_video_seen(self, caller_id, p_video_id):
        caller = self._caller(caller_id)
        video = self._visible_video(caller, p_video_id)
        seen_at = self.clock()
        self.video_views[(video["id"], caller["user_id"])] = seen_at
        return seen_at

    def _op_touch_last_seen_feed(self, caller_id):
        caller = self._caller(caller_id)
        seen_at = self.clock()
        self.feed_seen[caller["user_id"]] = seen_at
        return seen_at

    # ------------------------------------------------------------------
    # Audit
    # ------------------------------------------------------------------

    def _op_log_event(self, caller_id, p_action, p_entity_type, p_entity_id, p_metadata):
        self.events.append({
            "action": p_action,
            "entity_type": p_entity_type,
            "entity_id": p_entity_id,
            "metadata": dict(p_metadata or {}),
            "actor_user_id": caller_id,
            "created_at": self.clock(),
        })
        return None
