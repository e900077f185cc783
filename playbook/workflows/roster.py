"""
Roster onboarding workflow.

Players join a team in one of two ways:

1. Access code: the coach shares the team's code; anyone with it can preview
   the team and join as a player. Rotating the code invalidates the old one
   immediately.
2. Claim link: the coach creates a pending player; the generated token is
   single-use and expires.

Previews are public and only ever return display names.
"""

from typing import Optional

from playbook.auth.gate import require_identity, require_member
from playbook.errors import InvalidInput, NotFound
from playbook.models.common import DeleteResponse
from playbook.models.profile import Profile, ProfileResponse
from playbook.models.roster import (
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
from playbook.utils.audit_log import log_sensitive_operation
from .base import Workflow, check_id, parse_datetime, parse_payload

CLAIM_TOKEN_MAX_LENGTH = 128


def _profile_response(row) -> ProfileResponse:
    return ProfileResponse(
        user_id=str(row["user_id"]),
        team_id=str(row["team_id"]),
        role=row["role"],
        display_name=row["display_name"]
    )


class RosterOnboardingWorkflow(Workflow):
    """Access codes, claim links and player management."""

    subject_type = "team"

    async def rotate_access_code(self, caller: Optional[Profile]) -> AccessCodeResponse:
        """Replace the team's access code. The previous code stops working at commit."""
        caller = require_member(caller, "coach", action="rotate_team_access_code")

        result = await self._invoke(
            "rotate_team_access_code",
            caller_id=caller.user_id,
            failure="Unable to rotate access code."
        )

        log_sensitive_operation(
            operation="access_code_rotate",
            user_id=caller.user_id,
            role=caller.role,
            details=f"team_id={caller.team_id}"
        )
        await self._emit("access_code_rotated", caller.team_id, caller)
        return AccessCodeResponse(access_code=result["access_code"], rotated_at=result["rotated_at"])

    async def preview_team(self, payload) -> TeamPreviewResponse:
        """
        Public lookup of the team behind an access code.

        Unknown codes return ``ok=False`` rather than an error.
        """
        payload = parse_payload(TeamPreviewRequest, payload)

        result = await self._invoke(
            "preview_team_from_access_code",
            {"p_access_code": payload.access_code.upper()}
        )

        if not result:
            return TeamPreviewResponse(ok=False)

        return TeamPreviewResponse(
            ok=True,
            team_name=result["team_name"],
            coach_name=result["coach_name"]
        )

    async def join_with_access_code(self, user_id: Optional[str], payload) -> ProfileResponse:
        """Create a player profile for a signed-in user who has none yet."""
        user_id = require_identity(user_id)
        payload = parse_payload(JoinTeamRequest, payload)

        row = await self._invoke(
            "join_team_with_access_code",
            {"p_access_code": payload.access_code.upper(), "p_display_name": payload.display_name},
            caller_id=user_id,
            failure="You already belong to a team.",
            not_found="Invalid access code."
        )

        profile = _profile_response(row)
        await self._emit("player_joined", profile.user_id, actor_user_id=user_id,
                         metadata={"team_id": profile.team_id}, subject_type="profile")
        return profile

    async def preview_claim(self, token: str) -> ClaimPreview:
        """
        Public preview of a claim link.

        A claimed token is never valid, whatever its expiry.
        """
        token = _check_token(token)

        info = await self._invoke("get_claim_info", {"p_token": token})
        if not info:
            raise NotFound("Invite not found.")

        expires_at = parse_datetime(info["expires_at"])
        is_expired = self.clock() >= expires_at
        is_claimed = info.get("claimed_at") is not None

        return ClaimPreview(
            first_name=info.get("first_name"),
            last_name=info.get("last_name"),
            team_name=info.get("team_name") or "Unknown Team",
            coach_name=info.get("coach_name") or "Your Coach",
            is_expired=is_expired,
            is_claimed=is_claimed,
            is_valid=not is_expired and not is_claimed
        )

    async def complete_claim(self, user_id: Optional[str], token: str) -> ProfileResponse:
        """Consume a claim token and create the player's profile. Single use."""
        user_id = require_identity(user_id)
        token = _check_token(token)

        row = await self._invoke(
            "claim_player_invite",
            {"p_token": token},
            caller_id=user_id,
            failure="This invite can no longer be claimed.",
            not_found="Invite not found."
        )

        profile = _profile_response(row)
        log_sensitive_operation(
            operation="claim_complete",
            user_id=user_id,
            role=profile.role,
            details=f"team_id={profile.team_id}"
        )
        await self._emit("player_claimed", profile.user_id, actor_user_id=user_id,
                         metadata={"team_id": profile.team_id}, subject_type="profile")
        return profile

    async def create_pending_player(self, caller: Optional[Profile], payload) -> PendingPlayerCreated:
        caller = require_member(caller, "coach", action="create_pending_player")
        payload = parse_payload(PendingPlayerCreate, payload)

        result = await self._invoke(
            "create_pending_player",
            {
                "p_first_name": payload.first_name,
                "p_last_name": payload.last_name or None,
                "p_expires_in_days": payload.expires_in_days,
            },
            caller_id=caller.user_id,
            failure="Unable to create player."
        )

        await self._emit("pending_player_created", str(result["invite_id"]), caller,
                         {"expires_in_days": payload.expires_in_days},
                         subject_type="pending_player")
        return _claim_link(result)

    async def regenerate_claim_token(self, caller: Optional[Profile], invite_id: str, payload=None) -> PendingPlayerCreated:
        """
        Issue a new claim token and expiry for a pending player.

        The previous token stops working at commit. Claimed invites are refused.
        """
        caller = require_member(caller, "coach", action="regenerate_claim_token")
        invite_id = check_id(invite_id)
        payload = parse_payload(ClaimTokenRegenerate, payload)

        result = await self._invoke(
            "regenerate_claim_token",
            {"p_invite_id": invite_id, "p_expires_in_days": payload.expires_in_days},
            caller_id=caller.user_id,
            failure="This invite has already been claimed.",
            not_found="Invite not found."
        )

        log_sensitive_operation(
            operation="claim_token_regenerate",
            user_id=caller.user_id,
            role=caller.role,
            details=f"invite_id={invite_id}"
        )
        await self._emit("claim_token_regenerated", invite_id, caller,
                         {"expires_in_days": payload.expires_in_days},
                         subject_type="pending_player")
        return _claim_link(result)

    async def revoke_pending_player(self, caller: Optional[Profile], invite_id: str) -> DeleteResponse:
        """Remove an unclaimed pending player together with its claim link."""
        caller = require_member(caller, "coach", action="revoke_pending_player")
        invite_id = check_id(invite_id)

        deleted = await self._invoke(
            "revoke_pending_player",
            {"p_invite_id": invite_id},
            caller_id=caller.user_id,
            failure="This invite has already been claimed.",
            not_found="Invite not found."
        )

        await self._emit("pending_player_revoked", invite_id, caller, subject_type="pending_player")
        return DeleteResponse(deleted=bool(deleted))

    async def set_player_active(self, caller: Optional[Profile], payload) -> PlayerActiveResponse:
        """
        Activate or deactivate a teammate. Idempotent.

        A deactivated player is rejected by the gate on every later mutation.
        """
        caller = require_member(caller, "coach", action="set_player_active")
        payload = parse_payload(PlayerActiveUpdate, payload)

        result = await self._invoke(
            "set_player_active",
            {"p_user_id": payload.user_id, "p_active": payload.active},
            caller_id=caller.user_id,
            failure="Unable to update player.",
            not_found="Player not found."
        )

        log_sensitive_operation(
            operation="player_activate" if payload.active else "player_deactivate",
            user_id=caller.user_id,
            role=caller.role,
            target_user_id=payload.user_id
        )
        await self._emit("player_active_updated", payload.user_id, caller,
                         {"is_active": result["is_active"]}, subject_type="profile")
        return PlayerActiveResponse(user_id=str(result["user_id"]), is_active=result["is_active"])

    async def set_player_mode(self, caller: Optional[Profile], user_id: str, payload) -> PlayerModeResponse:
        caller = require_member(caller, "coach", action="set_player_mode")
        user_id = check_id(user_id)
        payload = parse_payload(PlayerModeUpdate, payload)

        result = await self._invoke(
            "set_player_mode",
            {"p_user_id": user_id, "p_mode": payload.mode},
            caller_id=caller.user_id,
            failure="Unable to update player.",
            not_found="Player not found."
        )

        await self._emit("player_mode_updated", user_id, caller,
                         {"mode": result["mode"]}, subject_type="profile")
        return PlayerModeResponse(user_id=str(result["user_id"]), mode=result["mode"])


def _claim_link(result) -> PendingPlayerCreated:
    return PendingPlayerCreated(
        invite_id=str(result["invite_id"]),
        token=result["token"],
        expires_at=result["expires_at"]
    )


def _check_token(token: Optional[str]) -> str:
    token = (token or "").strip()
    if not token or len(token) > CLAIM_TOKEN_MAX_LENGTH:
        raise InvalidInput()
    return token
