"""
Team roster routes.

Provides endpoints for access codes, self-onboarding and player
management. ``/team/preview`` is public and rate limited.
"""

from fastapi import APIRouter, status

from playbook.dependencies import Caller, Identity, JsonBody, Roster
from playbook.models.common import DeleteResponse
from playbook.models.profile import ProfileResponse
from playbook.models.roster import (
    AccessCodeResponse,
    TeamPreviewResponse,
    PendingPlayerCreated,
    PlayerActiveResponse,
    PlayerModeResponse
)

router = APIRouter(prefix="/team", tags=["Team"])


@router.post("/access-code", response_model=AccessCodeResponse)
async def rotate_access_code(caller: Caller, roster: Roster):
    """
    Generate a new team access code.

    The previous code stops working immediately. Only accessible by coaches.
    """
    return await roster.rotate_access_code(caller)


@router.post("/preview", response_model=TeamPreviewResponse)
async def preview_team(roster: Roster, payload: JsonBody):
    """
    Preview the team behind an access code (public).

    Returns only the team and coach display names, or ``ok: false``.
    """
    return await roster.preview_team(payload)


@router.post("/join", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def join_team(identity: Identity, roster: Roster, payload: JsonBody):
    """Join a team as a player using its access code."""
    return await roster.join_with_access_code(identity, payload)


@router.post("/players", response_model=PlayerActiveResponse)
async def set_player_active(caller: Caller, roster: Roster, payload: JsonBody):
    """Activate or deactivate a player on your team."""
    return await roster.set_player_active(caller, payload)


@router.post("/players/create", response_model=PendingPlayerCreated, status_code=status.HTTP_201_CREATED)
async def create_pending_player(caller: Caller, roster: Roster, payload: JsonBody):
    """
    Add a player who will claim their profile later.

    Returns the claim token to share with the player.
    """
    return await roster.create_pending_player(caller, payload)


@router.post("/players/{invite_id}/claim", response_model=PendingPlayerCreated)
async def regenerate_claim_token(invite_id: str, caller: Caller, roster: Roster, payload: JsonBody):
    """
    Issue a fresh claim link for a pending player.

    The previous link stops working. Fails once the invite has been claimed.
    """
    return await roster.regenerate_claim_token(caller, invite_id, payload)


@router.delete("/players/{invite_id}/claim", response_model=DeleteResponse)
async def revoke_pending_player(invite_id: str, caller: Caller, roster: Roster):
    """Delete a pending player and its claim link."""
    return await roster.revoke_pending_player(caller, invite_id)


@router.patch("/players/{user_id}/mode", response_model=PlayerModeResponse)
async def set_player_mode(user_id: str, caller: Caller, roster: Roster, payload: JsonBody):
    return await roster.set_player_mode(caller, user_id, payload)
