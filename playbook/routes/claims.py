"""
Claim link routes.

The preview is public so the claim page can show who the link is for
before the player signs in.
"""

from fastapi import APIRouter, status

from playbook.dependencies import Identity, Roster
from playbook.models.profile import ProfileResponse
from playbook.models.roster import ClaimPreview

router = APIRouter(prefix="/claim", tags=["Claims"])


@router.get("/{token}", response_model=ClaimPreview)
async def preview_claim(token: str, roster: Roster):
    """
    Get claim link details (public endpoint).

    Used to show the player name and team before claiming.
    """
    return await roster.preview_claim(token)


@router.post("/{token}/complete", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def complete_claim(token: str, identity: Identity, roster: Roster):
    """Claim the pending player profile for the signed-in user."""
    return await roster.complete_claim(identity, token)
