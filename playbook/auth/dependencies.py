"""
FastAPI dependencies for caller resolution.

Resolves the bearer token to a user id and the user id to the stored
profile. Role and ownership checks happen in the workflows through
``playbook.auth.gate``; these dependencies only answer "who is calling".
"""

import logging
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from playbook.errors import ServerError
from playbook.models.profile import Profile
from .jwt import subject_from_token

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    """
    Get the user id carried by the bearer token.

    Returns None if no valid access token is provided. Used by onboarding
    operations where the user has no profile yet.
    """
    if not credentials:
        return None
    return subject_from_token(credentials.credentials)


async def get_current_caller(
    request: Request,
    user_id: Optional[str] = Depends(get_current_identity)
) -> Optional[Profile]:
    """
    Get the profile of the current caller.

    Returns None when there is no valid token or the user has no profile.
    Workflows turn None into Unauthorized.

    Raises:
        ServerError: if the profile store cannot be read
    """
    if not user_id:
        return None

    store = request.app.state.store
    try:
        row = await store.fetch_profile(user_id)
    except Exception:
        logger.exception("Profile lookup failed for user %s", user_id)
        raise ServerError()

    if not row:
        return None

    return Profile(**row)
