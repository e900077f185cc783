"""
Authorization gate.

Pure checks applied by every workflow operation before the store is
touched. Each check returns the caller on success so calls can be chained.
"""

from typing import Optional

from playbook.errors import Forbidden, Unauthorized
from playbook.models.profile import Profile
from playbook.utils.audit_log import log_authorization_failure


def require_caller(caller: Optional[Profile]) -> Profile:
    """Fail with Unauthorized when no caller was resolved."""
    if caller is None:
        raise Unauthorized()
    return caller


def require_active(caller: Optional[Profile], action: str = "mutate") -> Profile:
    """Fail with Forbidden when the caller's profile has been deactivated."""
    caller = require_caller(caller)
    if not caller.is_active:
        log_authorization_failure(
            user_id=caller.user_id,
            role=caller.role,
            team_id=caller.team_id,
            action=action,
            reason="inactive profile"
        )
        raise Forbidden()
    return caller


def require_role(caller: Optional[Profile], *roles: str, action: str = "mutate") -> Profile:
    """Fail with Forbidden unless the caller holds one of ``roles``."""
    caller = require_caller(caller)
    if caller.role not in roles:
        log_authorization_failure(
            user_id=caller.user_id,
            role=caller.role,
            team_id=caller.team_id,
            action=action,
            reason=f"requires {' or '.join(roles)} role"
        )
        raise Forbidden(f"Requires {' or '.join(roles)} role")
    return caller


def require_member(caller: Optional[Profile], *roles: str, action: str = "mutate") -> Profile:
    """
    Standard guard for mutating operations.

    Resolved caller, active profile, and (when given) one of ``roles``.
    """
    caller = require_active(caller, action=action)
    if roles:
        require_role(caller, *roles, action=action)
    return caller


def require_identity(user_id: Optional[str]) -> str:
    """Fail with Unauthorized when the request carries no valid identity."""
    if not user_id:
        raise Unauthorized()
    return user_id
