"""
Authentication and authorization for the Playbook workflow service.

This module provides:
- JWT access token creation and validation
- The authorization gate (caller, active-status and role checks)
- FastAPI dependencies resolving the current caller
"""

from .jwt import create_access_token, decode_token, subject_from_token
from .gate import (
    require_caller,
    require_active,
    require_role,
    require_member,
    require_identity
)
from .dependencies import get_current_identity, get_current_caller

__all__ = [
    "create_access_token",
    "decode_token",
    "subject_from_token",
    "require_caller",
    "require_active",
    "require_role",
    "require_member",
    "require_identity",
    "get_current_identity",
    "get_current_caller",
]
