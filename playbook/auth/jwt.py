"""
JWT token utilities for caller resolution.

Tokens are HS256-signed and carry only the subject (user id). Role, team and
active status are always read from the stored profile, never from claims.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
import jwt
from jwt.exceptions import InvalidTokenError

# Configuration from environment
JWT_SECRET = os.getenv("JWT_SECRET", "your-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))


def create_access_token(user_id: str) -> str:
    """
    Create a JWT access token.

    Args:
        user_id: The user's UUID as a string

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)

    payload = {
        "sub": user_id,
        "type": "access",
        "exp": now + timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS),
        "iat": now
    }

    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Dict:
    """
    Decode and validate a JWT token.

    Raises:
        InvalidTokenError: If the token is invalid or expired
    """
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {str(e)}")


def subject_from_token(token: str) -> Optional[str]:
    """Return the user id of a valid access token, or None."""
    try:
        payload = decode_token(token)
    except InvalidTokenError:
        return None

    if payload.get("type") != "access":
        return None

    return payload.get("sub") or None
