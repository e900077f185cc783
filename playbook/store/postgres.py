"""
PostgreSQL-backed store.

Each operation is a database function with the same name as the registry
entry. An invocation runs in one transaction: the caller id is set as a
transaction-local setting (``request.caller_id``) that the functions read,
then the function is called with named arguments.

Functions signal business-rule rejections with ``RAISE EXCEPTION`` whose
message starts with the error kind (``forbidden``, ``not_found``,
``invalid_state``, ``invalid_input``), optionally followed by ``: detail``.
That leading kind is reported verbatim. Messages without one are matched
against the keywords in ``KEYWORD_KINDS``.
"""

import json
import logging
import uuid
from typing import Any, Dict, Optional

import asyncpg

from .base import (
    ERROR_KINDS,
    FORBIDDEN,
    INVALID_INPUT,
    INVALID_STATE,
    NOT_FOUND,
    OPERATIONS,
    StoreError,
    TransactionalStore,
)

logger = logging.getLogger(__name__)

# Fallback keywords for messages without a leading kind, checked in order
KEYWORD_KINDS = (
    ("forbidden", FORBIDDEN),
    ("missing_profile", FORBIDDEN),
    ("inactive", FORBIDDEN),
    ("not_found", NOT_FOUND),
    ("invalid_coach", NOT_FOUND),
    ("invalid_player", NOT_FOUND),
    ("invalid_state", INVALID_STATE),
    ("already_claimed", INVALID_STATE),
    ("expired", INVALID_STATE),
    ("conflict", INVALID_STATE),
    ("blocked", INVALID_STATE),
    ("invalid_input", INVALID_INPUT),
    ("invalid_duration", INVALID_INPUT),
)


def classify_error(error: asyncpg.PostgresError) -> Optional[StoreError]:
    """
    Translate a database error into a StoreError.

    Returns None for errors that are not business-rule rejections; those
    propagate as infrastructure failures.
    """
    message = (getattr(error, "message", None) or str(error)).strip()
    lowered = message.lower()

    if isinstance(error, asyncpg.exceptions.InsufficientPrivilegeError):
        return StoreError(FORBIDDEN, message)
    if isinstance(error, asyncpg.exceptions.NoDataFoundError):
        return StoreError(NOT_FOUND, message)
    if isinstance(error, asyncpg.exceptions.RaiseError):
        leading = lowered.split(":", 1)[0].strip()
        if leading in ERROR_KINDS:
            return StoreError(leading, message)
        for keyword, kind in KEYWORD_KINDS:
            if keyword in lowered:
                return StoreError(kind, message)
        return None
    if isinstance(error, (
        asyncpg.exceptions.UniqueViolationError,
        asyncpg.exceptions.CheckViolationError,
        asyncpg.exceptions.ForeignKeyViolationError,
    )):
        return StoreError(INVALID_STATE, message)
    if isinstance(error, (
        asyncpg.exceptions.InvalidTextRepresentationError,
        asyncpg.exceptions.StringDataRightTruncationError,
    )):
        return StoreError(INVALID_INPUT, message)
    return None


def build_call(operation: str) -> str:
    """SQL for calling a registered operation with named arguments."""
    names = OPERATIONS[operation]
    args = ", ".join(f"{name} => ${index}" for index, name in enumerate(names, start=1))
    return f"SELECT {operation}({args})"


async def _init_connection(conn: asyncpg.Connection):
    for type_name in ("json", "jsonb"):
        await conn.set_type_codec(
            type_name,
            encoder=json.dumps,
            decoder=json.loads,
            schema="pg_catalog"
        )


class PostgresStore(TransactionalStore):
    """Store backed by an asyncpg connection pool."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    @classmethod
    async def connect(cls, dsn: str, **pool_kwargs) -> "PostgresStore":
        pool = await asyncpg.create_pool(dsn, init=_init_connection, **pool_kwargs)
        logger.info("Connected PostgreSQL store")
        return cls(pool)

    async def _execute(self, operation: str, params: Dict[str, Any], caller_id: Optional[str]) -> Any:
        sql = build_call(operation)
        args = [params[name] for name in OPERATIONS[operation]]

        async with self.pool.acquire() as conn:
            try:
                async with conn.transaction():
                    await conn.execute(
                        "SELECT set_config('request.caller_id', $1, true)",
                        caller_id or ""
                    )
                    return await conn.fetchval(sql, *args)
            except asyncpg.PostgresError as e:
                store_error = classify_error(e)
                if store_error is None:
                    raise
                raise store_error from e

    async def fetch_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            user_uuid = uuid.UUID(user_id)
        except ValueError:
            return None

        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT user_id, team_id, role, display_name, is_active, player_mode
                FROM profiles
                WHERE user_id = $1
                """,
                user_uuid
            )

        if not row:
            return None

        return {
            "user_id": str(row["user_id"]),
            "team_id": str(row["team_id"]),
            "role": row["role"],
            "display_name": row["display_name"],
            "is_active": row["is_active"],
            "player_mode": row["player_mode"]
        }

    async def close(self) -> None:
        await self.pool.close()
