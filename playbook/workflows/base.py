"""
Operation boundary shared by all workflows.

A workflow operation resolves and checks its caller, validates its payload,
makes exactly one store invocation through ``Workflow._invoke`` and then
records a best-effort domain event. ``_invoke`` is where store rejections
become caller-facing errors and where unexpected failures are logged once
and replaced by a generic ServerError.
"""

import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from playbook.errors import (
    Forbidden,
    InvalidInput,
    InvalidState,
    NotFound,
    ServerError,
    WorkflowError,
)
from playbook.models.common import UUID_PATTERN
from playbook.models.profile import Profile
from playbook.store.base import FORBIDDEN, INVALID_INPUT, NOT_FOUND, StoreError, TransactionalStore
from playbook.utils.events import EventSink

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_UUID_RE = re.compile(UUID_PATTERN)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to an aware UTC datetime; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Accept datetimes or ISO strings (JSON payloads from the database)."""
    if value is None or isinstance(value, datetime):
        return as_utc(value)
    return as_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))


def parse_payload(model: Type[ModelT], data: Union[ModelT, Mapping[str, Any], None]) -> ModelT:
    """
    Validate a payload against its schema.

    Accepts an already-validated model instance or a plain mapping. A
    missing payload is validated as an empty object.

    Raises:
        InvalidInput: if the payload is not an object or does not match the schema
    """
    if isinstance(data, model):
        return data
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise InvalidInput()
    try:
        return model.model_validate(data)
    except ValidationError:
        raise InvalidInput()


def check_id(value: Optional[str]) -> str:
    """Ids taken from the URL must be UUIDs; anything else is InvalidInput."""
    if not isinstance(value, str) or not _UUID_RE.match(value):
        raise InvalidInput()
    return value.lower()


class Workflow:
    """
    Base class for workflows.

    Dependencies are passed in explicitly and live as long as the caller
    decides (per app, per request or per test).
    """

    subject_type = "entity"

    def __init__(self, store: TransactionalStore, events: Optional[EventSink] = None, clock=utcnow):
        self.store = store
        self.events = events if events is not None else EventSink()
        self.clock = clock

    async def _invoke(
        self,
        operation: str,
        params: Optional[Mapping[str, Any]] = None,
        caller_id: Optional[str] = None,
        failure: str = "Unable to complete request.",
        not_found: str = "Not found"
    ) -> Any:
        """
        Run one atomic store operation and translate its outcome.

        Args:
            operation: Registered operation name
            params: Operation parameters (``p_*`` names)
            caller_id: Resolved caller user id, if any
            failure: Message used when the store rejects the transition
            not_found: Message used when the target is missing or not visible

        Raises:
            NotFound, Forbidden, InvalidState, InvalidInput: store rejections
            ServerError: any unexpected failure
        """
        try:
            return await self.store.invoke(operation, params, caller_id=caller_id)
        except StoreError as e:
            logger.info("%s rejected for caller %s: %s (%s)", operation, caller_id, e.kind, e.message)
            if e.kind == NOT_FOUND:
                raise NotFound(not_found)
            if e.kind == FORBIDDEN:
                raise Forbidden()
            if e.kind == INVALID_INPUT:
                raise InvalidInput()
            raise InvalidState(failure)
        except WorkflowError:
            raise
        except Exception:
            correlation_id = uuid.uuid4().hex
            logger.exception(
                "%s failed | caller=%s | correlation_id=%s",
                operation, caller_id, correlation_id
            )
            raise ServerError()

    async def _emit(
        self,
        event_type: str,
        subject_id: Optional[str],
        caller: Optional[Profile] = None,
        metadata: Optional[Mapping[str, Any]] = None,
        subject_type: Optional[str] = None,
        actor_user_id: Optional[str] = None
    ) -> None:
        await self.events.record(
            event_type,
            subject_type or self.subject_type,
            subject_id,
            metadata=metadata,
            actor_user_id=actor_user_id or (caller.user_id if caller else None)
        )
