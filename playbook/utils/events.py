"""
Best-effort domain event sink.

Events are written to the audit log and persisted through the store's
``log_event`` operation. Recording never fails the operation that
triggered it.
"""

import logging
from typing import Any, Mapping, Optional

from .audit_log import log_domain_event

logger = logging.getLogger(__name__)


class EventSink:
    """Records ``{event_type, subject_type, subject_id, metadata}`` for audit."""

    def __init__(self, store=None):
        self.store = store

    async def record(
        self,
        event_type: str,
        subject_type: str,
        subject_id: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
        actor_user_id: Optional[str] = None
    ) -> None:
        log_domain_event(event_type, subject_type, subject_id, actor_user_id, metadata)

        if self.store is None:
            return

        try:
            await self.store.invoke(
                "log_event",
                {
                    "p_action": event_type,
                    "p_entity_type": subject_type,
                    "p_entity_id": subject_id,
                    "p_metadata": dict(metadata or {}),
                },
                caller_id=actor_user_id
            )
        except Exception as e:
            logger.warning(
                "Failed to record event %s for %s:%s: %s",
                event_type, subject_type, subject_id, e
            )
