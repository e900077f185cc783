"""
Audit logging for workflow transitions and security-sensitive operations.

Logs domain events, authorization failures and sensitive roster operations
to help with security monitoring and incident response.
"""

import logging
from typing import Any, Mapping, Optional

# Configure audit logger
audit_logger = logging.getLogger("audit")
audit_logger.setLevel(logging.INFO)

# Create handler if not already configured
if not audit_logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        '%(asctime)s - AUDIT - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    audit_logger.addHandler(handler)


def _format_metadata(metadata: Optional[Mapping[str, Any]]) -> str:
    if not metadata:
        return ""
    return ",".join(f"{key}={value}" for key, value in sorted(metadata.items()))


class AuditLogger:
    """
    Centralized audit logging.

    Every committed transition and every authorization denial ends up here.
    """

    @staticmethod
    def log_domain_event(
        event_type: str,
        subject_type: str,
        subject_id: Optional[str],
        actor_user_id: Optional[str],
        metadata: Optional[Mapping[str, Any]] = None
    ):
        """
        Log a committed workflow transition.

        Args:
            event_type: Event name (lesson_cancelled, player_claimed, ...)
            subject_type: Kind of entity the event is about (lesson, profile, video, ...)
            subject_id: ID of that entity
            actor_user_id: User whose request caused the transition
            metadata: Extra key/value details
        """
        message = (
            f"DOMAIN_EVENT | {event_type.upper()} | "
            f"subject={subject_type}:{subject_id or 'N/A'} | "
            f"actor={actor_user_id or 'N/A'}"
        )

        details = _format_metadata(metadata)
        if details:
            message += f" | metadata={details}"

        audit_logger.info(message)

    @staticmethod
    def log_authorization_failure(
        user_id: str,
        role: str,
        team_id: str,
        action: str,
        reason: Optional[str] = None
    ):
        """
        Log authorization failures (403 responses).

        Args:
            user_id: User attempting the action
            role: User's role
            team_id: User's team
            action: Operation attempted
            reason: Reason for denial
        """
        message = (
            f"AUTHZ_FAILURE | user_id={user_id} | role={role} | "
            f"team_id={team_id} | action={action}"
        )

        if reason:
            message += f" | reason={reason}"

        audit_logger.warning(message)

    @staticmethod
    def log_sensitive_operation(
        operation: str,
        user_id: str,
        role: str,
        target_user_id: Optional[str] = None,
        details: Optional[str] = None
    ):
        """
        Log sensitive roster and content operations.

        Args:
            operation: Operation type (access_code_rotate, player_deactivate, video_purge, ...)
            user_id: User performing the operation
            role: User's role
            target_user_id: If operation affects another user
            details: Additional details
        """
        message = (
            f"SENSITIVE_OP | {operation.upper()} | "
            f"user_id={user_id} | role={role}"
        )

        if target_user_id:
            message += f" | target_user_id={target_user_id}"

        if details:
            message += f" | details={details}"

        audit_logger.info(message)


# Convenience functions
def log_domain_event(
    event_type: str,
    subject_type: str,
    subject_id: Optional[str],
    actor_user_id: Optional[str],
    metadata: Optional[Mapping[str, Any]] = None
):
    """Convenience wrapper for AuditLogger.log_domain_event."""
    AuditLogger.log_domain_event(event_type, subject_type, subject_id, actor_user_id, metadata)


def log_authorization_failure(
    user_id: str,
    role: str,
    team_id: str,
    action: str,
    reason: Optional[str] = None
):
    """Convenience wrapper for AuditLogger.log_authorization_failure."""
    AuditLogger.log_authorization_failure(user_id, role, team_id, action, reason)


def log_sensitive_operation(
    operation: str,
    user_id: str,
    role: str,
    target_user_id: Optional[str] = None,
    details: Optional[str] = None
):
    """Convenience wrapper for AuditLogger.log_sensitive_operation."""
    AuditLogger.log_sensitive_operation(operation, user_id, role, target_user_id, details)
