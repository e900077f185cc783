"""
Utility modules for the Playbook workflow service.
"""

from .audit_log import (
    AuditLogger,
    log_domain_event,
    log_authorization_failure,
    log_sensitive_operation
)
from .events import EventSink

__all__ = [
    "AuditLogger",
    "log_domain_event",
    "log_authorization_failure",
    "log_sensitive_operation",
    "EventSink"
]
