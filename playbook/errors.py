"""
Caller-facing outcome types.

Every workflow operation either returns a payload or raises one of the
errors below. The HTTP layer maps them to status codes; other callers can
inspect ``status_code`` or match on the class.
"""

from typing import Optional


class WorkflowError(Exception):
    """Base class for every failure a workflow operation can report."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(WorkflowError):
    """No caller could be resolved."""

    status_code = 401
    default_message = "Unauthorized"


class Forbidden(WorkflowError):
    """The caller is known but lacks the role, ownership or active status."""

    status_code = 403
    default_message = "Forbidden"


class InvalidInput(WorkflowError):
    """The payload failed schema validation and never reached the store."""

    status_code = 400
    default_message = "Invalid input"


class NotFound(WorkflowError):
    """The target does not exist or is not visible to the caller's team."""

    status_code = 404
    default_message = "Not found"


class InvalidState(WorkflowError):
    """The store rejected the transition for the entity's current state."""

    status_code = 409
    default_message = "Invalid state"


class ServerError(WorkflowError):
    """Unexpected store or infrastructure failure."""

    status_code = 500
    default_message = "Server error"
