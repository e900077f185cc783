"""
Workflow layer: one class per area, each operation guarded by the
authorization gate and applied as exactly one atomic store operation.
"""

from .base import Workflow, as_utc, check_id, parse_payload
from .lessons import LessonWorkflow
from .programs import ProgramWorkflow
from .roster import RosterOnboardingWorkflow
from .content import ContentLifecycle

__all__ = [
    "Workflow",
    "as_utc",
    "check_id",
    "parse_payload",
    "LessonWorkflow",
    "ProgramWorkflow",
    "RosterOnboardingWorkflow",
    "ContentLifecycle",
]
