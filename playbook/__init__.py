"""
Playbook workflows - coaching workflows for team-based training.

This package contains:
- workflows: Lesson, program, roster onboarding and content state machines
- store: Atomic operation executor (PostgreSQL functions or in-memory)
- auth: Bearer token handling and the authorization gate
- routes: FastAPI endpoints wrapping the workflows
"""

__version__ = "0.1.0"
