"""
Shared field constraints and response shapes.
"""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

# Ids are compared as stored, in lowercase
UUIDStr = Annotated[str, Field(pattern=UUID_PATTERN), AfterValidator(str.lower)]

NOTE_MAX_LENGTH = 2000


class DeleteResponse(BaseModel):
    """Acknowledgement for hard deletes."""
    ok: bool = True
    deleted: bool
