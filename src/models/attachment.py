"""Attachment metadata accompanying a chat message."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import AttachmentType


class AttachmentRef(BaseModel):
    """Reference to a file the user attached.

    Only metadata is carried; the file bytes never reach the mediator.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    declared_type: AttachmentType = AttachmentType.FILE
    size_bytes: int = Field(default=0, ge=0)
