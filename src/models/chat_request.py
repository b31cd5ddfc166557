"""Request model for a single chat turn."""

from pydantic import BaseModel, Field, model_validator

from ..utils.error_handler import ChatValidationError
from .attachment import AttachmentRef


class ChatRequest(BaseModel):
    """Represents one message sent by the user.

    ``text`` may be empty only when at least one attachment is present.
    A request carrying neither is rejected at construction time with a
    :class:`ChatValidationError`, so the mediator never sees one.
    """

    text: str = Field(default="", description="The user's message content.")
    attachments: list[AttachmentRef] = Field(
        default_factory=list,
        description="Metadata for files attached to the message, in upload order.",
    )

    @model_validator(mode="after")
    def require_text_or_attachment(self) -> "ChatRequest":
        if not self.text.strip() and not self.attachments:
            raise ChatValidationError("Message or file attachment is required")
        return self
