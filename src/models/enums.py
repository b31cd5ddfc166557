"""Enumerations used across models."""

from enum import Enum


class MessageRole(str, Enum):
    """Enum for message roles in an upstream completion request.

    ``SYSTEM`` carries the fixed assistant instructions and ``USER`` the
    text typed by the person chatting.
    """

    USER = "user"
    SYSTEM = "system"


class AttachmentType(str, Enum):
    """Declared kind of a file attached to a chat message."""

    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    FILE = "file"

    @classmethod
    def from_declared(cls, declared: str | None, mime_type: str | None = None) -> "AttachmentType":
        """Resolve the client-declared type, falling back to the MIME type.

        Clients may send either one of the enum values or a full MIME type
        such as ``image/png``; anything unrecognised is treated as a plain
        file.
        """
        for candidate in (declared, mime_type):
            if not candidate:
                continue
            value = candidate.strip().lower()
            try:
                return cls(value)
            except ValueError:
                pass
            major = value.split("/", 1)[0]
            if major in (cls.IMAGE.value, cls.AUDIO.value, cls.VIDEO.value):
                return cls(major)
        return cls.FILE
