"""Expose commonly used model classes at the package level.

Importing these classes here allows consumers to write concise imports like::

    from src.models import ChatRequest, ChatResponse, AttachmentRef

These names refer to the underlying Pydantic models and dataclasses
defined in their respective modules.
"""

from .attachment import AttachmentRef  # noqa: F401
from .chat_request import ChatRequest  # noqa: F401
from .chat_response import ChatResponse, HealthResponse  # noqa: F401
from .enums import AttachmentType, MessageRole  # noqa: F401
from .upstream import (  # noqa: F401
    OtherFailure,
    RateLimited,
    Success,
    Unauthorized,
    UpstreamOutcome,
    UpstreamPayload,
)
