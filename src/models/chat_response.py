"""Response models for the HTTP API."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatResponse(BaseModel):
    """Represents the reply to a chat turn.

    ``success`` is always true: transient upstream failures are absorbed
    into a fallback reply and flagged through ``note`` instead.
    """

    success: bool = True
    response: str
    timestamp: datetime = Field(default_factory=_utcnow)
    note: Optional[str] = Field(
        default=None,
        description="Explains why a degraded (fallback) reply was returned.",
    )


class HealthResponse(BaseModel):
    """Payload returned by the health check."""

    status: str = "Server is running!"
    timestamp: datetime = Field(default_factory=_utcnow)
