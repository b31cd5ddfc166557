"""Types exchanged with the upstream completion provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..prompts.system import DEFAULT_SYSTEM_PROMPT
from .enums import MessageRole

UPSTREAM_MODEL = "llama-3.1-8b-instant"


class UpstreamPayload(BaseModel):
    """A single completion request.

    Everything except ``user_content`` is fixed: one model, one system
    prompt, one set of sampling parameters, no streaming.
    """

    model_config = ConfigDict(frozen=True)

    user_content: str
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    model: str = UPSTREAM_MODEL
    temperature: float = 0.7
    max_tokens: int = 500
    stream: bool = False

    def to_request_body(self) -> dict[str, Any]:
        """Return the OpenAI-compatible ``/chat/completions`` body."""
        return {
            "model": self.model,
            "messages": [
                {"role": MessageRole.SYSTEM.value, "content": self.system_prompt},
                {"role": MessageRole.USER.value, "content": self.user_content},
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": self.stream,
        }


@dataclass(frozen=True)
class Success:
    """2xx response.

    ``text`` is ``None`` when the provider returned no choices at all and
    an empty string when the first choice carried no content.
    """

    text: Optional[str]


@dataclass(frozen=True)
class Unauthorized:
    """HTTP 401: the API key was rejected."""


@dataclass(frozen=True)
class RateLimited:
    """HTTP 429: the provider is throttling requests."""


@dataclass(frozen=True)
class OtherFailure:
    """Any other failure, including transport errors and timeouts.

    ``status_code`` is ``None`` when no HTTP response was received.
    """

    status_code: Optional[int]
    message: str = ""


UpstreamOutcome = Union[Success, Unauthorized, RateLimited, OtherFailure]
