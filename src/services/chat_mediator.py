"""Orchestration of a single chat turn.

The ChatMediator builds the upstream payload from a validated request,
awaits the upstream collaborator and maps its outcome onto a
:class:`ChatResponse`. Transient upstream problems are absorbed into a
fallback reply; only a rejected API key escapes as an error, because
that is a configuration problem the operator has to fix.
"""

from __future__ import annotations

from functools import lru_cache

from loguru import logger

from ..config.llm_config import LlmConfig, get_llm_config
from ..models.chat_request import ChatRequest
from ..models.chat_response import ChatResponse
from ..models.upstream import (
    OtherFailure,
    RateLimited,
    Success,
    Unauthorized,
    UpstreamOutcome,
    UpstreamPayload,
)
from ..utils.error_handler import AuthError
from .fallback_service import FallbackResponder
from .upstream_client import UpstreamClient, UpstreamLLM

EMPTY_COMPLETION_REPLY = "Hello! I received your message. How can I help you today?"
BLANK_CHOICE_REPLY = "I understand your message, but I need a moment to process it properly."
RATE_LIMIT_NOTE = (
    "Rate limit reached — using fallback response. "
    "Please try again in a moment for AI-powered responses."
)
UNAVAILABLE_NOTE = "Using fallback response due to API unavailability."


def build_user_content(request: ChatRequest) -> str:
    """Return the trimmed text, plus an attachment summary when files exist."""
    content = request.text.strip()
    if request.attachments:
        names = ", ".join(attachment.name for attachment in request.attachments)
        content += f"\n[User attached {len(request.attachments)} file(s): {names}]"
    return content


def build_payload(request: ChatRequest) -> UpstreamPayload:
    return UpstreamPayload(user_content=build_user_content(request))


class ChatMediator:
    """Runs one chat turn end-to-end.

    The mediator is stateless between calls; it only holds its
    collaborators, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        upstream: UpstreamLLM | None = None,
        fallback: FallbackResponder | None = None,
        llm_config: LlmConfig | None = None,
    ) -> None:
        self.llm_config = llm_config or get_llm_config()
        self.upstream = upstream or UpstreamClient(llm_config=self.llm_config)
        self.fallback = fallback or FallbackResponder()

    async def handle(self, request: ChatRequest) -> ChatResponse:
        """Answer a chat request.

        Parameters
        ----------
        request: ChatRequest
            A validated request; it always carries text or attachments.

        Returns
        -------
        ChatResponse
            The model's reply, or a fallback reply with an explanatory
            ``note`` when the upstream was throttled or unavailable.

        Raises
        ------
        AuthError
            If the upstream rejected the API key.
        """
        payload = build_payload(request)
        logger.debug(
            "Sending {} chars with {} attachment(s) upstream",
            len(payload.user_content),
            len(request.attachments),
        )
        outcome = await self._call_upstream(payload)
        return self._resolve(outcome, request)

    async def _call_upstream(self, payload: UpstreamPayload) -> UpstreamOutcome:
        try:
            return await self.upstream.complete(payload)
        except Exception as exc:
            logger.exception("Upstream client raised unexpectedly")
            return OtherFailure(None, str(exc))

    def _resolve(self, outcome: UpstreamOutcome, request: ChatRequest) -> ChatResponse:
        if isinstance(outcome, Success):
            if outcome.text is None:
                reply = EMPTY_COMPLETION_REPLY
            else:
                reply = outcome.text or BLANK_CHOICE_REPLY
            return ChatResponse(response=reply)

        if isinstance(outcome, Unauthorized):
            logger.error("Upstream rejected the API key")
            raise AuthError("Invalid upstream API key")

        if isinstance(outcome, RateLimited):
            logger.warning("Rate limit exceeded - using fallback response")
            return self._fallback(request, RATE_LIMIT_NOTE)

        if outcome.status_code == 400:
            logger.error("Bad request - model might not be available: {}", outcome.message)
        else:
            logger.error(
                "Upstream call failed (status={}): {}",
                outcome.status_code,
                outcome.message,
            )
        return self._fallback(request, UNAVAILABLE_NOTE)

    def _fallback(self, request: ChatRequest, note: str) -> ChatResponse:
        return ChatResponse(response=self.fallback.respond(request.text), note=note)


@lru_cache()
def get_chat_mediator() -> ChatMediator:
    """Dependency injector for ChatMediator instances.

    FastAPI will call this function to obtain a singleton
    ChatMediator.  The lru_cache decorator ensures only one
    instance exists.
    """
    return ChatMediator()
