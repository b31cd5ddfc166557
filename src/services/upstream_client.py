"""Client for the upstream completion provider.

The provider speaks the OpenAI ``/chat/completions`` protocol. Every
result, including transport failures, is turned into an
:data:`~src.models.upstream.UpstreamOutcome` variant right here, so
callers only ever match on variants and never inspect raw responses or
catch httpx errors themselves.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

import httpx
from loguru import logger

from ..config.llm_config import LlmConfig, get_llm_config
from ..models.upstream import (
    OtherFailure,
    RateLimited,
    Success,
    Unauthorized,
    UpstreamOutcome,
    UpstreamPayload,
)
from ..utils.api_client import post_json


class UpstreamLLM(Protocol):
    """Anything able to run one completion and report its outcome."""

    async def complete(self, payload: UpstreamPayload) -> UpstreamOutcome:
        ...


def _error_message(body: Any) -> str:
    """Pull ``error.message`` out of an OpenAI-style error body, if present."""
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or error.get("code") or "")
        if isinstance(error, str):
            return error
    return ""


def _first_choice_content(body: Any) -> Any:
    """Return the first choice's raw content, ``None`` when there are no choices."""
    if not isinstance(body, dict):
        return None
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return "" if content is None else content


def classify_response(response: httpx.Response) -> UpstreamOutcome:
    """Map an HTTP response from the provider onto an outcome variant."""
    status_code = response.status_code
    if status_code == httpx.codes.UNAUTHORIZED:
        return Unauthorized()
    if status_code == httpx.codes.TOO_MANY_REQUESTS:
        return RateLimited()

    try:
        body = response.json()
    except ValueError:
        body = None

    if not response.is_success:
        return OtherFailure(status_code, _error_message(body) or response.reason_phrase)
    if body is None:
        return OtherFailure(status_code, "Upstream returned a non-JSON body")
    content = _first_choice_content(body)
    if content is not None and not isinstance(content, str):
        return OtherFailure(status_code, "Upstream returned malformed content")
    return Success(content)


class UpstreamClient:
    """Calls the provider over HTTP with a bounded timeout.

    When no usable API key is configured, no request is sent at all and
    every call resolves to :class:`OtherFailure`, which the mediator
    answers from the fallback responder.
    """

    def __init__(
        self,
        llm_config: LlmConfig | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.llm_config = llm_config or get_llm_config()
        self._transport = transport

    async def complete(self, payload: UpstreamPayload) -> UpstreamOutcome:
        if not self.llm_config.is_configured:
            return OtherFailure(None, "Upstream API key is not configured")

        headers = {
            "Authorization": f"Bearer {self.llm_config.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = await post_json(
                self.llm_config.completions_url,
                payload.to_request_body(),
                headers=headers,
                timeout=self.llm_config.timeout,
                transport=self._transport,
            )
        except httpx.TimeoutException as exc:
            logger.warning("Upstream request timed out after {}s", self.llm_config.timeout)
            return OtherFailure(None, f"Timed out: {exc}")
        except httpx.HTTPError as exc:
            return OtherFailure(None, f"{type(exc).__name__}: {exc}")

        return classify_response(response)
