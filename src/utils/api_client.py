"""Thin HTTP helpers built on httpx."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx


async def post_json(
    url: str,
    json: Dict[str, Any],
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """Perform an asynchronous JSON POST request.

    A fresh client is opened per call so concurrent requests share no
    connection state. ``transport`` lets tests substitute
    :class:`httpx.MockTransport`. Transport-level failures (connection
    errors, timeouts) propagate as :class:`httpx.HTTPError`; non-2xx
    responses are returned, not raised.
    """
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        return await client.post(url, json=json, headers=headers)
