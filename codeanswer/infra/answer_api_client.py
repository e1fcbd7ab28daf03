"""Minimal client for the answer API's raw completion endpoint."""
from __future__ import annotations

import httpx


class AnswerApiClient:
    """Sends ``{prompt, max_tokens}`` to the answer API and returns the raw reply text."""

    def __init__(self, base_url: str, *, timeout: float = 60.0) -> None:
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.endpoint = f"{self.base_url}/q"

    async def complete(self, prompt: str, *, max_tokens: int) -> str:
        """Request one completion.

        Non-2xx replies raise ``httpx.HTTPStatusError`` so callers can tell an
        overloaded upstream (503) from other failures.
        """

        payload: dict[str, object] = {"prompt": prompt, "max_tokens": max_tokens}
        timeout_obj = httpx.Timeout(self.timeout, connect=10.0)
        async with httpx.AsyncClient(timeout=timeout_obj) as client:
            response = await client.post(self.endpoint, json=payload)
            response.raise_for_status()
            return response.text
