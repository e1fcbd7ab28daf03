"""Calls to the completion service with upstream failures mapped to error kinds."""
from __future__ import annotations

from typing import Protocol

import httpx

from .errors import InternalError, UpstreamOverloaded


class CompletionClient(Protocol):
    async def complete(self, prompt: str, *, max_tokens: int) -> str: ...


class TokenCounter(Protocol):
    def count_tokens(self, text: str) -> int: ...


async def request_completion(client: CompletionClient, prompt: str, max_tokens: int) -> str:
    """Send one completion request; no retries."""

    try:
        return await client.complete(prompt, max_tokens=max_tokens)
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code == httpx.codes.SERVICE_UNAVAILABLE:
            raise UpstreamOverloaded() from exc
        raise InternalError(f"answer-api request failed: {exc}") from exc
    except (httpx.HTTPError, RuntimeError) as exc:
        raise InternalError(f"answer-api request failed: {exc}") from exc
