"""Thin async wrapper for the Qdrant search endpoint."""
from __future__ import annotations

from typing import List, Mapping, Sequence

import httpx


class QdrantClient:
    """Minimal client for vector search over the code passage collection."""

    def __init__(self, base_url: str, api_key: str | None = None, timeout: float = 30.0) -> None:
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self.headers = {"api-key": api_key} if api_key else None

    async def search_points(
        self,
        collection: str,
        vector: Sequence[float],
        *,
        limit: int = 10,
        filter_: Mapping[str, object] | None = None,
        with_payload: bool = True,
    ) -> List[Mapping[str, object]]:
        """Vector search wrapper returning raw hits (``id``, ``score``, ``payload``)."""

        if not vector:
            return []

        payload: dict[str, object] = {
            "vector": list(vector),
            "limit": limit,
            "with_payload": with_payload,
        }
        if filter_ is not None:
            payload["filter"] = filter_

        async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers) as client:
            response = await client.post(
                f"{self.base_url}/collections/{collection}/points/search", json=payload
            )
            response.raise_for_status()
            data = response.json()
            result = data.get("result", []) or []
            if not isinstance(result, list):
                raise RuntimeError("Qdrant returned a malformed search result")
            return result
