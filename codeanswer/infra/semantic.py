"""Semantic passage search: embed the query target and search Qdrant."""
from __future__ import annotations

from typing import List, Mapping

from codeanswer.answer.models import Passage
from codeanswer.query.parser import ParsedQuery

from .embedding_client import EmbeddingClient
from .qdrant_client import QdrantClient


def _any_of(key: str, values: List[str]) -> Mapping[str, object]:
    if len(values) == 1:
        return {"key": key, "match": {"value": values[0]}}
    return {"key": key, "match": {"any": list(values)}}


def build_filter(query: ParsedQuery) -> Mapping[str, object] | None:
    must: List[Mapping[str, object]] = []
    if query.repos:
        must.append(_any_of("repo_name", query.repos))
    if query.langs:
        must.append(_any_of("lang", query.langs))
    return {"must": must} if must else None


class SemanticSearch:
    """Search backend returning decoded passages for a parsed query."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        qdrant_client: QdrantClient,
        *,
        collection: str = "documents",
    ) -> None:
        self.embedding_client = embedding_client
        self.qdrant_client = qdrant_client
        self.collection = collection

    async def search(self, query: ParsedQuery, limit: int) -> List[Passage]:
        if not query.target:
            return []
        vectors = await self.embedding_client.embed_texts([query.target])
        hits = await self.qdrant_client.search_points(
            self.collection,
            vector=vectors[0],
            limit=limit,
            filter_=build_filter(query),
            with_payload=True,
        )
        # decode errors propagate: a malformed hit is a backend contract violation
        return [Passage.from_point(hit) for hit in hits]
