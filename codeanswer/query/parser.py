"""Natural-language query parsing with ``repo:`` and ``lang:`` filters."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from codeanswer.answer.errors import QueryParseError

FILTER_KEYS = ("repo", "lang")


@dataclass(slots=True)
class ParsedQuery:
    raw: str
    target: Optional[str] = None
    repos: List[str] = field(default_factory=list)
    langs: List[str] = field(default_factory=list)


def parse_nl(text: str) -> ParsedQuery:
    """Split a query into filter terms and the free-text search target.

    ``repo:bloop lang:rust how do we parse queries`` filters on repository
    and language; the remaining words are the target. A query made only of
    filters has no target.
    """

    raw = (text or "").strip()
    if not raw:
        raise QueryParseError("query is empty")

    query = ParsedQuery(raw=raw)
    words: List[str] = []
    for term in raw.split():
        key, sep, value = term.partition(":")
        if sep and key.lower() in FILTER_KEYS:
            if not value:
                raise QueryParseError(f"filter '{key}:' requires a value")
            if key.lower() == "repo":
                query.repos.append(value)
            else:
                query.langs.append(value.lower())
            continue
        words.append(term)

    if words:
        query.target = " ".join(words)
    return query
