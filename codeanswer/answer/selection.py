"""Relevance selection: ask the completion service which passage answers the query."""
from __future__ import annotations

import logging
import re
from typing import Sequence

from .completion import CompletionClient, TokenCounter, request_completion
from .errors import SelectionOutOfRange, SelectionParseError
from .models import Passage
from .prompts import build_select_prompt

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(r"\+?[0-9]+")


def parse_selection(raw: str, count: int) -> int:
    """Parse the selector's reply into a valid index for ``count`` passages."""

    text = raw.strip()
    if not _INDEX_RE.fullmatch(text):
        raise SelectionParseError(f"answer-api returned a non-numeric index: {text!r}")
    index = int(text)
    if index >= count:
        raise SelectionOutOfRange(index, count)
    return index


class SnippetSelector:
    """Builds the selection prompt and validates the returned index."""

    max_tokens = 1

    def __init__(self, client: CompletionClient, tokenizer: TokenCounter) -> None:
        self.client = client
        self.tokenizer = tokenizer

    def build_prompt(self, passages: Sequence[Passage], query: str) -> str:
        prompt = build_select_prompt(passages, query)
        logger.debug("select prompt token count: %s", self.tokenizer.count_tokens(prompt))
        return prompt

    async def select(self, prompt: str, count: int) -> int:
        raw = await request_completion(self.client, prompt, self.max_tokens)
        return parse_selection(raw, count)
