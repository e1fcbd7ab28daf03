"""Explanation of the grown snippet under the completion token budget."""
from __future__ import annotations

import logging

from .completion import CompletionClient, TokenCounter, request_completion
from .models import Passage
from .prompts import build_explain_prompt

logger = logging.getLogger(__name__)

CONTEXT_WINDOW_TOKENS = 4096
MIN_COMPLETION_TOKENS = 1
MAX_COMPLETION_TOKENS = 500


def explanation_budget(tokens_used: int, context_window: int = CONTEXT_WINDOW_TOKENS) -> int:
    """Tokens left for the completion, floored at zero."""

    return max(0, context_window - tokens_used)


def clamp_completion_tokens(
    budget: int,
    lower: int = MIN_COMPLETION_TOKENS,
    upper: int = MAX_COMPLETION_TOKENS,
) -> int:
    return min(max(budget, lower), upper)


class SnippetExplainer:
    """Asks the completion service to explain one snippet in context of the query."""

    def __init__(
        self,
        client: CompletionClient,
        tokenizer: TokenCounter,
        *,
        context_window: int = CONTEXT_WINDOW_TOKENS,
        max_tokens: int = MAX_COMPLETION_TOKENS,
    ) -> None:
        self.client = client
        self.tokenizer = tokenizer
        self.context_window = context_window
        self.max_tokens = max_tokens

    def build_prompt(self, snippet: Passage, query: str) -> str:
        return build_explain_prompt(snippet, query)

    def completion_size(self, prompt: str) -> int:
        tokens_used = self.tokenizer.count_tokens(prompt)
        logger.info("input prompt token count: %s", tokens_used)
        budget = explanation_budget(tokens_used, self.context_window)
        if budget == 0:
            # the request still goes out with the minimum size
            logger.warning("prompt overshot token limit: %s tokens used", tokens_used)
        max_tokens = clamp_completion_tokens(budget, MIN_COMPLETION_TOKENS, self.max_tokens)
        logger.info("clamping max tokens to %s", max_tokens)
        return max_tokens

    async def explain(self, prompt: str) -> str:
        return await request_completion(self.client, prompt, self.completion_size(prompt))
