"""Answer pipeline: turn a natural-language query into one explained snippet."""
from __future__ import annotations

import logging
from typing import List, Optional, Protocol

import httpx

from codeanswer.query.parser import ParsedQuery, parse_nl

from .assembly import QueryEventSink, build_response, enqueue_query_event, reorder
from .completion import CompletionClient, TokenCounter
from .errors import AnswerError, InternalError, UserError
from .explanation import SnippetExplainer
from .growth import INITIAL_LINES, MAX_LINES, STEP_LINES, TOKEN_LIMIT, grow_snippet
from .grouping import group_by_file
from .models import AnswerResponse, Passage, QueryEvent, RepoRef
from .overlap import resolve_overlaps
from .ranking import rank_and_truncate
from .selection import SnippetSelector

logger = logging.getLogger(__name__)

SNIPPET_COUNT = 15
SEARCH_OVERSAMPLE = 4


class PassageSearch(Protocol):
    async def search(self, query: ParsedQuery, limit: int) -> List[Passage]: ...


class FileIndex(Protocol):
    async def get_file(self, repo_ref: str, relative_path: str) -> str: ...


class AnswerService:
    """Runs one request through search, dedup, selection, growth and explanation.

    Each collaborator is awaited at most once per request and the first
    failure aborts the request. Nothing is retried.
    """

    def __init__(
        self,
        search: PassageSearch,
        file_index: FileIndex,
        completion_client: CompletionClient,
        tokenizer: TokenCounter,
        *,
        telemetry: Optional[QueryEventSink] = None,
        snippet_count: int = SNIPPET_COUNT,
        search_oversample: int = SEARCH_OVERSAMPLE,
        grow_initial_lines: int = INITIAL_LINES,
        grow_step_lines: int = STEP_LINES,
        grow_max_lines: int = MAX_LINES,
        grow_token_limit: int = TOKEN_LIMIT,
        context_window_tokens: int = 4096,
        max_answer_tokens: int = 500,
    ) -> None:
        self.search = search
        self.file_index = file_index
        self.tokenizer = tokenizer
        self.telemetry = telemetry
        self.snippet_count = snippet_count
        self.search_oversample = search_oversample
        self.grow_initial_lines = grow_initial_lines
        self.grow_step_lines = grow_step_lines
        self.grow_max_lines = grow_max_lines
        self.grow_token_limit = grow_token_limit
        self.selector = SnippetSelector(completion_client, tokenizer)
        self.explainer = SnippetExplainer(
            completion_client,
            tokenizer,
            context_window=context_window_tokens,
            max_tokens=max_answer_tokens,
        )

    async def _shortlist(self, query: ParsedQuery) -> List[Passage]:
        try:
            passages = await self.search.search(
                query, self.search_oversample * self.snippet_count
            )
        except AnswerError:
            raise
        except (httpx.HTTPError, RuntimeError, ValueError) as exc:
            raise InternalError(f"semantic search failed: {exc}") from exc

        groups = {path: resolve_overlaps(group) for path, group in group_by_file(passages).items()}
        return rank_and_truncate(groups, self.snippet_count)

    async def _grow(self, passage: Passage) -> Passage:
        try:
            repo_ref = RepoRef.parse(passage.repo_ref)
            content = await self.file_index.get_file(str(repo_ref), passage.relative_path)
        except (httpx.HTTPError, RuntimeError, ValueError) as exc:
            raise InternalError(f"failed to load {passage.relative_path}: {exc}") from exc

        try:
            return grow_snippet(
                content,
                passage,
                self.tokenizer,
                initial=self.grow_initial_lines,
                step=self.grow_step_lines,
                ceiling=self.grow_max_lines,
                token_limit=self.grow_token_limit,
            )
        except UnicodeError as exc:
            raise InternalError(f"failed to load {passage.relative_path}: {exc}") from exc

    async def answer(self, q: str, user_id: str, limit: int = 10) -> AnswerResponse:
        # ``limit`` is accepted for compatibility; the shortlist size is fixed
        query = parse_nl(q)
        if not query.target:
            raise UserError("missing search target")

        snippets = await self._shortlist(query)

        select_prompt = self.selector.build_prompt(snippets, query.target)
        index = await self.selector.select(select_prompt, len(snippets))

        grown = await self._grow(snippets[index])

        explain_prompt = self.explainer.build_prompt(grown, query.target)
        explanation = await self.explainer.explain(explain_prompt)

        snippets = reorder(snippets, index)

        enqueue_query_event(
            self.telemetry,
            QueryEvent(
                user_id=user_id,
                query=q,
                select_prompt=select_prompt,
                relevant_snippet_index=index,
                explain_prompt=explain_prompt,
                explanation=explanation,
            ),
        )

        return build_response(snippets, explanation, user_id)
