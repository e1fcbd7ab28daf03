"""Final response assembly and the audit event that accompanies it."""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence, Set

from .models import AnswerResponse, Passage, QueryEvent, Selection

logger = logging.getLogger(__name__)

# strong references so pending telemetry tasks are not garbage collected
_pending: Set[asyncio.Task] = set()


class QueryEventSink(Protocol):
    async def record_query(self, event: QueryEvent) -> None: ...


def reorder(snippets: Sequence[Passage], index: int) -> List[Passage]:
    """Swap the selected passage with the first one (not a stable move)."""

    reordered = list(snippets)
    reordered[0], reordered[index] = reordered[index], reordered[0]
    return reordered


def _log_task_failure(task: asyncio.Task) -> None:
    _pending.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("answer telemetry failed: %s", exc, exc_info=exc)


def enqueue_query_event(sink: Optional[QueryEventSink], event: QueryEvent) -> Optional[asyncio.Task]:
    """Fire-and-forget helper to avoid blocking the answer path."""

    if sink is None:
        return None

    async def _runner() -> None:
        await sink.record_query(event)

    task = asyncio.create_task(_runner())
    _pending.add(task)
    task.add_done_callback(_log_task_failure)
    return task


def build_response(snippets: Sequence[Passage], explanation: str, user_id: str) -> AnswerResponse:
    # the chosen passage has been moved to the front, so the index is always 0
    return AnswerResponse(
        snippets=list(snippets),
        selection=Selection(index=0, answer=explanation, id=user_id),
    )
