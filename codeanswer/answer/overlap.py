"""Per-file removal of overlapping passages."""
from __future__ import annotations

import logging
from typing import List, Sequence

from .models import Passage

logger = logging.getLogger(__name__)


def overlaps(previous: Passage, following: Passage) -> bool:
    """Line-granular overlap test; byte ranges are not consulted."""

    return following.start_line <= previous.end_line


def resolve_overlaps(passages: Sequence[Passage]) -> List[Passage]:
    """Keep a maximal non-overlapping subset of one file's passages.

    Interval-scheduling greedy: walk the passages in order of ``end_line`` and
    keep each one that starts after the last kept passage ends. Kept end lines
    only grow, so checking against the last kept passage is enough. The
    result is ordered by ascending score.
    """

    if not passages:
        return []

    # sorted() is stable, ties on end_line keep their input order
    by_end = sorted(passages, key=lambda p: p.end_line)
    kept = [by_end[0]]
    rejected = 0
    for candidate in by_end[1:]:
        if overlaps(kept[-1], candidate):
            rejected += 1
        else:
            kept.append(candidate)

    logger.debug("%s - %s overlapping snippets", by_end[0].relative_path, rejected)
    return sorted(kept, key=lambda p: p.score)
