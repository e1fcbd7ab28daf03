"""Merge de-overlapped file groups into the capped shortlist."""
from __future__ import annotations

import logging
from typing import List, Mapping, Sequence

from .errors import NoResults
from .models import Passage

logger = logging.getLogger(__name__)


def rank_and_truncate(groups: Mapping[str, Sequence[Passage]], limit: int) -> List[Passage]:
    """Flatten all groups, order by ascending score and keep the first ``limit``.

    Ascending order means the prefix holds the lowest scores of the pool.
    That ordering is kept as-is until product confirms the intended direction.
    """

    merged: List[Passage] = []
    for path, passages in groups.items():
        logger.debug("%s - %s total snippets after de-overlap", path, len(passages))
        merged.extend(passages)

    if not merged:
        raise NoResults()

    merged.sort(key=lambda p: p.score)
    return merged[:limit]
