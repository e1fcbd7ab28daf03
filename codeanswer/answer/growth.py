"""Grow the selected passage into a larger window of its source file.

Offsets in a ``Passage`` are byte offsets into the UTF-8 encoded file, so the
window is computed on bytes and decoded at the end. Every growth step starts
again from the passage's own offsets; nothing is carried between steps.
"""
from __future__ import annotations

import logging
from typing import List, Tuple

from .completion import TokenCounter
from .models import Passage

logger = logging.getLogger(__name__)

INITIAL_LINES = 40
STEP_LINES = 10
MAX_LINES = 100
TOKEN_LIMIT = 2000


def _newline_before(data: bytes, pos: int, size: int) -> int:
    """Offset of the newline ``size`` lines above ``pos``, or 0."""

    idx = pos
    for _ in range(size + 1):
        idx = data.rfind(b"\n", 0, idx)
        if idx == -1:
            return 0
    return idx


def _newline_after(data: bytes, pos: int, size: int) -> int:
    """Offset of the newline ``size`` lines below ``pos``, or the end of data."""

    idx = pos - 1
    for _ in range(size + 1):
        idx = data.find(b"\n", idx + 1)
        if idx == -1:
            return len(data)
    return idx


def grow_range(data: bytes, start_byte: int, end_byte: int, size: int) -> Tuple[int, int]:
    """Byte range widened by ``size`` lines on both sides, within ``[0, len(data)]``."""

    start = min(max(start_byte, 0), len(data))
    end = min(max(end_byte, start), len(data))
    return _newline_before(data, start, size), _newline_after(data, end, size)


def grow(content: str, start_byte: int, end_byte: int, size: int) -> str:
    data = content.encode("utf-8")
    new_start, new_end = grow_range(data, start_byte, end_byte, size)
    return data[new_start:new_end].decode("utf-8", errors="replace")


def window_sizes(
    initial: int = INITIAL_LINES,
    step: int = STEP_LINES,
    ceiling: int = MAX_LINES,
) -> List[int]:
    # last window is exactly ``ceiling`` lines, never one step past it
    sizes = list(range(initial, ceiling + 1, step))
    return sizes or [ceiling]


def grow_snippet(
    content: str,
    passage: Passage,
    tokenizer: TokenCounter,
    *,
    initial: int = INITIAL_LINES,
    step: int = STEP_LINES,
    ceiling: int = MAX_LINES,
    token_limit: int = TOKEN_LIMIT,
) -> Passage:
    """Return a copy of ``passage`` whose text is the widest window that fits.

    Windows grow by ``step`` lines until the text exceeds ``token_limit``
    tokens or the window reaches ``ceiling`` lines.
    """

    grown_text = passage.text
    for size in window_sizes(initial, step, ceiling):
        grown_text = grow(content, passage.start_byte, passage.end_byte, size)
        token_count = tokenizer.count_tokens(grown_text)
        logger.info("growing snippet: grow_size=%s token_count=%s", size, token_count)
        if token_count > token_limit:
            break

    return passage.model_copy(update={"text": grown_text})
