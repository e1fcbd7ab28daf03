"""Partition search passages by the file they were cut from."""
from __future__ import annotations

from typing import Dict, Iterable, List

from .models import Passage


def group_by_file(passages: Iterable[Passage]) -> Dict[str, List[Passage]]:
    """Group passages by ``relative_path``, keeping their input order."""

    groups: Dict[str, List[Passage]] = {}
    for passage in passages:
        groups.setdefault(passage.relative_path, []).append(passage)
    return groups
