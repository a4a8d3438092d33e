# reagradient/match.py
from __future__ import annotations

from typing import Iterable, List

from .model import Track, split_keywords


def name_matches(name: str, keyword: str, exact: bool) -> bool:
    n = (name or "").lower()
    k = (keyword or "").lower()
    if exact:
        return n == k
    return k in n


def match_tracks(keyword: str, exact: bool, all_tracks: Iterable[Track]) -> List[Track]:
    """Tracks whose name matches `keyword` (case-insensitive), in input order.

    An empty keyword matches every track in substring mode.
    """
    return [t for t in all_tracks if name_matches(t.name, keyword, exact)]


__all__ = ["match_tracks", "name_matches", "split_keywords"]
