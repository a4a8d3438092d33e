# reagradient/model.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def _is_channel(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 255


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int

    def is_valid(self) -> bool:
        return _is_channel(self.r) and _is_channel(self.g) and _is_channel(self.b)

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    @classmethod
    def from_hex(cls, s: str) -> "Color":
        m = _HEX_RE.match((s or "").strip())
        if not m:
            raise ValueError(f"Invalid hex color: {s!r} (expected #RRGGBB)")
        v = int(m.group(1), 16)
        return cls((v >> 16) & 0xFF, (v >> 8) & 0xFF, v & 0xFF)


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)


@dataclass(frozen=True)
class Track:
    """A host track as seen by the core.

    index: 0-based project position (unique per track list).
    folder_depth: >0 opens N folder levels, <0 closes N levels, 0 = no change.
    """

    index: int
    name: str
    folder_depth: int = 0


def split_keywords(text: str) -> List[str]:
    parts: List[str] = []
    for p in (text or "").split(","):
        p = p.strip()
        if p:
            parts.append(p)
    return parts


@dataclass(frozen=True)
class Rule:
    keyword: str
    start_color: Color = BLACK
    end_color: Color = WHITE
    exact_match: bool = False

    def keywords(self) -> List[str]:
        return split_keywords(self.keyword)


__all__ = [
    "BLACK",
    "WHITE",
    "Color",
    "Rule",
    "Track",
    "split_keywords",
]
