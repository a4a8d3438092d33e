# reagradient/gradient.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .color import interpolate
from .model import Color, Track
from .util.settings import DEFAULT_MAX_STEP

# Largest increase of the blend factor between two consecutive tracks.
MAX_FACTOR_STEP = DEFAULT_MAX_STEP


@dataclass(frozen=True)
class Assignment:
    track: Track
    color: Color
    factor: float


@dataclass(frozen=True)
class GradientResult:
    assignments: Tuple[Assignment, ...] = ()
    skipped: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.skipped is None


def gradient_factors(n: int, max_step: float = MAX_FACTOR_STEP) -> List[float]:
    """Blend factors for a group of `n` tracks.

    The nominal factor i/(n-1) is capped at previous + max_step, so a large
    group can stop short of 1.0.
    """
    out: List[float] = []
    prev = 0.0
    for i in range(n):
        raw = (i / (n - 1)) if n > 1 else 0.0
        f = min(raw, prev + max_step)
        out.append(f)
        prev = f
    return out


def apply_gradient(
    group: Sequence[Track],
    start_color: Color,
    end_color: Color,
    *,
    max_step: float = MAX_FACTOR_STEP,
) -> GradientResult:
    if not group:
        return GradientResult(skipped="empty group")
    if not isinstance(start_color, Color) or not start_color.is_valid():
        return GradientResult(skipped="invalid start color")
    if not isinstance(end_color, Color) or not end_color.is_valid():
        return GradientResult(skipped="invalid end color")

    factors = gradient_factors(len(group), max_step)
    out = tuple(
        Assignment(track=t, color=interpolate(start_color, end_color, f), factor=f)
        for t, f in zip(group, factors)
    )
    return GradientResult(assignments=out)
