# reagradient/engine.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, Sequence, Tuple

from .gradient import MAX_FACTOR_STEP, Assignment, apply_gradient
from .group import resolve_group
from .match import match_tracks
from .model import Color, Rule, Track
from .util.console import obs, warn

if TYPE_CHECKING:
    from .store import ConfigStore


class TrackWriter(Protocol):
    def set_color(self, track: Track, color: Color) -> None:
        """Assign a custom color to `track`."""


@dataclass
class RuleOutcome:
    """What one rule did during a pass.

    status: "applied" | "skipped"
    """

    rule: Rule
    status: str = "applied"
    reason: Optional[str] = None
    matched: int = 0
    written: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class ApplyReport:
    """Result of one pass.

    status: "ok" | "no_rules"
    """

    status: str = "ok"
    reason: Optional[str] = None
    outcomes: List[RuleOutcome] = field(default_factory=list)
    writes: List[Assignment] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def final_colors(self) -> Dict[Track, Color]:
        out: Dict[Track, Color] = {}
        for a in self.writes:
            out[a.track] = a.color
        return out

    def summary(self) -> str:
        if not self.ok:
            return f"no rules applied ({self.reason})"
        applied = sum(1 for o in self.outcomes if o.status == "applied")
        skipped = len(self.outcomes) - applied
        tracks = len(self.final_colors())
        return f"rules={len(self.outcomes)} applied={applied} skipped={skipped} writes={len(self.writes)} tracks={tracks}"


def _invalid_color_reason(rule: Rule) -> Optional[str]:
    if not isinstance(rule.start_color, Color) or not rule.start_color.is_valid():
        return "invalid start color"
    if not isinstance(rule.end_color, Color) or not rule.end_color.is_valid():
        return "invalid end color"
    return None


def _apply_rule(
    rule: Rule,
    tracks: Sequence[Track],
    writer: TrackWriter,
    report: ApplyReport,
    max_step: float,
) -> RuleOutcome:
    outcome = RuleOutcome(rule=rule)

    bad = _invalid_color_reason(rule)
    if bad:
        outcome.status = "skipped"
        outcome.reason = bad
        return outcome

    keywords = rule.keywords() if isinstance(rule.keyword, str) else []
    if not keywords:
        outcome.status = "skipped"
        outcome.reason = "no keywords"
        return outcome

    for kw in keywords:
        for root in match_tracks(kw, rule.exact_match, tracks):
            outcome.matched += 1
            group = resolve_group(root, tracks)
            res = apply_gradient(group, rule.start_color, rule.end_color, max_step=max_step)
            if not res.ok:
                obs("engine", "gradient.skip", keyword=kw, root=root.index, reason=repr(res.skipped))
                continue
            for a in res.assignments:
                try:
                    writer.set_color(a.track, a.color)
                except Exception as e:
                    msg = f"track #{a.track.index} {a.track.name!r}: {e}"
                    outcome.errors.append(msg)
                    warn(f"color write failed for {msg}")
                    continue
                outcome.written += 1
                report.writes.append(a)

    if outcome.matched == 0:
        outcome.reason = "no matching tracks"
    return outcome


def apply_all(
    rules: Optional[Sequence[Rule]],
    tracks: Sequence[Track],
    writer: TrackWriter,
    *,
    max_step: float = MAX_FACTOR_STEP,
) -> ApplyReport:
    """Run every rule in order and write colors as they are computed.

    Later rules (and later keywords of the same rule) overwrite colors set
    earlier in the same pass. Never raises; problems end up on the report.
    """
    if rules is None:
        return ApplyReport(status="no_rules", reason="no rules available")

    t0 = time.monotonic()
    report = ApplyReport()
    track_list = list(tracks)
    for rule in rules:
        if not isinstance(rule, Rule):
            report.outcomes.append(RuleOutcome(rule=rule, status="skipped", reason="not a rule"))
            continue
        report.outcomes.append(_apply_rule(rule, track_list, writer, report, max_step))

    elapsed_ms = int((time.monotonic() - t0) * 1000)
    obs("engine", "apply.ok", ms=elapsed_ms, rules=len(report.outcomes), writes=len(report.writes))
    return report


def apply_last_active(
    store: "ConfigStore",
    tracks: Sequence[Track],
    writer: TrackWriter,
    *,
    max_step: float = MAX_FACTOR_STEP,
) -> Tuple[Optional[str], ApplyReport]:
    """Direct-apply flow: run the most recently active configuration.

    Returns (config_name, report). When the pointer or the configuration
    cannot be loaded nothing is written and the report says "no_rules".
    """
    name = store.load_last_active()
    if name is None:
        return None, ApplyReport(status="no_rules", reason="no active configuration")
    rules = store.load(name)
    if rules is None:
        return name, ApplyReport(status="no_rules", reason=f"configuration {name!r} not found or unreadable")
    return name, apply_all(rules, tracks, writer, max_step=max_step)


__all__ = [
    "ApplyReport",
    "RuleOutcome",
    "TrackWriter",
    "apply_all",
    "apply_last_active",
]
