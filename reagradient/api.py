"""reagradient.api

Stable *library* entrypoint for ReaGradient.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from reagradient.cfg_lang import CfgSyntaxError
from reagradient.color import (
    CUSTOM_COLOR_FLAG,
    ChannelOrder,
    interpolate,
    native_channel_order,
    pack_color,
    unpack_color,
)
from reagradient.engine import ApplyReport, RuleOutcome, apply_all, apply_last_active
from reagradient.gradient import MAX_FACTOR_STEP, Assignment, GradientResult, apply_gradient
from reagradient.group import resolve_group
from reagradient.match import match_tracks
from reagradient.model import Color, Rule, Track, split_keywords
from reagradient.session import Session
from reagradient.store import ConfigNameError, ConfigStore
from reagradient.tracks import TrackFileError, TrackList


# --- Public API exports (locked by contract tests) ------------------------
# Keep changes intentional and reviewable.
_PUBLIC_EXPORTS = (
    "ApplyReport",
    "Assignment",
    "CUSTOM_COLOR_FLAG",
    "CfgSyntaxError",
    "ChannelOrder",
    "Color",
    "ConfigNameError",
    "ConfigStore",
    "GradientResult",
    "MAX_FACTOR_STEP",
    "Rule",
    "RuleOutcome",
    "Session",
    "Track",
    "TrackFileError",
    "TrackList",
    "apply_all",
    "apply_gradient",
    "apply_last_active",
    "interpolate",
    "match_tracks",
    "native_channel_order",
    "pack_color",
    "resolve_group",
    "split_keywords",
    "unpack_color",
)

__all__ = [n for n in _PUBLIC_EXPORTS if n in globals()]
# --- /Public API exports --------------------------------------------------
