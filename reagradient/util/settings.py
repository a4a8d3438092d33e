# reagradient/util/settings.py
from __future__ import annotations

import os
from pathlib import Path

DEFAULT_MAX_STEP = 0.3


def config_home() -> Path:
    """Directory holding the configuration files.

    Resolution order:
      - env REAGRADIENT_HOME
      - ~/.reagradient
    """
    raw = (os.getenv("REAGRADIENT_HOME", "") or "").strip()
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".reagradient"


def max_step_from_env() -> float:
    raw = (os.getenv("REAGRADIENT_MAX_STEP", "") or "").strip()
    if not raw:
        return DEFAULT_MAX_STEP
    try:
        v = float(raw)
        if v > 0:
            return v
    except ValueError:
        pass
    return DEFAULT_MAX_STEP


def parse_max_step(s: str) -> float:
    try:
        v = float(s)
    except ValueError:
        raise ValueError(f"max step must be a number: {s!r}")
    if not v > 0:
        raise ValueError(f"max step must be > 0: {s!r}")
    return v
