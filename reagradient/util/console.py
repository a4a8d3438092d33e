# reagradient/util/console.py
from __future__ import annotations

import os
import sys
from typing import Any


def eprint(*args: Any) -> None:
    print(*args, file=sys.stderr)


def warn(msg: str) -> None:
    eprint(f"[reagradient] WARN: {msg}")


def obs_enabled() -> bool:
    v = (os.getenv("REAGRADIENT_OBS_LOG", "") or "").strip().lower()
    return v in {"1", "true", "yes", "on"}


def obs(component: str, event: str, **fields: Any) -> None:
    """Emit one `[reagradient.<component>] event k=v ...` line when enabled."""
    if not obs_enabled():
        return
    parts = [f"[reagradient.{component}]", event]
    for k, v in fields.items():
        parts.append(f"{k}={v}")
    eprint(" ".join(parts))
