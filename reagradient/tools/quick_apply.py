#!/usr/bin/env python3
"""Apply the last active configuration to a track file, with no editing step.

Meant to be bound to a single key/action and run repeatedly.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List

from reagradient.cli import print_report
from reagradient.color import ChannelOrder
from reagradient.engine import apply_last_active
from reagradient.store import ConfigStore
from reagradient.tracks import TrackFileError, TrackList
from reagradient.util.settings import config_home, max_step_from_env, parse_max_step


def _die(msg: str, rc: int = 2) -> int:
    print(f"[reagradient-apply] ERROR: {msg}", file=sys.stderr)
    return rc


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="reagradient-apply",
        description="Apply the most recently used gradient configuration to a track file.",
    )
    ap.add_argument("--tracks", required=True, help="Track file (JSON)")
    ap.add_argument("--out", default=None, help="Output track file (default: overwrite --tracks)")
    ap.add_argument("--home", default=None, help="Configuration directory (default: env REAGRADIENT_HOME or ~/.reagradient)")
    ap.add_argument("--max-step", default=None, help="Largest blend-factor step (default: env REAGRADIENT_MAX_STEP or 0.3)")
    ap.add_argument(
        "--channel-order",
        default=os.getenv("REAGRADIENT_CHANNEL_ORDER", "auto"),
        help="Packed color order of the track file: rgb, bgr or auto",
    )
    ap.add_argument("--dry-run", action="store_true", help="Print colors without writing the track file")
    ns = ap.parse_args(argv)

    try:
        order = ChannelOrder.parse(ns.channel_order)
        max_step = parse_max_step(ns.max_step) if ns.max_step is not None else max_step_from_env()
    except ValueError as e:
        return _die(str(e))

    home = Path(ns.home).expanduser() if ns.home else config_home()
    tracks_path = Path(ns.tracks)
    try:
        track_list = TrackList.load(tracks_path, channel_order=order)
    except TrackFileError as e:
        return _die(str(e))

    name, report = apply_last_active(ConfigStore(home), track_list.tracks, track_list, max_step=max_step)
    if not report.ok:
        print(f"[reagradient-apply] no rules available: {report.reason}", file=sys.stderr)
        return 1

    print(f"[reagradient-apply] config: {name}")
    print_report(report, verbose=bool(ns.dry_run))
    if ns.dry_run:
        return 0

    out_path = Path(ns.out) if ns.out else tracks_path
    try:
        track_list.save(out_path)
    except OSError as e:
        return _die(f"cannot write track file {out_path}: {e}")
    print(str(out_path))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
