from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from .color import ChannelOrder
from .engine import ApplyReport
from .model import Color, Rule
from .session import Session
from .store import ConfigNameError, ConfigStore
from .tracks import TrackFileError, TrackList
from .util.console import eprint, warn
from .util.settings import config_home, max_step_from_env, parse_max_step


def parse_color(s: str) -> Color:
    """Accept #RRGGBB, RRGGBB or r,g,b."""
    text = (s or "").strip()
    if "," in text:
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 3:
            raise ValueError(f"Invalid color: {s!r} (expected r,g,b)")
        try:
            c = Color(*(int(p) for p in parts))
        except ValueError:
            raise ValueError(f"Invalid color: {s!r} (channels must be integers)")
        if not c.is_valid():
            raise ValueError(f"Invalid color: {s!r} (channels must be 0..255)")
        return c
    return Color.from_hex(text)


def _color_arg(s: str) -> Color:
    try:
        return parse_color(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _max_step_arg(s: str) -> float:
    try:
        return parse_max_step(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _channel_order_arg(s: str) -> ChannelOrder:
    try:
        return ChannelOrder.parse(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def format_rule(i: int, rule: Rule) -> str:
    mode = "exact" if rule.exact_match else "contains"
    return f"{i:>3}. {rule.keyword!r:<24} {rule.start_color.to_hex()} -> {rule.end_color.to_hex()}  [{mode}]"


def print_report(report: ApplyReport, *, verbose: bool = False) -> None:
    print(f"[reagradient] {report.summary()}")
    for i, o in enumerate(report.outcomes, start=1):
        if o.status == "skipped" or o.reason or o.errors or verbose:
            why = f" ({o.reason})" if o.reason else ""
            print(f"  rule {i}: {o.status}{why} matched={o.matched} written={o.written}")
        for err in o.errors:
            print(f"    error: {err}")
    if verbose:
        for t, c in report.final_colors().items():
            print(f"  #{t.index:<4} {t.name!r:<28} {c.to_hex()}")


def _rule_index(session: Session, n: int) -> int:
    if n < 1 or n > len(session.rules):
        raise SystemExit(f"No rule #{n} in configuration {session.config_name!r} ({len(session.rules)} rules)")
    return n - 1


def _persisted(ok: bool) -> None:
    if not ok:
        warn("changes were not saved to disk")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="reagradient",
        description="Manage gradient color rules and apply them to a track list.",
    )
    ap.add_argument(
        "--home",
        default=None,
        help="Configuration directory (default: env REAGRADIENT_HOME or ~/.reagradient)",
    )
    ap.add_argument(
        "--max-step",
        type=_max_step_arg,
        default=None,
        help="Largest blend-factor increase between adjacent tracks (default: env REAGRADIENT_MAX_STEP or 0.3)",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list", help="List configurations (* marks the active one)")
    p = sub.add_parser("new", help="Create a configuration with no rules and make it active")
    p.add_argument("name", nargs="?", default="", help="Name (default: 'Config N')")
    p = sub.add_parser("use", help="Make a configuration active")
    p.add_argument("name")
    p = sub.add_parser("delete", help="Delete a configuration")
    p.add_argument("name")

    sub.add_parser("show", help="Show the rules of the active configuration")

    p = sub.add_parser("add-rule", help="Append a rule to the active configuration")
    p.add_argument("keyword", help="Comma-separated keywords, e.g. 'kick,snare'")
    p.add_argument("--start", type=_color_arg, default=Color(0, 0, 0), help="Start color (#RRGGBB or r,g,b; default black)")
    p.add_argument("--end", type=_color_arg, default=Color(255, 255, 255), help="End color (default white)")
    p.add_argument("--exact", action="store_true", help="Match whole track names instead of substrings")

    p = sub.add_parser("edit-rule", help="Change fields of rule N (1-based)")
    p.add_argument("n", type=int)
    p.add_argument("--keyword", default=None)
    p.add_argument("--start", type=_color_arg, default=None)
    p.add_argument("--end", type=_color_arg, default=None)
    p.add_argument("--exact", dest="exact", action="store_true", default=None)
    p.add_argument("--no-exact", dest="exact", action="store_false")

    p = sub.add_parser("remove-rule", help="Remove rule N (1-based)")
    p.add_argument("n", type=int)

    p = sub.add_parser("move-rule", help="Move rule N one position up or down")
    p.add_argument("n", type=int)
    p.add_argument("direction", choices=("up", "down"))

    p = sub.add_parser("apply", help="Apply the active configuration to a track file")
    p.add_argument("--tracks", required=True, help="Track file (JSON)")
    p.add_argument("--out", default=None, help="Write the colored track file here (default: overwrite --tracks)")
    p.add_argument(
        "--channel-order",
        type=_channel_order_arg,
        default=os.getenv("REAGRADIENT_CHANNEL_ORDER", "auto"),
        help="Packed color order of the track file: rgb, bgr or auto (default: env REAGRADIENT_CHANNEL_ORDER or auto)",
    )
    p.add_argument("--dry-run", action="store_true", help="Compute and print colors without writing")
    p.add_argument("-v", "--verbose", action="store_true", help="Print the final color of every written track")
    return ap


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    home = Path(args.home).expanduser() if args.home else config_home()
    max_step = args.max_step if args.max_step is not None else max_step_from_env()
    session = Session(ConfigStore(home), max_step=max_step)

    try:
        _run(args, session)
    except ConfigNameError as e:
        raise SystemExit(f"Invalid configuration name: {e}")


def _run(args: argparse.Namespace, session: Session) -> None:
    cmd = args.cmd

    if cmd == "list":
        active = session.store.load_last_active()
        for name in session.config_names():
            mark = "*" if name == active else " "
            print(f"{mark} {name}")
        return

    if cmd == "new":
        _persisted(session.new_config(args.name))
        print(session.config_name)
        return

    if cmd == "use":
        if not session.store.exists(args.name):
            warn(f"configuration {args.name!r} does not exist yet; starting with no rules")
        session.load_config(args.name)
        print(session.config_name)
        return

    if cmd == "delete":
        if not session.delete_config(args.name):
            raise SystemExit(f"No configuration named {args.name!r}")
        active = session.config_name or session.store.load_last_active()
        print(f"deleted {args.name}; active: {active or 'none'}")
        return

    session.bootstrap()

    if cmd == "show":
        print(f"[{session.config_name}]")
        if not session.rules:
            print("  (no rules)")
        for i, rule in enumerate(session.rules, start=1):
            print(format_rule(i, rule))
        return

    if cmd == "add-rule":
        rule = Rule(keyword=args.keyword, start_color=args.start, end_color=args.end, exact_match=bool(args.exact))
        _persisted(session.add_rule(rule))
        print(format_rule(len(session.rules), rule))
        return

    if cmd == "edit-rule":
        idx = _rule_index(session, args.n)
        changes = {}
        if args.keyword is not None:
            changes["keyword"] = args.keyword
        if args.start is not None:
            changes["start_color"] = args.start
        if args.end is not None:
            changes["end_color"] = args.end
        if args.exact is not None:
            changes["exact_match"] = bool(args.exact)
        if not changes:
            raise SystemExit("edit-rule: nothing to change (use --keyword/--start/--end/--exact/--no-exact)")
        _persisted(session.update_rule(idx, **changes))
        print(format_rule(args.n, session.rules[idx]))
        return

    if cmd == "remove-rule":
        idx = _rule_index(session, args.n)
        _persisted(session.delete_rule(idx))
        print(f"removed rule #{args.n}")
        return

    if cmd == "move-rule":
        idx = _rule_index(session, args.n)
        _persisted(session.move_rule(idx, -1 if args.direction == "up" else 1))
        for i, rule in enumerate(session.rules, start=1):
            print(format_rule(i, rule))
        return

    if cmd == "apply":
        apply_to_track_file(
            session,
            Path(args.tracks),
            out=Path(args.out) if args.out else None,
            channel_order=args.channel_order,
            dry_run=bool(args.dry_run),
            verbose=bool(args.verbose),
        )
        return

    raise SystemExit(f"Unknown command: {cmd}")  # pragma: no cover


def apply_to_track_file(
    session: Session,
    tracks_path: Path,
    *,
    out: Optional[Path] = None,
    channel_order: Optional[ChannelOrder] = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> ApplyReport:
    try:
        track_list = TrackList.load(tracks_path, channel_order=channel_order)
    except TrackFileError as e:
        raise SystemExit(str(e))

    report = session.apply(track_list.tracks, track_list)
    print_report(report, verbose=verbose or dry_run)

    if not dry_run:
        out_path = out or tracks_path
        try:
            track_list.save(out_path)
        except OSError as e:
            raise SystemExit(f"Cannot write track file '{out_path}': {e}")
        print(str(out_path))
    return report


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        eprint("interrupted")
        sys.exit(130)
