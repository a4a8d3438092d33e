#!/usr/bin/env python3
"""Check configuration files for syntax and schema problems.

Unlike the store (which treats a bad file as missing), this reports every
problem and exits non-zero.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from reagradient.cfg_lang import CfgSyntaxError, parse_table, sequence_items
from reagradient.store import LAST_CONFIG_KEY, ConfigStore, rule_from_record
from reagradient.util.settings import config_home


def _read_text(p: Path) -> str:
    return p.read_text(encoding="utf-8", errors="replace")


def validate_rules_text(text: str) -> List[str]:
    try:
        tbl = parse_table(text)
    except CfgSyntaxError as e:
        return [f"syntax: {e}"]
    items = sequence_items(tbl)
    if items is None:
        return ["rule list must be a sequence of records"]
    errs: List[str] = []
    for i, raw in enumerate(items, start=1):
        try:
            rule = rule_from_record(raw)
        except ValueError as e:
            errs.append(f"rule #{i}: {e}")
            continue
        if not rule.keywords():
            errs.append(f"rule #{i}: keyword has no non-empty entries")
    return errs


def validate_pointer_text(text: str) -> List[str]:
    try:
        tbl = parse_table(text)
    except CfgSyntaxError as e:
        return [f"syntax: {e}"]
    if not isinstance(tbl.get(LAST_CONFIG_KEY), str):
        return [f"{LAST_CONFIG_KEY} must be a string"]
    return []


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="reagradient-validate-config",
        description="Validate ReaGradient configuration files.",
    )
    ap.add_argument("files", nargs="*", help="Rule list files to check (default: every configuration in --home)")
    ap.add_argument("--home", default=None, help="Configuration directory (default: env REAGRADIENT_HOME or ~/.reagradient)")
    ns = ap.parse_args(argv)

    all_errs: List[str] = []
    checked = 0

    if ns.files:
        paths = [Path(f) for f in ns.files]
        pointer = None
    else:
        store = ConfigStore(Path(ns.home).expanduser() if ns.home else config_home())
        paths = [store.path_for(n) for n in store.list_names()]
        pointer = store.last_active_path

    for p in paths:
        try:
            text = _read_text(p)
        except OSError as e:
            all_errs.append(f"{p}: cannot read ({e})")
            continue
        checked += 1
        all_errs.extend(f"{p}: {e}" for e in validate_rules_text(text))

    if pointer is not None and pointer.exists():
        checked += 1
        all_errs.extend(f"{pointer}: {e}" for e in validate_pointer_text(_read_text(pointer)))

    if all_errs:
        print("[reagradient-validate-config] FAIL", file=sys.stderr)
        for e in all_errs:
            print(f"  - {e}", file=sys.stderr)
        return 3

    print(f"[reagradient-validate-config] OK ({checked} files)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
