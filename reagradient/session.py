"""Editing session: the current configuration name and its rule list.

Every mutating call persists the rule list and the last-active pointer
before returning, and returns whether that write succeeded. A failed write
leaves the in-memory edit in place.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, List, Optional, Sequence

from .engine import ApplyReport, TrackWriter, apply_all
from .gradient import MAX_FACTOR_STEP
from .model import Rule, Track
from .store import ConfigStore, check_config_name
from .util.console import obs

DEFAULT_CONFIG_NAME = "Default Config"

_RULE_FIELDS = ("keyword", "start_color", "end_color", "exact_match")


class Session:
    def __init__(self, store: ConfigStore, *, max_step: float = MAX_FACTOR_STEP) -> None:
        self.store = store
        self.max_step = max_step
        self.config_name: Optional[str] = None
        self.rules: List[Rule] = []

    def __repr__(self) -> str:
        return f"Session(config={self.config_name!r}, rules={len(self.rules)})"

    # --- persistence ----------------------------------------------------------

    def persist(self) -> bool:
        if self.config_name is None:
            return False
        ok = self.store.save(self.config_name, self.rules)
        if ok:
            ok = self.store.save_last_active(self.config_name)
        return ok

    def bootstrap(self) -> bool:
        """Open the last active configuration, or the default one.

        Returns True when an existing rule list was loaded.
        """
        name = self.store.load_last_active() or DEFAULT_CONFIG_NAME
        return self.load_config(name)

    # --- configurations -------------------------------------------------------

    def config_names(self) -> List[str]:
        return self.store.list_names()

    def load_config(self, name: str) -> bool:
        """Make `name` current. A missing or unreadable file gives an empty list.

        Returns True when a stored rule list was found.
        """
        check_config_name(name)
        loaded = self.store.load(name)
        self.config_name = name
        self.rules = list(loaded) if loaded is not None else []
        self.store.save_last_active(name)
        obs("session", "load", name=name, found=loaded is not None, rules=len(self.rules))
        return loaded is not None

    def new_config(self, name: str = "") -> bool:
        """Create a configuration with an empty rule list and make it current."""
        name = (name or "").strip()
        if not name:
            name = f"Config {len(self.config_names()) + 1}"
        check_config_name(name)
        self.config_name = name
        self.rules = []
        return self.persist()

    def delete_config(self, name: str) -> bool:
        """Delete `name`. If it was current, switch to the first remaining one.

        With nothing left the session has no current configuration and the
        last-active pointer is cleared. The switch also happens when the
        current configuration was never saved; the return value is still
        False then, since no file was removed.
        """
        active = self.config_name if self.config_name is not None else self.store.load_last_active()
        deleted = self.store.delete(name)
        if name != active:
            return deleted

        remaining = self.config_names()
        if remaining:
            self.load_config(remaining[0])
        else:
            self.config_name = None
            self.rules = []
            self.store.clear_last_active()
        return deleted

    # --- rule edits -----------------------------------------------------------

    def _check_index(self, index: int) -> int:
        if not isinstance(index, int) or not 0 <= index < len(self.rules):
            raise IndexError(f"rule index out of range: {index!r} ({len(self.rules)} rules)")
        return index

    def add_rule(self, rule: Rule) -> bool:
        self.rules.append(rule)
        return self.persist()

    def update_rule(self, index: int, **changes: Any) -> bool:
        unknown = set(changes) - set(_RULE_FIELDS)
        if unknown:
            raise TypeError(f"unknown rule field(s): {', '.join(sorted(unknown))}")
        self._check_index(index)
        self.rules[index] = replace(self.rules[index], **changes)
        return self.persist()

    def delete_rule(self, index: int) -> bool:
        self._check_index(index)
        del self.rules[index]
        return self.persist()

    def move_rule(self, index: int, direction: int) -> bool:
        """Swap rule `index` with its neighbour `index + direction`.

        Moving past either end leaves the order unchanged.
        """
        new_index = index + direction
        if 0 <= index < len(self.rules) and 0 <= new_index < len(self.rules):
            self.rules[index], self.rules[new_index] = self.rules[new_index], self.rules[index]
        return self.persist()

    # --- apply ----------------------------------------------------------------

    def apply(self, tracks: Sequence[Track], writer: TrackWriter) -> ApplyReport:
        return apply_all(self.rules, tracks, writer, max_step=self.max_step)


__all__ = ["DEFAULT_CONFIG_NAME", "Session"]
