"""Configuration files: one rule list per name, plus a last-active pointer.

Layout under `base_dir`:
  <prefix>_<name>.<ext>   rule list for configuration <name>
  <prefix>.<ext>          {lastConfig = "<name>"}

Reading never raises: a missing or unreadable file and text that does not
parse are both reported as "not found" (None).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .cfg_lang import CfgSyntaxError, dumps, parse_table, sequence_items
from .color import ChannelOrder, pack_color, unpack_color
from .model import Rule
from .util.console import obs, warn

DEFAULT_PREFIX = "ReaGradient"
DEFAULT_EXT = "cfg"
LAST_CONFIG_KEY = "lastConfig"

_MAX_PACKED = 0x1FFFFFF  # 24 channel bits + custom-color flag


class ConfigNameError(ValueError):
    """Raised for configuration names that cannot be used as a file name part."""


def check_config_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ConfigNameError("configuration name must be a non-empty string")
    if name != name.strip():
        raise ConfigNameError(f"configuration name must not start or end with whitespace: {name!r}")
    if name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise ConfigNameError(f"configuration name must not contain path separators: {name!r}")
    return name


def _as_packed(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool) or not isinstance(v, int):
        return None
    if v < 0 or v > _MAX_PACKED:
        return None
    return v


def rule_to_record(rule: Rule, order: ChannelOrder = ChannelOrder.RGB) -> Dict[str, Any]:
    return {
        "keyword": rule.keyword,
        "start_color": pack_color(rule.start_color, order),
        "end_color": pack_color(rule.end_color, order),
        "exact_match": bool(rule.exact_match),
    }


def rule_from_record(raw: Any, order: ChannelOrder = ChannelOrder.RGB) -> Rule:
    """Decode one stored record; raises ValueError when it does not fit the schema."""
    if not isinstance(raw, dict):
        raise ValueError("rule record must be a table")

    keyword = raw.get("keyword", "")
    if not isinstance(keyword, str):
        raise ValueError("rule keyword must be a string")

    start = _as_packed(raw.get("start_color"))
    end = _as_packed(raw.get("end_color"))
    if start is None:
        raise ValueError("rule start_color must be an integer in 0..0x1FFFFFF")
    if end is None:
        raise ValueError("rule end_color must be an integer in 0..0x1FFFFFF")

    exact = raw.get("exact_match", False)
    if not isinstance(exact, bool):
        raise ValueError("rule exact_match must be a boolean")

    return Rule(
        keyword=keyword,
        start_color=unpack_color(start, order),
        end_color=unpack_color(end, order),
        exact_match=exact,
    )


def dumps_rules(rules: Sequence[Rule], order: ChannelOrder = ChannelOrder.RGB) -> str:
    return dumps([rule_to_record(r, order) for r in rules]) + "\n"


def loads_rules(text: str, order: ChannelOrder = ChannelOrder.RGB, *, label: str = "rules") -> List[Rule]:
    """Parse a stored rule list.

    Raises CfgSyntaxError for text that is not a table literal or not a
    sequence of records. Individual records that fail the schema are
    dropped with a warning.
    """
    tbl = parse_table(text)
    items = sequence_items(tbl)
    if items is None:
        raise CfgSyntaxError("rule list must be a sequence of records")

    out: List[Rule] = []
    for i, raw in enumerate(items, start=1):
        try:
            out.append(rule_from_record(raw, order))
        except ValueError as e:
            warn(f"{label}: skipping rule #{i}: {e}")
    return out


class ConfigStore:
    def __init__(
        self,
        base_dir: Path | str,
        *,
        prefix: str = DEFAULT_PREFIX,
        ext: str = DEFAULT_EXT,
        channel_order: ChannelOrder = ChannelOrder.RGB,
    ) -> None:
        self.base_dir = Path(base_dir)
        self.prefix = prefix
        self.ext = ext
        self.channel_order = channel_order
        self._name_re = re.compile(r"^" + re.escape(prefix) + r"_(.+)\." + re.escape(ext) + r"$")

    def __repr__(self) -> str:
        return f"ConfigStore({str(self.base_dir)!r}, prefix={self.prefix!r}, ext={self.ext!r})"

    # --- paths ----------------------------------------------------------------

    def path_for(self, name: str) -> Path:
        check_config_name(name)
        return self.base_dir / f"{self.prefix}_{name}.{self.ext}"

    @property
    def last_active_path(self) -> Path:
        return self.base_dir / f"{self.prefix}.{self.ext}"

    # --- io helpers -----------------------------------------------------------

    def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as e:
            warn(f"cannot read {path}: {e}")
            return None

    def _write(self, path: Path, text: str) -> bool:
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8", newline="\n")
        except (OSError, UnicodeError) as e:
            warn(f"cannot write {path}: {e}")
            return False
        obs("store", "write.ok", path=path.name, bytes=len(text))
        return True

    # --- rule lists -----------------------------------------------------------

    def save(self, name: str, rules: Sequence[Rule]) -> bool:
        return self._write(self.path_for(name), dumps_rules(rules, self.channel_order))

    def load(self, name: str) -> Optional[List[Rule]]:
        try:
            path = self.path_for(name)
        except ConfigNameError:
            return None
        text = self._read(path)
        if text is None:
            obs("store", "load.missing", name=name)
            return None
        try:
            rules = loads_rules(text, self.channel_order, label=path.name)
        except CfgSyntaxError as e:
            warn(f"ignoring corrupt configuration {path.name}: {e}")
            return None
        obs("store", "load.ok", name=name, rules=len(rules))
        return rules

    def exists(self, name: str) -> bool:
        try:
            return self.path_for(name).is_file()
        except ConfigNameError:
            return False

    def list_names(self) -> List[str]:
        try:
            entries = list(self.base_dir.iterdir())
        except OSError:
            return []
        names: List[str] = []
        for p in entries:
            m = self._name_re.match(p.name)
            if not m or not p.is_file():
                continue
            try:
                names.append(check_config_name(m.group(1)))
            except ConfigNameError:
                continue
        return sorted(names)

    def delete(self, name: str) -> bool:
        try:
            path = self.path_for(name)
        except ConfigNameError:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            warn(f"cannot delete {path}: {e}")
            return False
        obs("store", "delete.ok", name=name)
        return True

    # --- last-active pointer --------------------------------------------------

    def save_last_active(self, name: str) -> bool:
        check_config_name(name)
        return self._write(self.last_active_path, dumps({LAST_CONFIG_KEY: name}, inline=True) + "\n")

    def load_last_active(self) -> Optional[str]:
        text = self._read(self.last_active_path)
        if text is None:
            return None
        try:
            tbl = parse_table(text)
        except CfgSyntaxError as e:
            warn(f"ignoring corrupt {self.last_active_path.name}: {e}")
            return None
        name = tbl.get(LAST_CONFIG_KEY)
        if not isinstance(name, str):
            return None
        try:
            return check_config_name(name)
        except ConfigNameError:
            return None

    def clear_last_active(self) -> bool:
        try:
            self.last_active_path.unlink()
        except FileNotFoundError:
            return True
        except OSError as e:
            warn(f"cannot delete {self.last_active_path}: {e}")
            return False
        return True


__all__ = [
    "ConfigNameError",
    "ConfigStore",
    "DEFAULT_EXT",
    "DEFAULT_PREFIX",
    "check_config_name",
    "dumps_rules",
    "loads_rules",
    "rule_from_record",
    "rule_to_record",
]
