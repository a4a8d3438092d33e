# REAGRADIENT_CFG_LANG_V1
"""Reader/writer for the Lua-style table literals used by config files.

Only literal data is accepted: tables, strings, numbers, booleans and nil.
Anything else (names in value position, calls, operators) is a syntax error,
so a config file can never run code when it is read.

Tables come back as dicts. Positional entries use 1-based int keys, named
entries use str keys; `sequence_items` turns a pure array part into a list.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

LuaTable = Dict[Any, Any]


class CfgSyntaxError(ValueError):
    """Raised for text that is not a valid table literal."""


_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUM_RE = re.compile(
    r"0[xX][0-9a-fA-F]+"
    r"|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
)
_RESERVED = frozenset(
    """and break do else elseif end false for function goto if in local nil
    not or repeat return then true until while""".split()
)
_SIMPLE_ESCAPES = {
    "a": 7,
    "b": 8,
    "f": 12,
    "n": 10,
    "r": 13,
    "t": 9,
    "v": 11,
    "\\": 92,
    '"': 34,
    "'": 39,
    "\n": 10,
}
_QUOTE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

# Deepest table nesting accepted by the reader.
MAX_DEPTH = 64


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.depth = 0

    # --- scanning -------------------------------------------------------------

    def _where(self, pos: Optional[int] = None) -> str:
        p = self.pos if pos is None else pos
        line = self.text.count("\n", 0, p) + 1
        col = p - (self.text.rfind("\n", 0, p) + 1) + 1
        return f"line {line}, col {col}"

    def _fail(self, msg: str, pos: Optional[int] = None) -> CfgSyntaxError:
        return CfgSyntaxError(f"{msg} at {self._where(pos)}")

    def _skip_ws(self) -> None:
        text = self.text
        n = len(text)
        while self.pos < n:
            ch = text[self.pos]
            if ch in " \t\r\n\f\v":
                self.pos += 1
                continue
            if text.startswith("--", self.pos):
                end = text.find("\n", self.pos)
                self.pos = n if end < 0 else end + 1
                continue
            break

    def _peek(self) -> str:
        self._skip_ws()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _expect(self, ch: str) -> None:
        if self._peek() != ch:
            found = self.text[self.pos] if self.pos < len(self.text) else "end of input"
            raise self._fail(f"expected {ch!r}, found {found!r}")
        self.pos += 1

    # --- grammar --------------------------------------------------------------

    def parse_document(self) -> Any:
        if self._peek() == "":
            raise self._fail("empty document")
        v = self.parse_value()
        if self._peek() != "":
            raise self._fail("unexpected trailing text")
        return v

    def parse_value(self) -> Any:
        ch = self._peek()
        if ch == "{":
            return self.parse_table()
        if ch in ('"', "'"):
            return self.parse_string()
        if ch == "-" or ch == "." or ch.isdigit():
            return self.parse_number()
        m = _NAME_RE.match(self.text, self.pos)
        if m:
            word = m.group(0)
            if word == "true":
                self.pos = m.end()
                return True
            if word == "false":
                self.pos = m.end()
                return False
            if word == "nil":
                self.pos = m.end()
                return None
            raise self._fail(f"unexpected name {word!r} (only literal values are allowed)")
        if ch == "":
            raise self._fail("unexpected end of input")
        raise self._fail(f"unexpected character {ch!r}")

    def parse_table(self) -> LuaTable:
        if self.depth >= MAX_DEPTH:
            raise self._fail(f"tables nested deeper than {MAX_DEPTH} levels")
        self._expect("{")
        self.depth += 1
        out: LuaTable = {}
        n = 0
        while True:
            ch = self._peek()
            if ch == "}":
                self.pos += 1
                self.depth -= 1
                return out
            if ch == "":
                raise self._fail("unterminated table")

            if ch == "[" and not self.text.startswith("[[", self.pos) and not self.text.startswith("[=", self.pos):
                self.pos += 1
                key = self.parse_value()
                if key is None:
                    raise self._fail("table key is nil")
                if isinstance(key, dict):
                    raise self._fail("table key must be a scalar")
                self._expect("]")
                self._expect("=")
                val = self.parse_value()
                if val is not None:
                    out[key] = val
                else:
                    out.pop(key, None)
            else:
                key_name = self._try_name_key()
                if key_name is not None:
                    val = self.parse_value()
                    if val is not None:
                        out[key_name] = val
                    else:
                        out.pop(key_name, None)
                else:
                    n += 1
                    val = self.parse_value()
                    if val is not None:
                        out[n] = val

            sep = self._peek()
            if sep in (",", ";"):
                self.pos += 1
                continue
            if sep == "}":
                continue
            raise self._fail("expected ',' or '}' in table")

    def _try_name_key(self) -> Optional[str]:
        m = _NAME_RE.match(self.text, self.pos)
        if not m or m.group(0) in _RESERVED:
            return None
        save = self.pos
        self.pos = m.end()
        if self._peek() == "=" and not self.text.startswith("==", self.pos):
            self.pos += 1
            return m.group(0)
        self.pos = save
        return None

    def parse_number(self) -> Any:
        start = self.pos
        neg = False
        if self.text.startswith("-", self.pos):
            neg = True
            self.pos += 1
            self._skip_ws()
        m = _NUM_RE.match(self.text, self.pos)
        if not m:
            raise self._fail("malformed number", start)
        self.pos = m.end()
        nxt = self.text[self.pos:self.pos + 1]
        if nxt and (nxt.isalnum() or nxt == "_"):
            raise self._fail("malformed number", start)
        raw = m.group(0)
        if raw[:2] in ("0x", "0X"):
            v: Any = int(raw, 16)
        elif any(c in raw for c in ".eE"):
            v = float(raw)
        else:
            v = int(raw)
        return -v if neg else v

    def parse_string(self) -> str:
        start = self.pos
        quote = self.text[self.pos]
        self.pos += 1
        text = self.text
        n = len(text)
        buf = bytearray()
        while True:
            if self.pos >= n:
                raise self._fail("unterminated string", start)
            ch = text[self.pos]
            if ch == quote:
                self.pos += 1
                break
            if ch == "\n":
                raise self._fail("unterminated string", start)
            if ch != "\\":
                buf += ch.encode("utf-8", errors="surrogatepass")
                self.pos += 1
                continue
            self._read_escape(buf)
        return buf.decode("utf-8", errors="replace")

    def _read_escape(self, buf: bytearray) -> None:
        text = self.text
        esc_pos = self.pos
        self.pos += 1
        if self.pos >= len(text):
            raise self._fail("unterminated escape", esc_pos)
        e = text[self.pos]

        if e in _SIMPLE_ESCAPES:
            buf.append(_SIMPLE_ESCAPES[e])
            self.pos += 1
            if e == "\n" and text.startswith("\r", self.pos):
                self.pos += 1
            return
        if e == "\r":
            buf.append(10)
            self.pos += 1
            if text.startswith("\n", self.pos):
                self.pos += 1
            return
        if e == "z":
            self.pos += 1
            while self.pos < len(text) and text[self.pos] in " \t\r\n\f\v":
                self.pos += 1
            return
        if e == "x":
            hx = text[self.pos + 1:self.pos + 3]
            if len(hx) != 2 or not all(c in "0123456789abcdefABCDEF" for c in hx):
                raise self._fail("invalid \\x escape", esc_pos)
            buf.append(int(hx, 16))
            self.pos += 3
            return
        if e.isdigit():
            j = self.pos
            while j < len(text) and j - self.pos < 3 and text[j].isdigit():
                j += 1
            v = int(text[self.pos:j])
            if v > 255:
                raise self._fail("decimal escape too large", esc_pos)
            buf.append(v)
            self.pos = j
            return
        if e == "u":
            m = re.match(r"u\{([0-9a-fA-F]+)\}", text[self.pos:])
            if not m:
                raise self._fail("invalid \\u escape", esc_pos)
            cp = int(m.group(1), 16)
            if cp > 0x10FFFF:
                raise self._fail("\\u escape out of range", esc_pos)
            buf += chr(cp).encode("utf-8", errors="surrogatepass")
            self.pos += m.end()
            return
        raise self._fail(f"invalid escape sequence '\\{e}'", esc_pos)


def parse_value(text: str) -> Any:
    """Parse one literal value (the whole document)."""
    if not isinstance(text, str):
        raise CfgSyntaxError(f"expected text, got {type(text).__name__}")
    # Tolerate a UTF-8 BOM written by some editors.
    if text.startswith("\ufeff"):
        text = text[1:]
    return _Parser(text).parse_document()


def parse_table(text: str) -> LuaTable:
    v = parse_value(text)
    if not isinstance(v, dict):
        raise CfgSyntaxError(f"expected a table, got {type(v).__name__}")
    return v


def sequence_items(tbl: LuaTable) -> Optional[List[Any]]:
    """Array part of `tbl` as a list, or None if it has other keys or holes."""
    if not isinstance(tbl, dict):
        return None
    # bool and float keys compare equal to ints; only real ints count.
    if any(not isinstance(k, int) or isinstance(k, bool) for k in tbl):
        return None
    out: List[Any] = []
    for i in range(1, len(tbl) + 1):
        if i not in tbl:
            return None
        out.append(tbl[i])
    return out


# --- writer -------------------------------------------------------------------


def quote_string(s: str) -> str:
    parts: List[str] = ['"']
    for ch in s:
        if ch in _QUOTE_ESCAPES:
            parts.append(_QUOTE_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            parts.append(f"\\{ord(ch):03d}")
        else:
            parts.append(ch)
    parts.append('"')
    return "".join(parts)


def _format_key(k: Any) -> str:
    if isinstance(k, str) and _NAME_RE.fullmatch(k) and k not in _RESERVED:
        return k
    return f"[{_format_scalar(k)}]"


def _format_scalar(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if v is None:
        return "nil"
    if isinstance(v, int):
        return str(v)
    if isinstance(v, float):
        if v != v or v in (float("inf"), float("-inf")):
            raise ValueError(f"cannot write non-finite number: {v!r}")
        return repr(v)
    if isinstance(v, str):
        return quote_string(v)
    raise TypeError(f"cannot write value of type {type(v).__name__}")


def dumps(value: Any, *, inline: bool = False, indent: int = 0) -> str:
    """Write `value` as a table literal.

    Lists become positional entries, dicts become `key = value` entries.
    With inline=True everything goes on one line (used for small records).
    """
    if not isinstance(value, (list, tuple, dict)):
        return _format_scalar(value)

    if isinstance(value, dict):
        entries = [f"{_format_key(k)} = {dumps(v, inline=inline, indent=indent + 1)}" for k, v in value.items()]
    else:
        entries = [dumps(v, inline=inline, indent=indent + 1) for v in value]

    if inline:
        return "{" + ", ".join(entries) + "}"
    if not entries:
        return "{}"
    pad = "  " * (indent + 1)
    body = "".join(f"{pad}{e},\n" for e in entries)
    return "{\n" + body + "  " * indent + "}"


__all__ = [
    "CfgSyntaxError",
    "LuaTable",
    "MAX_DEPTH",
    "dumps",
    "parse_table",
    "parse_value",
    "quote_string",
    "sequence_items",
]
