"""Color math and the packed-integer boundary.

Everything that knows how a host packs three channels into one integer lives
here. The rest of the package only handles `Color` values.
"""

from __future__ import annotations

import enum
import math
import sys
from typing import Optional

from .model import Color

# Set on a track's custom color slot whenever a custom color is assigned.
CUSTOM_COLOR_FLAG = 0x1000000

_CHANNEL_MASK = 0xFFFFFF


class ChannelOrder(enum.Enum):
    RGB = "rgb"  # r<<16 | g<<8 | b
    BGR = "bgr"  # b<<16 | g<<8 | r  (Windows hosts)

    @classmethod
    def parse(cls, s: str) -> "ChannelOrder":
        v = (s or "").strip().lower()
        if v in ("", "auto", "native"):
            return native_channel_order()
        for o in cls:
            if o.value == v:
                return o
        raise ValueError(f"Unknown channel order: {s!r} (expected rgb, bgr or auto)")


def native_channel_order(platform: Optional[str] = None) -> ChannelOrder:
    p = (platform if platform is not None else sys.platform).lower()
    if p.startswith("win") or p.startswith("cygwin"):
        return ChannelOrder.BGR
    return ChannelOrder.RGB


def interpolate(start: Color, end: Color, factor: float) -> Color:
    """Linear blend from `start` (factor 0) to `end` (factor 1).

    Callers clamp `factor`; channels are rounded half-up.
    """

    def ch(a: int, b: int) -> int:
        return int(math.floor(a + (b - a) * factor + 0.5))

    return Color(ch(start.r, end.r), ch(start.g, end.g), ch(start.b, end.b))


def pack_color(color: Color, order: ChannelOrder = ChannelOrder.RGB) -> int:
    if order is ChannelOrder.BGR:
        return (color.b << 16) | (color.g << 8) | color.r
    return (color.r << 16) | (color.g << 8) | color.b


def unpack_color(packed: int, order: ChannelOrder = ChannelOrder.RGB) -> Color:
    """Decode a packed color. Bits above the 24 channel bits are ignored."""
    v = int(packed) & _CHANNEL_MASK
    hi = (v >> 16) & 0xFF
    mid = (v >> 8) & 0xFF
    lo = v & 0xFF
    if order is ChannelOrder.BGR:
        return Color(lo, mid, hi)
    return Color(hi, mid, lo)


def to_native(color: Color, order: ChannelOrder) -> int:
    """Value for a host custom-color slot (packed + override flag)."""
    return pack_color(color, order) | CUSTOM_COLOR_FLAG


def from_native(value: int, order: ChannelOrder) -> Optional[Color]:
    """Inverse of to_native; None when the override flag is not set."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        return None
    if not value & CUSTOM_COLOR_FLAG:
        return None
    return unpack_color(value, order)


__all__ = [
    "CUSTOM_COLOR_FLAG",
    "ChannelOrder",
    "from_native",
    "interpolate",
    "native_channel_order",
    "pack_color",
    "to_native",
    "unpack_color",
]
