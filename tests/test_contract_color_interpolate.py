from __future__ import annotations

import unittest

from reagradient.color import (
    CUSTOM_COLOR_FLAG,
    ChannelOrder,
    from_native,
    interpolate,
    native_channel_order,
    pack_color,
    to_native,
    unpack_color,
)
from reagradient.model import Color


RED = Color(255, 0, 0)
BLUE = Color(0, 0, 255)


class TestInterpolateContract(unittest.TestCase):
    def test_endpoints_are_exact(self) -> None:
        pairs = [
            (RED, BLUE),
            (Color(0, 0, 0), Color(255, 255, 255)),
            (Color(12, 200, 99), Color(250, 3, 128)),
            (Color(7, 7, 7), Color(7, 7, 7)),
        ]
        for a, b in pairs:
            self.assertEqual(interpolate(a, b, 0), a)
            self.assertEqual(interpolate(a, b, 0.0), a)
            self.assertEqual(interpolate(a, b, 1), b)
            self.assertEqual(interpolate(a, b, 1.0), b)

    def test_midpoint_rounds_half_up(self) -> None:
        self.assertEqual(interpolate(Color(0, 0, 0), Color(255, 255, 255), 0.5), Color(128, 128, 128))
        self.assertEqual(interpolate(Color(0, 10, 20), Color(1, 11, 21), 0.5), Color(1, 11, 21))

    def test_descending_channel(self) -> None:
        self.assertEqual(interpolate(Color(200, 0, 0), Color(100, 0, 0), 0.5), Color(150, 0, 0))

    def test_unclamped_factor_is_not_corrected(self) -> None:
        c = interpolate(Color(0, 0, 0), Color(100, 100, 100), 2.0)
        self.assertEqual(c, Color(200, 200, 200))
        self.assertFalse(Color(300, 0, 0).is_valid())

    def test_monotone_factors_move_toward_end(self) -> None:
        prev = -1
        for f in (0.0, 0.1, 0.25, 0.5, 0.75, 0.9, 1.0):
            c = interpolate(RED, BLUE, f)
            self.assertGreaterEqual(c.b, prev)
            prev = c.b


class TestPackedColorContract(unittest.TestCase):
    def test_rgb_and_bgr_packing_swap_red_and_blue(self) -> None:
        c = Color(0x12, 0x34, 0x56)
        self.assertEqual(pack_color(c, ChannelOrder.RGB), 0x123456)
        self.assertEqual(pack_color(c, ChannelOrder.BGR), 0x563412)
        self.assertEqual(unpack_color(0x123456, ChannelOrder.RGB), c)
        self.assertEqual(unpack_color(0x563412, ChannelOrder.BGR), c)

    def test_unpack_ignores_flag_bits(self) -> None:
        self.assertEqual(unpack_color(0x1FF0000, ChannelOrder.RGB), RED)

    def test_native_slot_carries_override_flag(self) -> None:
        v = to_native(RED, ChannelOrder.RGB)
        self.assertTrue(v & CUSTOM_COLOR_FLAG)
        self.assertEqual(from_native(v, ChannelOrder.RGB), RED)
        self.assertIsNone(from_native(0, ChannelOrder.RGB))
        self.assertIsNone(from_native(0xFF0000, ChannelOrder.RGB))

    def test_native_channel_order_by_platform(self) -> None:
        self.assertIs(native_channel_order("win32"), ChannelOrder.BGR)
        self.assertIs(native_channel_order("cygwin"), ChannelOrder.BGR)
        self.assertIs(native_channel_order("darwin"), ChannelOrder.RGB)
        self.assertIs(native_channel_order("linux"), ChannelOrder.RGB)

    def test_channel_order_parse(self) -> None:
        self.assertIs(ChannelOrder.parse("BGR"), ChannelOrder.BGR)
        self.assertIs(ChannelOrder.parse("rgb"), ChannelOrder.RGB)
        self.assertIs(ChannelOrder.parse("auto"), native_channel_order())
        with self.assertRaises(ValueError):
            ChannelOrder.parse("grb")

    def test_hex_helpers(self) -> None:
        self.assertEqual(Color.from_hex("#FF8000"), Color(255, 128, 0))
        self.assertEqual(Color.from_hex("00ff00"), Color(0, 255, 0))
        self.assertEqual(Color(1, 2, 255).to_hex(), "#0102ff")
        with self.assertRaises(ValueError):
            Color.from_hex("#abc")


if __name__ == "__main__":
    unittest.main(verbosity=2)
