from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path

from reagradient.color import ChannelOrder, interpolate
from reagradient.engine import apply_all, apply_last_active
from reagradient.model import Color, Rule, Track
from reagradient.store import ConfigStore
from reagradient.tracks import TrackList

RED = Color(255, 0, 0)
BLUE = Color(0, 0, 255)
GREEN = Color(0, 255, 0)


class RecordingWriter:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Color]] = []

    def set_color(self, track: Track, color: Color) -> None:
        self.calls.append((track.name, color))


class FailingWriter(RecordingWriter):
    def __init__(self, bad_name: str) -> None:
        super().__init__()
        self.bad_name = bad_name

    def set_color(self, track: Track, color: Color) -> None:
        if track.name == self.bad_name:
            raise RuntimeError("host refused")
        super().set_color(track, color)


def _tracks(*entries: tuple[str, int]) -> list[Track]:
    return [Track(index=i, name=n, folder_depth=d) for i, (n, d) in enumerate(entries)]


class TestRuleEngineContract(unittest.TestCase):
    def test_kick_snare_scenario(self) -> None:
        tracks = _tracks(("Kick Drum", 1), ("Kick Mic", 0), ("Kick Mic 2", -1), ("Snare Top", 0))
        rules = [Rule(keyword="kick,snare", start_color=RED, end_color=BLUE, exact_match=False)]
        w = RecordingWriter()
        report = apply_all(rules, tracks, w)

        self.assertTrue(report.ok)
        # "kick" matches three tracks; the folder is a group of three, the
        # other two are singletons. Then "snare" colors Snare Top.
        self.assertEqual(
            [name for name, _ in w.calls],
            ["Kick Drum", "Kick Mic", "Kick Mic 2", "Kick Mic", "Kick Mic 2", "Snare Top"],
        )
        first_group = [c for _, c in w.calls[:3]]
        self.assertEqual(first_group[0], RED)
        self.assertEqual(first_group[1], interpolate(RED, BLUE, 0.3))
        self.assertEqual(first_group[2], interpolate(RED, BLUE, 0.6))
        self.assertNotEqual(first_group[2], BLUE)
        self.assertEqual(w.calls[-1], ("Snare Top", RED))

        self.assertEqual([a.factor for a in report.writes[:3]], [0.0, 0.3, 0.6])
        final = {t.name: c for t, c in report.final_colors().items()}
        self.assertEqual(final, {"Kick Drum": RED, "Kick Mic": RED, "Kick Mic 2": RED, "Snare Top": RED})

        self.assertEqual(len(report.outcomes), 1)
        self.assertEqual(report.outcomes[0].status, "applied")
        self.assertEqual(report.outcomes[0].matched, 4)
        self.assertEqual(report.outcomes[0].written, 6)

    def test_later_rules_overwrite_earlier_ones(self) -> None:
        tracks = _tracks(("Bass", 0), ("Keys", 0))
        rules = [
            Rule(keyword="bass,keys", start_color=RED, end_color=BLUE),
            Rule(keyword="keys", start_color=GREEN, end_color=BLUE),
        ]
        w = RecordingWriter()
        report = apply_all(rules, tracks, w)
        self.assertEqual(w.calls, [("Bass", RED), ("Keys", RED), ("Keys", GREEN)])
        final = {t.name: c for t, c in report.final_colors().items()}
        self.assertEqual(final, {"Bass": RED, "Keys": GREEN})

    def test_exact_rule_only_matches_whole_names(self) -> None:
        tracks = _tracks(("Drums", 1), ("Drums Room", -1))
        w = RecordingWriter()
        apply_all([Rule(keyword="drums", start_color=RED, end_color=BLUE, exact_match=True)], tracks, w)
        self.assertEqual([n for n, _ in w.calls], ["Drums", "Drums Room"])
        self.assertEqual(w.calls[1][1], interpolate(RED, BLUE, 0.3))

    def test_bad_color_rule_is_skipped_without_aborting(self) -> None:
        tracks = _tracks(("Gtr", 0), ("Vox", 0))
        rules = [
            Rule(keyword="gtr", start_color=Color(300, 0, 0), end_color=BLUE),
            Rule(keyword="vox", start_color=GREEN, end_color=BLUE),
        ]
        w = RecordingWriter()
        report = apply_all(rules, tracks, w)
        self.assertEqual(w.calls, [("Vox", GREEN)])
        self.assertEqual(report.outcomes[0].status, "skipped")
        self.assertEqual(report.outcomes[0].reason, "invalid start color")
        self.assertEqual(report.outcomes[1].status, "applied")

    def test_empty_keywords_are_skipped(self) -> None:
        tracks = _tracks(("A", 0), ("B", 0))
        w = RecordingWriter()
        report = apply_all([Rule(keyword=" , ,", start_color=RED, end_color=BLUE)], tracks, w)
        self.assertEqual(w.calls, [])
        self.assertEqual(report.outcomes[0].status, "skipped")
        self.assertEqual(report.outcomes[0].reason, "no keywords")

    def test_no_match_is_reported(self) -> None:
        w = RecordingWriter()
        report = apply_all([Rule(keyword="horns", start_color=RED, end_color=BLUE)], _tracks(("Piano", 0)), w)
        self.assertEqual(report.outcomes[0].status, "applied")
        self.assertEqual(report.outcomes[0].reason, "no matching tracks")
        self.assertEqual(report.writes, [])

    def test_no_rules_means_no_writes(self) -> None:
        w = RecordingWriter()
        report = apply_all(None, _tracks(("A", 0)), w)
        self.assertFalse(report.ok)
        self.assertEqual(report.status, "no_rules")
        self.assertEqual(w.calls, [])

        report = apply_all([], _tracks(("A", 0)), w)
        self.assertTrue(report.ok)
        self.assertEqual(report.outcomes, [])

    def test_writer_errors_do_not_escape(self) -> None:
        tracks = _tracks(("Bus", 1), ("Bad", 0), ("Good", -1))
        w = FailingWriter("Bad")
        with redirect_stderr(io.StringIO()):
            report = apply_all([Rule(keyword="bus", start_color=RED, end_color=BLUE)], tracks, w)
        self.assertEqual([n for n, _ in w.calls], ["Bus", "Good"])
        self.assertEqual(len(report.outcomes[0].errors), 1)
        self.assertIn("host refused", report.outcomes[0].errors[0])
        self.assertEqual(report.outcomes[0].written, 2)

    def test_custom_max_step(self) -> None:
        tracks = _tracks(("Bus", 1), ("A", -1))
        w = RecordingWriter()
        apply_all([Rule(keyword="bus", start_color=RED, end_color=BLUE)], tracks, w, max_step=1.0)
        self.assertEqual(w.calls, [("Bus", RED), ("A", BLUE)])


class TestApplyLastActiveContract(unittest.TestCase):
    def test_runs_last_active_configuration(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = ConfigStore(Path(td))
            store.save("Mix", [Rule(keyword="vox", start_color=GREEN, end_color=BLUE)])
            store.save_last_active("Mix")
            tl = TrackList.build([("Lead Vox", 0), ("Bass", 0)], channel_order=ChannelOrder.RGB)
            name, report = apply_last_active(store, tl.tracks, tl)
            self.assertEqual(name, "Mix")
            self.assertTrue(report.ok)
            self.assertEqual(tl.color_of(tl.tracks[0]), GREEN)
            self.assertIsNone(tl.color_of(tl.tracks[1]))

    def test_missing_pointer_or_config_writes_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = ConfigStore(Path(td))
            tl = TrackList.build([("Lead Vox", 0)])
            name, report = apply_last_active(store, tl.tracks, tl)
            self.assertIsNone(name)
            self.assertEqual(report.status, "no_rules")

            store.save_last_active("Gone")
            name, report = apply_last_active(store, tl.tracks, tl)
            self.assertEqual(name, "Gone")
            self.assertEqual(report.status, "no_rules")
            self.assertEqual(tl.native_color(tl.tracks[0]), 0)

    def test_corrupt_config_writes_nothing(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            base = Path(td)
            store = ConfigStore(base)
            store.save_last_active("Broken")
            (base / "ReaGradient_Broken.cfg").write_text("{ {keyword = 'vox', ", encoding="utf-8")
            tl = TrackList.build([("Vox", 0)])
            with redirect_stderr(io.StringIO()):
                _, report = apply_last_active(store, tl.tracks, tl)
            self.assertEqual(report.status, "no_rules")
            self.assertEqual(report.writes, [])
            self.assertEqual(tl.native_color(tl.tracks[0]), 0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
