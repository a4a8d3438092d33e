"""Track list adapter backed by a JSON track file.

The host application owns the real track graph. This adapter stands in for
it on the command line: it loads an ordered track list, takes color writes
from the rule engine, and saves the result.

Track file format:
  {"tracks": [{"name": "Drums", "folder_depth": 1, "color": 0}, ...]}

`color` is the host's custom-color slot: 0 for "no custom color", otherwise
the packed color in the host channel order with CUSTOM_COLOR_FLAG set.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .color import ChannelOrder, from_native, native_channel_order, to_native
from .model import Color, Track


class TrackFileError(ValueError):
    """Raised when a track file cannot be read or does not fit the format."""


def _as_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    return None


class TrackList:
    def __init__(
        self,
        tracks: Sequence[Track],
        colors: Optional[Dict[int, int]] = None,
        *,
        channel_order: Optional[ChannelOrder] = None,
    ) -> None:
        self._tracks: Tuple[Track, ...] = tuple(tracks)
        self._colors: Dict[int, int] = dict(colors or {})
        self.channel_order = channel_order if channel_order is not None else native_channel_order()

    @classmethod
    def build(cls, entries: Iterable[Tuple[str, int]], **kwargs: Any) -> "TrackList":
        """TrackList from (name, folder_depth) pairs in project order."""
        tracks = [Track(index=i, name=n, folder_depth=d) for i, (n, d) in enumerate(entries)]
        return cls(tracks, **kwargs)

    def __len__(self) -> int:
        return len(self._tracks)

    @property
    def tracks(self) -> Tuple[Track, ...]:
        return self._tracks

    def is_valid(self, track: Track) -> bool:
        i = track.index
        return isinstance(i, int) and 0 <= i < len(self._tracks) and self._tracks[i] == track

    def set_color(self, track: Track, color: Color) -> None:
        if not self.is_valid(track):
            raise ValueError(f"unknown track: {track!r}")
        if not color.is_valid():
            raise ValueError(f"invalid color: {color!r}")
        self._colors[track.index] = to_native(color, self.channel_order)

    def native_color(self, track: Track) -> int:
        return self._colors.get(track.index, 0)

    def color_of(self, track: Track) -> Optional[Color]:
        return from_native(self.native_color(track), self.channel_order)

    # --- JSON -----------------------------------------------------------------

    @classmethod
    def from_json_obj(cls, obj: Any, *, channel_order: Optional[ChannelOrder] = None) -> "TrackList":
        if isinstance(obj, dict):
            raw_tracks = obj.get("tracks")
        else:
            raw_tracks = obj
        if not isinstance(raw_tracks, list):
            raise TrackFileError("track file must be a list of tracks or an object with a 'tracks' list")

        tracks: List[Track] = []
        colors: Dict[int, int] = {}
        for i, raw in enumerate(raw_tracks):
            if not isinstance(raw, dict):
                raise TrackFileError(f"tracks[{i}] must be an object")
            name = raw.get("name", "")
            if not isinstance(name, str):
                raise TrackFileError(f"tracks[{i}].name must be a string")
            depth = _as_int(raw.get("folder_depth", 0))
            if depth is None:
                raise TrackFileError(f"tracks[{i}].folder_depth must be an integer")
            color = _as_int(raw.get("color", 0))
            if color is None or color < 0:
                raise TrackFileError(f"tracks[{i}].color must be a non-negative integer")
            tracks.append(Track(index=i, name=name, folder_depth=depth))
            if color:
                colors[i] = color
        return cls(tracks, colors, channel_order=channel_order)

    def to_json_obj(self) -> Dict[str, Any]:
        out: List[Dict[str, Any]] = []
        for t in self._tracks:
            out.append({"name": t.name, "folder_depth": t.folder_depth, "color": self.native_color(t)})
        return {"tracks": out}

    @classmethod
    def load(cls, path: Path, *, channel_order: Optional[ChannelOrder] = None) -> "TrackList":
        try:
            obj = json.loads(Path(path).read_text(encoding="utf-8", errors="replace"))
        except OSError as e:
            raise TrackFileError(f"cannot read track file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise TrackFileError(f"track file {path} is not valid JSON: {e}") from e
        return cls.from_json_obj(obj, channel_order=channel_order)

    def save(self, path: Path) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(
            json.dumps(self.to_json_obj(), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
            newline="\n",
        )


__all__ = ["TrackFileError", "TrackList"]
