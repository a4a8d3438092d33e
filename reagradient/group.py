# reagradient/group.py
from __future__ import annotations

from typing import List, Optional, Sequence

from .model import Track


def _position(root: Track, ordered_tracks: Sequence[Track]) -> Optional[int]:
    # Fast path: Track.index is the project position.
    i = root.index
    if isinstance(i, int) and 0 <= i < len(ordered_tracks) and ordered_tracks[i] == root:
        return i
    for pos, t in enumerate(ordered_tracks):
        if t == root:
            return pos
    return None


def resolve_group(root: Track, ordered_tracks: Sequence[Track]) -> List[Track]:
    """Return `root` followed by the tracks inside its folder.

    Only a root whose marker opens exactly one level gathers children; any
    other root is a group of one. The track that closes the folder is part
    of the group. A root not present in `ordered_tracks` yields [].
    """
    pos = _position(root, ordered_tracks)
    if pos is None:
        return []

    out: List[Track] = [root]
    if root.folder_depth != 1:
        return out

    depth = 0
    for t in ordered_tracks[pos + 1:]:
        depth += t.folder_depth
        out.append(t)
        if depth < 0:
            break
    return out
