from __future__ import annotations

import json
import random
from pathlib import Path

from .models import Clip


# Red bar on the clip = limit, in seconds.
DEFAULT_CLIPS: list[Clip] = [
    Clip(file="clipsite/clip1.mp4", label="Clip 1", limit=4.5),
    Clip(file="clipsite/clip2.mp4", label="Clip 2", limit=5.11),
]


def load_clips(path: str | Path | None) -> list[Clip]:
    """Read a clip pool from a JSON list of ``{file, label, limit}`` objects.

    Falls back to :data:`DEFAULT_CLIPS` when no path is configured.
    """
    if not path:
        return list(DEFAULT_CLIPS)

    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list) or not raw:
        raise ValueError(f"clip pool in {path} must be a non-empty list")

    clips: list[Clip] = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("file"):
            raise ValueError(f"invalid clip entry in {path}: {item!r}")
        clips.append(
            Clip(
                file=str(item["file"]),
                label=str(item.get("label") or item["file"]),
                limit=float(item.get("limit", 0)),
            )
        )
    return clips


def build_playlist(pool_size: int, n: int, rng: random.Random | None = None) -> list[int]:
    """Return ``n`` clip indices made of back-to-back shuffles of the pool.

    Each full block of ``pool_size`` entries is a permutation, so a clip never
    comes up twice inside a block, but may repeat across a block boundary.
    """
    if pool_size < 1:
        raise ValueError("pool_size must be >= 1")

    rng = rng or random.Random()
    order: list[int] = []
    while len(order) < n:
        block = list(range(pool_size))
        rng.shuffle(block)
        order.extend(block)
    return order[:n]
