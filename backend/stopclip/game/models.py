from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


Phase = Literal["idle", "preview", "playing", "results"]


@dataclass(frozen=True)
class Clip:
    file: str
    label: str
    limit: float


@dataclass
class TurnSlot:
    id: str
    name: str
    order: int


@dataclass
class Attempt:
    id: str
    name: str
    time: float
    duration: float


@dataclass
class RoundState:
    clip_file: str
    label: str
    limit: float
    attempts: list[Attempt] = field(default_factory=list)
    phase: Phase = "idle"
    turn_started_at_ms: int | None = None


@dataclass
class Room:
    code: str
    creator_id: str | None = None
    # socket id -> display name (present connections only)
    players: dict[str, str] = field(default_factory=dict)
    # socket id -> last known display name, never pruned
    roster: dict[str, str] = field(default_factory=dict)
    order: list[TurnSlot] = field(default_factory=list)
    round: int = 1
    rounds_total: int = 1
    clip_order: list[int] = field(default_factory=list)
    clip_ptr: int = 0
    previews_used: int = 0
    turn_index: int = 0
    current: RoundState | None = None
    scores: dict[str, int] = field(default_factory=dict)
    best_delta: dict[str, float] = field(default_factory=dict)
    game_over: bool = False
    last_empty_at_ms: int | None = None
