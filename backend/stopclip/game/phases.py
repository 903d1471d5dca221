from __future__ import annotations

from .models import Phase, RoundState


TRANSITIONS: dict[str, frozenset[str]] = {
    "idle": frozenset({"preview", "playing"}),
    "preview": frozenset({"preview", "playing"}),
    "playing": frozenset({"results"}),
    "results": frozenset(),
}


def can_transition(current: RoundState, target: Phase) -> bool:
    return target in TRANSITIONS.get(current.phase, frozenset())


def transition(current: RoundState, target: Phase) -> bool:
    if not can_transition(current, target):
        return False
    current.phase = target
    return True
