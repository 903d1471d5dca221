from __future__ import annotations

import random

from .models import Room, TurnSlot


def start_order(room: Room, rng: random.Random | None = None) -> list[TurnSlot]:
    """Shuffle the present players into a fresh 1-based turn order."""
    rng = rng or random.Random()
    players = list(room.players.items())
    rng.shuffle(players)
    room.order = [TurnSlot(id=pid, name=name, order=i + 1) for i, (pid, name) in enumerate(players)]
    room.turn_index = 0
    return room.order


def current_turn(room: Room) -> TurnSlot | None:
    if 0 <= room.turn_index < len(room.order):
        return room.order[room.turn_index]
    return None


def is_turn_of(room: Room, socket_id: str) -> bool:
    slot = current_turn(room)
    return slot is not None and slot.id == socket_id


def advance(room: Room) -> TurnSlot | None:
    """Move the cursor on. Returns the next player, or None once the round is done."""
    if room.turn_index < len(room.order):
        room.turn_index += 1
    return current_turn(room)


def clear(room: Room) -> None:
    room.order = []
    room.turn_index = 0
