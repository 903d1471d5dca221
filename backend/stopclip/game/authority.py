from __future__ import annotations

from .models import Room


def creator_present(room: Room) -> bool:
    return bool(room.creator_id) and room.creator_id in room.players


def is_creator(room: Room, socket_id: str) -> bool:
    return bool(socket_id) and socket_id == room.creator_id


def claim(room: Room, socket_id: str) -> tuple[bool, bool]:
    """Try to take control of the room.

    Returns ``(granted, changed)``. Only a player currently in the room can
    claim, and control only moves when the recorded creator is no longer
    there; a disconnect alone never clears it.
    """
    if socket_id not in room.players:
        return False, False
    if not creator_present(room):
        room.creator_id = socket_id
        return True, True
    if room.creator_id == socket_id:
        return True, False
    return False, False
