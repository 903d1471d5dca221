from __future__ import annotations

import random
from threading import RLock

from .models import Room


class RoomRegistry:
    """Short code -> Room, for the lifetime of the process.

    Codes are not checked for collisions; with four characters from a 32-letter
    alphabet the space is large enough for the handful of rooms a single
    process hosts.
    """

    def __init__(self, alphabet: str, length: int = 4, rng: random.Random | None = None) -> None:
        self.alphabet = alphabet
        self.length = length
        self._rng = rng or random.Random()
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}

    def new_code(self) -> str:
        return "".join(self._rng.choice(self.alphabet) for _ in range(self.length))

    def create(self) -> Room:
        with self._lock:
            room = Room(code=self.new_code())
            self._rooms[room.code] = room
            return room

    def get(self, code: str) -> Room | None:
        with self._lock:
            return self._rooms.get(code)

    def remove(self, code: str) -> bool:
        with self._lock:
            return self._rooms.pop(code, None) is not None

    def rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)
