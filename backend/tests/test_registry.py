import random

from stopclip.game.registry import RoomRegistry


ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def test_codes_use_unambiguous_alphabet():
    registry = RoomRegistry(ALPHABET, 4, random.Random(9))
    for _ in range(50):
        code = registry.new_code()
        assert len(code) == 4
        assert set(code) <= set(ALPHABET)
        assert not set(code) & set("IO01")


def test_create_get_and_remove():
    registry = RoomRegistry(ALPHABET, 4, random.Random(9))
    room = registry.create()
    assert registry.get(room.code) is room
    assert registry.get("ZZZZZ") is None
    assert len(registry) == 1
    assert registry.remove(room.code)
    assert not registry.remove(room.code)
    assert registry.rooms() == []
