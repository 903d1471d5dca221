from __future__ import annotations

import logging
import random
import time
from dataclasses import asdict, dataclass
from threading import RLock
from typing import Any, Mapping

from . import authority, phases, scoring, turns
from .clips import build_playlist, load_clips
from .models import Attempt, Clip, Room, RoundState
from .registry import RoomRegistry


logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Outbound:
    """One message to send: ``to`` is a room code (broadcast) or a socket id (unicast)."""

    event: str
    payload: Any
    to: str


def _reject(sid: str, error: str, message: str) -> list[Outbound]:
    logger.debug("[rejected] sid=%s error=%s", sid, error)
    return [Outbound("room:error", {"error": error, "message": message}, sid)]


class GameService:
    """Room and round state machine.

    Every public method runs to completion under one lock and returns the
    messages the transport layer should deliver, in order.
    """

    def __init__(
        self,
        clips: list[Clip],
        registry: RoomRegistry,
        rng: random.Random | None = None,
        max_previews: int = 2,
        max_rounds: int = 50,
        turn_timeout_sec: int = 0,
        room_idle_ttl_sec: int = 0,
    ) -> None:
        if not clips:
            raise ValueError("clip pool must not be empty")
        self.clips = list(clips)
        self.registry = registry
        self.rng = rng or random.Random()
        self.max_previews = max_previews
        self.max_rounds = max_rounds
        self.turn_timeout_sec = turn_timeout_sec
        self.room_idle_ttl_sec = room_idle_ttl_sec
        self._lock = RLock()
        # socket id -> codes of every room it created or joined
        self._joined: dict[str, set[str]] = {}

    @classmethod
    def from_config(cls, config: Mapping[str, Any], rng: random.Random | None = None) -> "GameService":
        rng = rng or random.Random()
        registry = RoomRegistry(
            alphabet=config.get("ROOM_CODE_ALPHABET", "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"),
            length=int(config.get("ROOM_CODE_LENGTH", 4)),
            rng=rng,
        )
        return cls(
            clips=load_clips(config.get("CLIPS_FILE")),
            registry=registry,
            rng=rng,
            max_previews=int(config.get("MAX_PREVIEWS", 2)),
            max_rounds=int(config.get("MAX_ROUNDS", 50)),
            turn_timeout_sec=int(config.get("TURN_TIMEOUT_SEC", 0)),
            room_idle_ttl_sec=int(config.get("ROOM_IDLE_TTL_SEC", 0)),
        )

    # ---- views ----

    def get_room(self, code: str) -> Room | None:
        return self.registry.get(code)

    def joined_codes(self, sid: str) -> set[str]:
        with self._lock:
            return set(self._joined.get(sid, ()))

    def current_clip(self, room: Room) -> Clip:
        idx = room.clip_order[room.clip_ptr] if room.clip_ptr < len(room.clip_order) else 0
        return self.clips[idx]

    def lobby_payload(self, room: Room) -> dict:
        return {
            "players": [{"id": pid, "name": name} for pid, name in room.players.items()],
            "code": room.code,
            "creatorId": room.creator_id,
        }

    def round_payload(self, room: Room) -> dict:
        current = room.current
        return {
            "clip": current.clip_file if current else None,
            "label": current.label if current else None,
            "order": [asdict(slot) for slot in room.order],
            "round": room.round,
            "roundsTotal": room.rounds_total,
            "limitPublic": current.limit if current else None,
            "currentScores": dict(room.scores),
        }

    def room_public_state(self, room: Room) -> dict:
        with self._lock:
            payload = self.lobby_payload(room)
            payload.update(
                {
                    "round": room.round,
                    "roundsTotal": room.rounds_total,
                    "phase": room.current.phase if room.current else None,
                    "previewsUsed": room.previews_used,
                    "order": [asdict(slot) for slot in room.order],
                    "scores": dict(room.scores),
                    "gameOver": room.game_over,
                }
            )
            return payload

    def _lobby(self, room: Room) -> Outbound:
        return Outbound("lobby:state", self.lobby_payload(room), room.code)

    def _turn_start(self, room: Room, now: int | None = None) -> list[Outbound]:
        slot = turns.current_turn(room)
        if slot is None or room.current is None:
            return []
        room.current.turn_started_at_ms = now if now is not None else now_ms()
        return [Outbound("turn:start", {"playerId": slot.id, "playerName": slot.name}, room.code)]

    # ---- lobby ----

    def create_room(self, sid: str, name: str, rounds_total: int) -> tuple[Room, list[Outbound]]:
        with self._lock:
            room = self.registry.create()
            room.creator_id = sid
            room.rounds_total = max(1, min(int(rounds_total or 1), self.max_rounds))
            room.clip_order = build_playlist(len(self.clips), room.rounds_total, self.rng)
            room.clip_ptr = 0
            self._add_player(room, sid, name)
            logger.info("[room-created] code=%s rounds=%d creator=%s", room.code, room.rounds_total, sid)
            return room, [
                Outbound("room:created", {"code": room.code}, sid),
                self._lobby(room),
            ]

    def join_room(self, sid: str, code: str, name: str) -> tuple[Room | None, list[Outbound]]:
        with self._lock:
            if not code:
                return None, _reject(sid, "missing_code", "Room code is missing.")
            room = self.registry.get(code)
            if room is None:
                return None, _reject(sid, "room_not_found", "Room not found.")
            self._add_player(room, sid, name)
            logger.info("[room-joined] code=%s sid=%s name=%s", code, sid, name)
            return room, [
                Outbound("room:joined", {"code": room.code}, sid),
                self._lobby(room),
            ]

    def _add_player(self, room: Room, sid: str, name: str) -> None:
        room.players[sid] = name
        room.roster[sid] = name
        room.last_empty_at_ms = None
        self._joined.setdefault(sid, set()).add(room.code)

    def claim_authority(self, sid: str, code: str) -> list[Outbound]:
        with self._lock:
            room = self.registry.get(code)
            if room is None:
                return []
            granted, changed = authority.claim(room, sid)
            if not granted:
                return []
            out = [Outbound("authority:granted", {"code": room.code}, sid)]
            if changed:
                logger.info("[authority] code=%s new_creator=%s", code, sid)
                out.append(self._lobby(room))
            return out

    def lobby_state(self, code: str) -> list[Outbound]:
        with self._lock:
            room = self.registry.get(code)
            if room is None:
                return []
            return [self._lobby(room)]

    def _controller_room(self, sid: str, code: str, action: str) -> tuple[Room | None, list[Outbound]]:
        room = self.registry.get(code)
        if room is None:
            return None, []
        if not authority.is_creator(room, sid):
            return None, _reject(sid, "only_creator", f"Only the room creator can {action}.")
        return room, []

    def open_game(self, sid: str, code: str) -> list[Outbound]:
        with self._lock:
            room, out = self._controller_room(sid, code, "open the game")
            if room is None:
                return out
            return [Outbound("game:opened", {"code": room.code}, room.code)]

    # ---- rounds ----

    def prepare_round(self, room: Room, broadcast: bool = True) -> list[Outbound]:
        """Create the round state for ``room.round`` unless one already exists."""
        with self._lock:
            if room.current is not None:
                return []
            clip = self.current_clip(room)
            room.previews_used = 0
            room.current = RoundState(clip_file=clip.file, label=clip.label, limit=clip.limit)
            logger.info("[round-prepared] code=%s round=%d clip=%s", room.code, room.round, clip.file)
            if not broadcast:
                return []
            return [Outbound("round:prepared", self.round_payload(room), room.code)]

    def ready_for_round(self, code: str) -> list[Outbound]:
        with self._lock:
            room = self.registry.get(code)
            if room is None:
                return []
            return self.prepare_round(room)

    def start_preview(self, sid: str, code: str) -> list[Outbound]:
        with self._lock:
            room, out = self._controller_room(sid, code, "start the preview")
            if room is None:
                return out
            out = self.prepare_round(room)
            if room.previews_used >= self.max_previews:
                return out + _reject(sid, "previews_exhausted", f"All {self.max_previews} previews have been used.")
            if not phases.transition(room.current, "preview"):
                return out + _reject(sid, "invalid_phase", "The clip cannot be previewed now.")
            room.previews_used += 1
            out.append(
                Outbound(
                    "round:preview_started",
                    {"previewsUsed": room.previews_used, "previewsLeft": self.max_previews - room.previews_used},
                    room.code,
                )
            )
            return out

    def start_round(self, sid: str, code: str, now: int | None = None) -> list[Outbound]:
        with self._lock:
            room, out = self._controller_room(sid, code, "start the round")
            if room is None:
                return out
            out = self.prepare_round(room)
            if not phases.can_transition(room.current, "playing"):
                return out + _reject(sid, "invalid_phase", "The round has already started.")
            turns.start_order(room, self.rng)
            phases.transition(room.current, "playing")
            logger.info("[round-started] code=%s round=%d players=%d", room.code, room.round, len(room.order))
            out.append(Outbound("round:prepared", self.round_payload(room), room.code))
            out.extend(self._turn_start(room, now))
            return out

    def submit_stop(self, sid: str, code: str, stop_time: float, duration: float, now: int | None = None) -> list[Outbound]:
        with self._lock:
            room = self.registry.get(code)
            if room is None or room.current is None or room.current.phase != "playing":
                return []
            if not turns.is_turn_of(room, sid):
                return []
            name = room.players.get(sid, "???")
            room.current.attempts.append(Attempt(id=sid, name=name, time=stop_time, duration=duration))
            out = [Outbound("turn:stopped", {"playerId": sid, "time": stop_time}, room.code)]
            return out + self._next_turn(room, now)

    def _next_turn(self, room: Room, now: int | None = None) -> list[Outbound]:
        if turns.advance(room) is not None:
            return self._turn_start(room, now)

        phases.transition(room.current, "results")
        room.current.turn_started_at_ms = None
        awards = scoring.apply_scoring(room)
        logger.info("[round-scored] code=%s round=%d awards=%s", room.code, room.round, awards)
        return [Outbound("round:summary", scoring.round_summary(room), room.code)]

    def open_results(self, sid: str, code: str) -> list[Outbound]:
        with self._lock:
            room, out = self._controller_room(sid, code, "open the results")
            if room is None:
                return out
            return [Outbound("results:opened", {"code": room.code}, room.code)]

    def request_results(self, sid: str, code: str) -> list[Outbound]:
        with self._lock:
            room = self.registry.get(code)
            if room is None or room.current is None:
                return []
            return [Outbound("round:summary", scoring.round_summary(room), sid)]

    def advance_round(self, sid: str, code: str) -> list[Outbound]:
        with self._lock:
            room, out = self._controller_room(sid, code, "continue")
            if room is None:
                return out
            if room.round >= room.rounds_total:
                if not room.game_over:
                    logger.info("[game-over] code=%s rounds=%d", room.code, room.rounds_total)
                room.game_over = True
                return [Outbound("game:over", {"podium": scoring.podium(room)}, room.code)]

            room.round += 1
            room.clip_ptr = min(room.clip_ptr + 1, len(room.clip_order) - 1)
            room.current = None
            room.previews_used = 0
            turns.clear(room)
            logger.info("[round-advanced] code=%s round=%d clip_ptr=%d", room.code, room.round, room.clip_ptr)
            return [Outbound("round:advanced", {"code": room.code, "round": room.round}, room.code)]

    def request_final(self, sid: str, code: str) -> list[Outbound]:
        with self._lock:
            room = self.registry.get(code)
            if room is None:
                return []
            return [Outbound("game:final_ranking", {"podium": scoring.podium(room)}, sid)]

    # ---- connection lifecycle ----

    def disconnect(self, sid: str, now: int | None = None) -> list[Outbound]:
        """Drop the connection from every room it is in. The creator id is kept on purpose."""
        with self._lock:
            out: list[Outbound] = []
            for code in sorted(self._joined.pop(sid, ())):
                room = self.registry.get(code)
                if room is None or sid not in room.players:
                    continue
                del room.players[sid]
                if not room.players:
                    room.last_empty_at_ms = now if now is not None else now_ms()
                logger.info("[left] code=%s sid=%s remaining=%d", code, sid, len(room.players))
                out.append(self._lobby(room))
            return out

    # ---- sweeper ----

    def expire_turns(self, now: int | None = None) -> list[Outbound]:
        """Skip players who have held their turn past ``turn_timeout_sec``."""
        if self.turn_timeout_sec <= 0:
            return []
        now = now if now is not None else now_ms()
        limit_ms = self.turn_timeout_sec * 1000
        out: list[Outbound] = []
        with self._lock:
            for room in self.registry.rooms():
                current = room.current
                if current is None or current.phase != "playing" or current.turn_started_at_ms is None:
                    continue
                if now - current.turn_started_at_ms < limit_ms:
                    continue
                slot = turns.current_turn(room)
                if slot is None:
                    continue
                logger.info("[turn-timeout] code=%s sid=%s", room.code, slot.id)
                out.append(Outbound("turn:skipped", {"playerId": slot.id, "playerName": slot.name}, room.code))
                out.extend(self._next_turn(room, now))
        return out

    def expire_rooms(self, now: int | None = None) -> list[str]:
        """Remove rooms that have been empty longer than ``room_idle_ttl_sec``."""
        if self.room_idle_ttl_sec <= 0:
            return []
        now = now if now is not None else now_ms()
        ttl_ms = self.room_idle_ttl_sec * 1000
        removed: list[str] = []
        with self._lock:
            for room in self.registry.rooms():
                if room.players or room.last_empty_at_ms is None:
                    continue
                if now - room.last_empty_at_ms >= ttl_ms:
                    self.registry.remove(room.code)
                    removed.append(room.code)
                    logger.info("[room-expired] code=%s", room.code)
        return removed
