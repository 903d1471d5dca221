from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Iterable

from flask import request
from flask_socketio import SocketIO, join_room

from ..game.service import GameService, Outbound
from . import events


logger = logging.getLogger(__name__)


def register_socketio_handlers(socketio: SocketIO, service: GameService, sweep_interval: float = 1.0) -> None:
    sweeper = {"running": False}
    sweeper_lock = Lock()

    def _dispatch(messages: Iterable[Outbound]) -> None:
        for msg in messages:
            socketio.emit(msg.event, msg.payload, to=msg.to)

    def _ensure_sweeper() -> None:
        if service.turn_timeout_sec <= 0 and service.room_idle_ttl_sec <= 0:
            return
        with sweeper_lock:
            if sweeper["running"]:
                return
            sweeper["running"] = True

        def _runner() -> None:
            while True:
                _dispatch(service.expire_turns())
                service.expire_rooms()
                socketio.sleep(sweep_interval)

        socketio.start_background_task(_runner)
        logger.info(
            "[sweeper-started] turn_timeout=%ss idle_ttl=%ss",
            service.turn_timeout_sec,
            service.room_idle_ttl_sec,
        )

    @socketio.on("room:create")
    def room_create(data: Any):
        msg = events.parse_create(data, service.max_rounds)
        room, out = service.create_room(request.sid, msg.name, msg.rounds_total)
        join_room(room.code)
        _dispatch(out)
        _ensure_sweeper()

    @socketio.on("room:join")
    def room_join(data: Any):
        msg = events.parse_join(data)
        room, out = service.join_room(request.sid, msg.code, msg.name)
        if room is not None:
            join_room(room.code)
        _dispatch(out)

    @socketio.on("authority:claim")
    def authority_claim(data: Any):
        msg = events.parse_request(data)
        _dispatch(service.claim_authority(request.sid, msg.code))

    @socketio.on("lobby:get")
    def lobby_get(data: Any):
        msg = events.parse_request(data)
        _dispatch(service.lobby_state(msg.code))

    @socketio.on("game:open")
    def game_open(data: Any):
        msg = events.parse_request(data)
        _dispatch(service.open_game(request.sid, msg.code))

    @socketio.on("round:ready")
    def round_ready(data: Any):
        msg = events.parse_request(data)
        _dispatch(service.ready_for_round(msg.code))

    @socketio.on("round:preview")
    def round_preview(data: Any):
        msg = events.parse_request(data)
        _dispatch(service.start_preview(request.sid, msg.code))

    @socketio.on("round:start")
    def round_start(data: Any):
        msg = events.parse_request(data)
        _dispatch(service.start_round(request.sid, msg.code))

    @socketio.on("turn:stop")
    def turn_stop(data: Any):
        msg = events.parse_stop(data)
        _dispatch(service.submit_stop(request.sid, msg.code, msg.time, msg.duration))

    @socketio.on("results:open")
    def results_open(data: Any):
        msg = events.parse_request(data)
        _dispatch(service.open_results(request.sid, msg.code))

    @socketio.on("results:get")
    def results_get(data: Any):
        msg = events.parse_request(data)
        _dispatch(service.request_results(request.sid, msg.code))

    @socketio.on("round:next")
    def round_next(data: Any):
        msg = events.parse_request(data)
        _dispatch(service.advance_round(request.sid, msg.code))

    @socketio.on("game:final")
    def game_final(data: Any):
        msg = events.parse_request(data)
        _dispatch(service.request_final(request.sid, msg.code))

    @socketio.on("disconnect")
    def on_disconnect(*_args):
        # creator_id survives the disconnect; authority:claim hands it over later
        _dispatch(service.disconnect(request.sid))
