from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, current_app, jsonify

from ..realtime.events import normalize_code

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    service = current_app.extensions["stopclip"]
    room = service.get_room(normalize_code(code))
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(service.room_public_state(room))


@bp.get("/clips")
def get_clips():
    service = current_app.extensions["stopclip"]
    return jsonify({"clips": [asdict(c) for c in service.clips]})
