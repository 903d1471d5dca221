"""Inbound Socket.IO payloads, coerced into typed messages.

Clients send either an object or, for code-only requests, the bare room code.
Nothing past this module handles raw payloads.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


DEFAULT_NAME = "Anonyme"
MAX_NAME_LENGTH = 24


@dataclass(frozen=True)
class CreateRoom:
    name: str
    rounds_total: int


@dataclass(frozen=True)
class JoinRoom:
    code: str
    name: str


@dataclass(frozen=True)
class RoomRequest:
    code: str


@dataclass(frozen=True)
class SubmitStop:
    code: str
    time: float
    duration: float


def _as_dict(data: Any) -> dict:
    return data if isinstance(data, dict) else {}


def normalize_code(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip().upper()


def normalize_name(raw: Any) -> str:
    n = "" if raw is None else str(raw)
    n = "".join(ch for ch in n if ord(ch) >= 32).strip()
    return n[:MAX_NAME_LENGTH] or DEFAULT_NAME


def to_seconds(raw: Any) -> float:
    if isinstance(raw, bool):
        return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def to_rounds(raw: Any, max_rounds: int) -> int:
    try:
        value = int(float(raw))
    except (TypeError, ValueError, OverflowError):
        value = 1
    return max(1, min(value, max_rounds))


def parse_create(data: Any, max_rounds: int) -> CreateRoom:
    payload = _as_dict(data)
    return CreateRoom(
        name=normalize_name(payload.get("name")),
        rounds_total=to_rounds(payload.get("roundsTotal"), max_rounds),
    )


def parse_join(data: Any) -> JoinRoom:
    payload = _as_dict(data)
    return JoinRoom(code=normalize_code(payload.get("code")), name=normalize_name(payload.get("name")))


def parse_request(data: Any) -> RoomRequest:
    if isinstance(data, dict):
        return RoomRequest(code=normalize_code(data.get("code")))
    return RoomRequest(code=normalize_code(data))


def parse_stop(data: Any) -> SubmitStop:
    payload = _as_dict(data)
    return SubmitStop(
        code=normalize_code(payload.get("code")),
        time=to_seconds(payload.get("time")),
        duration=to_seconds(payload.get("duration")),
    )
