"""Round scoring and final ranking.

Attempts are ranked by their distance to the clip's limit. Only attempts that
stop at or before the limit can earn points: first place gets 2, second gets 1,
everyone else (including every overshoot) gets nothing.
"""

from __future__ import annotations

from .models import Attempt, Room


POINTS_BY_RANK: tuple[int, ...] = (2, 1)


def deviation(attempt: Attempt, limit: float) -> float:
    return abs((attempt.time or 0.0) - limit)


def evaluate(limit: float, attempts: list[Attempt]) -> list[dict]:
    """All attempts, closest to the limit first, eligible or not."""
    results = [
        {
            "id": a.id,
            "name": a.name,
            "time": a.time,
            "duration": a.duration,
            "delta": deviation(a, limit),
        }
        for a in attempts
    ]
    results.sort(key=lambda r: r["delta"])
    return results


def score(limit: float, attempts: list[Attempt]) -> list[tuple[str, int, float]]:
    """Return ``(name, points, delta)`` for every attempt that earns points."""
    eligible = [a for a in attempts if (a.time or 0.0) <= limit]
    eligible.sort(key=lambda a: deviation(a, limit))

    awards: list[tuple[str, int, float]] = []
    for attempt, points in zip(eligible, POINTS_BY_RANK):
        awards.append((attempt.name, points, deviation(attempt, limit)))
    return awards


def apply_scoring(room: Room) -> list[tuple[str, int, float]]:
    if room.current is None:
        return []

    awards = score(room.current.limit, room.current.attempts)
    for name, points, delta in awards:
        room.scores[name] = room.scores.get(name, 0) + points
        prev = room.best_delta.get(name)
        room.best_delta[name] = delta if prev is None else min(prev, delta)
    return awards


def representative_duration(limit: float, attempts: list[Attempt]) -> float:
    if attempts:
        return attempts[0].duration
    return max(limit, 1.0) + 0.5


def round_summary(room: Room) -> dict:
    current = room.current
    limit = current.limit if current else 0.0
    attempts = current.attempts if current else []
    return {
        "limit": limit,
        "results": evaluate(limit, attempts),
        "duration": representative_duration(limit, attempts),
        "round": room.round,
        "roundsTotal": room.rounds_total,
    }


def podium(room: Room) -> list[dict]:
    """Everyone ever seen in the room, highest cumulative score first.

    Equal scores keep roster order.
    """
    names: list[str] = []
    for name in room.roster.values():
        if name not in names:
            names.append(name)

    ranking = [
        {
            "name": n,
            "score": room.scores.get(n, 0),
            "bestDelta": room.best_delta.get(n),
        }
        for n in names
    ]
    ranking.sort(key=lambda r: r["score"], reverse=True)
    return ranking
