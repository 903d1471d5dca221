from stopclip.game import scoring
from stopclip.game.models import Attempt, Room, RoundState


def _attempt(name, t, duration=7.0):
    return Attempt(id=f"sid-{name}", name=name, time=t, duration=duration)


def test_evaluate_sorts_by_deviation_including_overshoots():
    attempts = [_attempt("a", 3.0), _attempt("b", 5.6), _attempt("c", 4.7)]
    results = scoring.evaluate(5.0, attempts)
    deltas = [r["delta"] for r in results]
    assert deltas == sorted(deltas)
    assert [r["name"] for r in results] == ["c", "b", "a"]


def test_overshoot_scores_nothing_even_when_closest():
    attempts = [_attempt("over", 5.01), _attempt("under", 4.0)]
    awards = scoring.score(5.0, attempts)
    assert awards == [("under", 2, 1.0)]


def test_only_two_places_are_awarded():
    attempts = [_attempt(n, t) for n, t in [("a", 1.0), ("b", 4.9), ("c", 3.0), ("d", 4.5)]]
    awards = scoring.score(5.0, attempts)
    assert [(name, points) for name, points, _ in awards] == [("b", 2), ("d", 1)]


def test_exact_limit_is_eligible():
    awards = scoring.score(4.5, [_attempt("a", 4.5)])
    assert awards == [("a", 2, 0.0)]


def test_apply_scoring_accumulates_and_tracks_best_delta():
    room = Room(code="ABCD")
    room.scores = {"a": 3}
    room.best_delta = {"a": 0.1}
    room.current = RoundState(clip_file="x.mp4", label="X", limit=5.0,
                              attempts=[_attempt("a", 4.0), _attempt("b", 4.8)])
    scoring.apply_scoring(room)
    assert room.scores == {"a": 4, "b": 2}
    assert room.best_delta["a"] == 0.1
    assert abs(room.best_delta["b"] - 0.2) < 1e-9


def test_round_summary_uses_first_attempt_duration():
    room = Room(code="ABCD", round=2, rounds_total=3)
    room.current = RoundState(clip_file="x.mp4", label="X", limit=4.5,
                              attempts=[_attempt("a", 4.0, duration=9.5), _attempt("b", 6.0, duration=1.0)])
    summary = scoring.round_summary(room)
    assert summary["limit"] == 4.5
    assert summary["duration"] == 9.5
    assert summary["round"] == 2 and summary["roundsTotal"] == 3
    assert [r["name"] for r in summary["results"]] == ["a", "b"]


def test_round_summary_without_attempts():
    room = Room(code="ABCD")
    room.current = RoundState(clip_file="x.mp4", label="X", limit=4.5)
    assert scoring.round_summary(room)["duration"] == 5.0


def test_podium_includes_departed_players_and_keeps_tie_order():
    room = Room(code="ABCD")
    room.roster = {"s1": "ann", "s2": "bob", "s3": "cid", "s4": "ann"}
    room.players = {"s2": "bob"}
    room.scores = {"ann": 2, "bob": 3, "cid": 2}
    room.best_delta = {"ann": 0.5, "bob": 0.1, "cid": 0.3}
    ranking = scoring.podium(room)
    assert [r["name"] for r in ranking] == ["bob", "ann", "cid"]
    assert ranking[0] == {"name": "bob", "score": 3, "bestDelta": 0.1}


def test_podium_best_delta_absent_when_never_scored():
    room = Room(code="ABCD", roster={"s1": "zed"})
    assert scoring.podium(room) == [{"name": "zed", "score": 0, "bestDelta": None}]
