import math

from stopclip.realtime import events


def test_stop_values_are_coerced_to_non_negative_floats():
    assert events.parse_stop({"code": " abcd ", "time": "4.25", "duration": 8}) == events.SubmitStop("ABCD", 4.25, 8.0)
    for bad in (None, "", "abc", math.nan, math.inf, -2, [1], True):
        msg = events.parse_stop({"code": "ABCD", "time": bad, "duration": bad})
        assert msg.time == 0.0 and msg.duration == 0.0


def test_request_accepts_bare_code_or_object():
    assert events.parse_request("wxyz").code == "WXYZ"
    assert events.parse_request({"code": "wxyz"}).code == "WXYZ"
    assert events.parse_request(None).code == ""


def test_create_defaults_and_clamps():
    msg = events.parse_create({"name": "  \x07Zoe  ", "roundsTotal": "3"}, max_rounds=10)
    assert msg == events.CreateRoom(name="Zoe", rounds_total=3)
    assert events.parse_create({}, max_rounds=10) == events.CreateRoom(name="Anonyme", rounds_total=1)
    assert events.parse_create({"roundsTotal": 0}, max_rounds=10).rounds_total == 1
    assert events.parse_create({"roundsTotal": 99}, max_rounds=10).rounds_total == 10
    assert events.parse_create({"roundsTotal": "inf"}, max_rounds=10).rounds_total == 1


def test_join_truncates_long_names():
    msg = events.parse_join({"code": "abcd", "name": "x" * 40})
    assert msg.code == "ABCD"
    assert len(msg.name) == events.MAX_NAME_LENGTH
