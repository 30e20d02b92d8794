import math

from gamenight.services.fields import (
    dig,
    find_by,
    first_of,
    first_present,
    leading_int,
    score_value,
    to_float,
    to_int,
)


def test_dig_walks_dicts_and_lists():
    data = {"competitions": [{"status": {"type": {"name": "STATUS_FINAL"}}}]}
    assert dig(data, "competitions", 0, "status", "type", "name") == "STATUS_FINAL"


def test_dig_absent_steps_return_default():
    data = {"competitions": []}
    assert dig(data, "competitions", 0, "status", default="x") == "x"
    assert dig(data, "missing", "deeper") is None
    assert dig(None, "a") is None
    # wrong container types never raise
    assert dig({"a": "text"}, "a", "b") is None
    assert dig({"a": {"b": 1}}, "a", 0) is None


def test_first_of_skips_empty_candidates():
    data = {"splits": {"categories": []}, "statistics": {"splits": {"categories": [{"name": "x"}]}}}
    found = first_of(
        data,
        ("results", "stats", "categories"),
        ("splits", "categories"),
        ("statistics", "splits", "categories"),
        default=[],
    )
    assert found == [{"name": "x"}]


def test_first_of_default_when_nothing_resolves():
    assert first_of({}, ("a",), ("b", "c"), default=[]) == []


def test_first_present():
    assert first_present(None, "", "PG") == "PG"
    assert first_present(None, default="G") == "G"
    assert first_present(0, 5) == 0


def test_numeric_coercion_never_yields_nan():
    assert to_int("110") == 110
    assert to_int("110.0") == 110
    assert to_int(7.9) == 7
    assert to_int("abc") is None
    assert to_int(None, 0) == 0
    assert to_int(True) is None
    assert to_float(float("nan"), 0.0) == 0.0
    assert to_float("1.5") == 1.5
    assert not math.isnan(to_float("nan", 0.0))


def test_leading_int_reads_rank_display_values():
    assert leading_int("1st") == 1
    assert leading_int("12th") == 12
    assert leading_int("T-3rd") is None
    assert leading_int(4) == 4


def test_score_value_handles_both_encodings():
    assert score_value("101") == 101
    assert score_value({"value": 98.0, "displayValue": "98"}) == 98
    assert score_value({"displayValue": "77"}) == 77
    assert score_value("") is None
    assert score_value(None) is None


def test_find_by_matches_any_value():
    items = [{"name": "perGame"}, {"type": "totals"}, "junk"]
    assert find_by(items, "type", "totals") == {"type": "totals"}
    assert find_by(items, "name", "x", "perGame") == {"name": "perGame"}
    assert find_by(None, "name", "x") is None
