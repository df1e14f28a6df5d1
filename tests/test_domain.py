import pytest

from casino_ledger.domain import history_entry, normalize_game, normalize_username, parse_integer


@pytest.mark.parametrize("value, expected", [
    (5, 5),
    (0, 0),
    (-3, -3),
    (4.99, 4),
    (-0.5, -1),
    ("12", 12),
    ("  8 ", 8),
    ("2.7", 2),
    ("1e3", 1000),
    (10**20, 10**20),
])
def test_parse_integer_floors_numbers(value, expected):
    assert parse_integer(value) == expected


@pytest.mark.parametrize("value", [None, True, False, "", "   ", "abc", "12abc", "1_000", "NaN", "Infinity",
                                   float("inf"), float("nan"), [1], {"a": 1}])
def test_parse_integer_rejects(value):
    assert parse_integer(value) is None


@pytest.mark.parametrize("raw, expected", [("ann", "ann"), ("  ann ", "ann"), ("", None), ("  ", None),
                                           (None, None), (7, None)])
def test_normalize_username(raw, expected):
    assert normalize_username(raw) == expected


def test_normalize_game():
    assert normalize_game("  slots ") == "slots"
    assert normalize_game(3) == ""


def test_history_entry_shape():
    entry = history_entry("slots", -5, "spin")
    assert entry.game == "slots"
    assert entry.delta == -5
    assert entry.desc == "spin"
    assert entry.ts.endswith("Z")
    assert len(entry.ts) == len("2024-01-01T00:00:00.000Z")


@pytest.mark.parametrize("desc", ["", "   ", None, 3])
def test_history_entry_blank_desc(desc):
    assert history_entry("slots", 1, desc).desc == ""
