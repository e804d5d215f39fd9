from datetime import datetime, timezone

from app.services.dates import (
    normalize_date_param,
    parse_date_input,
    parse_iso,
    parse_name_timestamp,
    to_iso,
)
from app.services.formatting import clip, collapse_whitespace, make_preview, tail


def test_parse_date_input_formats():
    assert parse_date_input("2024-03-07") == datetime(2024, 3, 7, tzinfo=timezone.utc)
    assert parse_date_input("03/07/2024") == datetime(2024, 3, 7, tzinfo=timezone.utc)
    assert parse_date_input(" 2024-03-07 ") == datetime(2024, 3, 7, tzinfo=timezone.utc)


def test_parse_date_input_end_exclusive_advances_one_day():
    assert parse_date_input("2024-12-31", end_exclusive=True) == datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_parse_date_input_rejects_garbage():
    for value in ("", None, "March 7", "2024-3-7", "2024-02-30", "13/01/2024"):
        assert parse_date_input(value) is None


def test_normalize_date_param():
    assert normalize_date_param("03/07/2024") == "2024-03-07"
    assert normalize_date_param("last week") == "last week"


def test_parse_name_timestamp_variants():
    expected = datetime(2024, 1, 5, 10, 0, 0, tzinfo=timezone.utc)
    assert parse_name_timestamp("2024-01-05 10.00.00 notes.txt") == expected
    assert parse_name_timestamp("2024/01/05_10:00:00 notes.vtt") == expected
    assert parse_name_timestamp("2024-01-05T10:00:00.srt") == expected
    assert parse_name_timestamp("notes 2024-01-05 10.00.00.txt") is None
    assert parse_name_timestamp("2024-01-05 notes.txt") is None


def test_iso_roundtrip_sorts_as_string():
    early = to_iso(datetime(2024, 1, 5, 10, tzinfo=timezone.utc))
    late = to_iso(datetime(2024, 2, 1, 9, tzinfo=timezone.utc))
    assert early == "2024-01-05T10:00:00.000Z"
    assert late > early
    assert parse_iso("2024-01-05T10:00:00.000Z") == datetime(2024, 1, 5, 10, tzinfo=timezone.utc)
    assert parse_iso(None) is None


def test_clip_and_preview():
    assert clip("abc", 5) == "abc"
    assert clip("abcdef", 4) == "abc…"
    assert len(clip("x" * 1000, 700)) == 700
    assert clip(None, 3) == ""
    assert collapse_whitespace("a \n\n b\tc") == "a b c"
    assert make_preview("  hello\n\nworld  ", 500) == "hello world"
    assert tail("abcdef", 3) == "def"
    assert tail("ab", 3) == "ab"
