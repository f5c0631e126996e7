import pytest

from receiptapi.parsers.dates import extract_date, parse_date_string


@pytest.mark.parametrize("text,expected", [
    ("Paid 15 Oct 2024 05:03 pm", "2024-10-15"),
    ("28 Sep 2024, 4:13 PM", "2024-09-28"),
    ("Date 15 October 2024", "2024-10-15"),
    ("Date: 16/10/2024", "2024-10-16"),
    ("Date: 16-10-2024", "2024-10-16"),
    ("Posted 22-Nov-2024", "2024-11-22"),
    ("15 Oct 2024 05:05:14 PM", "2024-10-15"),
    ("Paid 15Oct2024 05:03 pm", "2024-10-15"),
    ("Date 15 Oct2024", "2024-10-15"),
    ("Date 15 Sept 2024", "2024-09-15"),
    ("Posted 15-Sept-2024", "2024-09-15"),
])
def test_extract_date_formats(text, expected):
    assert extract_date(text) == expected


def test_single_digit_parts_are_zero_padded():
    assert extract_date("on 5-Jan-2025") == "2025-01-05"
    assert extract_date("on 1/2/2025") == "2025-02-01"


def test_lookalike_letters_inside_digits_are_fixed():
    # "I5 Oct 2O24" would need O->0 too; only I and S are date corrections
    assert extract_date("I5 Oct 2024 05:03 pm") == "2024-10-15"
    assert extract_date("1S/10/2024") == "2024-10-15"


def test_month_names_are_not_corrupted():
    assert extract_date("Date 3 Sep 2024") == "2024-09-03"


def test_no_date_returns_none():
    assert extract_date("no date here") is None
    assert extract_date("") is None


def test_unparseable_candidate_moves_on_to_next_pattern():
    events = []
    date = extract_date("Ref 20241101 x 01-Nov-2024", observer=lambda e, f: events.append((e, f)))
    assert date == "2024-11-01"
    assert any(e == "date.parse_failed" for e, _ in events)
    assert ("date.matched", {"pattern": "named_dashed", "value": "01-Nov-2024", "date": "2024-11-01"}) in events


def test_parse_date_string_rejects_impossible_dates():
    assert parse_date_string("31/02/2024") is None
    assert parse_date_string("12  Oct   2024") == "2024-10-12"


def test_parse_date_string_splits_run_together_parts():
    assert parse_date_string("5Jan2025") == "2025-01-05"
    assert parse_date_string("15Sept2024") == "2024-09-15"
    # September is not touched by the Sept fix
    assert parse_date_string("15 September 2024") == "2024-09-15"
