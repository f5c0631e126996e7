import re

from receiptapi.parsers.common import ReceiptText, normalize_whitespace, tolerant


def test_line_breaks_and_runs_collapse_to_single_space():
    assert normalize_whitespace("Reference\r\nNo.\n\n  AB12345\t\tRM 5") == "Reference No. AB12345 RM 5"


def test_none_and_empty_become_empty_string():
    assert normalize_whitespace(None) == ""
    assert normalize_whitespace("") == ""


def test_normalize_is_idempotent():
    once = normalize_whitespace("a\n\nb   c\r\nd")
    assert normalize_whitespace(once) == once


def test_corrected_view_swaps_letter_lookalikes():
    views = ReceiptText("REF SO1I")
    assert views.corrected == "REF 5011"
    # vendor names must be read from the uncorrected view
    assert views.normalized == "REF SO1I"


def test_date_view_only_touches_digit_tokens():
    views = ReceiptText("28 Sep 2O24 I5/1O/2024")
    # month names survive, O is not a date correction
    assert "Sep" in views.date_view
    assert views.date_view.startswith("28 Sep")
    assert "15/1O/2024" in views.date_view


def test_amount_view_fixes_split_myr_marker():
    views = ReceiptText("Total (MY R) 1O.5O")
    assert views.amount_view == "Total (MYR) 10.50"


def test_views_are_cached():
    views = ReceiptText("BANK@AM Reference No. X")
    assert views.corrected is views.corrected


def test_tolerant_label_matches_corrected_text():
    pattern = re.compile(tolerant("Reference No"), re.I)
    assert pattern.search("Reference N0.")
    assert pattern.search("Reference No.")
