import pytest

from receiptapi.parsers.detect import VendorTag, classify_vendor


@pytest.mark.parametrize("text,expected", [
    ("BANK@AM Reference No. AB12345", VendorTag.AMBANK),
    ("CIMB OCTO DuitNow Reference No.", VendorTag.CIMB_OCTO),
    ("Maybank2u Reference ID 12345678", VendorTag.MAYBANK),
    ("RHB Now 20241001RHBBMYKL070QR12345", VendorTag.RHB),
    ("Touch n Go eWallet", VendorTag.TNG_WALLET),
    ("HLB Connect", VendorTag.HONG_LEONG),
    ("PUBLIC BANK DuitNow QR Ref No 12345678", VendorTag.PUBLIC_BANK),
    ("alliance online", VendorTag.ALLIANCE),
    ("Al-Awfar account", VendorTag.BANK_ISLAM),
    ("Thank you, come again", VendorTag.UNKNOWN),
    ("", VendorTag.UNKNOWN),
])
def test_classify_vendor(text, expected):
    assert classify_vendor(text) == expected


def test_octo_marker_only_matches_after_correction():
    # "OCTO" with letter O and "0CT0" with zeros both land on CIMB
    assert classify_vendor("0CT0") == VendorTag.CIMB_OCTO
    assert classify_vendor("OCTO") == VendorTag.CIMB_OCTO


def test_first_marker_wins():
    assert classify_vendor("Maybank transfer to RHB") == VendorTag.MAYBANK


def test_maybank_is_not_matched_case_insensitively():
    assert classify_vendor("MAYBANK") == VendorTag.UNKNOWN


def test_observer_sees_detection():
    events = []
    classify_vendor("HLB Connect", observer=lambda e, f: events.append((e, f)))
    assert events == [("vendor.detected", {"vendor": "hong_leong", "token": "HLB"})]
