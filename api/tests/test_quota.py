from datetime import date

import pytest

from receiptapi.quota import Campaign, QuotaCounters, QuotaError, apply_quota, default_campaign

CAMPAIGN = Campaign(start=date(2024, 11, 10), end=date(2024, 12, 31), max_weeks=8)


def test_week_index_counts_from_campaign_start():
    assert CAMPAIGN.week_index(date(2024, 11, 10)) == 1
    assert CAMPAIGN.week_index(date(2024, 11, 16)) == 1
    assert CAMPAIGN.week_index(date(2024, 11, 17)) == 2
    assert CAMPAIGN.week_index(date(2024, 12, 31)) == 8


def test_counts_week_month_and_total():
    counters = QuotaCounters()
    today = date(2024, 11, 12)
    assert apply_quota(counters, date(2024, 11, 12), today=today, campaign=CAMPAIGN) is True
    assert apply_quota(counters, date(2024, 11, 20), today=today, campaign=CAMPAIGN) is True
    assert counters.week_counts == {"1": 1, "2": 1}
    assert counters.month_counts == {"2024-11": 2}
    assert counters.total_count == 2


def test_outside_campaign_is_a_no_op():
    counters = QuotaCounters()
    assert apply_quota(counters, date(2024, 10, 1), today=date(2024, 10, 1), campaign=CAMPAIGN) is False
    assert counters == QuotaCounters()


def test_past_month_is_rejected():
    counters = QuotaCounters()
    with pytest.raises(QuotaError) as exc:
        apply_quota(counters, date(2024, 11, 30), today=date(2024, 12, 2), campaign=CAMPAIGN)
    assert exc.value.message == "You cannot add transactions for past months."
    assert exc.value.field == "date"
    assert counters.total_count == 0


def test_past_month_compares_year_too():
    # January after a December campaign month is not "earlier"
    long_campaign = Campaign(start=date(2024, 12, 1), end=date(2025, 2, 28), max_weeks=13)
    counters = QuotaCounters()
    assert apply_quota(counters, date(2025, 1, 5), today=date(2025, 1, 5), campaign=long_campaign) is True


def test_past_week_is_rejected():
    with pytest.raises(QuotaError, match="past weeks"):
        apply_quota(QuotaCounters(), date(2024, 11, 11), today=date(2024, 11, 20), campaign=CAMPAIGN)


def test_week_beyond_max_only_counts_month_and_total():
    short = Campaign(start=date(2024, 11, 10), end=date(2024, 12, 31), max_weeks=2)
    counters = QuotaCounters()
    assert apply_quota(counters, date(2024, 11, 30), today=date(2024, 11, 30), campaign=short) is True
    assert counters.week_counts == {}
    assert counters.month_counts == {"2024-11": 1}
    assert counters.total_count == 1


def test_default_campaign_reads_env(monkeypatch):
    monkeypatch.setenv("CAMPAIGN_START", "2025-01-01")
    monkeypatch.setenv("CAMPAIGN_END", "2025-02-01")
    monkeypatch.setenv("CAMPAIGN_MAX_WEEKS", "5")
    assert default_campaign() == Campaign(date(2025, 1, 1), date(2025, 2, 1), 5)
