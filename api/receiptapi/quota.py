# api/receiptapi/quota.py
"""
Week / month counters for confirmed transactions during a campaign window.

Runs only after a person has confirmed the extracted date. The extraction
parsers never call into this module.
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional


def _env_date(name: str, default: str) -> date:
    return date.fromisoformat(os.getenv(name, default))


class QuotaError(ValueError):
    def __init__(self, message: str, field: str = "date"):
        super().__init__(message)
        self.field = field
        self.message = message


@dataclass(frozen=True)
class Campaign:
    start: date
    end: date
    max_weeks: int = 8

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def week_index(self, d: date) -> int:
        """1-based week number counted from the campaign start."""
        days = max(0, (d - self.start).days)
        return math.ceil((days + 1) / 7)


def default_campaign() -> Campaign:
    return Campaign(
        start=_env_date("CAMPAIGN_START", "2024-11-10"),
        end=_env_date("CAMPAIGN_END", "2024-12-31"),
        max_weeks=int(os.getenv("CAMPAIGN_MAX_WEEKS", "8")),
    )


@dataclass
class QuotaCounters:
    week_counts: Dict[str, int] = field(default_factory=dict)
    month_counts: Dict[str, int] = field(default_factory=dict)
    total_count: int = 0


def apply_quota(
    counters: QuotaCounters,
    txn_date: date,
    today: Optional[date] = None,
    campaign: Optional[Campaign] = None,
) -> bool:
    """
    Count one confirmed transaction against the campaign counters.

    Returns False (and changes nothing) when the date is outside the campaign.
    Raises QuotaError for a month or week that has already passed.
    """
    campaign = campaign or default_campaign()
    today = today or date.today()

    if not campaign.contains(txn_date):
        return False

    if (txn_date.year, txn_date.month) < (today.year, today.month):
        raise QuotaError("You cannot add transactions for past months.")

    week = campaign.week_index(txn_date)
    if week < campaign.week_index(today):
        raise QuotaError("You cannot add transactions for past weeks.")

    if 1 <= week <= campaign.max_weeks:
        key = str(week)
        counters.week_counts[key] = counters.week_counts.get(key, 0) + 1

    month_key = f"{txn_date.year:04d}-{txn_date.month:02d}"
    counters.month_counts[month_key] = counters.month_counts.get(month_key, 0) + 1
    counters.total_count += 1
    return True
