"""
Read-side aggregation over a store snapshot.

Every function is pure: it takes the list returned by ``list_all()`` (newest
first) plus an explicit ``now`` and recomputes from scratch on each call.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Iterable, Optional, Sequence

from dateutil.relativedelta import relativedelta

from src.core.schemas import ConditionResult, RiskLevel, ScanResult, TimeWindow, ensure_aware


HEALTH_SCORE_WINDOW = 5
NOT_AVAILABLE = "N/A"


def _local(ts: datetime, now: datetime) -> datetime:
    return ensure_aware(ts).astimezone(now.tzinfo)


def _newest_first(scans: Iterable[ScanResult]) -> list[ScanResult]:
    return sorted(scans, key=lambda s: ensure_aware(s.timestamp), reverse=True)


def in_window(ts: datetime, window: TimeWindow, now: datetime) -> bool:
    now = ensure_aware(now)
    ts = _local(ts, now)
    if window == TimeWindow.All:
        return True
    if window == TimeWindow.ThisWeek:
        return ts.isocalendar()[:2] == now.isocalendar()[:2]
    if window == TimeWindow.ThisMonth:
        return (ts.year, ts.month) == (now.year, now.month)
    if window == TimeWindow.Last3Months:
        return ts >= now - relativedelta(months=3)
    raise ValueError(f"Unknown time window: {window!r}")


def filter_by_window(scans: Iterable[ScanResult], window: TimeWindow, now: datetime) -> list[ScanResult]:
    return [s for s in scans if in_window(s.timestamp, window, now)]


def highest_risk(scan: ScanResult) -> ConditionResult:
    """
    Condition shown as the scan's headline risk.

    Compares risk *display labels* as strings, so "Monitor" < "Safe" < "See Dentist":
    a High condition always wins, but a Low condition outranks a Medium one.
    The first condition wins among equal labels.
    """
    return max(scan.conditions, key=lambda c: c.risk.label)


def monthly_count(scans: Iterable[ScanResult], now: datetime) -> int:
    return len(filter_by_window(scans, TimeWindow.ThisMonth, now))


def health_score(scans: Sequence[ScanResult]) -> Optional[int]:
    """
    Share of Low conditions over the most recent scans, as 0-100.

    None when there are no scans at all; 0 when the recent scans carry no conditions.
    """
    if not scans:
        return None
    recent = _newest_first(scans)[:HEALTH_SCORE_WINDOW]
    total = sum(len(s.conditions) for s in recent)
    if total == 0:
        return 0
    low = sum(1 for s in recent for c in s.conditions if c.risk == RiskLevel.Low)
    return round(100 * low / total)


def format_health_score(score: Optional[int]) -> str:
    return NOT_AVAILABLE if score is None else str(score)


def risk_breakdown(scan: ScanResult) -> dict[RiskLevel, int]:
    counts = Counter(c.risk for c in scan.conditions)
    return {level: counts.get(level, 0) for level in (RiskLevel.High, RiskLevel.Medium, RiskLevel.Low)}


def conditions_by_confidence(scan: ScanResult) -> list[ConditionResult]:
    return sorted(scan.conditions, key=lambda c: c.confidence, reverse=True)
