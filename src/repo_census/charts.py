"""Chart data for the HTML report: language and commit-recency pie slices."""

from __future__ import annotations

import random
from collections.abc import Iterable
from datetime import datetime, timezone

from .models import ChartSlice, RepositoryRecord

# (upper bound in months, inclusive; label)
RECENCY_BUCKETS: list[tuple[float, str]] = [
    (1, "Last Month"),
    (3, "Last 3 Months"),
    (6, "Last 6 Months"),
    (12, "Last Year"),
    (float("inf"), "More than a Year"),
]


def random_color(rng: random.Random | None = None) -> str:
    """Return a random ``#rrggbb`` colour."""
    value = (rng or random).randint(0, 0xFFFFFF)
    return f"#{value:06x}"


def parse_commit_date(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp; ``None`` for empty, ``N/A`` or garbage."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def months_between(start: datetime, end: datetime) -> int:
    """Whole calendar months elapsed from ``start`` to ``end``, truncated.

    Negative spans (``start`` after ``end``) count as zero.
    """
    start = _as_utc(start)
    end = _as_utc(end)
    if start >= end:
        return 0
    months = (end.year - start.year) * 12 + (end.month - start.month)
    # The last month only counts once end reaches start's day and time of day
    start_offset = (start.day, start.time())
    end_offset = (end.day, end.time())
    if end_offset < start_offset:
        months -= 1
    return max(months, 0)


def commit_recency_bucket(months: int) -> str:
    for upper, label in RECENCY_BUCKETS:
        if months <= upper:
            return label
    return RECENCY_BUCKETS[-1][1]


def language_distribution(
    records: Iterable[RepositoryRecord], rng: random.Random | None = None
) -> list[ChartSlice]:
    """Count repositories per primary language, skipping unknown languages."""
    counts: dict[str, int] = {}
    for record in records:
        if not record.language:
            continue
        counts[record.language] = counts.get(record.language, 0) + 1
    return [
        ChartSlice(label=language, count=count, color=random_color(rng))
        for language, count in counts.items()
    ]


def commit_recency_distribution(
    records: Iterable[RepositoryRecord],
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> list[ChartSlice]:
    """Group repositories by months since their last commit.

    Records whose commit date does not parse are left out.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    counts = {label: 0 for _, label in RECENCY_BUCKETS}
    for record in records:
        committed = parse_commit_date(record.last_commit_date)
        if committed is None:
            continue
        counts[commit_recency_bucket(months_between(committed, now))] += 1
    return [
        ChartSlice(label=label, count=count, color=random_color(rng))
        for label, count in counts.items()
    ]
