from __future__ import annotations

import calendar
import enum
from collections.abc import Callable
from datetime import UTC, datetime, timedelta


class Period(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


def _months_back(moment: datetime, months: int) -> datetime:
    total = moment.year * 12 + (moment.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


_PERIOD_STARTS: dict[Period, Callable[[datetime], datetime]] = {
    Period.DAY: lambda now: now - timedelta(days=1),
    Period.WEEK: lambda now: now - timedelta(weeks=1),
    Period.MONTH: lambda now: _months_back(now, 1),
    Period.QUARTER: lambda now: _months_back(now, 3),
    Period.YEAR: lambda now: _months_back(now, 12),
}


def resolve_period(period: Period | str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the half-open ``[start, end)`` window for a named period ending at ``now``."""
    end = now or datetime.now(UTC)
    start = _PERIOD_STARTS[Period(period)](end)
    return start, end
