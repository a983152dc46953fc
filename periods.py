from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from enum import Enum
from typing import Optional, Union


class TimeRange(str, Enum):
    all = "all"
    this_month = "this_month"
    last_month = "last_month"
    last_3_months = "last_3_months"
    last_6_months = "last_6_months"
    this_year = "this_year"

    @classmethod
    def _missing_(cls, value):
        # spellings used by the web client
        alias = _CAMEL_CASE_ALIASES.get(value)
        return cls(alias) if alias else None


_CAMEL_CASE_ALIASES = {
    "thisMonth": "this_month",
    "lastMonth": "last_month",
    "last3Months": "last_3_months",
    "last6Months": "last_6_months",
    "thisYear": "this_year",
}


def as_datetime(
    value: Union[date, datetime], tz: Optional[tzinfo] = None
) -> datetime:
    """Widen a plain date to midnight so it compares against period bounds."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min, tzinfo=tz)


@dataclass(frozen=True)
class Period:
    slug: str
    start: datetime
    end: datetime

    def contains(self, moment: Union[date, datetime]) -> bool:
        return self.start <= as_datetime(moment, self.start.tzinfo) <= self.end


def _month_start(d: datetime, back: int = 0) -> datetime:
    month_index = (d.year * 12) + (d.month - 1) - back
    year = month_index // 12
    month = (month_index % 12) + 1
    return datetime(year, month, 1, tzinfo=d.tzinfo)


def _month_end(d: datetime, back: int = 0) -> datetime:
    first = _month_start(d, back)
    next_first = _month_start(first, -1)
    last_day = next_first.date() - date.resolution
    return datetime.combine(last_day, time.max, tzinfo=d.tzinfo)


def resolve_time_range(
    token: Union[TimeRange, str, None], now: datetime
) -> Optional[Period]:
    """Map a range token onto an inclusive ``Period`` relative to ``now``.

    ``None`` means unbounded. Unknown tokens are treated like ``all`` so a
    filter can always be produced.
    """
    try:
        time_range = TimeRange(token) if token else TimeRange.all
    except ValueError:
        return None

    if time_range == TimeRange.this_month:
        return Period(time_range.value, _month_start(now), _month_end(now))
    if time_range == TimeRange.last_month:
        return Period(time_range.value, _month_start(now, 1), _month_end(now, 1))
    if time_range == TimeRange.last_3_months:
        return Period(time_range.value, _month_start(now, 2), _month_end(now))
    if time_range == TimeRange.last_6_months:
        return Period(time_range.value, _month_start(now, 5), _month_end(now))
    if time_range == TimeRange.this_year:
        return Period(
            time_range.value,
            datetime(now.year, 1, 1, tzinfo=now.tzinfo),
            datetime.combine(date(now.year, 12, 31), time.max, tzinfo=now.tzinfo),
        )
    return None
