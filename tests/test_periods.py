from datetime import date, datetime, time, timezone

from periods import TimeRange, resolve_time_range


NOW = datetime(2025, 3, 15, 10, 30)


def test_this_month_spans_whole_calendar_month() -> None:
    period = resolve_time_range(TimeRange.this_month, NOW)

    assert period.slug == "this_month"
    assert period.start == datetime(2025, 3, 1)
    assert period.end == datetime.combine(date(2025, 3, 31), time.max)


def test_last_month_crosses_year_boundary() -> None:
    period = resolve_time_range("last_month", datetime(2025, 1, 10, 8, 0))

    assert period.start == datetime(2024, 12, 1)
    assert period.end == datetime.combine(date(2024, 12, 31), time.max)


def test_last_month_ends_on_leap_day() -> None:
    period = resolve_time_range("last_month", datetime(2024, 3, 1))

    assert period.start == datetime(2024, 2, 1)
    assert period.end.date() == date(2024, 2, 29)


def test_rolling_windows_include_current_month() -> None:
    three = resolve_time_range("last_3_months", datetime(2025, 1, 10))
    six = resolve_time_range("last_6_months", NOW)

    assert three.start == datetime(2024, 11, 1)
    assert three.end.date() == date(2025, 1, 31)
    assert six.start == datetime(2024, 10, 1)
    assert six.end.date() == date(2025, 3, 31)


def test_this_year() -> None:
    period = resolve_time_range("this_year", NOW)

    assert period.start == datetime(2025, 1, 1)
    assert period.end == datetime.combine(date(2025, 12, 31), time.max)


def test_all_and_unknown_tokens_are_unbounded() -> None:
    assert resolve_time_range(TimeRange.all, NOW) is None
    assert resolve_time_range("all", NOW) is None
    assert resolve_time_range(None, NOW) is None
    assert resolve_time_range("fortnight", NOW) is None


def test_bounds_are_inclusive() -> None:
    period = resolve_time_range("this_month", NOW)

    assert period.contains(datetime(2025, 3, 1))
    assert period.contains(datetime.combine(date(2025, 3, 31), time.max))
    assert period.contains(date(2025, 3, 31))
    assert not period.contains(datetime(2025, 4, 1))
    assert not period.contains(datetime.combine(date(2025, 2, 28), time.max))


def test_bounds_keep_timezone_of_now() -> None:
    now = datetime(2025, 3, 15, 10, 30, tzinfo=timezone.utc)

    month = resolve_time_range("this_month", now)
    year = resolve_time_range("this_year", now)

    assert month.start == datetime(2025, 3, 1, tzinfo=timezone.utc)
    assert month.end.tzinfo is timezone.utc
    assert year.start.tzinfo is timezone.utc
    assert month.contains(datetime(2025, 3, 2, tzinfo=timezone.utc))
    assert not month.contains(datetime(2024, 1, 1, tzinfo=timezone.utc))
    assert month.contains(date(2025, 3, 1))


def test_client_spellings_resolve_like_snake_case() -> None:
    pairs = [
        ("thisMonth", TimeRange.this_month),
        ("lastMonth", TimeRange.last_month),
        ("last3Months", TimeRange.last_3_months),
        ("last6Months", TimeRange.last_6_months),
        ("thisYear", TimeRange.this_year),
    ]
    for alias, member in pairs:
        assert TimeRange(alias) is member
        assert resolve_time_range(alias, NOW) == resolve_time_range(member, NOW)
