"""Human-readable labels for dates and grid cells."""

from __future__ import annotations

from datetime import date, datetime

from yearweek import DateRange, YearWeek

_SUFFIXES = ["th", "st", "nd", "rd"]
DATE_FORMATS = ("MM/DD/YY", "MM/DD", "MM/DD/YY HH:MM", "MMM DD YYYY")


def add_ordinal_suffix(value: int) -> str:
    """Return *value* with its English ordinal suffix (1st, 12th, 23rd)."""
    remainder = value % 100
    if 11 <= remainder <= 13:
        return f"{value}th"
    last = remainder % 10
    suffix = _SUFFIXES[last] if last < len(_SUFFIXES) else _SUFFIXES[0]
    return f"{value}{suffix}"


def render_date(value: date, fmt: str) -> str:
    """Format *value* in one of the US-style layouts in ``DATE_FORMATS``."""
    if fmt == "MM/DD/YY":
        return value.strftime("%m/%d/%y")
    if fmt == "MM/DD":
        return value.strftime("%m/%d")
    if fmt == "MM/DD/YY HH:MM":
        if not isinstance(value, datetime):
            value = datetime.combine(value, datetime.min.time())
        return value.strftime("%m/%d/%y, %I:%M %p")
    if fmt == "MMM DD YYYY":
        return f"{value.strftime('%b')} {value.day}, {value.year}"
    raise ValueError(f"Unknown date format: {fmt!r}")


def describe_year_week(year_week: YearWeek) -> str:
    return f"year {year_week.year}, week {year_week.week}"


def describe_range(date_range: DateRange) -> str:
    start, end = date_range
    return f"{render_date(start, 'MM/DD/YY')} - {render_date(end, 'MM/DD/YY')}"


def describe_age(year_week: YearWeek) -> str:
    """E.g. ``"3rd week of your 25th year"`` for year 24, week 3."""
    return (
        f"{add_ordinal_suffix(year_week.week)} week of your "
        f"{add_ordinal_suffix(year_week.year + 1)} year"
    )
