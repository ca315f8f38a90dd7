"""Birthday-relative calendar math — map dates to (year, week) grid cells."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from typing import Callable, NamedTuple

import dateparser

logger = logging.getLogger(__name__)

MAX_YEARS = 90
WEEKS_PER_YEAR = 52


@dataclass(frozen=True, order=True)
class YearWeek:
    """A cell of the life grid.

    *year* is 0-indexed (year 0 is the twelve months following birth) and
    *week* is 1-indexed within that year.  Instances order lexicographically,
    year first, so ``a < b`` means *a* comes earlier in life than *b*.
    """

    year: int
    week: int

    def is_valid(self) -> bool:
        return is_valid_year_week(self)


class DateRange(NamedTuple):
    """Inclusive span of calendar days covered by one week."""

    start: date
    end: date


def _as_date(value: date) -> date:
    """Drop any time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _shift(day: date, days: int) -> date:
    """Add *days* to *day*, pinned to the supported date range."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def anniversary(birthday: date, years: int) -> date:
    """Return *birthday* shifted by *years* whole years.

    A 29 February birthday lands on 1 March in non-leap years.  Years
    outside 1..9999 pin to ``date.min`` or ``date.max``.
    """
    birthday = _as_date(birthday)
    target_year = birthday.year + years
    if target_year < MINYEAR:
        return date.min
    if target_year > MAXYEAR:
        return date.max
    try:
        return birthday.replace(year=target_year)
    except ValueError:
        return date(target_year, 3, 1)


def most_recent_anniversary(birthday: date, reference: date) -> date:
    """Return the latest birthday anniversary on or before *reference*."""
    birthday = _as_date(birthday)
    reference = _as_date(reference)
    this_year = anniversary(birthday, reference.year - birthday.year)
    if this_year > reference:
        return anniversary(birthday, reference.year - birthday.year - 1)
    return this_year


def date_to_year_week(birthday: date, day: date) -> YearWeek:
    """Return the grid cell that *day* falls in.

    Week 52 absorbs the one or two days a birthday year has beyond
    52 * 7, so the result never has a week 53.  Days before the birthday
    map to negative years.
    """
    birthday = _as_date(birthday)
    day = _as_date(day)
    anchor = most_recent_anniversary(birthday, day)

    years_old = day.year - birthday.year
    if day.year == anchor.year:
        years_old += 1

    weeks = min((day - anchor).days // 7, WEEKS_PER_YEAR - 1)
    return YearWeek(year=years_old - 1, week=weeks + 1)


def year_week_to_date_range(birthday: date, year_week: YearWeek) -> DateRange:
    """Return the first and last day covered by *year_week*."""
    birthday = _as_date(birthday)
    start = _shift(anniversary(birthday, year_week.year), (year_week.week - 1) * 7)
    if year_week.week == WEEKS_PER_YEAR:
        if birthday.year + year_week.year + 1 > MAXYEAR:
            end = date.max
        else:
            end = _shift(anniversary(birthday, year_week.year + 1), -1)
    else:
        end = _shift(start, 6)
    return DateRange(start, end)


def current_year_week(birthday: date, today: date) -> YearWeek:
    return date_to_year_week(birthday, today)


def has_year_week_elapsed(birthday: date, year_week: YearWeek, today: date) -> bool:
    """True when *year_week* lies strictly before the week containing *today*."""
    return year_week < current_year_week(birthday, today)


def elapsed_checker(birthday: date, today: date) -> Callable[[YearWeek], bool]:
    """Return a per-cell predicate with the current week computed once.

    Rendering the full grid asks this question thousands of times, so the
    date math happens here rather than on every call.
    """
    current = current_year_week(birthday, today)

    def has_elapsed(year_week: YearWeek) -> bool:
        return year_week < current

    return has_elapsed


def is_valid_year_week(year_week: YearWeek) -> bool:
    """Return True if *year_week* is a cell of the 90-year grid."""
    return (
        0 <= year_week.year < MAX_YEARS
        and 1 <= year_week.week <= WEEKS_PER_YEAR
    )


UNPARSEABLE_MESSAGE = "Unable to find date"
OFF_CALENDAR_MESSAGE = "That date is not on the calendar"


def parse_freeform_date(text: str | None, today: date | None = None) -> date | None:
    """Resolve free text such as ``"yesterday"`` or ``"jan 21 2024"``.

    Relative phrases are interpreted against *today* (the real date when
    omitted).  Returns ``None`` instead of raising when nothing parses.
    """
    if text is None or not text.strip():
        return None
    if today is None:
        today = date.today()
    base = datetime.combine(_as_date(today), datetime.min.time())
    try:
        parsed = dateparser.parse(
            text,
            languages=["en"],
            settings={"RELATIVE_BASE": base},
        )
    except (ValueError, OverflowError):
        logger.debug("Date parser rejected %r", text, exc_info=True)
        return None
    if parsed is None:
        return None
    return parsed.date()
