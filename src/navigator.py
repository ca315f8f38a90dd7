"""Navigator — jump from a free-text date to its week on the life grid."""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path

from config import ConfigError, load_settings, parse_birthday
from formatting import describe_age, describe_range, describe_year_week, render_date
from moment import Moment, load_moments
from yearweek import (
    OFF_CALENDAR_MESSAGE,
    UNPARSEABLE_MESSAGE,
    YearWeek,
    date_to_year_week,
    is_valid_year_week,
    parse_freeform_date,
    year_week_to_date_range,
)


def describe_week(
    birthday: date,
    year_week: YearWeek,
    moments: list[Moment] | None = None,
) -> str:
    """Multi-line summary of a week: its range, age and any moments."""
    lines = [
        f"{describe_year_week(year_week).capitalize()} "
        f"({describe_range(year_week_to_date_range(birthday, year_week))})",
        f"The {describe_age(year_week)}",
    ]
    for moment in moments or []:
        lines.append(f"- {moment.name}")
    return "\n".join(lines)


def navigate(
    birthday: date,
    text: str,
    today: date,
    moments: list[Moment] | None = None,
) -> tuple[bool, str]:
    """Return ``(found, output)`` for the query *text*."""
    day = parse_freeform_date(text, today=today)
    if day is None:
        return False, UNPARSEABLE_MESSAGE
    year_week = date_to_year_week(birthday, day)
    if not is_valid_year_week(year_week):
        return False, f"{OFF_CALENDAR_MESSAGE} ({render_date(day, 'MMM DD YYYY')})"
    in_week = [m for m in moments or [] if m.year_week == year_week]
    header = f"{render_date(day, 'MMM DD YYYY')} is in {describe_year_week(year_week)}"
    return True, f"{header}\n{describe_week(birthday, year_week, in_week)}"


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Find the week of your life a date falls in")
    parser.add_argument("query", nargs="+", help="Free-text date, e.g. 'last friday'")
    parser.add_argument("--birthday", type=str, default=None,
                        help="Birthday as YYYY-MM-DD (default: $LIFE_CALENDAR_BIRTHDAY)")
    parser.add_argument("--moments-dir", type=Path, default=None,
                        help="Also list moments recorded in that week")
    parser.add_argument("--user-id", type=str, default=settings.user_id)
    parser.add_argument("--today", type=date.fromisoformat, default=None,
                        help="Override today's date for testing")
    args = parser.parse_args(argv)

    try:
        birthday = parse_birthday(args.birthday) if args.birthday else settings.birthday
    except ConfigError as exc:
        parser.error(str(exc))
    if birthday is None:
        parser.error("--birthday or LIFE_CALENDAR_BIRTHDAY is required")

    moments = None
    if args.moments_dir is not None:
        moments = load_moments(args.moments_dir, user_id=args.user_id)

    today = args.today or date.today()
    found, output = navigate(birthday, " ".join(args.query), today, moments)
    print(output)
    if not found:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
