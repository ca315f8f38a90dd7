"""Recorder — attach a new moment to the week a date falls in."""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path

from config import ConfigError, load_settings, parse_birthday
from formatting import describe_year_week
from moment import COLORS, Moment, slugify, unique_path
from yearweek import (
    OFF_CALENDAR_MESSAGE,
    UNPARSEABLE_MESSAGE,
    YearWeek,
    date_to_year_week,
    is_valid_year_week,
    parse_freeform_date,
)

logger = logging.getLogger(__name__)


def resolve_year_week(
    birthday: date,
    text: str,
    today: date,
) -> tuple[YearWeek | None, str]:
    """Turn free text into a grid cell.

    Returns ``(year_week, message)``; *year_week* is ``None`` when the text
    does not parse or the date lands off the 90-year grid.
    """
    day = parse_freeform_date(text, today=today)
    if day is None:
        return None, UNPARSEABLE_MESSAGE
    year_week = date_to_year_week(birthday, day)
    if not is_valid_year_week(year_week):
        return None, OFF_CALENDAR_MESSAGE
    return year_week, f"{day.isoformat()} ({describe_year_week(year_week)})"


def record_moment(
    moments_dir: Path,
    year_week: YearWeek,
    name: str,
    *,
    journal: str = "",
    color: str | None = None,
    images: list[str] | None = None,
    user_id: str,
    slug: str | None = None,
) -> Path:
    """Write a new moment file and return its path."""
    moment = Moment(
        year=year_week.year,
        week=year_week.week,
        name=name,
        journal=journal,
        color=color,
        images=images or None,
        user_id=user_id,
    )
    moments_dir.mkdir(parents=True, exist_ok=True)
    filename = slugify(name, year_week, slug=slug)
    while True:
        path = unique_path(moments_dir, filename)
        try:
            moment.dump(path, exclusive=True)
        except FileExistsError:
            logger.debug("%s appeared while recording, retrying", path)
            continue
        break
    logger.info("Recorded moment %r in %s", name, path)
    return path


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Attach a moment to a week of your life")
    parser.add_argument("--birthday", type=str, default=None,
                        help="Birthday as YYYY-MM-DD (default: $LIFE_CALENDAR_BIRTHDAY)")
    parser.add_argument("--moments-dir", type=Path, default=settings.moments_dir)
    parser.add_argument("--when", type=str, default=None,
                        help="Free-text date, e.g. 'yesterday' or 'jan 21 2024'")
    parser.add_argument("--year", type=int, default=None)
    parser.add_argument("--week", type=int, default=None)
    parser.add_argument("--name", required=True, help="Short name for the moment")
    parser.add_argument("--journal", type=str, default="", help="Journal entry (markdown)")
    parser.add_argument("--image", action="append", default=[],
                        help="Image URL to attach (repeatable)")
    parser.add_argument("--color", choices=COLORS, default=None)
    parser.add_argument("--slug", type=str, default=None,
                        help="ASCII identifier for the filename")
    parser.add_argument("--user-id", type=str, default=settings.user_id)
    parser.add_argument("--today", type=date.fromisoformat, default=None,
                        help="Override today's date for testing")
    args = parser.parse_args(argv)

    if args.when is not None:
        if args.year is not None or args.week is not None:
            parser.error("use either --when or --year/--week, not both")
        try:
            birthday = parse_birthday(args.birthday) if args.birthday else settings.birthday
        except ConfigError as exc:
            parser.error(str(exc))
        if birthday is None:
            parser.error("--birthday or LIFE_CALENDAR_BIRTHDAY is required with --when")
        today = args.today or date.today()
        year_week, message = resolve_year_week(birthday, args.when, today)
        if year_week is None:
            parser.exit(1, f"{message}\n")
    elif args.year is not None and args.week is not None:
        year_week = YearWeek(args.year, args.week)
        if not is_valid_year_week(year_week):
            parser.exit(1, f"{OFF_CALENDAR_MESSAGE}\n")
    else:
        parser.error("either --when or both --year and --week are required")

    path = record_moment(
        args.moments_dir,
        year_week,
        args.name,
        journal=args.journal,
        color=args.color,
        images=args.image,
        user_id=args.user_id,
        slug=args.slug,
    )
    print(f"Recorded: {path}")


if __name__ == "__main__":
    main()
