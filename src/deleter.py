"""Deleter — remove moments from a week."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from config import load_settings
from moment import Moment, MomentError
from yearweek import YearWeek

logger = logging.getLogger(__name__)


def find_moments(
    moments_dir: Path,
    year_week: YearWeek,
    name: str | None = None,
    user_id: str | None = None,
) -> list[tuple[Path, Moment]]:
    """Scan *moments_dir* and return (path, moment) pairs in *year_week*.

    *name* and *user_id* narrow the match further when given.
    """
    found: list[tuple[Path, Moment]] = []
    if not moments_dir.is_dir():
        return found
    for path in sorted(moments_dir.glob("*.md")):
        try:
            moment = Moment.load(path)
        except MomentError as exc:
            logger.warning("Skipping invalid moment file: %s", exc)
            continue
        if moment.year_week != year_week:
            continue
        if name is not None and moment.name != name:
            continue
        if user_id is not None and moment.user_id != user_id:
            continue
        found.append((path, moment))
    return found


def delete_moments(
    moments_dir: Path,
    year_week: YearWeek,
    name: str | None = None,
    user_id: str | None = None,
) -> list[Path]:
    """Delete matching moment files.

    Returns the list of deleted file paths.
    """
    deleted: list[Path] = []
    for path, moment in find_moments(moments_dir, year_week, name=name, user_id=user_id):
        path.unlink()
        logger.info("Deleted moment %r (%s)", moment.name, path)
        deleted.append(path)
    return deleted


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the deleter module."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Delete the moments recorded in a week",
    )
    parser.add_argument(
        "--moments-dir", type=Path, default=settings.moments_dir,
    )
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument("--week", type=int, required=True)
    parser.add_argument(
        "--name", type=str, default=None,
        help="Only delete the moment with this name",
    )
    parser.add_argument("--user-id", type=str, default=settings.user_id)
    args = parser.parse_args(argv)

    deleted = delete_moments(
        args.moments_dir,
        YearWeek(args.year, args.week),
        name=args.name,
        user_id=args.user_id,
    )
    if not deleted:
        print("No matching moments.")
    for path in deleted:
        print(f"Deleted: {path}")


if __name__ == "__main__":
    main()
